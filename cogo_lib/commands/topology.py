# -*- coding: utf-8 -*-
"""Topology command: validate sections against their parent parcel."""

import argparse
import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

from cogo_lib.constants import DEFAULT_SRID
from cogo_lib.constants import MIN_GAP_AREA
from cogo_lib.constants import OVERLAP_TOLERANCE
from cogo_lib.errors import ValidationError
from cogo_lib.geometry import Geometry
from cogo_lib.parsing import parse_wkt_geometry
from cogo_lib.topology.engine import GeometryEngine
from cogo_lib.topology.local import ShapelyEngine
from cogo_lib.topology.models import TopologyValidationOptions
from cogo_lib.topology.models import TopologyValidationReport
from cogo_lib.topology.remote import EngineSettings
from cogo_lib.topology.remote import RemoteEngine
from cogo_lib.topology.validator import TopologyValidator

logger = logging.getLogger(__name__)


def _read_wkt(path: Path, srid: int) -> Geometry:
    if not path.exists():
        raise FileNotFoundError(f"Impossible to find: `{path}`.")
    return parse_wkt_geometry(path.read_text(encoding="utf-8").strip(), srid=srid)


async def _run(
    sections: list[Geometry],
    parent: Geometry,
    options: TopologyValidationOptions,
    settings: EngineSettings,
) -> TopologyValidationReport:
    engine: GeometryEngine
    if settings.is_configured:
        logger.info("Using remote geometry engine at %s", settings.base_url)
        engine = RemoteEngine(settings)
    else:
        engine = ShapelyEngine()

    try:
        return await TopologyValidator(engine).validate_topology(
            sections, parent, options
        )
    finally:
        await engine.aclose()


def topology(args: list[str]) -> int:
    """Entry point for the topology command."""
    parser = argparse.ArgumentParser(
        prog="cogo topology",
        description="Check sections for overlaps, gaps and containment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cogo topology -p parent.wkt -s s1.wkt s2.wkt
  cogo topology -p parent.wkt -s s1.wkt --no-gaps --strict-boundary
  cogo topology -p parent.wkt -s s1.wkt -e engine.env

Geometry engine:
  The remote engine is used when COGO_ENGINE_BASE_URL is set (in the
  environment or the file given with --env-file); otherwise predicates are
  computed locally with shapely.
""",
    )

    parser.add_argument(
        "-p",
        "--parent",
        type=Path,
        required=True,
        help="WKT file of the parent parcel",
    )
    parser.add_argument(
        "-s",
        "--sections",
        type=Path,
        nargs="+",
        required=True,
        help="WKT files of the sections",
    )
    parser.add_argument(
        "--srid",
        type=int,
        default=DEFAULT_SRID,
        help="SRID of the WKT coordinates",
    )
    parser.add_argument(
        "-e",
        "--env-file",
        type=Path,
        default=None,
        help="Environment file holding the COGO_ENGINE_* settings",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=OVERLAP_TOLERANCE,
        help="Overlap area ignored (m²)",
    )
    parser.add_argument(
        "--min-gap-area",
        type=float,
        default=MIN_GAP_AREA,
        help="Smallest gap reported (m²)",
    )
    parser.add_argument(
        "--strict-boundary",
        action="store_true",
        help="Report sections touching the parent boundary as errors",
    )
    parser.add_argument(
        "--no-gaps",
        action="store_true",
        help="Skip the gap check",
    )

    parsed_args = parser.parse_args(args)

    if parsed_args.env_file is not None:
        if not parsed_args.env_file.exists():
            logger.error("Impossible to find: `%s`.", parsed_args.env_file)
            return 1
        load_dotenv(parsed_args.env_file, override=True)
        logger.info("Loaded environment variables from: `%s`", parsed_args.env_file)

    try:
        parent = _read_wkt(parsed_args.parent, parsed_args.srid)
        sections = [_read_wkt(path, parsed_args.srid) for path in parsed_args.sections]
    except FileNotFoundError:
        logger.exception("FileNotFoundError")
        return 1
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)  # noqa: TRY400
        return 1

    options = TopologyValidationOptions(
        check_gaps=not parsed_args.no_gaps,
        tolerance=parsed_args.tolerance,
        min_gap_area=parsed_args.min_gap_area,
        allow_touching=not parsed_args.strict_boundary,
    )

    try:
        report = asyncio.run(_run(sections, parent, options, EngineSettings()))
    except ValidationError:
        logger.exception("Topology validation failed")
        return 1

    print(report.model_dump_json(indent=2, exclude_none=True))  # noqa: T201
    return 0 if report.is_valid else 2
