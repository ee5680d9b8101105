# -*- coding: utf-8 -*-
"""Closure command: outside-figure computation of a traverse."""

import argparse
import logging
from pathlib import Path

from cogo_lib.commands.inputs import load_points
from cogo_lib.computation import compute_outside_figure
from cogo_lib.computation import generate_computation_report
from cogo_lib.enums import CoordinateFormat
from cogo_lib.errors import ValidationError

logger = logging.getLogger(__name__)


def closure(args: list[str]) -> int:
    """Entry point for the closure command."""
    parser = argparse.ArgumentParser(
        prog="cogo closure",
        description="Compute closure, area and accuracy of a surveyed boundary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cogo closure -i boundary.csv                  # Text report to stdout
  cogo closure -i boundary.csv --json           # JSON result to stdout
  cogo closure -i boundary.csv -o report.txt    # Text report to file
  cogo closure -i gps.csv -f decimal            # Lat/lon input, projected to UTM 35S

Input:
  One point per line: `x,y` or `id,x,y` (UTM meters), `lat,lon` (decimal)
  or a DMS string.  A closed figure repeats the first point at the end.
""",
    )

    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        required=True,
        help="CSV file holding the boundary points",
    )
    parser.add_argument(
        "-o",
        "--output-file",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=[fmt.value for fmt in CoordinateFormat],
        default=CoordinateFormat.UTM.value,
        dest="coordinate_format",
        help="Coordinate format of the input (default: utm)",
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        default=",",
        help="CSV field separator",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the full result as JSON instead of a text report",
    )

    parsed_args = parser.parse_args(args)

    try:
        points = load_points(
            parsed_args.input_file,
            parsed_args.coordinate_format,
            delimiter=parsed_args.delimiter,
        )
    except FileNotFoundError:
        logger.exception("FileNotFoundError")
        return 1
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)  # noqa: TRY400
        return 1

    result = compute_outside_figure(points)

    if parsed_args.json:
        output = result.model_dump_json(indent=2)
    else:
        output = generate_computation_report(result)

    if parsed_args.output_file is None:
        print(output)  # noqa: T201
    else:
        parsed_args.output_file.write_text(output, encoding="utf-8")
        logger.info("Wrote %s", parsed_args.output_file)

    return 0 if result.success else 2
