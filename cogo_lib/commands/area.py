# -*- coding: utf-8 -*-
"""Area command: area, perimeter and interior angles of a figure."""

import argparse
import json
import logging
from pathlib import Path

from cogo_lib.cogo import compute_area
from cogo_lib.cogo import validate_traverse_angles
from cogo_lib.commands.inputs import load_points
from cogo_lib.enums import AreaUnit
from cogo_lib.enums import CoordinateFormat
from cogo_lib.errors import ValidationError

logger = logging.getLogger(__name__)


def area(args: list[str]) -> int:
    """Entry point for the area command."""
    parser = argparse.ArgumentParser(
        prog="cogo area",
        description="Compute the area and perimeter of a closed figure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cogo area -i boundary.csv                 # Square meters
  cogo area -i boundary.csv -u hectares     # Hectares
""",
    )

    parser.add_argument(
        "-i",
        "--input-file",
        type=Path,
        required=True,
        help="CSV file holding the figure vertices",
    )
    parser.add_argument(
        "-u",
        "--unit",
        choices=[unit.value for unit in AreaUnit],
        default=AreaUnit.SQUARE_METERS.value,
        help="Unit of the reported area",
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

    parsed_args = parser.parse_args(args)

    try:
        points = load_points(
            parsed_args.input_file,
            parsed_args.coordinate_format,
            delimiter=parsed_args.delimiter,
        )
        result = compute_area(points, parsed_args.unit)
        angles = validate_traverse_angles(points)
    except FileNotFoundError:
        logger.exception("FileNotFoundError")
        return 1
    except ValidationError as exc:
        logger.error("Invalid input: %s", exc)  # noqa: TRY400
        return 1

    payload = {
        "area": result.area,
        "unit": result.unit.value,
        "perimeter": result.perimeter,
        "angles": angles.model_dump(),
    }
    print(json.dumps(payload, indent=2))  # noqa: T201

    if not angles.is_valid:
        logger.warning(
            "Interior angle sum off by %.4f degrees", angles.difference
        )
    return 0
