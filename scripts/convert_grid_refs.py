"""Convert a CSV/parquet file between lat/lon and OS grid references.

Usage:
    python scripts/convert_grid_refs.py points.csv out.csv --to-grid
    python scripts/convert_grid_refs.py points.csv out.csv --to-grid --digits 10
    python scripts/convert_grid_refs.py refs.csv out.parquet --from-grid --ref-col gridref
    python scripts/convert_grid_refs.py points.csv out.csv --to-grid --no-datum-shift

--no-datum-shift projects WGS84 lat/lon directly, skipping the OSGB36 shift
(tens of metres out, matches older data produced that way).
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from osgrid.batch import add_coordinates, add_grid_references, read_table, write_table
from osgrid.config import LOG_LEVEL
from osgrid.grid.codec import VALID_DIGITS

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s  %(levelname)-7s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("convert_grid_refs")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Convert between lat/lon and OS grid references")
    parser.add_argument("input", type=Path, help="Input .csv or .parquet file")
    parser.add_argument("output", type=Path, help="Output .csv or .parquet file")

    direction = parser.add_mutually_exclusive_group(required=True)
    direction.add_argument("--to-grid", action="store_true", help="Add grid references from lat/lon")
    direction.add_argument("--from-grid", action="store_true", help="Add lat/lon from grid references")

    parser.add_argument("--lat-col", default="latitude")
    parser.add_argument("--lon-col", default="longitude")
    parser.add_argument("--ref-col", default="grid_reference")
    parser.add_argument("--digits", type=int, choices=VALID_DIGITS, default=None,
                        help="Grid reference digits (default GRID_DEFAULT_DIGITS)")
    parser.add_argument("--no-datum-shift", action="store_true",
                        help="Skip the WGS84 <-> OSGB36 Helmert shift")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    datum_shift = False if args.no_datum_shift else None

    if not args.input.is_file():
        log.error("Input file not found: %s", args.input)
        return 1

    df = read_table(args.input)
    log.info("Read %d rows from %s", len(df), args.input)

    try:
        if args.to_grid:
            out = add_grid_references(
                df, lat_col=args.lat_col, lon_col=args.lon_col, out_col=args.ref_col,
                digits=args.digits, datum_shift=datum_shift,
            )
        else:
            out = add_coordinates(
                df, ref_col=args.ref_col, lat_col=args.lat_col, lon_col=args.lon_col,
                datum_shift=datum_shift,
            )
    except KeyError as e:
        log.error("%s", e.args[0])
        return 1

    write_table(out, args.output)
    log.info("Wrote %s", args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
