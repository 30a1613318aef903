"""Command-line interface for gtfs-geojson."""

import argparse
import logging
import sys

from gtfs_geojson.api import convert
from gtfs_geojson.gtfs.models import ConvertConfig
from gtfs_geojson.output.writer import check_geojson_file
from gtfs_geojson.version import VERSION


def setup_logging(verbose: bool = False) -> None:
    """Configure logging on stderr so stdout stays free for GeoJSON."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def cmd_convert(args: argparse.Namespace) -> int:
    """Execute convert command."""
    setup_logging(args.verbose)

    config = ConvertConfig(
        input_path=args.input,
        output_path=args.output,
        include_stops=args.stops,
        include_shapes=args.shapes,
        fallback_to_stops=args.fallback_to_stops,
        precision=args.precision,
        indent=args.indent,
    )

    try:
        report = convert(args.input, args.output, config)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Conversion failed")
        return 1

    if args.output is not None:
        print("\nConversion successful!")
        print(f"Output: {report.output_path}")
        print(f"Stats: {report.stats}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Execute check command."""
    setup_logging(args.verbose)

    try:
        report = check_geojson_file(args.input)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.exception("Check failed")
        return 1

    if report.valid:
        print("\nCheck successful!")
        print(f"Stats: {report.stats}")
        if report.warnings:
            print(f"Warnings ({len(report.warnings)}):")
            for warning in report.warnings:
                print(f"  - {warning}")
        return 0

    print(f"\nCheck failed with {len(report.errors)} errors:")
    for error in report.errors:
        print(f"  - {error}")
    return 1


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gtfs-geojson",
        description="Convert GTFS stops and trip shapes to GeoJSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert GTFS to GeoJSON")
    convert_parser.add_argument(
        "-i", "--input", required=True, help="Path to GTFS directory or zip archive"
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output GeoJSON file (default: write to stdout)",
    )
    convert_parser.add_argument(
        "--no-stops",
        dest="stops",
        action="store_false",
        help="Leave stop points out of the output",
    )
    convert_parser.add_argument(
        "--no-shapes",
        dest="shapes",
        action="store_false",
        help="Leave trip lines out of the output",
    )
    convert_parser.add_argument(
        "--fallback-to-stops",
        action="store_true",
        help="Draw trips without a shape as straight lines through their stops",
    )
    convert_parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Round coordinates to this many decimal places (default: keep as read)",
    )
    convert_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indent the JSON output by this many spaces (default: compact)",
    )
    convert_parser.set_defaults(func=cmd_convert)

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a written GeoJSON file")
    check_parser.add_argument("-i", "--input", required=True, help="Path to GeoJSON file")
    check_parser.set_defaults(func=cmd_check)

    # Parse and execute
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
