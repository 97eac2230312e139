"""Command-line interface for donation_tracker."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import Settings, parse_years
from .nccs import NCCSFetcher
from .transformer import NCCSTransformer

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )
    # Quiet down requests library
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def cmd_fetch(args, settings: Settings) -> int:
    """Download NCCS tables and write nccs-combined-data.json."""
    settings = settings.with_overrides(
        data_dir=args.data_dir,
        years=args.years,
        max_records=args.max_records,
    )

    if not args.quiet:
        print(f"\n{'='*70}")
        print("NCCS DATA FETCHER")
        print(f"{'='*70}")
        print(f"Years: {', '.join(str(y) for y in settings.years)}")
        print(f"Max records per table: {settings.max_records}")

    fetcher = NCCSFetcher(settings)
    organizations = fetcher.run(download=not args.skip_download)

    if not args.quiet:
        print(f"\n{'='*70}")
        print("COMPLETE")
        print(f"{'='*70}")
        print(f"Organizations: {len(organizations)}")
        print(f"Output: {settings.combined_data_file}")
    return 0


def cmd_transform(args, settings: Settings) -> int:
    """Turn nccs-combined-data.json into the tracker's JSON files."""
    settings = settings.with_overrides(
        output_dir=args.output_dir,
        org_limit=args.limit,
        seed=args.seed,
    )

    transformer = NCCSTransformer(settings, input_file=args.input)
    try:
        data = transformer.run()
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        print(f"Error during transformation: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"\n{'='*70}")
        print("COMPLETE")
        print(f"{'='*70}")
        print(f"Campaigns: {len(data.campaigns)}")
        print(f"Donations: {len(data.donations)} (${data.total_donations:,})")
        print(f"Impact locations: {len(data.impact_locations)}")
        print(f"Output: {settings.output_dir}")
    return 0


def cmd_serve(args, settings: Settings) -> int:
    """Run the HTTP API with Flask's development server."""
    from .api import create_app

    settings = settings.with_overrides(output_dir=args.output_dir)
    if args.no_mock:
        settings.use_mock_data = False

    app = create_app(settings)
    app.run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="donation-tracker",
        description="Build Donation Impact Tracker data from NCCS IRS 990 filings"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (minimal output)"
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        help="Path to a .env file with DONATION_TRACKER_* settings"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch = subparsers.add_parser("fetch", help="Download and combine NCCS efile tables")
    fetch.add_argument(
        "--data-dir",
        type=Path,
        help="Directory for raw CSVs and combined JSON (default: data/nccs)"
    )
    fetch.add_argument(
        "--years",
        type=parse_years,
        help="Comma-separated tax years, most recent first (default: 2023,2022,2021)"
    )
    fetch.add_argument(
        "--max-records",
        type=int,
        help="Maximum data rows read per table (default: 10000)"
    )
    fetch.add_argument(
        "--skip-download",
        action="store_true",
        help="Only combine CSVs already on disk"
    )
    fetch.set_defaults(func=cmd_fetch)

    transform = subparsers.add_parser("transform", help="Generate tracker JSON from combined data")
    transform.add_argument(
        "-i", "--input",
        type=Path,
        help="Combined data file (default: <data-dir>/nccs-combined-data.json)"
    )
    transform.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Output directory (default: data/transformed)"
    )
    transform.add_argument(
        "--limit",
        type=int,
        help="Maximum organizations to transform (default: 1000)"
    )
    transform.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducible output"
    )
    transform.set_defaults(func=cmd_transform)

    serve = subparsers.add_parser("serve", help="Serve the tracker API")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=7071, help="Port (default: 7071)")
    serve.add_argument(
        "-o", "--output-dir",
        type=Path,
        help="Directory with transformed JSON (default: data/transformed)"
    )
    serve.add_argument(
        "--no-mock",
        action="store_true",
        help="Serve empty collections instead of mock data when files are missing"
    )
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    if args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        setup_logging(args.verbose)

    try:
        settings = Settings.from_env(args.env_file)
    except ValueError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(args.func(args, settings))


if __name__ == "__main__":
    main()
