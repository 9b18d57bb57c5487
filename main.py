"""
Clarus Vitae - Review statistics and property comparison

CLI entry point for computing review summaries and exporting comparisons.
"""

import argparse
import json
import logging
import sys

import config.settings as settings
from clarus.comparison.export import ComparisonExporter, EXPORT_FORMATS
from clarus.comparison.urls import parse_comparison_url
from clarus.services.review_service import ReviewService
from clarus.utils.storage import DataStore


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def run_stats(args) -> int:
    service = ReviewService(DataStore(args.data_root))

    stats = service.get_review_stats(args.property_id)
    outcomes = stats.outcome_stats
    aggregation = service.get_review_aggregation(args.property_id)

    print(json.dumps({
        "propertyId": args.property_id,
        "reviewStats": stats.to_dict(),
        "goalAchievementRate": outcomes.achievement_rate if outcomes else None,
        "aggregation": aggregation.to_dict() if aggregation else None,
    }, indent=2))
    return 0


def run_compare(args) -> int:
    if args.properties.startswith(settings.COMPARE_PAGE_PATH) or "=" in args.properties:
        slugs = parse_comparison_url(args.properties)
    else:
        slugs = [slug for slug in args.properties.split(",") if slug]

    exporter = ComparisonExporter(DataStore(args.data_root))
    output_path = exporter.export(slugs, output_dir=args.output_dir, fmt=args.format)

    print(f"Comparison export: {output_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Clarus Vitae - Review statistics and property comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Review summary for one property
  python main.py stats --property-id prop-123

  # Compare up to four properties (slugs or a shared compare link)
  python main.py compare --properties lanserhof-tegernsee,sha-wellness-clinic
  python main.py compare --properties "/compare?properties=a,b" --format html
        """
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )
    common.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    stats = subparsers.add_parser("stats", parents=[common], help="Print review statistics")
    stats.add_argument("--property-id", required=True, help="Property id")
    stats.set_defaults(handler=run_stats)

    compare = subparsers.add_parser("compare", parents=[common], help="Export a comparison")
    compare.add_argument(
        "--properties",
        required=True,
        help="Comma-separated property slugs, or a /compare?properties=... link"
    )
    compare.add_argument(
        "--format",
        default="csv",
        choices=list(EXPORT_FORMATS),
        help="Export format (default: csv)"
    )
    compare.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Output directory (default: {settings.OUTPUT_ROOT})"
    )
    compare.set_defaults(handler=run_compare)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        exit_code = args.handler(args)
        logger.info(f"Command '{args.command}' completed successfully")
        sys.exit(exit_code)

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n⚠️  Interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"\n❌ Failed: {e}")
        print(f"Check {settings.LOG_FILE} for details")
        sys.exit(1)


if __name__ == "__main__":
    main()
