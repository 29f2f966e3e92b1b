"""
Main entry point for the regulatory feed aggregation system.
"""

import sys
import json
import logging
import argparse
from pathlib import Path
import structlog

from .core.config import Settings, load_settings
from .core.errors import RegistryError
from .ingestion import load_registry
from .orchestration import RegulatoryFeedPipeline
from .tagging import tag_vocabulary


def setup_logging(settings: Settings):
    """Configure structured logging."""
    # Ensure logs directory exists
    settings.logs_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[
            logging.FileHandler(settings.logs_dir / "regwatch.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regwatch",
        description="Regulatory feed aggregation & tagging"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run pipeline command
    run_parser = subparsers.add_parser('run', help='Fetch, summarize, tag and publish the feed')
    run_parser.add_argument('--feeds', type=str, help='Source registry JSON file')
    run_parser.add_argument('--output', type=str, help='Artifact path to write')
    run_parser.add_argument('--days', type=int, help='Recency window in days')
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Run every stage without writing the artifact'
    )

    # Health check command
    subparsers.add_parser('health', help='Check system health')

    # Tag vocabulary command
    tags_parser = subparsers.add_parser('tags', help='Show tag filters per region of an artifact')
    tags_parser.add_argument('--artifact', type=str, help='Artifact to read (defaults to OUTPUT_PATH)')
    tags_parser.add_argument('--region', type=str, help='Only show this region')

    # Registry validation command
    registry_parser = subparsers.add_parser('validate-registry', help='Check the source registry')
    registry_parser.add_argument('--feeds', type=str, help='Source registry JSON file')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = load_settings(
        feeds_path=getattr(args, 'feeds', None),
        output_path=getattr(args, 'output', None),
        days_back=getattr(args, 'days', None),
    )

    # Setup logging
    setup_logging(settings)
    logger = structlog.get_logger(__name__)

    if args.command == 'run':
        logger.info("Starting pipeline execution", dry_run=args.dry_run)

        pipeline = RegulatoryFeedPipeline(settings)
        pipeline_run = pipeline.run(publish=not args.dry_run)

        if pipeline_run.status == "completed":
            print(f"Wrote {pipeline_run.published} items to {pipeline_run.output_path or '(dry run)'}")
            sys.exit(0)
        else:
            logger.error("Pipeline failed", error=pipeline_run.error_message)
            sys.exit(1)

    elif args.command == 'health':
        logger.info("Running health checks")
        health_status = RegulatoryFeedPipeline(settings).health_check()

        print("\n=== System Health Check ===")
        for component, status in health_status.items():
            status_icon = "✅" if status else "❌"
            print(f"{status_icon} {component.replace('_', ' ').title()}: {'OK' if status else 'FAILED'}")
        if not health_status.get("summarization_credential"):
            print("⚠️  No completion credential configured; snippet summaries will be used")

        required = [status for component, status in health_status.items()
                    if component != "summarization_credential"]
        all_healthy = all(required)
        print(f"\nOverall Status: {'✅ HEALTHY' if all_healthy else '❌ ISSUES DETECTED'}")

        sys.exit(0 if all_healthy else 1)

    elif args.command == 'tags':
        show_tags(settings, args.artifact, args.region)

    elif args.command == 'validate-registry':
        validate_registry(settings)


def show_tags(settings: Settings, artifact_path=None, region=None):
    """Print the tag filter vocabulary for each region of an artifact."""
    path = Path(artifact_path or settings.output_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Could not load {path}: {e}")
        sys.exit(1)

    items = data.get("items") or []
    regions = [region] if region else sorted({item.get("region") for item in items if item.get("region")})

    print(f"\n=== Tag Filters ({path}) ===")
    for name in regions:
        count = sum(1 for item in items if item.get("region") == name)
        vocabulary = tag_vocabulary(items, name)
        print(f"• {name} ({count} items): {', '.join(vocabulary) or '-'}")


def validate_registry(settings: Settings):
    """Load the source registry and report malformed endpoints."""
    try:
        registry = load_registry(settings.feeds_path)
    except RegistryError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print(f"\n=== Source Registry ({settings.feeds_path}) ===")
    for name, urls in registry.regions.items():
        print(f"• {name}: {len(urls)} endpoints")

    invalid = registry.invalid_urls()
    for name, url in invalid:
        print(f"❌ {name}: {url}")

    print(f"\n{registry.endpoint_count} endpoints, {len(invalid)} invalid")
    sys.exit(1 if invalid else 0)


if __name__ == "__main__":
    main()
