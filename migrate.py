#!/usr/bin/env python3
"""
Orchestration Migration Tool - Main CLI Entry Point

Copies all orchestrations from a source Keboola project into an empty
destination project, rewriting references between orchestrations.

The source project is given in the configuration file; the destination
project comes from the KBC_TOKEN and KBC_URL environment variables.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

# Add project root to Python path for relative imports
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from clients import OrchestratorClient, resolve_service_url
from config_loader import ConfigLoader, get_nested
from errors import TransportError, UserError
from logger import setup_logging, log_section, log_config
from migration import MigrationReport, OrchestrationMigrator

__version__ = "1.0.0"

# Exit codes
EXIT_OK = 0
EXIT_USER_ERROR = 1
EXIT_APPLICATION_ERROR = 2
EXIT_INTERRUPTED = 130


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        description="Migrate orchestrations from a source project to an empty destination project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Migrate using config.yaml and KBC_TOKEN/KBC_URL for the destination
  python migrate.py --config config.yaml

  # Preview without creating anything
  python migrate.py --dry-run

  # Verbose logging and a JSON report
  python migrate.py -vv --report-path migration_report.json
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration file (default: $KBC_DATADIR/config.json or config.yaml)'
    )

    parser.add_argument(
        '--dry-run',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Read both projects but create or update nothing'
    )

    parser.add_argument(
        '--report-path',
        type=str,
        help='Write a JSON migration report to this path'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write logs to this file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def build_clients(config: Dict[str, Any], logger: logging.Logger):
    """
    Resolve orchestrator endpoints and build both project clients.

    Returns:
        Tuple of (source_client, destination_client)
    """
    parameters = config['parameters']
    destination = config['destination']

    logger.info("Detecting orchestrator API url for source project")
    source_token = parameters['#sourceKbcToken']
    source_url = resolve_service_url(source_token, parameters['sourceKbcUrl'], config)
    source_client = OrchestratorClient.from_config(config, url=source_url, token=source_token)

    logger.info("Detecting orchestrator API url for destination project")
    destination_url = resolve_service_url(destination['token'], destination['url'], config)
    destination_client = OrchestratorClient.from_config(
        config, url=destination_url, token=destination['token']
    )

    return source_client, destination_client


def run_migration(config: Dict[str, Any], logger: logging.Logger) -> int:
    """Execute the complete migration."""
    dry_run = get_nested(config, 'migration.dry_run', False)
    show_progress = get_nested(config, 'advanced.progress_bars', True) and sys.stderr.isatty()

    source_client, destination_client = build_clients(config, logger)
    try:
        migrator = OrchestrationMigrator(
            source_client,
            destination_client,
            logger=logger,
            dry_run=dry_run,
            show_progress=show_progress
        )
        report = migrator.run()
    finally:
        source_client.close()
        destination_client.close()

    report_generator = MigrationReport(logger)
    print("\n" + report_generator.format_console_report(report))

    report_path = get_nested(config, 'migration.report_path')
    if report_path:
        report_generator.export_json_report(report, report_path)

    logger.info("Migration completed successfully")
    return EXIT_OK


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose >= 2:
        log_level = 'DEBUG'
    else:
        log_level = 'INFO'
    logger = setup_logging(level=log_level)

    log_section("Orchestration Migration Tool")
    logger.info(f"Version: {__version__}")

    try:
        config_path = args.config or ConfigLoader.default_config_path()
        logger.info(f"Loading configuration from {config_path}")
        config = ConfigLoader.load(config_path)
        config = ConfigLoader.apply_environment(config)
        config = ConfigLoader.merge_with_args(config, args)
        ConfigLoader.validate(config)

        # Reconfigure logging with config file settings
        logger = setup_logging(
            level=get_nested(config, 'logging.level', log_level),
            log_file=get_nested(config, 'logging.file')
        )
    except (OSError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return EXIT_USER_ERROR

    log_config(config)

    try:
        return run_migration(config, logger)
    except UserError as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USER_ERROR
    except TransportError as e:
        logger.error(f"Remote call failed: {e}")
        print(f"ERROR: Remote call failed: {e}", file=sys.stderr)
        return EXIT_APPLICATION_ERROR
    except KeyboardInterrupt:
        print("\nMigration interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return EXIT_APPLICATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
