"""Command line entry point for Jira Report."""

import argparse
import asyncio
import sys
from typing import List, Optional

from . import __version__
from .core.config_manager import ConfigManager
from .core.orchestrator import ReportOrchestrator, WorkflowStatus
from .utils.exceptions import JiraReportError
from .utils.logging_config import get_logger, setup_logging


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate Jira development status and weekly due-date PDF reports"
    )

    parser.add_argument("--config", type=str, help="Path to a JSON configuration file")

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory for the generated PDFs (default: current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    parser.add_argument("--log-file", type=str, help="Also write logs to this file")

    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    parser.add_argument(
        "--version", action="version", version=f"jira-report {__version__}"
    )

    return parser.parse_args(argv)


def initialize_logging(args: argparse.Namespace, default_level: str = "INFO"):
    """Initialize logging system."""
    if args.debug:
        log_level = "DEBUG"
    else:
        log_level = args.log_level or default_level

    setup_logging(
        level=log_level,
        log_file=args.log_file,
        enable_console=True,
        enable_structured=True,
        sanitize=True,
    )

    logger = get_logger(__name__)
    logger.info(f"Jira Report starting - Version {__version__}")
    logger.debug(f"Log level: {log_level}")

    return logger


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_arguments(argv)

    # Logging comes up before configuration so load errors are reported
    setup_logging(level="DEBUG" if args.debug else (args.log_level or "INFO"))
    logger = get_logger(__name__)

    try:
        config_manager = ConfigManager(config_file=args.config)
        config_manager.update_report_config(output_dir=args.output_dir)

        logger = initialize_logging(
            args, default_level=config_manager.get_report_config().log_level
        )
        logger.debug(f"Effective configuration: {config_manager.as_dict()}")

        orchestrator = ReportOrchestrator(config_manager)
        result = asyncio.run(orchestrator.run())

    except JiraReportError as e:
        logger.error(f"Application error: {e}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    for report in result.reports:
        if report.generated:
            logger.info(f"{report.name}: {report.issue_count} issues -> {report.output_path}")
        elif report.error_message:
            logger.warning(f"{report.name}: failed ({report.error_message})")
        else:
            logger.info(f"{report.name}: no issues, report skipped")

    if result.generated_files:
        logger.info(f"Generated: {', '.join(str(p) for p in result.generated_files)}")
    logger.info(f"Finished in {result.execution_time:.2f}s")
    return 0 if result.status == WorkflowStatus.COMPLETED else 1


if __name__ == "__main__":
    sys.exit(main())
