"""
Command-line interface for the lock submitter.

Provides commands for submitting the lock call or checking it without sending.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from lock_submitter import __version__
from lock_submitter.config import ConfigError, SubmitterError, load_config
from lock_submitter.core.submitter import TransactionSubmitter

logger = structlog.get_logger(__name__)

EXIT_FAILURE = 1


def setup_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """Configure structured logging."""
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
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lock-submitter",
        description="Submit a signed lock call to an EVM contract",
        epilog="Exit codes: 0 run completed, 1 fatal error, 3 gas estimation failed.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Environment file to read (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Output logs in JSON format",
    )
    parser.add_argument(
        "--receipt-timeout",
        type=float,
        help="Seconds to wait for the receipt (default: RECEIPT_TIMEOUT_SECONDS or 120)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run (default: submit)")

    # Options go before the command: lock-submitter --log-level INFO check
    subparsers.add_parser(
        "submit",
        help="Check balances, send the lock transaction and wait for it",
    )
    subparsers.add_parser(
        "check",
        help="Check balances and estimate cost without sending",
    )

    return parser


def _overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_json is not None:
        overrides["log_json"] = args.log_json
    if args.receipt_timeout is not None:
        overrides["receipt_timeout_seconds"] = args.receipt_timeout
    return overrides


async def run_submitter(args: argparse.Namespace) -> int:
    """Load configuration and run the submitter once."""
    config = load_config(env_file=args.env_file or None, **_overrides(args))
    setup_logging(config.log_level, config.log_json)

    submitter = TransactionSubmitter(config)
    result = await submitter.run(submit=args.command != "check")

    logger.info("run_result", outcome=result.outcome.value, exit_code=result.exit_code)
    return result.exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        args.command = "submit"

    try:
        return asyncio.run(run_submitter(args))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except SubmitterError as e:
        logger.error("run_failed", error_type=e.__class__.__name__, error=str(e))
        print(f"Error: {e.__class__.__name__}: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
