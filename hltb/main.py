"""Main entry point for the HowLongToBeat scraper.

This module provides the command line entry point with:
- Command-line argument parsing
- Service initialization and dependency injection
- JSON output of the scraped records
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from hltb.models import AppConfig, GameRecord
from hltb.services.config import ConfigurationService
from hltb.services.errors import get_error_service
from hltb.services.game_scraper import GameScraperService
from hltb.services.http_client import HttpClientService
from hltb.services.logging import setup_logging


log = structlog.stdlib.get_logger()


class ApplicationContext:
    """Container for application services.

    Services are created lazily so that argument errors never open a
    network client.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path: Path | None = config_path

        self._config_service: ConfigurationService | None = None
        self._http_client: HttpClientService | None = None
        self._game_scraper: GameScraperService | None = None
        self._config: AppConfig | None = None

    @property
    def config_service(self) -> ConfigurationService:
        """Get the configuration service (lazy initialization)."""
        if self._config_service is None:
            self._config_service = ConfigurationService(config_path=self._config_path)
        return self._config_service

    @property
    def config(self) -> AppConfig:
        """Get the current application configuration."""
        if self._config is None:
            self._config = self.config_service.load_config()
        return self._config

    @property
    def http_client(self) -> HttpClientService:
        """Get the HTTP client service (lazy initialization)."""
        if self._http_client is None:
            self._http_client = HttpClientService(
                timeout=self.config.timeout,
                max_retries=self.config.max_retries,
                rate_limit_delay=self.config.request_delay,
            )
        return self._http_client

    @property
    def game_scraper(self) -> GameScraperService:
        """Get the game scraper service (lazy initialization)."""
        if self._game_scraper is None:
            self._game_scraper = GameScraperService(
                http_client=self.http_client,
                config=self.config,
            )
        return self._game_scraper

    async def cleanup(self) -> None:
        """Close open connections."""
        if self._http_client is not None:
            await self._http_client.close()
        log.debug("Application cleanup complete")


class ParsedArgs:
    """Type-safe container for parsed command-line arguments."""

    def __init__(
        self,
        command: str,
        target: str,
        config: Path | None,
        log_level: str | None,
        log_dir: Path | None,
        quiet: bool = False,
    ) -> None:
        self.command: str = command
        self.target: str = target
        self.config: Path | None = config
        self.log_level: str | None = log_level
        self.log_dir: Path | None = log_dir
        self.quiet: bool = quiet


def parse_arguments(argv: list[str] | None = None) -> ParsedArgs:
    """Parse command-line arguments.

    Args:
        argv: Arguments to parse, defaults to sys.argv

    Returns:
        Parsed arguments container
    """
    parser = argparse.ArgumentParser(
        prog="hltb-scraper",
        description="Look up game lengths on HowLongToBeat",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hltb-scraper detail 6974             Show the play times of one game
  hltb-scraper search "dark souls"     List games matching a search term
  hltb-scraper --log-level DEBUG search celeste
        """
    )

    _ = parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0"
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: ~/.config/hltb-scraper/config.json)"
    )

    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Set the logging level (default: from configuration)"
    )

    _ = parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for log files (default: console only)"
    )

    _ = parser.add_argument(
        "--quiet",
        action="store_true",
        help="Disable console logging (log files are still written with --log-dir)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    detail_parser = subparsers.add_parser("detail", help="Show the play times of one game")
    _ = detail_parser.add_argument("target", metavar="GAME_ID", help="Catalog id of the game")

    search_parser = subparsers.add_parser("search", help="Search the catalog")
    _ = search_parser.add_argument("target", metavar="QUERY", help="Search term")

    ns = parser.parse_args(argv)

    return ParsedArgs(
        command=str(ns.command),
        target=str(ns.target),
        config=ns.config,
        log_level=ns.log_level,
        log_dir=ns.log_dir,
        quiet=ns.quiet,
    )


async def run_command(context: ApplicationContext, args: ParsedArgs) -> list[GameRecord]:
    """Run the requested lookup and return its records."""
    try:
        if args.command == "detail":
            return [await context.game_scraper.detail(args.target)]
        return await context.game_scraper.search(args.target)
    finally:
        await context.cleanup()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)

    # Configure logging before the configuration file is read, then apply
    # the configured level unless one was given on the command line
    _ = setup_logging(log_level=args.log_level or "INFO", log_dir=args.log_dir, quiet=args.quiet)
    context = ApplicationContext(config_path=args.config)

    try:
        if args.log_level is None and context.config.log_level != "INFO":
            _ = setup_logging(log_level=context.config.log_level, log_dir=args.log_dir, quiet=args.quiet)

        log.info(
            "Starting HowLongToBeat scraper",
            version="0.1.0",
            command=args.command,
            config_path=str(context.config_service.config_path),
        )

        records = asyncio.run(run_command(context, args))
        print(json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False))
        exit_code = 0

    except KeyboardInterrupt:
        log.info("Application interrupted by user")
        exit_code = 130  # Standard exit code for SIGINT

    except Exception as e:
        error_service = get_error_service()
        friendly = error_service.handle_error(
            e,
            operation=args.command,
            component="cli",
            context={"target": args.target},
        )
        print(error_service.create_user_message(friendly), file=sys.stderr)
        exit_code = 1

    log.info("Application exiting", exit_code=exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
