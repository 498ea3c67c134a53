"""Command-line interface for the weather lookup service."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from weather_lookup.config import Settings, get_settings
from weather_lookup.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def refresh_favorites(settings: Settings) -> dict:
    """Run the favorites refresh job once against the configured database.

    Raises:
        FatalRunError: If favorites could not be listed
    """
    from weather_lookup.api.dependencies import CRON_LOGGER_NAME
    from weather_lookup.api.routes.scheduler import COMPLETED_MESSAGE, EMPTY_MESSAGE
    from weather_lookup.database.connection import close_db, get_session_factory, init_db
    from weather_lookup.database.stores import SqlDaySummaryCache, SqlFavoritesStore
    from weather_lookup.jobs.favorites_refresh import FavoritesRefreshJob
    from weather_lookup.providers.openweather import OpenWeatherProvider

    await init_db(settings.database_url, echo=settings.database_echo)
    try:
        factory = get_session_factory()
        async with OpenWeatherProvider(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            timeout=settings.openweather_timeout_seconds,
        ) as provider:
            job = FavoritesRefreshJob(
                favorites=SqlFavoritesStore(factory),
                cache=SqlDaySummaryCache(factory),
                provider=provider,
                logger=logging.getLogger(CRON_LOGGER_NAME),
            )
            result = await job.run()
    finally:
        await close_db()

    return {
        "message": COMPLETED_MESSAGE if result.processed else EMPTY_MESSAGE,
        "summary": result.summary(),
    }


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Weather Lookup - weather proxy with cached favorites"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Refresh command
    subparsers.add_parser(
        "refresh-favorites",
        help="Cache yesterday's day summary for every favorite location",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    configure_logging(settings.log_level)

    if args.command == "refresh-favorites":
        from weather_lookup.jobs.favorites_refresh import FatalRunError

        try:
            response = asyncio.run(refresh_favorites(settings))
        except FatalRunError as e:
            logger.error(f"Scheduled check failed: {e}")
            print(json.dumps({"error": "Internal server error during scheduled check"}))
            return 1

        print(json.dumps(response, indent=2, default=str))
        return 0

    if args.command == "serve":
        import uvicorn

        from weather_lookup.api.app import create_app

        uvicorn.run(
            create_app(settings),
            host=args.host or settings.host,
            port=args.port or settings.port,
        )
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
