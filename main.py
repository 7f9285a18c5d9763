import sys
import argparse
import asyncio
from typing import List, Optional

from hockeyplots.logging.setup import setup_logging
from hockeyplots.config.settings import AppSettings, settings

from loguru import logger

from hockeyplots.app.dashboard import DivisionFilter, render_series_table
from hockeyplots.app.refresh import RefreshController
from hockeyplots.calculation.points import derive_league_series, load_ledger_games
from hockeyplots.feeds.nhl_schedule_feed import NHLScheduleFeed
from hockeyplots.models.enums import IndexPolicy, LedgerBackend, TeamNamespace
from hockeyplots.models.errors import ReferenceDataError
from hockeyplots.models.series import TeamSeries
from hockeyplots.reference.store import ReferenceData, load_reference_data
from hockeyplots.storage.base import GameLedger
from hockeyplots.storage.factory import open_ledger

from rich.console import Console
from rich.live import Live


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Track each NHL team's points above a per-game baseline."
    )
    parser.add_argument(
        "--ledger",
        choices=[backend.value for backend in LedgerBackend],
        help="Ledger backend (default from settings)",
    )
    parser.add_argument("--db", help="SQLite ledger path")
    parser.add_argument("--season", help="Season code, e.g. 20232024")
    parser.add_argument("--baseline", type=float, help="Expected points per game")
    parser.add_argument(
        "--index-policy",
        choices=[policy.value for policy in IndexPolicy],
        help="x-axis handling of unscored games",
    )
    parser.add_argument(
        "--division",
        action="append",
        default=[],
        help="Only show this division (repeatable): metro, atlantic, central, pacific",
    )
    parser.add_argument("--once", action="store_true", help="Render once and exit")
    parser.add_argument("--offline", action="store_true", help="Do not fetch from the feed")
    parser.add_argument("--log-level", help="Override the configured log level")
    return parser.parse_args(argv)


def apply_overrides(args: argparse.Namespace) -> AppSettings:
    overrides = {}
    if args.ledger:
        overrides["ledger_backend"] = LedgerBackend(args.ledger)
    if args.db:
        overrides["sqlite_path"] = args.db
    if args.season:
        overrides["season"] = args.season
    if args.baseline is not None:
        overrides["baseline_points_per_game"] = args.baseline
    if args.index_policy:
        overrides["index_policy"] = IndexPolicy(args.index_policy)
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    return settings.model_copy(update=overrides)


async def derive_from_ledger(
    ledger: GameLedger, reference: ReferenceData, app_settings: AppSettings
) -> List[TeamSeries]:
    games_by_team = await load_ledger_games(ledger, reference)
    return derive_league_series(
        games_by_team,
        reference,
        TeamNamespace.INTERNAL,
        baseline=app_settings.baseline_points_per_game,
        index_policy=app_settings.index_policy,
    )


async def run(args: argparse.Namespace, app_settings: AppSettings) -> int:
    division_filter = DivisionFilter.from_names(args.division)
    console = Console()

    ledger = await open_ledger(app_settings)
    try:
        try:
            reference = await load_reference_data(ledger)
        except ReferenceDataError as e:
            logger.critical(f"Reference data must be fixed before running: {e}")
            return 1

        controller = RefreshController(
            ledger,
            reference,
            feed_factory=lambda: NHLScheduleFeed(season=app_settings.season),
        )
        league_series = await derive_from_ledger(ledger, reference, app_settings)

        if args.once:
            if not args.offline:
                controller.request_refresh()
                await controller.wait_idle()
                if await controller.poll() is not None:
                    league_series = await derive_from_ledger(ledger, reference, app_settings)
            console.print(render_series_table(league_series, division_filter))
            return 0

        loop = asyncio.get_running_loop()
        last_refresh = loop.time()
        if not args.offline:
            controller.request_refresh()

        with Live(
            render_series_table(league_series, division_filter),
            console=console,
            refresh_per_second=4,
        ) as live:
            while True:
                report = await controller.poll()
                if report is not None and report.changed:
                    league_series = await derive_from_ledger(ledger, reference, app_settings)
                    live.update(render_series_table(league_series, division_filter))

                interval = app_settings.refresh_interval_seconds
                if (
                    not args.offline
                    and interval > 0
                    and loop.time() - last_refresh >= interval
                    and controller.in_flight == 0
                ):
                    last_refresh = loop.time()
                    controller.request_refresh()

                await asyncio.sleep(app_settings.frame_interval_seconds)
    finally:
        await ledger.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    app_settings = apply_overrides(args)
    setup_logging(app_settings.log_level)
    logger.info("Starting hockeyplots")
    return asyncio.run(run(args, app_settings))


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except ReferenceDataError as e:
        logger.critical(f"Fatal reference data error: {e}")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
