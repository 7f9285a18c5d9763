# hockeyplots/feeds/nhl_schedule_feed.py

import asyncio
from typing import List, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from hockeyplots.config.settings import settings
from hockeyplots.models.feed import FeedBatch, TeamSchedule
from hockeyplots.models.team import Team
from .base_feed import BaseFeed, FeedError


class NHLScheduleFeed(BaseFeed):
    """Fetches club season schedules from the NHL web API."""

    name: str = "nhl-api"

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None,
        season: Optional[str] = None,
        max_concurrency: Optional[int] = None,
    ):
        super().__init__(client)
        self.base_url = (base_url or settings.feed_base_url).rstrip("/")
        self.season = season or settings.season
        self._semaphore = asyncio.Semaphore(max_concurrency or settings.feed_max_concurrency)

    def schedule_url(self, team: Team) -> str:
        return f"{self.base_url}/club-schedule-season/{team.abbrev}/{self.season}"

    async def fetch_team_schedule(self, team: Team) -> TeamSchedule:
        url = self.schedule_url(team)
        async with self._semaphore:
            response = await self._make_request(method="GET", url=url)
        try:
            schedule = TeamSchedule.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.debug(f"Raw schedule response content: {response.text[:500]}")
            raise FeedError(f"Malformed schedule response for {team.abbrev}: {e}") from e
        logger.debug(f"Fetched {len(schedule.games)} games for {team.abbrev}")
        return schedule

    async def fetch_schedules(self, teams: List[Team]) -> FeedBatch:
        """Fetch every team's schedule concurrently; any failure abandons the batch."""
        logger.info(f"Fetching {len(teams)} schedules for season {self.season} from {self.name}")

        results = await asyncio.gather(
            *(self.fetch_team_schedule(team) for team in teams), return_exceptions=True
        )

        batch = FeedBatch(season=self.season)
        failures = []
        for team, result in zip(teams, results):
            if isinstance(result, BaseException):
                logger.error(f"Error fetching schedule for {team.abbrev}: {result}")
                failures.append((team, result))
            else:
                batch.schedules[team.api_id] = result

        if failures:
            team, first_error = failures[0]
            if not isinstance(first_error, Exception):
                raise first_error
            raise FeedError(
                f"{len(failures)} of {len(teams)} schedules failed; first was {team.abbrev}"
            ) from first_error

        logger.info(
            f"Finished fetching from {self.name}. {batch.game_count} games across "
            f"{len(batch.schedules)} teams."
        )
        return batch
