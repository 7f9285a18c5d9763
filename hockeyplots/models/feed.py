from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import GameCategory, OutcomeType
from .errors import MalformedGameError
from .game import Game, Score


class _FeedModel(BaseModel):
    """Base for payloads from the schedule feed (camelCase keys, extras ignored)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class FeedTeam(_FeedModel):
    id: int
    abbrev: Optional[str] = None
    score: Optional[int] = None


class FeedGameOutcome(_FeedModel):
    # Kept as the raw code: an unknown code is a reference-data problem,
    # not a malformed response.
    last_period_type: str


class FeedGame(_FeedModel):
    """One entry of a club schedule as returned by the feed."""

    id: int
    game_type: int
    game_date: date
    game_state: Optional[str] = None
    home_team: FeedTeam
    away_team: FeedTeam
    game_outcome: Optional[FeedGameOutcome] = None

    @property
    def category(self) -> GameCategory:
        return GameCategory.from_code(self.game_type)

    @property
    def is_final(self) -> bool:
        return self.game_outcome is not None

    def final_score(self) -> Optional[Score]:
        """Returns the final Score, or None while the game is not decided.

        Raises:
            MalformedGameError: the game has an outcome but a team has no score.
            UnknownOutcomeTypeError: the outcome code is not REG, OT or SO.
        """
        if self.game_outcome is None:
            return None
        outcome = OutcomeType.from_feed_code(self.game_outcome.last_period_type)
        for side, team in (("home", self.home_team), ("away", self.away_team)):
            if team.score is None:
                raise MalformedGameError(
                    f"Game {self.id} has an outcome but no score for the {side} team"
                )
        return Score(home=self.home_team.score, away=self.away_team.score, outcome=outcome)

    def to_game(self) -> Game:
        """Builds a domain Game keyed by feed team ids."""
        return Game(
            api_id=self.id,
            home_team_id=self.home_team.id,
            away_team_id=self.away_team.id,
            category=self.category,
            game_date=self.game_date,
            score=self.final_score(),
        )


class TeamSchedule(_FeedModel):
    games: List[FeedGame] = []


class FeedBatch(BaseModel):
    """Everything fetched in one refresh, keyed by team feed id in fetch order."""

    season: str
    schedules: Dict[int, TeamSchedule] = {}
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def game_count(self) -> int:
        return sum(len(schedule.games) for schedule in self.schedules.values())
