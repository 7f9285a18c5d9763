from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .enums import GameCategory, OutcomeType


class Score(BaseModel):
    """Final tally of a completed game. Never amended once created."""

    model_config = ConfigDict(frozen=True)

    home: int = Field(..., ge=0)
    away: int = Field(..., ge=0)
    outcome: OutcomeType


class Game(BaseModel):
    """Represents a single regular-season game, final or not.

    Team ids are in whichever namespace the game was built from: ledger ids
    when read back from storage, feed ids when built from a fresh batch.
    """

    model_config = ConfigDict(frozen=True)

    api_id: int  # dedup key, unique in the feed's namespace
    home_team_id: int
    away_team_id: int
    category: GameCategory = GameCategory.REGULAR_SEASON
    game_date: Optional[date] = None
    score: Optional[Score] = None

    @computed_field  # type: ignore[misc]
    @property
    def is_final(self) -> bool:
        return self.score is not None

    def involves(self, team_id: int) -> bool:
        return team_id in (self.home_team_id, self.away_team_id)

    def __hash__(self):
        return hash(self.api_id)

    def __eq__(self, other):
        if not isinstance(other, Game):
            return NotImplemented
        return self.api_id == other.api_id
