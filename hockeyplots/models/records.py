"""Row shapes of the persisted ledger tables.

Column names follow the stored schema so rows can be validated straight
from SQLite or PostgREST results.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DivisionRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class OutcomeTypeRecord(BaseModel):
    """A row of last_period_types."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class TeamRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    api_id: int
    r: int = Field(..., ge=0, le=255)
    g: int = Field(..., ge=0, le=255)
    b: int = Field(..., ge=0, le=255)
    abbrev: str
    division_id: int


class ScoreRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    home: int
    away: int
    last_period_type_id: int


class GameRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_id: int
    home_team_id: int
    away_team_id: int
    game_date: date
    score_id: Optional[int] = None
