import sqlite3
from pathlib import Path
from typing import List, Optional, Type, TypeVar

from loguru import logger
from pydantic import BaseModel

from hockeyplots.models.records import (
    DivisionRecord,
    GameRecord,
    OutcomeTypeRecord,
    ScoreRecord,
    TeamRecord,
)
from .base import GameLedger, LedgerError, LedgerWriteError
from .sqlite_schema import apply_schema

RecordT = TypeVar("RecordT", bound=BaseModel)


class SqliteLedger(GameLedger):
    """Ledger stored in a single SQLite file.

    Writes are small and only happen on refresh, so calls run directly on
    the event loop thread.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise LedgerError("SqliteLedger used before initialize()")
        return self._conn

    def initialize(self) -> "SqliteLedger":
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON;")
            with conn:
                apply_schema(conn.cursor())
        except sqlite3.Error as e:
            raise LedgerError(f"could not initialize SQLite ledger at {self.db_path}: {e}") from e
        self._conn = conn
        logger.info(f"Initialized SQLite ledger at {self.db_path}")
        return self

    def _all(self, model: Type[RecordT], query: str, params: tuple = ()) -> List[RecordT]:
        rows = self.conn.execute(query, params).fetchall()
        return [model.model_validate(dict(row)) for row in rows]

    async def all_divisions(self) -> List[DivisionRecord]:
        return self._all(DivisionRecord, "SELECT id, name FROM divisions ORDER BY id;")

    async def all_teams(self) -> List[TeamRecord]:
        return self._all(
            TeamRecord,
            "SELECT id, api_id, r, g, b, abbrev, division_id FROM teams ORDER BY id;",
        )

    async def all_outcome_types(self) -> List[OutcomeTypeRecord]:
        return self._all(OutcomeTypeRecord, "SELECT id, name FROM last_period_types ORDER BY id;")

    async def all_scores(self) -> List[ScoreRecord]:
        return self._all(
            ScoreRecord,
            "SELECT id, home, away, last_period_type_id FROM scores ORDER BY id;",
        )

    async def all_games(self) -> List[GameRecord]:
        return self._all(
            GameRecord,
            "SELECT api_id, home_team_id, away_team_id, game_date, score_id "
            "FROM games ORDER BY game_date, api_id;",
        )

    async def games_for_team(self, team_id: int) -> List[GameRecord]:
        return self._all(
            GameRecord,
            "SELECT api_id, home_team_id, away_team_id, game_date, score_id FROM games "
            "WHERE home_team_id = ? OR away_team_id = ? ORDER BY game_date, api_id;",
            (team_id, team_id),
        )

    async def insert_score(self, home: int, away: int, last_period_type_id: int) -> int:
        try:
            with self.conn:
                cursor = self.conn.execute(
                    "INSERT INTO scores (home, away, last_period_type_id) VALUES (?, ?, ?);",
                    (home, away, last_period_type_id),
                )
            return cursor.lastrowid
        except sqlite3.Error as e:
            raise LedgerWriteError(f"score insert failed: {e}") from e

    async def insert_game(self, game: GameRecord) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    "INSERT INTO games (api_id, home_team_id, away_team_id, game_date, score_id) "
                    "VALUES (:api_id, :home_team_id, :away_team_id, :game_date, :score_id);",
                    {**game.model_dump(), "game_date": game.game_date.isoformat()},
                )
        except sqlite3.Error as e:
            raise LedgerWriteError(f"game insert failed for {game.api_id}: {e}") from e

    async def attach_score(self, api_id: int, score_id: int) -> None:
        try:
            with self.conn:
                cursor = self.conn.execute(
                    "UPDATE games SET score_id = ? WHERE api_id = ? AND score_id IS NULL;",
                    (score_id, api_id),
                )
        except sqlite3.Error as e:
            raise LedgerWriteError(f"score attach failed for {api_id}: {e}") from e
        if cursor.rowcount != 1:
            raise LedgerWriteError(f"Game {api_id} is missing or already has a score")

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info(f"Closed SQLite ledger at {self.db_path}")
