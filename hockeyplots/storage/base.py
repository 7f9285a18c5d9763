from abc import ABC, abstractmethod
from typing import List

from hockeyplots.models.records import (
    DivisionRecord,
    GameRecord,
    OutcomeTypeRecord,
    ScoreRecord,
    TeamRecord,
)


class LedgerError(Exception):
    """Custom exception for ledger-related errors."""

    pass


class LedgerWriteError(LedgerError):
    """A single insert or attach failed. Other records are unaffected."""

    pass


class GameLedger(ABC):
    """Durable record of known games and their final scores.

    The core only ever appends: scores are inserted once, games are inserted
    once, and an unscored game may be given its score exactly once.
    """

    # --- reference tables ---

    @abstractmethod
    async def all_divisions(self) -> List[DivisionRecord]:
        pass

    @abstractmethod
    async def all_teams(self) -> List[TeamRecord]:
        pass

    @abstractmethod
    async def all_outcome_types(self) -> List[OutcomeTypeRecord]:
        pass

    # --- games and scores ---

    @abstractmethod
    async def all_scores(self) -> List[ScoreRecord]:
        pass

    @abstractmethod
    async def all_games(self) -> List[GameRecord]:
        pass

    @abstractmethod
    async def games_for_team(self, team_id: int) -> List[GameRecord]:
        """Games where the team is home or away, ordered by (game_date, api_id)."""
        pass

    @abstractmethod
    async def insert_score(self, home: int, away: int, last_period_type_id: int) -> int:
        """Inserts a score and returns its generated id.

        Raises:
            LedgerWriteError: the row could not be written.
        """
        pass

    @abstractmethod
    async def insert_game(self, game: GameRecord) -> None:
        """Inserts a new game.

        Raises:
            LedgerWriteError: the row could not be written, including when a
                game with the same api_id already exists.
        """
        pass

    @abstractmethod
    async def attach_score(self, api_id: int, score_id: int) -> None:
        """Gives a stored, unscored game its score.

        Raises:
            LedgerWriteError: the game is unknown or already has a score.
        """
        pass

    async def close(self) -> None:
        pass
