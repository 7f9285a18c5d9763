from typing import Dict, List, Optional

from loguru import logger

from hockeyplots.models.records import (
    DivisionRecord,
    GameRecord,
    OutcomeTypeRecord,
    ScoreRecord,
    TeamRecord,
)
from hockeyplots.reference import defaults
from .base import GameLedger, LedgerWriteError


class InMemoryLedger(GameLedger):
    """Process-local ledger, seeded with the default reference table."""

    def __init__(
        self,
        divisions: Optional[List[DivisionRecord]] = None,
        teams: Optional[List[TeamRecord]] = None,
        outcome_types: Optional[List[OutcomeTypeRecord]] = None,
    ):
        self.divisions = list(divisions if divisions is not None else defaults.division_records())
        self.teams = list(teams if teams is not None else defaults.team_records())
        self.outcome_types = list(
            outcome_types if outcome_types is not None else defaults.outcome_type_records()
        )
        self.scores: Dict[int, ScoreRecord] = {}
        self.games: Dict[int, GameRecord] = {}  # insertion ordered, keyed by api_id
        self._next_score_id = 1

    async def all_divisions(self) -> List[DivisionRecord]:
        return list(self.divisions)

    async def all_teams(self) -> List[TeamRecord]:
        return list(self.teams)

    async def all_outcome_types(self) -> List[OutcomeTypeRecord]:
        return list(self.outcome_types)

    async def all_scores(self) -> List[ScoreRecord]:
        return list(self.scores.values())

    async def all_games(self) -> List[GameRecord]:
        return list(self.games.values())

    async def games_for_team(self, team_id: int) -> List[GameRecord]:
        games = [
            game
            for game in self.games.values()
            if team_id in (game.home_team_id, game.away_team_id)
        ]
        return sorted(games, key=lambda game: (game.game_date, game.api_id))

    async def insert_score(self, home: int, away: int, last_period_type_id: int) -> int:
        if last_period_type_id not in {record.id for record in self.outcome_types}:
            raise LedgerWriteError(
                f"FOREIGN KEY constraint failed: last_period_type_id {last_period_type_id}"
            )
        score_id = self._next_score_id
        self._next_score_id += 1
        self.scores[score_id] = ScoreRecord(
            id=score_id, home=home, away=away, last_period_type_id=last_period_type_id
        )
        return score_id

    async def insert_game(self, game: GameRecord) -> None:
        if game.api_id in self.games:
            raise LedgerWriteError(f"UNIQUE constraint failed: games.api_id {game.api_id}")
        if game.score_id is not None and game.score_id not in self.scores:
            raise LedgerWriteError(f"FOREIGN KEY constraint failed: score_id {game.score_id}")
        self.games[game.api_id] = game

    async def attach_score(self, api_id: int, score_id: int) -> None:
        game = self.games.get(api_id)
        if game is None:
            raise LedgerWriteError(f"No stored game with api_id {api_id}")
        if game.score_id is not None:
            raise LedgerWriteError(f"Game {api_id} already has score {game.score_id}")
        if score_id not in self.scores:
            raise LedgerWriteError(f"FOREIGN KEY constraint failed: score_id {score_id}")
        self.games[api_id] = game.model_copy(update={"score_id": score_id})
        logger.debug(f"Attached score {score_id} to game {api_id}")
