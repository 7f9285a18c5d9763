from datetime import date
from typing import Dict, List, Optional, Set, Union

from loguru import logger
from pydantic import BaseModel, computed_field

from hockeyplots.models.enums import GameCategory
from hockeyplots.models.errors import MalformedGameError
from hockeyplots.models.feed import FeedBatch, FeedGame
from hockeyplots.models.records import GameRecord
from hockeyplots.reference.store import ReferenceData
from hockeyplots.storage.base import GameLedger, LedgerWriteError


class NewScore(BaseModel):
    home: int
    away: int
    last_period_type_id: int


class InsertGame(BaseModel):
    """A game the ledger has never seen, with its score if already final."""

    api_id: int
    home_team_id: int
    away_team_id: int
    game_date: date
    score: Optional[NewScore] = None


class AttachScore(BaseModel):
    """A stored, unscored game that has since gone final."""

    api_id: int
    score: NewScore


LedgerMutation = Union[InsertGame, AttachScore]


class ReconciliationReport(BaseModel):
    """Counts for one reconciliation pass."""

    games_inserted: int = 0
    scores_inserted: int = 0
    scores_attached: int = 0
    already_final: int = 0
    unchanged: int = 0
    skipped_non_regular: int = 0
    duplicates_in_batch: int = 0
    malformed_game_ids: List[int] = []
    failed_game_ids: List[int] = []

    @computed_field  # type: ignore[misc]
    @property
    def changed(self) -> bool:
        return bool(self.games_inserted or self.scores_attached)

    def summary(self) -> str:
        return (
            f"{self.games_inserted} games inserted, {self.scores_inserted} scores inserted "
            f"({self.scores_attached} attached to known games), {self.already_final} already final, "
            f"{self.unchanged} unchanged, {self.skipped_non_regular} non-regular skipped, "
            f"{self.duplicates_in_batch} duplicates, {len(self.malformed_game_ids)} malformed, "
            f"{len(self.failed_game_ids)} failed"
        )


class Reconciler:
    """Merges fetched schedules into the ledger.

    Re-running a pass over the same or overlapping data is a no-op for games
    the ledger already has final.
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    async def reconcile(self, ledger: GameLedger, batch: FeedBatch) -> ReconciliationReport:
        """Plans and applies one batch.

        Raises:
            ReferenceDataError: a team id or outcome code is unknown. Raised
                before anything is written.
        """
        logger.info(
            f"Reconciling {batch.game_count} fetched games from {len(batch.schedules)} schedules "
            f"(season {batch.season})"
        )
        known = {game.api_id: game for game in await ledger.all_games()}
        report = ReconciliationReport()
        mutations = self.plan(batch, known, report)
        await self.apply(ledger, mutations, report)
        logger.success(f"Reconciliation complete: {report.summary()}")
        return report

    def plan(
        self,
        batch: FeedBatch,
        known: Dict[int, GameRecord],
        report: Optional[ReconciliationReport] = None,
    ) -> List[LedgerMutation]:
        """Works out the ledger writes for a batch without performing any.

        A malformed game is logged, recorded and left out of the plan; the
        rest of the batch is still planned.
        """
        report = report if report is not None else ReconciliationReport()
        mutations: List[LedgerMutation] = []
        seen: Set[int] = set()

        for schedule in batch.schedules.values():
            for feed_game in schedule.games:
                if feed_game.category is not GameCategory.REGULAR_SEASON:
                    report.skipped_non_regular += 1
                    continue
                # Every game shows up in both teams' schedules
                if feed_game.id in seen:
                    report.duplicates_in_batch += 1
                    continue
                seen.add(feed_game.id)

                try:
                    mutation = self._plan_game(feed_game, known.get(feed_game.id), report)
                except MalformedGameError as e:
                    logger.error(f"Skipping malformed game {feed_game.id}: {e}")
                    report.malformed_game_ids.append(feed_game.id)
                    continue
                if mutation is not None:
                    mutations.append(mutation)

        logger.debug(f"Planned {len(mutations)} ledger mutations")
        return mutations

    def _plan_game(
        self,
        feed_game: FeedGame,
        stored: Optional[GameRecord],
        report: ReconciliationReport,
    ) -> Optional[LedgerMutation]:
        home = self.reference.team_by_api_id(feed_game.home_team.id)
        away = self.reference.team_by_api_id(feed_game.away_team.id)
        new_score = self._new_score(feed_game)

        if stored is None:
            if new_score is None:
                logger.debug(f"got no gameOutcome for {feed_game.id}")
            return InsertGame(
                api_id=feed_game.id,
                home_team_id=home.db_id,
                away_team_id=away.db_id,
                game_date=feed_game.game_date,
                score=new_score,
            )
        if stored.score_id is not None:
            report.already_final += 1
            return None
        if new_score is None:
            report.unchanged += 1
            return None
        return AttachScore(api_id=feed_game.id, score=new_score)

    def _new_score(self, feed_game: FeedGame) -> Optional[NewScore]:
        score = feed_game.final_score()
        if score is None:
            return None
        return NewScore(
            home=score.home,
            away=score.away,
            last_period_type_id=self.reference.outcome_type_id_for_code(
                feed_game.game_outcome.last_period_type
            ),
        )

    async def apply(
        self,
        ledger: GameLedger,
        mutations: List[LedgerMutation],
        report: Optional[ReconciliationReport] = None,
    ) -> ReconciliationReport:
        """Writes planned mutations in order; a failed record does not stop the pass.

        A score is always written first and its id handed to the game write.
        If the score write fails the game write is skipped, so no stored game
        ever points at a missing score.
        """
        report = report if report is not None else ReconciliationReport()

        for mutation in mutations:
            score_id = None
            if mutation.score is not None:
                try:
                    score_id = await ledger.insert_score(
                        mutation.score.home,
                        mutation.score.away,
                        mutation.score.last_period_type_id,
                    )
                except LedgerWriteError as e:
                    logger.error(f"Score insert failed for game {mutation.api_id}, skipping game: {e}")
                    report.failed_game_ids.append(mutation.api_id)
                    continue
                report.scores_inserted += 1

            try:
                if isinstance(mutation, InsertGame):
                    await ledger.insert_game(
                        GameRecord(
                            api_id=mutation.api_id,
                            home_team_id=mutation.home_team_id,
                            away_team_id=mutation.away_team_id,
                            game_date=mutation.game_date,
                            score_id=score_id,
                        )
                    )
                    report.games_inserted += 1
                else:
                    await ledger.attach_score(mutation.api_id, score_id)
                    report.scores_attached += 1
            except LedgerWriteError as e:
                logger.error(
                    f"Game write failed for {mutation.api_id} (score {score_id} left unreferenced): {e}"
                )
                report.failed_game_ids.append(mutation.api_id)

        return report
