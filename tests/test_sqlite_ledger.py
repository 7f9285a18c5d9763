"""
Tests for the SQLite ledger, each against a fresh file under tmp_path.
"""
from datetime import date

import pytest

from hockeyplots.models.records import GameRecord
from hockeyplots.reconciliation.reconciler import Reconciler
from hockeyplots.reference import defaults
from hockeyplots.reference.store import load_reference_data
from hockeyplots.storage.base import LedgerError, LedgerWriteError
from hockeyplots.storage.sqlite_ledger import SqliteLedger

from factories import two_team_batch


@pytest.fixture
def sqlite_ledger(tmp_path):
    ledger = SqliteLedger(str(tmp_path / "data" / "ledger.db")).initialize()
    yield ledger
    ledger.conn.close()


def game_record(api_id, day, score_id=None, home=1, away=2):
    return GameRecord(
        api_id=api_id,
        home_team_id=home,
        away_team_id=away,
        game_date=date(2023, 10, day),
        score_id=score_id,
    )


class TestSchema:
    """Schema creation and reference seeding."""

    @pytest.mark.asyncio
    async def test_reference_tables_are_seeded(self, sqlite_ledger):
        assert await sqlite_ledger.all_divisions() == defaults.division_records()
        assert await sqlite_ledger.all_outcome_types() == defaults.outcome_type_records()
        teams = await sqlite_ledger.all_teams()
        assert len(teams) == len(defaults.TEAMS)

    @pytest.mark.asyncio
    async def test_initialize_twice_keeps_existing_rows(self, tmp_path):
        path = str(tmp_path / "ledger.db")
        first = SqliteLedger(path).initialize()
        await first.insert_game(game_record(1, 10))
        await first.close()

        second = SqliteLedger(path).initialize()
        try:
            assert [game.api_id for game in await second.all_games()] == [1]
            assert len(await second.all_teams()) == len(defaults.TEAMS)
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_reference_data_loads_from_sqlite(self, sqlite_ledger):
        reference = await load_reference_data(sqlite_ledger)

        assert reference.team_by_api_id(14).abbrev == "TBL"
        assert reference.outcome_code_table == {"REG": 1, "OT": 2, "SO": 3}

    @pytest.mark.asyncio
    async def test_use_before_initialize_raises(self, tmp_path):
        ledger = SqliteLedger(str(tmp_path / "never.db"))
        with pytest.raises(LedgerError):
            await ledger.all_games()


class TestWrites:
    """Inserts and the set-once score attach."""

    @pytest.mark.asyncio
    async def test_score_ids_are_generated(self, sqlite_ledger):
        first = await sqlite_ledger.insert_score(3, 2, 1)
        second = await sqlite_ledger.insert_score(1, 4, 2)

        assert second == first + 1
        scores = await sqlite_ledger.all_scores()
        assert [(s.home, s.away, s.last_period_type_id) for s in scores] == [(3, 2, 1), (1, 4, 2)]

    @pytest.mark.asyncio
    async def test_unknown_outcome_type_is_rejected(self, sqlite_ledger):
        with pytest.raises(LedgerWriteError):
            await sqlite_ledger.insert_score(3, 2, 99)

    @pytest.mark.asyncio
    async def test_duplicate_game_is_rejected(self, sqlite_ledger):
        await sqlite_ledger.insert_game(game_record(1, 10))

        with pytest.raises(LedgerWriteError):
            await sqlite_ledger.insert_game(game_record(1, 11))
        assert len(await sqlite_ledger.all_games()) == 1

    @pytest.mark.asyncio
    async def test_game_with_missing_score_is_rejected(self, sqlite_ledger):
        with pytest.raises(LedgerWriteError):
            await sqlite_ledger.insert_game(game_record(1, 10, score_id=42))

    @pytest.mark.asyncio
    async def test_attach_score_only_once(self, sqlite_ledger):
        await sqlite_ledger.insert_game(game_record(1, 10))
        score_id = await sqlite_ledger.insert_score(2, 1, 1)

        await sqlite_ledger.attach_score(1, score_id)
        assert (await sqlite_ledger.all_games())[0].score_id == score_id

        other = await sqlite_ledger.insert_score(5, 1, 1)
        with pytest.raises(LedgerWriteError):
            await sqlite_ledger.attach_score(1, other)
        assert (await sqlite_ledger.all_games())[0].score_id == score_id

    @pytest.mark.asyncio
    async def test_attach_to_unknown_game_raises(self, sqlite_ledger):
        score_id = await sqlite_ledger.insert_score(2, 1, 1)
        with pytest.raises(LedgerWriteError):
            await sqlite_ledger.attach_score(12345, score_id)


class TestReads:
    """Ordering and per-team queries."""

    @pytest.mark.asyncio
    async def test_games_for_team_ordered_by_date_then_id(self, sqlite_ledger):
        await sqlite_ledger.insert_game(game_record(30, 12))
        await sqlite_ledger.insert_game(game_record(20, 10, home=2, away=1))
        await sqlite_ledger.insert_game(game_record(10, 12))
        await sqlite_ledger.insert_game(game_record(40, 11, home=3, away=4))

        games = await sqlite_ledger.games_for_team(1)

        assert [game.api_id for game in games] == [20, 10, 30]
        assert games[0].game_date == date(2023, 10, 10)


class TestReconcileIntoSqlite:
    """Reconciler passes against a real database."""

    @pytest.mark.asyncio
    async def test_second_pass_leaves_database_unchanged(self, sqlite_ledger):
        reference = await load_reference_data(sqlite_ledger)
        reconciler = Reconciler(reference)

        await reconciler.reconcile(sqlite_ledger, two_team_batch())
        games = await sqlite_ledger.all_games()
        scores = await sqlite_ledger.all_scores()

        report = await reconciler.reconcile(sqlite_ledger, two_team_batch())

        assert not report.changed
        assert await sqlite_ledger.all_games() == games
        assert await sqlite_ledger.all_scores() == scores
        assert len(games) == 4
        assert len(scores) == 3
