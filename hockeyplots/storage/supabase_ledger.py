# hockeyplots/storage/supabase_ledger.py
from typing import Any, Dict, List, Optional, Type, TypeVar

from loguru import logger
from postgrest import APIResponse
from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import AsyncClient, create_async_client

from hockeyplots.models.records import (
    DivisionRecord,
    GameRecord,
    OutcomeTypeRecord,
    ScoreRecord,
    TeamRecord,
)
from .base import GameLedger, LedgerError, LedgerWriteError

RecordT = TypeVar("RecordT", bound=BaseModel)


async def initialize_supabase(url: Optional[str], key: Optional[str]) -> AsyncClient:
    """Creates the async Supabase client."""
    if not url or not key:
        logger.critical("Supabase URL or Key not configured in settings.")
        raise SystemExit("Supabase configuration missing.")

    logger.debug(f"Attempting to initialize Async Supabase client with URL: {url}")
    try:
        client: AsyncClient = await create_async_client(url, key)
    except Exception as e:
        logger.exception(f"Failed to initialize Async Supabase client: {e}")
        raise LedgerError("could not initialize Supabase client") from e
    logger.success("Async Supabase client initialized successfully.")
    return client


class SupabaseLedger(GameLedger):
    """Ledger stored in Supabase tables with the same layout as the SQLite schema.

    Reference tables (divisions, teams, last_period_types) are expected to be
    provisioned with the project.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def _select(self, model: Type[RecordT], table_name: str, query) -> List[RecordT]:
        try:
            response: APIResponse = await query.execute()
        except APIError as e:
            logger.error(f"Error during async select from {table_name}: {e.message}")
            logger.debug(f"Full APIError details: {e}")
            raise LedgerError(f"select from {table_name} failed: {e.message}") from e
        return [model.model_validate(row) for row in response.data or []]

    async def _insert(self, table_name: str, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        try:
            response: APIResponse = await self.client.table(table_name).insert(data).execute()
        except APIError as e:
            logger.debug(f"Full APIError details: {e}")
            raise LedgerWriteError(f"insert into {table_name} failed: {e.message}") from e
        return response.data or []

    async def all_divisions(self) -> List[DivisionRecord]:
        return await self._select(
            DivisionRecord, "divisions", self.client.table("divisions").select("*").order("id")
        )

    async def all_teams(self) -> List[TeamRecord]:
        return await self._select(
            TeamRecord, "teams", self.client.table("teams").select("*").order("id")
        )

    async def all_outcome_types(self) -> List[OutcomeTypeRecord]:
        return await self._select(
            OutcomeTypeRecord,
            "last_period_types",
            self.client.table("last_period_types").select("*").order("id"),
        )

    async def all_scores(self) -> List[ScoreRecord]:
        return await self._select(
            ScoreRecord, "scores", self.client.table("scores").select("*").order("id")
        )

    async def all_games(self) -> List[GameRecord]:
        return await self._select(
            GameRecord,
            "games",
            self.client.table("games").select("*").order("game_date").order("api_id"),
        )

    async def games_for_team(self, team_id: int) -> List[GameRecord]:
        query = (
            self.client.table("games")
            .select("*")
            .or_(f"home_team_id.eq.{team_id},away_team_id.eq.{team_id}")
            .order("game_date")
            .order("api_id")
        )
        return await self._select(GameRecord, "games", query)

    async def insert_score(self, home: int, away: int, last_period_type_id: int) -> int:
        rows = await self._insert(
            "scores",
            {"home": home, "away": away, "last_period_type_id": last_period_type_id},
        )
        if not rows or "id" not in rows[0]:
            raise LedgerWriteError("score insert returned no id")
        return int(rows[0]["id"])

    async def insert_game(self, game: GameRecord) -> None:
        data = game.model_dump()
        data["game_date"] = game.game_date.isoformat()
        await self._insert("games", data)

    async def attach_score(self, api_id: int, score_id: int) -> None:
        try:
            response: APIResponse = (
                await self.client.table("games")
                .update({"score_id": score_id})
                .eq("api_id", api_id)
                .is_("score_id", "null")
                .execute()
            )
        except APIError as e:
            raise LedgerWriteError(f"score attach failed for {api_id}: {e.message}") from e
        if not response.data:
            raise LedgerWriteError(f"Game {api_id} is missing or already has a score")

    async def close(self) -> None:
        # The async client holds no pool that needs explicit closing
        logger.info("Supabase client cleanup will be handled implicitly on exit.")
