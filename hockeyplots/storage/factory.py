from loguru import logger

from hockeyplots.config.settings import AppSettings
from hockeyplots.models.enums import LedgerBackend
from .base import GameLedger
from .memory_ledger import InMemoryLedger
from .sqlite_ledger import SqliteLedger


async def open_ledger(app_settings: AppSettings) -> GameLedger:
    """Opens the ledger backend named in settings."""
    backend = app_settings.ledger_backend
    logger.info(f"Opening {backend.value} ledger")
    if backend is LedgerBackend.MEMORY:
        return InMemoryLedger()
    if backend is LedgerBackend.SQLITE:
        return SqliteLedger(app_settings.sqlite_path).initialize()

    # Imported lazily: the Supabase client is only needed for this backend
    from .supabase_ledger import SupabaseLedger, initialize_supabase

    client = await initialize_supabase(app_settings.supabase_url, app_settings.supabase_key)
    return SupabaseLedger(client)
