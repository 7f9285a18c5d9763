import sys
import logging
from typing import Any

from loguru import logger

from hockeyplots.config.settings import settings


SENSITIVE_KEYS = ["key", "token", "password", "secret"]


def _is_sensitive(name: Any) -> bool:
    return isinstance(name, str) and any(sk in name.lower() for sk in SENSITIVE_KEYS)


def _mask(value: Any) -> Any:
    if isinstance(value, str) and len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return "********"


def mask_value(value: Any) -> Any:
    """Copies dicts and lists, masking values stored under sensitive keys at any depth."""
    if isinstance(value, dict):
        return {
            k: _mask(v) if _is_sensitive(k) else mask_value(v) for k, v in value.items()
        }
    if isinstance(value, list):
        return [mask_value(item) for item in value]
    return value


def sensitive_data_filter(record: dict[str, Any]) -> bool:
    """Filter function to mask sensitive data in log records."""
    if "extra" in record and isinstance(record["extra"], dict):
        record["extra"] = mask_value(record["extra"])

    # The Supabase key is the only secret the service holds
    if settings.supabase_key and settings.supabase_key in record["message"]:
        record["message"] = record["message"].replace(settings.supabase_key, "********")

    return True  # Keep the record after filtering/masking


class InterceptHandler(logging.Handler):
    """Routes standard logging records (httpx, supabase) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: str = None) -> None:
    """Configures Loguru logger based on application settings."""
    level = (level or settings.log_level).upper()
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=True,
        diagnose=True,
        filter=sensitive_data_filter,
    )

    logger.info(f"Logging initialized with level: {level}")

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger.debug("Standard logging intercepted.")
