from enum import Enum, IntEnum

from .errors import UnknownDivisionError, UnknownOutcomeTypeError


class Division(str, Enum):
    METROPOLITAN = "Metropolitan"
    ATLANTIC = "Atlantic"
    CENTRAL = "Central"
    PACIFIC = "Pacific"

    @classmethod
    def from_name(cls, name: str) -> "Division":
        try:
            return cls(name)
        except ValueError:
            raise UnknownDivisionError(f"Found division with invalid name: {name!r}")


class OutcomeType(str, Enum):
    """How a completed game ended. The value is the name stored in the ledger."""

    REGULATION = "Regulation"
    OVERTIME = "Overtime"
    SHOOTOUT = "Shootout"

    @property
    def feed_code(self) -> str:
        return _OUTCOME_FEED_CODES[self]

    @property
    def reached_extra_time(self) -> bool:
        return self is not OutcomeType.REGULATION

    @classmethod
    def from_feed_code(cls, code: str) -> "OutcomeType":
        for outcome, feed_code in _OUTCOME_FEED_CODES.items():
            if feed_code == code:
                return outcome
        raise UnknownOutcomeTypeError(f"Unknown lastPeriodType code from feed: {code!r}")

    @classmethod
    def from_name(cls, name: str) -> "OutcomeType":
        try:
            return cls(name)
        except ValueError:
            raise UnknownOutcomeTypeError(f"Found unknown last period type name: {name!r}")


_OUTCOME_FEED_CODES = {
    OutcomeType.REGULATION: "REG",
    OutcomeType.OVERTIME: "OT",
    OutcomeType.SHOOTOUT: "SO",
}


class GameCategory(IntEnum):
    """Mirrors the feed's numeric gameType."""

    OTHER = 0
    PRESEASON = 1
    REGULAR_SEASON = 2
    PLAYOFFS = 3

    @classmethod
    def from_code(cls, code: int) -> "GameCategory":
        try:
            return cls(code)
        except ValueError:
            return cls.OTHER


class TeamNamespace(str, Enum):
    INTERNAL = "internal"  # ledger ids
    EXTERNAL = "external"  # feed ids


class IndexPolicy(str, Enum):
    COMPACT = "compact"  # one x step per scored game
    SCHEDULE = "schedule"  # unscored games still consume an x step


class LedgerBackend(str, Enum):
    MEMORY = "memory"
    SQLITE = "sqlite"
    SUPABASE = "supabase"
