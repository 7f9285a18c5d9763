# hockeyplots/models/team.py
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

from .enums import Division, TeamNamespace


class Team(BaseModel):
    """Represents a team with both its ledger id and its feed id."""

    model_config = ConfigDict(frozen=True)

    db_id: int  # internal id, used by ledger rows
    api_id: int  # external id, used by the feed
    abbrev: str
    color: Tuple[int, int, int] = Field((255, 255, 255))
    division: Division

    def id_in(self, namespace: TeamNamespace) -> int:
        if namespace is TeamNamespace.INTERNAL:
            return self.db_id
        return self.api_id

    @property
    def hex_color(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self.color)
