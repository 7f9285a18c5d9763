from typing import Iterable, List

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from hockeyplots.models.enums import Division
from hockeyplots.models.series import TeamSeries
from hockeyplots.models.team import Team
from hockeyplots.utils.misc_utils import sparkline

DIVISION_ORDER = [Division.METROPOLITAN, Division.ATLANTIC, Division.CENTRAL, Division.PACIFIC]


class DivisionFilter(BaseModel):
    """Which divisions the dashboard shows."""

    metropolitan: bool = True
    atlantic: bool = True
    central: bool = True
    pacific: bool = True

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "DivisionFilter":
        wanted = {
            Division.METROPOLITAN if name.lower() == "metro" else Division.from_name(name.capitalize())
            for name in names
        }
        if not wanted:
            return cls()
        return cls(**{division.name.lower(): division in wanted for division in Division})

    def shows(self, team: Team) -> bool:
        return getattr(self, team.division.name.lower())


def render_series_table(
    league_series: List[TeamSeries],
    division_filter: DivisionFilter = DivisionFilter(),
    title: str = "Points above expectation",
) -> Table:
    """Table of shown teams, grouped by division, best first within each."""
    table = Table(title=title, header_style="bold", expand=False)
    table.add_column("Team")
    table.add_column("Division")
    table.add_column("GP", justify="right")
    table.add_column("+/-", justify="right")
    table.add_column("Trend")

    for division in DIVISION_ORDER:
        rows = [
            entry
            for entry in league_series
            if entry.team.division is division and division_filter.shows(entry.team)
        ]
        rows.sort(key=lambda entry: entry.series.final_value, reverse=True)
        for position, entry in enumerate(rows):
            values = [point.value for point in entry.series.points]
            colour = f"rgb({entry.team.color[0]},{entry.team.color[1]},{entry.team.color[2]})"
            table.add_row(
                Text(entry.team.abbrev, style=f"bold {colour}"),
                division.value,
                str(entry.series.games_counted),
                f"{entry.series.final_value:+.1f}",
                Text(sparkline(values), style=colour),
                end_section=position == len(rows) - 1,
            )

    return table
