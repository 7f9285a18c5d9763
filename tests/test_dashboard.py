"""
Tests for the dashboard table and its helpers.
"""
import pytest
from rich.console import Console

from hockeyplots.app.dashboard import DivisionFilter, render_series_table
from hockeyplots.calculation.points import derive_league_series, games_from_feed
from hockeyplots.models.enums import Division, TeamNamespace
from hockeyplots.models.errors import UnknownDivisionError
from hockeyplots.utils.misc_utils import SPARK_BARS, sparkline

from factories import two_team_batch


def render_text(table) -> str:
    console = Console(width=120, record=True, color_system=None)
    console.print(table)
    return console.export_text()


class TestDivisionFilter:
    def test_defaults_show_every_division(self, reference):
        division_filter = DivisionFilter.from_names([])
        assert all(division_filter.shows(team) for team in reference.teams)

    def test_named_divisions_only(self, reference):
        division_filter = DivisionFilter.from_names(["metro", "pacific"])

        shown = {team.division for team in reference.teams if division_filter.shows(team)}
        assert shown == {Division.METROPOLITAN, Division.PACIFIC}

    def test_full_names_are_case_insensitive(self):
        division_filter = DivisionFilter.from_names(["ATLANTIC"])
        assert division_filter.atlantic
        assert not division_filter.central

    def test_unknown_division_name(self):
        with pytest.raises(UnknownDivisionError):
            DivisionFilter.from_names(["northeast"])


class TestSeriesTable:
    def test_all_teams_listed(self, reference):
        league = derive_league_series(
            games_from_feed(two_team_batch()), reference, TeamNamespace.EXTERNAL
        )
        table = render_series_table(league)

        assert table.row_count == len(reference.teams)
        text = render_text(table)
        assert "TBL" in text
        assert "+1.0" in text

    def test_filter_hides_other_divisions(self, reference):
        league = derive_league_series(
            games_from_feed(two_team_batch()), reference, TeamNamespace.EXTERNAL
        )
        table = render_series_table(league, DivisionFilter.from_names(["central"]))

        text = render_text(table)
        assert "NSH" in text
        assert "TBL" not in text
        assert table.row_count == len(reference.teams_in([Division.CENTRAL]))


class TestSparkline:
    def test_empty(self):
        assert sparkline([]) == ""

    def test_flat_series_uses_middle_bar(self):
        assert sparkline([0.0, 0.0, 0.0]) == SPARK_BARS[4] * 3

    def test_extremes_map_to_lowest_and_highest_bar(self):
        line = sparkline([0.0, -1.0, 0.0, 1.0])
        assert line[1] == SPARK_BARS[0]
        assert line[3] == SPARK_BARS[-1]

    def test_long_series_is_sampled_down(self):
        line = sparkline([float(i) for i in range(100)], width=10)
        assert len(line) == 10
        assert line[-1] == SPARK_BARS[-1]
