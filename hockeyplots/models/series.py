from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .team import Team


class SeriesPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    value: float


ORIGIN = SeriesPoint(index=0, value=0.0)


class CumulativeSeries(BaseModel):
    """Running total of (points - baseline) over a team's scored games."""

    baseline: float = 1.0
    points: List[SeriesPoint] = Field(default_factory=lambda: [ORIGIN])

    @computed_field  # type: ignore[misc]
    @property
    def final_value(self) -> float:
        return self.points[-1].value

    @computed_field  # type: ignore[misc]
    @property
    def games_counted(self) -> int:
        return len(self.points) - 1

    def as_pairs(self) -> List[tuple]:
        return [(point.index, point.value) for point in self.points]


class TeamSeries(BaseModel):
    """A team's series along with the metadata a chart needs to label it."""

    team: Team
    series: CumulativeSeries
