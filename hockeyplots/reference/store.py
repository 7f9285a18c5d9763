from typing import Dict, Iterable, List, Union

from loguru import logger

from hockeyplots.models.enums import Division, OutcomeType
from hockeyplots.models.errors import (
    ReferenceDataError,
    UnknownOutcomeTypeError,
    UnknownTeamError,
)
from hockeyplots.models.records import DivisionRecord, OutcomeTypeRecord, TeamRecord
from hockeyplots.models.team import Team


class ReferenceData:
    """Read-only team and outcome-type tables for one session.

    Built once at startup and passed explicitly to the reconciler and the
    points deriver. Any inconsistency found while building it is fatal.
    """

    def __init__(self, teams: Iterable[Team], outcome_types: Iterable[OutcomeTypeRecord]):
        self.teams: List[Team] = sorted(teams, key=lambda team: team.db_id)
        self._by_db_id: Dict[int, Team] = {}
        self._by_api_id: Dict[int, Team] = {}
        for team in self.teams:
            if team.db_id in self._by_db_id or team.api_id in self._by_api_id:
                raise ReferenceDataError(
                    f"Duplicate team in reference data: {team.abbrev} "
                    f"(db id {team.db_id}, api id {team.api_id})"
                )
            self._by_db_id[team.db_id] = team
            self._by_api_id[team.api_id] = team

        self._outcome_ids: Dict[OutcomeType, int] = {}
        self._outcomes_by_id: Dict[int, OutcomeType] = {}
        for record in outcome_types:
            outcome = OutcomeType.from_name(record.name)
            self._outcome_ids[outcome] = record.id
            self._outcomes_by_id[record.id] = outcome

        # Feed code -> stored id, resolved once instead of per game
        self._code_table: Dict[str, int] = {}
        for outcome in OutcomeType:
            if outcome not in self._outcome_ids:
                raise UnknownOutcomeTypeError(
                    f"No stored last period type named {outcome.value!r}; reference data is out of date"
                )
            self._code_table[outcome.feed_code] = self._outcome_ids[outcome]

        logger.debug(
            f"Reference data loaded: {len(self.teams)} teams, "
            f"{len(self._outcome_ids)} outcome types."
        )

    @classmethod
    def from_records(
        cls,
        divisions: Iterable[DivisionRecord],
        teams: Iterable[TeamRecord],
        outcome_types: Iterable[OutcomeTypeRecord],
    ) -> "ReferenceData":
        division_names = {record.id: record.name for record in divisions}

        def find_division(division_id: int) -> Division:
            if division_id not in division_names:
                raise ReferenceDataError(f"could not find division with id: {division_id}")
            return Division.from_name(division_names[division_id])

        return cls(
            teams=[
                Team(
                    db_id=record.id,
                    api_id=record.api_id,
                    abbrev=record.abbrev,
                    color=(record.r, record.g, record.b),
                    division=find_division(record.division_id),
                )
                for record in teams
            ],
            outcome_types=outcome_types,
        )

    def team_by_id(self, db_id: int) -> Team:
        try:
            return self._by_db_id[db_id]
        except KeyError:
            raise UnknownTeamError(f"No team with ledger id {db_id}")

    def team_by_api_id(self, api_id: int) -> Team:
        try:
            return self._by_api_id[api_id]
        except KeyError:
            raise UnknownTeamError(f"No team with feed id {api_id}; reference data is out of date")

    def teams_in(self, divisions: Iterable[Division]) -> List[Team]:
        wanted = set(divisions)
        return [team for team in self.teams if team.division in wanted]

    def outcome_type_id(self, outcome: Union[OutcomeType, str]) -> int:
        if not isinstance(outcome, OutcomeType):
            outcome = OutcomeType.from_name(outcome)
        return self._outcome_ids[outcome]

    def outcome_type_for_id(self, type_id: int) -> OutcomeType:
        try:
            return self._outcomes_by_id[type_id]
        except KeyError:
            raise UnknownOutcomeTypeError(f"found unknown last_period_type id in ledger: {type_id}")

    def outcome_type_id_for_code(self, code: str) -> int:
        try:
            return self._code_table[code]
        except KeyError:
            raise UnknownOutcomeTypeError(f"Unknown lastPeriodType code from feed: {code!r}")

    @property
    def outcome_code_table(self) -> Dict[str, int]:
        return dict(self._code_table)


async def load_reference_data(ledger) -> ReferenceData:
    """Reads divisions, teams and outcome types from the ledger's reference tables."""
    divisions = await ledger.all_divisions()
    teams = await ledger.all_teams()
    outcome_types = await ledger.all_outcome_types()
    if not teams:
        raise ReferenceDataError("Ledger has no teams; reference tables were never seeded")
    reference = ReferenceData.from_records(divisions, teams, outcome_types)
    logger.info(f"Loaded reference data for {len(reference.teams)} teams from ledger.")
    return reference
