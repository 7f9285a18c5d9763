import pytest

from hockeyplots.reference import defaults
from hockeyplots.reference.store import ReferenceData
from hockeyplots.storage.memory_ledger import InMemoryLedger


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData.from_records(
        defaults.division_records(),
        defaults.team_records(),
        defaults.outcome_type_records(),
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()
