class DataContractError(Exception):
    """Base exception for data that breaks the feed or ledger contract."""

    pass


class ReferenceDataError(DataContractError):
    """Reference data is out of date relative to the feed or the ledger.

    These errors are fatal: dropping the offending record silently would
    corrupt every series derived afterwards.
    """

    pass


class UnknownTeamError(ReferenceDataError):
    """A team id has no entry in the reference table."""

    pass


class UnknownOutcomeTypeError(ReferenceDataError):
    """An outcome type code, name or id is outside the known set."""

    pass


class UnknownDivisionError(ReferenceDataError):
    """A division name has no matching Division."""

    pass


class MalformedGameError(DataContractError):
    """A single game record is internally inconsistent (e.g. final without a score)."""

    pass
