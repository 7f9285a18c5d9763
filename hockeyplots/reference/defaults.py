"""Static league reference table used to seed a fresh ledger.

Team rows are (db id, feed id, abbreviation, (r, g, b), division name) for
the 2023-24 season.
"""
from typing import List

from hockeyplots.models.enums import Division, OutcomeType
from hockeyplots.models.records import DivisionRecord, OutcomeTypeRecord, TeamRecord

DIVISIONS = [
    (1, Division.METROPOLITAN),
    (2, Division.ATLANTIC),
    (3, Division.CENTRAL),
    (4, Division.PACIFIC),
]

OUTCOME_TYPES = [
    (1, OutcomeType.REGULATION),
    (2, OutcomeType.OVERTIME),
    (3, OutcomeType.SHOOTOUT),
]

TEAMS = [
    # Metropolitan
    (1, 12, "CAR", (206, 17, 38), Division.METROPOLITAN),
    (2, 29, "CBJ", (0, 38, 84), Division.METROPOLITAN),
    (3, 1, "NJD", (206, 17, 38), Division.METROPOLITAN),
    (4, 2, "NYI", (0, 83, 155), Division.METROPOLITAN),
    (5, 3, "NYR", (0, 56, 168), Division.METROPOLITAN),
    (6, 4, "PHI", (247, 73, 2), Division.METROPOLITAN),
    (7, 5, "PIT", (252, 181, 20), Division.METROPOLITAN),
    (8, 15, "WSH", (200, 16, 46), Division.METROPOLITAN),
    # Atlantic
    (9, 6, "BOS", (252, 181, 20), Division.ATLANTIC),
    (10, 7, "BUF", (0, 48, 135), Division.ATLANTIC),
    (11, 17, "DET", (206, 17, 38), Division.ATLANTIC),
    (12, 13, "FLA", (200, 16, 46), Division.ATLANTIC),
    (13, 8, "MTL", (175, 30, 45), Division.ATLANTIC),
    (14, 9, "OTT", (218, 26, 50), Division.ATLANTIC),
    (15, 14, "TBL", (0, 40, 104), Division.ATLANTIC),
    (16, 10, "TOR", (0, 32, 91), Division.ATLANTIC),
    # Central
    (17, 53, "ARI", (140, 38, 51), Division.CENTRAL),
    (18, 16, "CHI", (207, 10, 44), Division.CENTRAL),
    (19, 21, "COL", (111, 38, 61), Division.CENTRAL),
    (20, 25, "DAL", (0, 104, 71), Division.CENTRAL),
    (21, 30, "MIN", (21, 71, 52), Division.CENTRAL),
    (22, 18, "NSH", (255, 184, 28), Division.CENTRAL),
    (23, 19, "STL", (0, 47, 135), Division.CENTRAL),
    (24, 52, "WPG", (4, 30, 66), Division.CENTRAL),
    # Pacific
    (25, 24, "ANA", (252, 76, 2), Division.PACIFIC),
    (26, 20, "CGY", (200, 16, 46), Division.PACIFIC),
    (27, 22, "EDM", (252, 76, 0), Division.PACIFIC),
    (28, 26, "LAK", (162, 170, 173), Division.PACIFIC),
    (29, 28, "SJS", (0, 109, 117), Division.PACIFIC),
    (30, 55, "SEA", (153, 217, 217), Division.PACIFIC),
    (31, 23, "VAN", (0, 32, 91), Division.PACIFIC),
    (32, 54, "VGK", (185, 151, 91), Division.PACIFIC),
]


def division_records() -> List[DivisionRecord]:
    return [DivisionRecord(id=div_id, name=division.value) for div_id, division in DIVISIONS]


def outcome_type_records() -> List[OutcomeTypeRecord]:
    return [OutcomeTypeRecord(id=type_id, name=outcome.value) for type_id, outcome in OUTCOME_TYPES]


def team_records() -> List[TeamRecord]:
    division_ids = {division: div_id for div_id, division in DIVISIONS}
    return [
        TeamRecord(
            id=db_id,
            api_id=api_id,
            r=r,
            g=g,
            b=b,
            abbrev=abbrev,
            division_id=division_ids[division],
        )
        for db_id, api_id, abbrev, (r, g, b), division in TEAMS
    ]
