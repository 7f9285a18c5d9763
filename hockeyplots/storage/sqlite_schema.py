"""SQLite schema for the ledger: reference tables plus games and scores.

Only DDL and seeding live here.
"""
import sqlite3

from hockeyplots.reference import defaults

DDL = """
CREATE TABLE IF NOT EXISTS divisions (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS last_period_types (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS teams (
    id INTEGER PRIMARY KEY,
    api_id INTEGER NOT NULL UNIQUE,
    r INTEGER NOT NULL,
    g INTEGER NOT NULL,
    b INTEGER NOT NULL,
    abbrev TEXT NOT NULL,
    division_id INTEGER NOT NULL,
    FOREIGN KEY(division_id) REFERENCES divisions(id)
);

CREATE TABLE IF NOT EXISTS scores (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    home INTEGER NOT NULL,
    away INTEGER NOT NULL,
    last_period_type_id INTEGER NOT NULL,
    FOREIGN KEY(last_period_type_id) REFERENCES last_period_types(id)
);

CREATE TABLE IF NOT EXISTS games (
    api_id INTEGER PRIMARY KEY,
    home_team_id INTEGER NOT NULL,
    away_team_id INTEGER NOT NULL,
    game_date TEXT NOT NULL,
    score_id INTEGER UNIQUE,
    FOREIGN KEY(home_team_id) REFERENCES teams(id),
    FOREIGN KEY(away_team_id) REFERENCES teams(id),
    FOREIGN KEY(score_id) REFERENCES scores(id)
);

CREATE INDEX IF NOT EXISTS idx_games_home_team_id ON games(home_team_id);
CREATE INDEX IF NOT EXISTS idx_games_away_team_id ON games(away_team_id);
"""


def apply_schema(cur: sqlite3.Cursor) -> None:
    """Create tables if missing and seed the reference rows (idempotent)."""
    cur.executescript(DDL)
    cur.executemany(
        "INSERT OR IGNORE INTO divisions (id, name) VALUES (?, ?);",
        [(record.id, record.name) for record in defaults.division_records()],
    )
    cur.executemany(
        "INSERT OR IGNORE INTO last_period_types (id, name) VALUES (?, ?);",
        [(record.id, record.name) for record in defaults.outcome_type_records()],
    )
    cur.executemany(
        "INSERT OR IGNORE INTO teams (id, api_id, r, g, b, abbrev, division_id) "
        "VALUES (?, ?, ?, ?, ?, ?, ?);",
        [
            (t.id, t.api_id, t.r, t.g, t.b, t.abbrev, t.division_id)
            for t in defaults.team_records()
        ],
    )
