"""
SQLite database utilities for the store module.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


SCHEMA_SQL = """
CREATE TABLE jobs (
  job_id TEXT PRIMARY KEY,
  config_json TEXT NOT NULL,
  n_elements INTEGER NOT NULL DEFAULT 0,
  status TEXT DEFAULT 'running',
  summary_json TEXT,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  finished_at TIMESTAMP
);

CREATE TABLE artifacts (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  job_id TEXT NOT NULL,
  name TEXT NOT NULL,
  kind TEXT NOT NULL,
  element_id TEXT,
  component_type TEXT,
  quality REAL NOT NULL,
  iterations INTEGER NOT NULL DEFAULT 0,
  status TEXT,
  failure_type TEXT,
  source_hash TEXT NOT NULL,
  source_text TEXT NOT NULL,
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  FOREIGN KEY (job_id) REFERENCES jobs(job_id),
  UNIQUE(job_id, name)
);

CREATE TABLE iterations (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  job_id TEXT NOT NULL,
  element_id TEXT NOT NULL,
  iteration INTEGER NOT NULL,
  intensity REAL NOT NULL,
  variants_evaluated INTEGER NOT NULL,
  best_quality REAL NOT NULL,
  status TEXT NOT NULL,
  FOREIGN KEY (job_id) REFERENCES jobs(job_id)
);

CREATE INDEX idx_artifacts_job ON artifacts(job_id, kind);
CREATE INDEX idx_iterations_element ON iterations(job_id, element_id, iteration);
"""

_IDEMPOTENT_SCHEMA_SQL = (
    SCHEMA_SQL.replace("CREATE TABLE", "CREATE TABLE IF NOT EXISTS")
    .replace("CREATE INDEX", "CREATE INDEX IF NOT EXISTS")
)


def initialize_database(db_path: str) -> None:
    """Create the SQLite database and schema if needed."""
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(str(path))
    try:
        _ = connection.executescript(_IDEMPOTENT_SCHEMA_SQL)
        connection.commit()
    finally:
        connection.close()


def connect(db_path: str) -> sqlite3.Connection:
    """Open a SQLite connection with sane defaults."""
    connection = sqlite3.connect(db_path)
    connection.row_factory = sqlite3.Row
    _ = connection.execute("PRAGMA foreign_keys = ON")
    return connection
