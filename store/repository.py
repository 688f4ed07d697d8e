"""
SQLite-backed job repository and query interface.
"""

from __future__ import annotations

import hashlib
import json
import sqlite3
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias, cast

from forge_core.loop import IterationRecord
from forge_core.schemas import GeneratedArtifact

from .database import connect, initialize_database


ConfigInput: TypeAlias = Mapping[str, object] | str | None


@dataclass
class StoredJob:
    job_id: str
    config_json: str
    n_elements: int
    status: str
    summary: dict[str, object] | None = None
    created_at: str | None = None
    finished_at: str | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "StoredJob":
        row_dict = cast(dict[str, object], dict(row))
        summary_json = _optional_str(row_dict.get("summary_json"))
        return cls(
            job_id=_require_str(row_dict["job_id"], "job_id"),
            config_json=_require_str(row_dict["config_json"], "config_json"),
            n_elements=_require_int(row_dict["n_elements"], "n_elements"),
            status=_optional_str(row_dict.get("status")) or "running",
            summary=json.loads(summary_json) if summary_json else None,
            created_at=_optional_str(row_dict.get("created_at")),
            finished_at=_optional_str(row_dict.get("finished_at")),
        )


@dataclass
class StoredArtifact:
    id: int
    job_id: str
    name: str
    kind: str
    quality: float
    iterations: int
    source_hash: str
    source_text: str
    element_id: str | None = None
    component_type: str | None = None
    status: str | None = None
    failure_type: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "StoredArtifact":
        row_dict = cast(dict[str, object], dict(row))
        return cls(
            id=_require_int(row_dict["id"], "id"),
            job_id=_require_str(row_dict["job_id"], "job_id"),
            name=_require_str(row_dict["name"], "name"),
            kind=_require_str(row_dict["kind"], "kind"),
            quality=_optional_float(row_dict.get("quality")) or 0.0,
            iterations=_require_int(row_dict["iterations"], "iterations"),
            source_hash=_require_str(row_dict["source_hash"], "source_hash"),
            source_text=_require_str(row_dict["source_text"], "source_text"),
            element_id=_optional_str(row_dict.get("element_id")),
            component_type=_optional_str(row_dict.get("component_type")),
            status=_optional_str(row_dict.get("status")),
            failure_type=_optional_str(row_dict.get("failure_type")),
            created_at=_optional_str(row_dict.get("created_at")),
        )


def _require_str(value: object, field: str) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        raise ValueError(f"{field} is required")
    return str(value)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _require_int(value: object, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an int")
    if isinstance(value, int):
        return value
    if isinstance(value, (float, str)):
        return int(value)
    if value is None:
        raise ValueError(f"{field} is required")
    raise ValueError(f"{field} must be an int")


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    if isinstance(value, (bool, int, float, str)):
        return float(value)
    raise ValueError("value must be a float")


def source_hash(source_text: str) -> str:
    """Return SHA256 hash of generated source with trailing whitespace stripped."""
    normalized = "\n".join(line.rstrip() for line in source_text.strip().splitlines())
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def _prepare_config_json(config: ConfigInput) -> str:
    if config is None:
        return "{}"
    if isinstance(config, str):
        return config
    return json.dumps(dict(config), sort_keys=True, default=str)


class JobStore:
    def __init__(self, db_path: str | Path) -> None:
        self.db_path: str = str(db_path)
        initialize_database(self.db_path)

    def start_job(self, job_id: str, config: ConfigInput, n_elements: int) -> None:
        """Register a job, replacing the records of an earlier run with the same id."""
        config_json = _prepare_config_json(config)
        with connect(self.db_path) as connection:
            _ = connection.execute("DELETE FROM iterations WHERE job_id = ?", (job_id,))
            _ = connection.execute("DELETE FROM artifacts WHERE job_id = ?", (job_id,))
            _ = connection.execute(
                """
                INSERT INTO jobs (job_id, config_json, n_elements, status)
                VALUES (?, ?, ?, 'running')
                ON CONFLICT(job_id) DO UPDATE SET
                    config_json = excluded.config_json,
                    n_elements = excluded.n_elements,
                    status = 'running',
                    summary_json = NULL,
                    finished_at = NULL
                """,
                (job_id, config_json, n_elements),
            )
            connection.commit()

    def finish_job(
        self,
        job_id: str,
        summary: Mapping[str, object] | None = None,
        status: str = "completed",
    ) -> None:
        summary_json = json.dumps(dict(summary), default=str) if summary is not None else None
        with connect(self.db_path) as connection:
            _ = connection.execute(
                """
                UPDATE jobs
                SET status = ?, summary_json = ?, finished_at = CURRENT_TIMESTAMP
                WHERE job_id = ?
                """,
                (status, summary_json, job_id),
            )
            connection.commit()

    def save_artifact(
        self,
        job_id: str,
        artifact: GeneratedArtifact,
        status: str | None = None,
        failure_type: str | None = None,
    ) -> bool:
        with connect(self.db_path) as connection:
            try:
                _ = connection.execute(
                    """
                    INSERT INTO artifacts (
                        job_id, name, kind, element_id, component_type, quality,
                        iterations, status, failure_type, source_hash, source_text
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        job_id,
                        artifact.name,
                        artifact.kind,
                        artifact.element_id,
                        artifact.component_type,
                        artifact.quality,
                        artifact.iterations,
                        status,
                        failure_type,
                        source_hash(artifact.source_text),
                        artifact.source_text,
                    ),
                )
                connection.commit()
                return True
            except sqlite3.IntegrityError:
                return False

    def record_iterations(
        self,
        job_id: str,
        element_id: str,
        history: Iterable[IterationRecord],
    ) -> int:
        rows = [
            (
                job_id,
                element_id,
                record.iteration,
                record.intensity,
                record.variants_evaluated,
                record.best_quality,
                record.status.value,
            )
            for record in history
        ]
        if not rows:
            return 0
        with connect(self.db_path) as connection:
            _ = connection.executemany(
                """
                INSERT INTO iterations (
                    job_id, element_id, iteration, intensity,
                    variants_evaluated, best_quality, status
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            connection.commit()
        return len(rows)

    def get_job(self, job_id: str) -> StoredJob | None:
        with connect(self.db_path) as connection:
            row = cast(
                sqlite3.Row | None,
                connection.execute("SELECT * FROM jobs WHERE job_id = ?", (job_id,)).fetchone(),
            )
        if row is None:
            return None
        return StoredJob.from_row(row)

    def list_jobs(self) -> list[StoredJob]:
        with connect(self.db_path) as connection:
            rows = connection.execute(
                "SELECT * FROM jobs ORDER BY created_at DESC, job_id"
            ).fetchall()
        return [StoredJob.from_row(cast(sqlite3.Row, row)) for row in rows]

    def get_artifacts(self, job_id: str, kind: str | None = None) -> list[StoredArtifact]:
        query = "SELECT * FROM artifacts WHERE job_id = ?"
        params: tuple[object, ...] = (job_id,)
        if kind is not None:
            query += " AND kind = ?"
            params = (job_id, kind)
        with connect(self.db_path) as connection:
            rows = connection.execute(query + " ORDER BY id", params).fetchall()
        return [StoredArtifact.from_row(cast(sqlite3.Row, row)) for row in rows]

    def get_iteration_trace(self, job_id: str, element_id: str) -> list[dict[str, object]]:
        with connect(self.db_path) as connection:
            rows = connection.execute(
                """
                SELECT iteration, intensity, variants_evaluated, best_quality, status
                FROM iterations
                WHERE job_id = ? AND element_id = ?
                ORDER BY iteration
                """,
                (job_id, element_id),
            ).fetchall()
        return [dict(cast(sqlite3.Row, row)) for row in rows]

    def count_by_kind(self, job_id: str) -> dict[str, int]:
        with connect(self.db_path) as connection:
            rows = connection.execute(
                """
                SELECT kind, COUNT(*) AS count
                FROM artifacts
                WHERE job_id = ?
                GROUP BY kind
                """,
                (job_id,),
            ).fetchall()
        counts: dict[str, int] = {}
        for row in rows:
            typed_row = cast(sqlite3.Row, row)
            kind = _require_str(cast(object, typed_row["kind"]), "kind")
            counts[kind] = _require_int(cast(object, typed_row["count"]), "count")
        return counts
