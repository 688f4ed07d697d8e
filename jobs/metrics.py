"""Per-element metrics collection for component generation jobs."""

from __future__ import annotations

import csv
import json
from collections import Counter
from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class ElementMetrics:
    element_id: str
    artifact_name: str
    kind: str
    quality: float
    iterations: int
    status: str | None = None
    complexity: float | None = None
    max_iterations: int | None = None
    elapsed_ms: float = 0.0
    failure_type: str | None = None
    error: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class MetricsCollector:
    def __init__(self, elements: Iterable[ElementMetrics] = ()) -> None:
        self.elements: list[ElementMetrics] = list(elements)

    def record_element(self, metrics: ElementMetrics) -> None:
        self.elements.append(metrics)

    def export_jsonl(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            for element in self.elements:
                json.dump(element.to_dict(), f)
                f.write("\n")

    def export_csv(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if not self.elements:
            return

        fieldnames = [
            "element_id", "artifact_name", "kind", "quality", "iterations",
            "status", "complexity", "max_iterations", "elapsed_ms",
            "failure_type", "timestamp",
        ]

        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            for element in self.elements:
                writer.writerow(element.to_dict())

    def summary(self) -> dict[str, Any]:
        return summarize(element.to_dict() for element in self.elements)


def summarize(rows: Any) -> dict[str, Any]:
    """Aggregate statistics over per-element metric rows (dicts)."""
    rows = list(rows)
    if not rows:
        return {
            "n_elements": 0,
            "n_optimized": 0,
            "n_fallback": 0,
            "mean_quality": None,
            "best_quality": None,
            "total_iterations": 0,
            "status_counts": {},
            "failure_breakdown": {},
        }

    qualities = [float(row["quality"]) for row in rows]
    fallbacks = [row for row in rows if row.get("kind") == "fallback"]
    statuses = Counter(row["status"] for row in rows if row.get("status"))
    failures = Counter(row["failure_type"] for row in rows if row.get("failure_type"))
    return {
        "n_elements": len(rows),
        "n_optimized": len(rows) - len(fallbacks),
        "n_fallback": len(fallbacks),
        "mean_quality": sum(qualities) / len(qualities),
        "best_quality": max(qualities),
        "total_iterations": sum(int(row.get("iterations") or 0) for row in rows),
        "status_counts": dict(statuses),
        "failure_breakdown": dict(failures),
    }
