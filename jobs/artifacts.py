"""Filesystem artifact sink for component generation jobs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from forge_core.schemas import GeneratedArtifact

from .config import JobConfig, save_config
from .metrics import MetricsCollector, summarize


class ArtifactWriter:
    """Writes each artifact to ``<output_dir>/<job_id>/<name><extension>``.

    Alongside the sources a job directory holds a ``config.yaml`` snapshot,
    ``metrics.jsonl``, ``metrics.csv`` and, once the report has been
    generated, ``report.md``.
    """

    def __init__(self, config: JobConfig, output_dir: str | Path | None = None):
        self.config = config
        self.output_root = Path(output_dir if output_dir is not None else config.output_dir)
        self.job_id: str | None = None
        self.job_dir: Path | None = None

    def prepare(self, job_id: str) -> Path:
        """Create the job directory. Failures propagate to the caller."""
        self.job_id = job_id
        self.job_dir = self.output_root / job_id
        self.job_dir.mkdir(parents=True, exist_ok=True)
        return self.job_dir

    def _require_job_dir(self) -> Path:
        if self.job_dir is None:
            raise RuntimeError("ArtifactWriter.prepare() must be called before writing")
        return self.job_dir

    def write(self, artifact: GeneratedArtifact) -> Path:
        path = self._require_job_dir() / artifact.filename
        path.write_text(artifact.source_text, encoding="utf-8")
        return path

    @property
    def config_path(self) -> Path:
        return self._require_job_dir() / "config.yaml"

    @property
    def metrics_path(self) -> Path:
        return self._require_job_dir() / "metrics.jsonl"

    @property
    def report_path(self) -> Path:
        return self._require_job_dir() / "report.md"

    def snapshot_config(self) -> None:
        """Save a snapshot of the configuration for reproducibility."""
        save_config(self.config, self.config_path)

    @property
    def metrics_csv_path(self) -> Path:
        return self._require_job_dir() / "metrics.csv"

    def save_element_metrics(self, collector: MetricsCollector) -> None:
        collector.export_jsonl(self.metrics_path)
        collector.export_csv(self.metrics_csv_path)

    def load_metrics(self) -> list[dict[str, Any]]:
        return load_metrics(self.metrics_path)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the written job."""
        job_dir = self._require_job_dir()
        sources = sorted(
            path.name
            for path in job_dir.iterdir()
            if path.suffix in {self.config.component_extension, self.config.manifest_extension}
        )
        return {
            "job_id": self.job_id,
            "job_dir": str(job_dir),
            "files": sources,
            **summarize(self.load_metrics()),
        }


def load_metrics(metrics_path: str | Path) -> list[dict[str, Any]]:
    """Load per-element metric rows from a JSONL file."""
    metrics_path = Path(metrics_path)
    if not metrics_path.exists():
        return []

    metrics = []
    with open(metrics_path, "r", encoding="utf-8") as f:
        for line in f:
            if line.strip():
                metrics.append(json.loads(line))
    return metrics
