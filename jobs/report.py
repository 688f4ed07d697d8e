"""Markdown report for one job directory."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import yaml

from .artifacts import load_metrics
from .metrics import summarize


def _fmt(value: Any, spec: str = ".3f") -> str:
    if value is None:
        return "N/A"
    if isinstance(value, float):
        return format(value, spec)
    return str(value)


class ReportGenerator:
    def __init__(self, job_dir: Path):
        self.job_dir = Path(job_dir)
        self.metrics = load_metrics(self.job_dir / "metrics.jsonl")
        self.config = self._load_config()
        self.kpis = summarize(self.metrics)

    def _load_config(self) -> dict[str, Any]:
        config_path = self.job_dir / "config.yaml"
        if not config_path.exists():
            return {}
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def element_rows(self) -> list[str]:
        rows = []
        for m in self.metrics:
            rows.append(
                f"| {m.get('element_id')} | {m.get('artifact_name')} | {m.get('kind')} "
                f"| {_fmt(m.get('quality'))} | {m.get('iterations', 0)} "
                f"| {_fmt(m.get('status'))} | {_fmt(m.get('complexity'))} "
                f"| {_fmt(m.get('elapsed_ms'), '.1f')} |"
            )
        return rows

    def generate_markdown(self, output_path: Path | None = None) -> str:
        date = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        kpis = self.kpis

        status_lines = [f"- **{status}:** {count}" for status, count in kpis["status_counts"].items()]
        failure_lines = [f"- **{failure}:** {count}" for failure, count in kpis["failure_breakdown"].items()]
        element_table = "\n".join(self.element_rows())

        md_content = f"""# Component Generation Report

## Job Summary
- **Job ID:** {self.job_dir.name}
- **Date:** {date}
- **Elements:** {kpis['n_elements']}

## Key Performance Indicators
| Metric | Value |
|--------|-------|
| Mean Quality | {_fmt(kpis['mean_quality'])} |
| Best Quality | {_fmt(kpis['best_quality'])} |
| Optimized | {kpis['n_optimized']} |
| Fallbacks | {kpis['n_fallback']} |
| Total Iterations | {kpis['total_iterations']} |

## Loop Outcomes
{chr(10).join(status_lines) or "- none"}

## Failures
{chr(10).join(failure_lines) or "- none"}

## Elements
| Element | Artifact | Kind | Quality | Iterations | Status | Complexity | Time (ms) |
|---------|----------|------|---------|------------|--------|------------|-----------|
{element_table}

## Configuration
```yaml
{yaml.dump(self.config, default_flow_style=False, sort_keys=False)}```
"""
        if output_path is not None:
            Path(output_path).write_text(md_content, encoding="utf-8")
        return md_content
