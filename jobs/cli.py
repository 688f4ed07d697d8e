"""CLI interface for running component generation jobs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from jobs.artifacts import ArtifactWriter
from jobs.config import JobConfig, load_config
from jobs.demo import demo_job
from jobs.orchestrator import JobResult, run_job
from jobs.report import ReportGenerator

app = typer.Typer(help="uiforge component generation CLI")


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        typer.secho(f"❌ Invalid log level: {log_level}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _load_job_config(config_path: Optional[str], output_dir: Optional[str]) -> JobConfig:
    try:
        config = load_config(config_path) if config_path else JobConfig()
    except FileNotFoundError as e:
        typer.secho(f"❌ Config file not found: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValueError as e:
        typer.secho(f"❌ Invalid config: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    if output_dir is not None:
        config = config.model_copy(update={"output_dir": output_dir})
    return config


def _print_result(result: JobResult) -> None:
    summary = result.summary
    typer.secho(f"\n✅ Job {result.job_id} completed", fg=typer.colors.GREEN)
    typer.echo(f"   Elements:  {summary['n_elements']} ({summary['n_fallback']} fallback)")
    mean = summary.get("mean_quality")
    typer.echo(f"   Mean quality: {mean:.3f}" if mean is not None else "   Mean quality: N/A")
    typer.echo(f"   Artifacts: {len(result.all_artifacts)}")
    typer.echo(f"   Output:    {result.output_dir}")


@app.command()
def run(
    analysis_path: str = typer.Argument(..., help="Path to the analysis JSON"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to job YAML config"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Override the output directory"),
) -> None:
    """Generate components for one analysis file."""
    path = Path(analysis_path)
    if not path.exists():
        typer.secho(f"❌ Analysis file not found: {analysis_path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    config = _load_job_config(config_path, output_dir)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        result = run_job(data, config)
    except json.JSONDecodeError as e:
        typer.secho(f"❌ Invalid analysis JSON: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except ValidationError as e:
        typer.secho(f"❌ Invalid analysis: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    except OSError as e:
        typer.secho(f"❌ Job failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    _print_result(result)


@app.command()
def demo(
    seed: int = typer.Option(0, "--seed", help="Seed for the generated analysis"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to job YAML config"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", help="Override the output directory"),
) -> None:
    """Run a generated demo dashboard analysis."""
    config = _load_job_config(config_path, output_dir)
    result = run_job(demo_job(seed), config)
    _print_result(result)


@app.command()
def list_jobs(
    output_dir: str = typer.Option("generated", help="Output directory"),
) -> None:
    """List all jobs in the output directory."""
    output_path = Path(output_dir)

    if not output_path.exists():
        typer.secho(f"❌ Output directory not found: {output_dir}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    job_dirs = [d for d in output_path.iterdir() if d.is_dir()]

    if not job_dirs:
        typer.secho("No jobs found.", fg=typer.colors.YELLOW)
        return

    typer.secho(f"\n📁 Found {len(job_dirs)} job(s):\n", fg=typer.colors.BLUE)

    for job_dir in sorted(job_dirs):
        metrics_path = job_dir / "metrics.jsonl"
        has_metrics = "✓" if metrics_path.exists() else "✗"
        has_report = "✓" if (job_dir / "report.md").exists() else "✗"
        has_manifest = "✓" if any(job_dir.glob("index.*")) else "✗"

        num_elements = 0
        if metrics_path.exists():
            with open(metrics_path, "r", encoding="utf-8") as f:
                num_elements = sum(1 for line in f if line.strip())

        typer.echo(f"  {job_dir.name}")
        typer.echo(
            f"    Metrics: {has_metrics} | Report: {has_report} | Manifest: {has_manifest} "
            f"| Elements: {num_elements}"
        )


@app.command()
def report(
    job_id: str = typer.Argument(..., help="Job ID to generate report for"),
    output_dir: str = typer.Option("generated", help="Output directory"),
) -> None:
    """Regenerate the Markdown report for a job."""
    job_dir = Path(output_dir) / job_id

    if not job_dir.exists():
        typer.secho(f"❌ Job not found: {job_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if not (job_dir / "metrics.jsonl").exists():
        typer.secho(f"❌ Metrics not found for job: {job_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    md_path = job_dir / "report.md"
    ReportGenerator(job_dir).generate_markdown(md_path)

    typer.secho("✅ Report generated successfully!", fg=typer.colors.GREEN)
    typer.echo(f"   Markdown: {md_path}")


@app.command()
def show(
    job_id: str = typer.Argument(..., help="Job ID to show"),
    output_dir: str = typer.Option("generated", help="Output directory"),
    artifact: Optional[str] = typer.Option(None, "--artifact", help="Print the source of one artifact"),
) -> None:
    """Show the summary of a job, or one artifact's source."""
    job_dir = Path(output_dir) / job_id

    if not job_dir.exists():
        typer.secho(f"❌ Job not found: {job_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if artifact is not None:
        matches = sorted(job_dir.glob(f"{artifact}.*"))
        if not matches:
            typer.secho(f"❌ Artifact not found: {artifact}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        typer.echo(matches[0].read_text(encoding="utf-8"))
        return

    writer = ArtifactWriter(JobConfig(output_dir=output_dir))
    writer.prepare(job_id)
    summary = writer.get_summary()

    typer.secho(f"\n📊 Job {job_id}", fg=typer.colors.BLUE)
    typer.echo(f"   Elements: {summary['n_elements']} ({summary['n_fallback']} fallback)")
    mean = summary.get("mean_quality")
    typer.echo(f"   Mean quality: {mean:.3f}" if mean is not None else "   Mean quality: N/A")
    for status, count in summary["status_counts"].items():
        typer.echo(f"   {status}: {count}")
    typer.echo("   Files:")
    for name in summary["files"]:
        typer.echo(f"     {name}")


if __name__ == "__main__":
    app()
