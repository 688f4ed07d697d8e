from __future__ import annotations

from pathlib import Path

import pytest

from forge_core.schemas import ElementDescriptor, GeneratedArtifact, OptimizerSettings, ParameterSet
from jobs.config import JobConfig
from jobs.orchestrator import BatchOrchestrator, run_job, unique_name
from store import JobStore


class MemorySink:
    def __init__(self) -> None:
        self.prepared: list[str] = []
        self.written: list[GeneratedArtifact] = []

    def prepare(self, job_id: str) -> None:
        self.prepared.append(job_id)

    def write(self, artifact: GeneratedArtifact) -> None:
        self.written.append(artifact)


class FailingSink(MemorySink):
    def prepare(self, job_id: str) -> None:
        raise PermissionError(f"cannot create {job_id}")


class ExplodingEvaluator:
    def evaluate(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> float:
        raise ZeroDivisionError("division by zero")


def _job(elements: list[object]) -> dict[str, object]:
    return {"jobId": "job-1", "elements": elements, "colors": {"background": "#ffffff"}}


BUTTON = {
    "id": "e1",
    "type": "button",
    "properties": {"text": "Save", "backgroundColor": "#1976d2"},
    "position": {"x": 0, "y": 0, "width": 120, "height": 40},
}
CARD = {
    "id": "c1",
    "type": "card",
    "properties": {"title": "Revenue", "value": "42"},
    "position": {"x": 0, "y": 0, "width": 240, "height": 120},
}
BROKEN = {"id": "bad", "type": "card", "position": {"x": 0, "y": 0, "width": -50, "height": 80}}


def test_unique_name_appends_numeric_suffix() -> None:
    used: set[str] = set()

    assert unique_name("ButtonE1", used) == "ButtonE1"
    assert unique_name("ButtonE1", used) == "ButtonE12"
    assert unique_name("ButtonE1", used) == "ButtonE13"


def test_one_artifact_per_element_plus_aggregator_and_manifest() -> None:
    sink = MemorySink()

    result = BatchOrchestrator(sink).run(_job([BUTTON, BROKEN, CARD]))

    assert sink.prepared == ["job-1"]
    assert [a.kind for a in sink.written] == ["element", "fallback", "element", "aggregator", "manifest"]
    assert len(result.artifacts) == 3
    assert result.aggregator.name == "MainJob1"
    assert result.manifest.name == "index"
    assert result.all_artifacts == tuple(sink.written)


def test_invalid_element_becomes_fallback_without_failing_job() -> None:
    result = BatchOrchestrator(MemorySink()).run(_job([BUTTON, BROKEN, CARD]))

    fallback = result.artifacts[1]
    assert fallback.kind == "fallback"
    assert fallback.quality == 0.1
    assert fallback.iterations == 0
    assert result.metrics[1].failure_type == "validation_error"
    assert result.summary["n_fallback"] == 1
    assert result.summary["n_optimized"] == 2
    assert result.summary["failures"] == {"validation_error": 1}


def test_button_scenario_improves_quality() -> None:
    result = BatchOrchestrator(MemorySink()).run(_job([BUTTON]))

    artifact = result.artifacts[0]
    assert artifact.name == "ButtonE1"
    assert artifact.quality > 0.3
    assert artifact.iterations <= result.metrics[0].max_iterations
    assert "Save" in artifact.source_text


def test_duplicate_names_are_suffixed() -> None:
    result = BatchOrchestrator(MemorySink()).run(_job([BUTTON, BUTTON]))

    assert [a.name for a in result.artifacts] == ["ButtonE1", "ButtonE12"]
    assert "export default ButtonE12;" in result.artifacts[1].source_text


def test_evaluator_failure_falls_back() -> None:
    result = BatchOrchestrator(MemorySink(), evaluator=ExplodingEvaluator()).run(_job([BUTTON]))

    assert result.artifacts[0].kind == "fallback"
    assert result.artifacts[0].name == "ButtonE1"
    assert result.metrics[0].failure_type == "arithmetic_error"


def test_non_mapping_element_falls_back() -> None:
    result = BatchOrchestrator(MemorySink()).run(_job(["not an element"]))

    assert result.artifacts[0].element_id == "element_0"
    assert result.artifacts[0].kind == "fallback"


def test_null_properties_and_numeric_id_are_optimized() -> None:
    elements = [
        {"id": "e1", "type": "button", "properties": None, "position": BUTTON["position"]},
        {"id": 7, "type": "card", "properties": {"title": "Orders"}},
    ]

    result = BatchOrchestrator(MemorySink()).run(_job(elements))

    assert [a.kind for a in result.artifacts] == ["element", "element"]
    assert [a.name for a in result.artifacts] == ["ButtonE1", "Card7"]
    assert result.metrics[1].element_id == "7"
    assert result.summary["n_fallback"] == 0


def test_empty_job_still_writes_aggregator_and_manifest() -> None:
    sink = MemorySink()

    result = BatchOrchestrator(sink).run(_job([]))

    assert result.artifacts == ()
    assert [a.kind for a in sink.written] == ["aggregator", "manifest"]
    assert result.summary["n_elements"] == 0


def test_prepare_failure_propagates() -> None:
    with pytest.raises(PermissionError):
        _ = BatchOrchestrator(FailingSink()).run(_job([BUTTON]))


def test_disabled_optimizer_keeps_base_quality() -> None:
    orchestrator = BatchOrchestrator(MemorySink(), settings=OptimizerSettings(enabled=False))

    result = orchestrator.run(_job([BUTTON]))

    assert result.artifacts[0].quality == 0.3
    assert result.artifacts[0].iterations == 0


def test_store_records_artifacts_and_iterations(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")

    _ = BatchOrchestrator(MemorySink(), store=store).run(_job([BUTTON, BROKEN]))

    job = store.get_job("job-1")
    assert job is not None
    assert job.status == "completed"
    assert job.summary is not None and job.summary["n_fallback"] == 1
    assert store.count_by_kind("job-1") == {"element": 1, "fallback": 1, "aggregator": 1, "manifest": 1}
    trace = store.get_iteration_trace("job-1", "e1")
    assert trace
    assert [row["iteration"] for row in trace] == list(range(1, len(trace) + 1))
    assert store.get_iteration_trace("job-1", "bad") == []


def test_run_job_writes_files(tmp_path: Path) -> None:
    config = JobConfig(output_dir=str(tmp_path), show_progress=False, store_enabled=True)

    result = run_job(_job([BUTTON, BROKEN, CARD]), config)

    job_dir = tmp_path / "job-1"
    assert result.output_dir == job_dir
    for artifact in result.all_artifacts:
        assert (job_dir / artifact.filename).read_text(encoding="utf-8") == artifact.source_text
    assert (job_dir / "index.ts").exists()
    assert (job_dir / "config.yaml").exists()
    assert (job_dir / "metrics.jsonl").exists()
    assert (job_dir / "metrics.csv").read_text(encoding="utf-8").startswith("element_id,")
    assert "# Component Generation Report" in (job_dir / "report.md").read_text(encoding="utf-8")
    assert (tmp_path / "jobs.db").exists()


def test_run_job_respects_output_flags(tmp_path: Path) -> None:
    config = JobConfig(output_dir=str(tmp_path), show_progress=False, write_metrics=False, write_report=False)

    _ = run_job(_job([CARD]), config)

    job_dir = tmp_path / "job-1"
    assert (job_dir / "CardC1.tsx").exists()
    assert not (job_dir / "metrics.jsonl").exists()
    assert not (job_dir / "report.md").exists()
