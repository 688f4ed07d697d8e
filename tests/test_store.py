from pathlib import Path

from forge_core.loop import IterationRecord, LoopStatus
from forge_core.schemas import GeneratedArtifact
from store.repository import JobStore, source_hash


def _artifact(name: str, kind: str = "element", quality: float = 0.8) -> GeneratedArtifact:
    return GeneratedArtifact(
        name=name,
        source_text=f"export default {name};\n",
        quality=quality,
        iterations=2,
        kind=kind,
        element_id=name.lower(),
        component_type="ButtonComponent",
    )


def test_job_lifecycle(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")

    store.start_job("job-1", {"output_dir": "gen"}, n_elements=2)
    running = store.get_job("job-1")
    assert running is not None
    assert running.status == "running"
    assert running.n_elements == 2

    store.finish_job("job-1", {"mean_quality": 0.7})
    finished = store.get_job("job-1")
    assert finished is not None
    assert finished.status == "completed"
    assert finished.summary == {"mean_quality": 0.7}
    assert finished.finished_at is not None


def test_artifact_names_are_unique_per_job(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")
    store.start_job("job-1", None, n_elements=1)

    assert store.save_artifact("job-1", _artifact("ButtonE1"), status="stagnant") is True
    assert store.save_artifact("job-1", _artifact("ButtonE1")) is False

    stored = store.get_artifacts("job-1")
    assert len(stored) == 1
    assert stored[0].status == "stagnant"
    assert stored[0].source_hash == source_hash(stored[0].source_text)


def test_get_artifacts_filters_by_kind(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")
    store.start_job("job-1", None, n_elements=2)
    store.save_artifact("job-1", _artifact("ButtonE1"))
    store.save_artifact("job-1", _artifact("CardBad", kind="fallback", quality=0.1), failure_type="validation_error")

    fallbacks = store.get_artifacts("job-1", kind="fallback")

    assert [a.name for a in fallbacks] == ["CardBad"]
    assert fallbacks[0].failure_type == "validation_error"
    assert store.count_by_kind("job-1") == {"element": 1, "fallback": 1}


def test_iteration_trace_is_ordered(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")
    store.start_job("job-1", None, n_elements=1)
    history = [
        IterationRecord(iteration=1, intensity=0.05, variants_evaluated=15, best_quality=0.6, status=LoopStatus.IMPROVED),
        IterationRecord(iteration=2, intensity=0.07, variants_evaluated=15, best_quality=0.6, status=LoopStatus.STAGNANT),
    ]

    assert store.record_iterations("job-1", "e1", history) == 2
    assert store.record_iterations("job-1", "e2", []) == 0

    trace = store.get_iteration_trace("job-1", "e1")
    assert [row["iteration"] for row in trace] == [1, 2]
    assert [row["status"] for row in trace] == ["improved", "stagnant"]


def test_restarting_a_job_replaces_its_records(tmp_path: Path) -> None:
    store = JobStore(tmp_path / "jobs.db")
    store.start_job("job-1", None, n_elements=1)
    store.save_artifact("job-1", _artifact("ButtonE1"))
    store.finish_job("job-1")

    store.start_job("job-1", None, n_elements=3)

    job = store.get_job("job-1")
    assert job is not None
    assert job.status == "running"
    assert job.n_elements == 3
    assert store.get_artifacts("job-1") == []
    assert [j.job_id for j in store.list_jobs()] == ["job-1"]
