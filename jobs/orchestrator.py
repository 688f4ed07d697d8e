"""Batch orchestration of one analysis job.

For every raw element, strictly in order: validate, build the base candidate,
optimize, materialize. Any exception inside that span turns the element into a
fallback artifact; failures to prepare the job location or to write an artifact
propagate to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Protocol

from tqdm import tqdm

from evaluator import QualityEvaluator
from forge_core.catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from forge_core.loop import Evaluator, OptimizationLoop, OptimizationResult
from forge_core.normalizer import base_candidate
from forge_core.schemas import AnalysisJob, ElementDescriptor, GeneratedArtifact, OptimizerSettings
from materializer import ComponentMaterializer
from store import JobStore

from .artifacts import ArtifactWriter
from .config import JobConfig
from .failure_taxonomy import FailureAnalyzer
from .metrics import ElementMetrics, MetricsCollector
from .report import ReportGenerator

logger = logging.getLogger(__name__)


class ArtifactSink(Protocol):
    def prepare(self, job_id: str) -> object:
        ...

    def write(self, artifact: GeneratedArtifact) -> object:
        ...


@dataclass(frozen=True)
class JobResult:
    job_id: str
    artifacts: tuple[GeneratedArtifact, ...]
    aggregator: GeneratedArtifact
    manifest: GeneratedArtifact
    metrics: tuple[ElementMetrics, ...]
    summary: dict[str, Any] = field(default_factory=dict)
    output_dir: Path | None = None

    @property
    def all_artifacts(self) -> tuple[GeneratedArtifact, ...]:
        return (*self.artifacts, self.aggregator, self.manifest)


def unique_name(name: str, used: set[str]) -> str:
    """Return ``name`` or the first free ``name2``, ``name3``, ... and claim it."""
    candidate = name
    suffix = 2
    while candidate in used:
        candidate = f"{name}{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


class BatchOrchestrator:
    """Runs every element of a job through optimization and materialization."""

    def __init__(
        self,
        sink: ArtifactSink,
        evaluator: Evaluator | None = None,
        settings: OptimizerSettings | None = None,
        catalogue: ComponentCatalogue = DEFAULT_CATALOGUE,
        materializer: ComponentMaterializer | None = None,
        store: JobStore | None = None,
        show_progress: bool = False,
        config_snapshot: Mapping[str, object] | None = None,
    ) -> None:
        self.sink = sink
        self.settings = settings or OptimizerSettings()
        self.catalogue = catalogue
        self.loop = OptimizationLoop(
            evaluator or QualityEvaluator(),
            settings=self.settings,
            catalogue=catalogue,
        )
        self.materializer = materializer or ComponentMaterializer(catalogue)
        self.store = store
        self.show_progress = show_progress
        self.config_snapshot = config_snapshot

    @classmethod
    def from_config(
        cls,
        config: JobConfig,
        sink: ArtifactSink,
        evaluator: Evaluator | None = None,
        store: JobStore | None = None,
    ) -> "BatchOrchestrator":
        catalogue = config.build_catalogue()
        return cls(
            sink=sink,
            evaluator=evaluator,
            settings=config.optimizer,
            catalogue=catalogue,
            materializer=ComponentMaterializer(
                catalogue,
                component_extension=config.component_extension,
                manifest_extension=config.manifest_extension,
            ),
            store=store,
            show_progress=config.show_progress,
            config_snapshot=config.model_dump(mode="json"),
        )

    def run(self, job: AnalysisJob | Mapping[str, Any]) -> JobResult:
        if not isinstance(job, AnalysisJob):
            job = AnalysisJob.model_validate(job)

        self.sink.prepare(job.job_id)
        if self.store is not None:
            self.store.start_job(job.job_id, self.config_snapshot, len(job.elements))

        logger.info("Job %s: %d elements", job.job_id, len(job.elements))

        collector = MetricsCollector()
        analyzer = FailureAnalyzer()
        used_names: set[str] = set()
        artifacts: list[GeneratedArtifact] = []

        pbar = tqdm(
            job.elements,
            desc=f"Job {job.job_id}",
            unit="element",
            disable=not self.show_progress,
        )
        for index, raw in enumerate(pbar):
            artifact, metrics, result = self._process_element(raw, index, used_names, analyzer)
            self.sink.write(artifact)
            artifacts.append(artifact)
            collector.record_element(metrics)
            if self.store is not None:
                self.store.save_artifact(
                    job.job_id, artifact, status=metrics.status, failure_type=metrics.failure_type
                )
                if result is not None:
                    self.store.record_iterations(job.job_id, metrics.element_id, result.history)
            pbar.set_postfix({"last": artifact.name, "quality": f"{artifact.quality:.2f}"})
        pbar.close()

        aggregator = self.materializer.aggregate(job, artifacts)
        manifest = self.materializer.manifest(artifacts, aggregator)
        for extra in (aggregator, manifest):
            self.sink.write(extra)
            if self.store is not None:
                self.store.save_artifact(job.job_id, extra)

        summary = {
            **collector.summary(),
            "failures": analyzer.get_failure_stats(),
        }
        if self.store is not None:
            self.store.finish_job(job.job_id, summary)

        logger.info(
            "Job %s finished: %d optimized, %d fallback",
            job.job_id,
            summary["n_optimized"],
            summary["n_fallback"],
        )
        return JobResult(
            job_id=job.job_id,
            artifacts=tuple(artifacts),
            aggregator=aggregator,
            manifest=manifest,
            metrics=tuple(collector.elements),
            summary=summary,
        )

    def _process_element(
        self,
        raw: object,
        index: int,
        used_names: set[str],
        analyzer: FailureAnalyzer,
    ) -> tuple[GeneratedArtifact, ElementMetrics, OptimizationResult | None]:
        start = time.perf_counter()
        claimed: str | None = None
        try:
            descriptor = ElementDescriptor.model_validate(raw)
            base = base_candidate(descriptor, self.catalogue, self.settings)
            result = self.loop.optimize(descriptor, base)
            claimed = unique_name(result.candidate.name, used_names)
            candidate = result.candidate.model_copy(update={"name": claimed})
            artifact = self.materializer.materialize(candidate)
        except Exception as exc:
            failure_type = analyzer.record_failure(exc)
            name = claimed or unique_name(self.materializer.fallback_name(raw, index), used_names)
            artifact = self.materializer.fallback(raw, index, name=name)
            logger.warning(
                "Element %d (%s) fell back to a placeholder: %s: %s",
                index,
                artifact.element_id,
                type(exc).__name__,
                exc,
            )
            if self.show_progress:
                tqdm.write(f"  ! {artifact.name}: fallback ({failure_type.value})")
            metrics = ElementMetrics(
                element_id=str(artifact.element_id),
                artifact_name=artifact.name,
                kind=artifact.kind,
                quality=artifact.quality,
                iterations=artifact.iterations,
                elapsed_ms=(time.perf_counter() - start) * 1000,
                failure_type=failure_type.value,
                error=str(exc),
            )
            return artifact, metrics, None

        metrics = ElementMetrics(
            element_id=descriptor.id,
            artifact_name=artifact.name,
            kind=artifact.kind,
            quality=artifact.quality,
            iterations=artifact.iterations,
            status=result.status.value,
            complexity=result.complexity,
            max_iterations=result.max_iterations,
            elapsed_ms=(time.perf_counter() - start) * 1000,
        )
        return artifact, metrics, result


def run_job(
    job: AnalysisJob | Mapping[str, Any],
    config: JobConfig | None = None,
    output_dir: str | Path | None = None,
    evaluator: Evaluator | None = None,
) -> JobResult:
    """Run a job against the filesystem sink and write the job's side files."""
    config = config or JobConfig()
    if output_dir is not None:
        config = config.model_copy(update={"output_dir": str(output_dir)})

    writer = ArtifactWriter(config)
    store = JobStore(config.resolved_store_path) if config.store_enabled else None
    orchestrator = BatchOrchestrator.from_config(config, writer, evaluator=evaluator, store=store)
    result = orchestrator.run(job)

    writer.snapshot_config()
    if config.write_metrics:
        writer.save_element_metrics(MetricsCollector(result.metrics))
    if config.write_report:
        ReportGenerator(writer.job_dir).generate_markdown(writer.report_path)

    return replace(result, output_dir=writer.job_dir)
