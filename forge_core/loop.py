from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from .catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from .complexity import analyze_complexity, max_iterations, select_key_params
from .normalizer import base_candidate
from .schemas import Candidate, ElementDescriptor, OptimizerSettings, ParameterSet
from .variants import VariantGenerator

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    def evaluate(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> float:
        ...


class LoopStatus(str, Enum):
    RUNNING = "running"
    IMPROVED = "improved"
    STAGNANT = "stagnant"
    THRESHOLD_REACHED = "threshold_reached"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class LoopState:
    iteration: int
    best_quality: float
    best_candidate: Candidate
    stagnation_count: int
    status: LoopStatus = LoopStatus.RUNNING


@dataclass(frozen=True)
class IterationRecord:
    iteration: int
    intensity: float
    variants_evaluated: int
    best_quality: float
    status: LoopStatus


@dataclass(frozen=True)
class OptimizationResult:
    candidate: Candidate
    status: LoopStatus
    iterations_run: int
    max_iterations: int
    complexity: float
    key_params: tuple[str, ...]
    history: tuple[IterationRecord, ...] = field(default_factory=tuple)

    @property
    def quality(self) -> float:
        return self.candidate.quality


def _clamp_quality(value: object) -> float:
    try:
        quality = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(quality):
        return 0.0
    return max(0.0, min(1.0, quality))


class OptimizationLoop:
    """Bounded, stagnation-aware local search over parameter variants.

    Starting from the normalized base candidate, each iteration perturbs the
    current best, keeps any strictly better variant and stops on the quality
    threshold, on ``stagnation_limit`` consecutive non-improving iterations, or
    when the complexity-sized iteration budget runs out. The returned candidate
    is the best one observed, so quality never regresses across a run.
    """

    def __init__(
        self,
        evaluator: Evaluator,
        settings: OptimizerSettings | None = None,
        catalogue: ComponentCatalogue = DEFAULT_CATALOGUE,
        variant_generator: VariantGenerator | None = None,
    ) -> None:
        self.evaluator: Evaluator = evaluator
        self.settings: OptimizerSettings = settings or OptimizerSettings()
        self.catalogue: ComponentCatalogue = catalogue
        self.variant_generator: VariantGenerator = variant_generator or VariantGenerator(
            self.settings
        )

    def variation_intensity(
        self,
        iteration: int,
        max_iterations: int,
        stagnation_count: int,
    ) -> float:
        progress = iteration / max_iterations
        intensity = (
            self.settings.base_intensity
            + progress * self.settings.progress_intensity
            + stagnation_count * self.settings.stagnation_intensity
        )
        return min(self.settings.max_intensity, intensity)

    def optimize(
        self,
        descriptor: ElementDescriptor,
        base: Candidate | None = None,
    ) -> OptimizationResult:
        base = base or base_candidate(descriptor, self.catalogue, self.settings)
        complexity = analyze_complexity(descriptor)
        key_params = select_key_params(descriptor, self.catalogue, complexity)
        budget = max_iterations(complexity, self.settings)

        if not self.settings.enabled:
            return OptimizationResult(
                candidate=base,
                status=LoopStatus.EXHAUSTED,
                iterations_run=0,
                max_iterations=budget,
                complexity=complexity,
                key_params=key_params,
            )

        logger.debug(
            "Optimizing %s: complexity=%.3f budget=%d params=%s",
            descriptor.id,
            complexity,
            budget,
            ",".join(key_params),
        )

        state = LoopState(
            iteration=0,
            best_quality=base.quality,
            best_candidate=base,
            stagnation_count=0,
        )
        history: list[IterationRecord] = []

        for iteration in range(budget):
            intensity = self.variation_intensity(iteration, budget, state.stagnation_count)
            variants = self.variant_generator.generate(state.best_candidate, key_params, intensity)
            state, evaluated = self._step(state, descriptor, variants, iteration + 1)
            history.append(
                IterationRecord(
                    iteration=iteration + 1,
                    intensity=intensity,
                    variants_evaluated=evaluated,
                    best_quality=state.best_quality,
                    status=state.status,
                )
            )
            logger.debug(
                "%s iteration %d/%d: %s best=%.3f",
                descriptor.id,
                iteration + 1,
                budget,
                state.status.value,
                state.best_quality,
            )
            if state.status is LoopStatus.THRESHOLD_REACHED:
                logger.info("%s reached quality %.3f", descriptor.id, state.best_quality)
                return self._result(state, LoopStatus.THRESHOLD_REACHED, history, budget, complexity, key_params)
            if state.stagnation_count >= self.settings.stagnation_limit:
                logger.info(
                    "%s stopped after %d iterations without improvement (best %.3f)",
                    descriptor.id,
                    state.stagnation_count,
                    state.best_quality,
                )
                return self._result(state, LoopStatus.STAGNANT, history, budget, complexity, key_params)

        logger.info("%s exhausted %d iterations (best %.3f)", descriptor.id, budget, state.best_quality)
        return self._result(state, LoopStatus.EXHAUSTED, history, budget, complexity, key_params)

    def _step(
        self,
        state: LoopState,
        descriptor: ElementDescriptor,
        variants: list[Candidate],
        iteration: int,
    ) -> tuple[LoopState, int]:
        best_candidate = state.best_candidate
        best_quality = state.best_quality
        improved = False
        evaluated = 0
        for variant in variants:
            quality = _clamp_quality(self.evaluator.evaluate(variant.parameter_set, descriptor))
            evaluated += 1
            if quality > best_quality:
                best_quality = quality
                best_candidate = variant.model_copy(
                    update={"quality": quality, "iterations_used": iteration}
                )
                improved = True
            if quality >= self.settings.quality_threshold:
                return (
                    LoopState(
                        iteration=iteration,
                        best_quality=best_quality,
                        best_candidate=best_candidate,
                        stagnation_count=0,
                        status=LoopStatus.THRESHOLD_REACHED,
                    ),
                    evaluated,
                )

        if improved:
            return (
                LoopState(iteration, best_quality, best_candidate, 0, LoopStatus.IMPROVED),
                evaluated,
            )
        return (
            LoopState(
                iteration,
                best_quality,
                best_candidate,
                state.stagnation_count + 1,
                LoopStatus.STAGNANT,
            ),
            evaluated,
        )

    def _result(
        self,
        state: LoopState,
        status: LoopStatus,
        history: list[IterationRecord],
        budget: int,
        complexity: float,
        key_params: tuple[str, ...],
    ) -> OptimizationResult:
        return OptimizationResult(
            candidate=state.best_candidate,
            status=status,
            iterations_run=state.iteration,
            max_iterations=budget,
            complexity=complexity,
            key_params=key_params,
            history=tuple(history),
        )
