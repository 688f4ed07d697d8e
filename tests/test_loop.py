from __future__ import annotations

import pytest

from evaluator import QualityEvaluator
from forge_core.loop import LoopStatus, OptimizationLoop
from forge_core.schemas import ElementDescriptor, OptimizerSettings, ParameterSet


class ConstantEvaluator:
    def __init__(self, quality: float) -> None:
        self.quality = quality
        self.calls = 0

    def evaluate(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> float:
        self.calls += 1
        return self.quality


class RisingEvaluator:
    """Every call scores a little higher than the last, never reaching the threshold."""

    def __init__(self) -> None:
        self.calls = 0

    def evaluate(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> float:
        self.calls += 1
        return min(0.9, 0.3 + self.calls * 0.001)


def _button() -> ElementDescriptor:
    return ElementDescriptor.from_dict(
        {
            "id": "e1",
            "type": "button",
            "properties": {"text": "Save", "backgroundColor": "#1976d2"},
            "position": {"x": 0, "y": 0, "width": 120, "height": 40},
        }
    )


def _matching_card() -> ElementDescriptor:
    return ElementDescriptor.from_dict(
        {
            "id": "c1",
            "type": "card",
            "properties": {
                "title": "Hello",
                "text": "Welcome back",
                "value": "42",
                "color": "#1976d2",
                "backgroundColor": "#ffffff",
                "textColor": "#000000",
                "fontSize": "14px",
                "fontWeight": "400",
            },
            "position": {"x": 0, "y": 0, "width": 300, "height": 200},
        }
    )


def test_button_improves_over_base_quality() -> None:
    result = OptimizationLoop(QualityEvaluator()).optimize(_button())

    assert result.candidate.name == "ButtonE1"
    assert result.quality > 0.3
    assert result.max_iterations == 8
    assert result.key_params == ("width", "height", "color")
    assert 1 <= result.candidate.iterations_used <= result.max_iterations
    assert result.candidate.parameter_set.text == "Save"


def test_matching_descriptor_stops_at_threshold() -> None:
    result = OptimizationLoop(QualityEvaluator()).optimize(_matching_card())

    assert result.status is LoopStatus.THRESHOLD_REACHED
    assert result.quality >= 0.95
    assert result.iterations_run == 1
    assert result.iterations_run < result.max_iterations


def test_stagnation_stops_after_three_flat_iterations() -> None:
    evaluator = ConstantEvaluator(0.6)

    result = OptimizationLoop(evaluator).optimize(_button())

    assert result.status is LoopStatus.STAGNANT
    assert result.iterations_run == 4
    assert result.candidate.iterations_used == 1
    assert result.quality == pytest.approx(0.6)
    assert [record.status for record in result.history] == [
        LoopStatus.IMPROVED,
        LoopStatus.STAGNANT,
        LoopStatus.STAGNANT,
        LoopStatus.STAGNANT,
    ]


def test_steady_improvement_exhausts_budget() -> None:
    result = OptimizationLoop(RisingEvaluator()).optimize(_button())

    assert result.status is LoopStatus.EXHAUSTED
    assert result.iterations_run == result.max_iterations
    assert result.candidate.iterations_used == result.max_iterations
    assert len(result.history) == result.max_iterations


def test_best_quality_never_decreases() -> None:
    result = OptimizationLoop(RisingEvaluator()).optimize(_button())

    qualities = [record.best_quality for record in result.history]
    assert qualities == sorted(qualities)


def test_threshold_hit_stops_mid_iteration() -> None:
    evaluator = ConstantEvaluator(0.99)

    result = OptimizationLoop(evaluator).optimize(_button())

    assert result.status is LoopStatus.THRESHOLD_REACHED
    assert evaluator.calls == 1
    assert result.candidate.iterations_used == 1


def test_out_of_range_scores_are_clamped() -> None:
    result = OptimizationLoop(ConstantEvaluator(7.0)).optimize(_button())

    assert result.quality == 1.0
    assert result.status is LoopStatus.THRESHOLD_REACHED


def test_intensity_schedule() -> None:
    loop = OptimizationLoop(ConstantEvaluator(0.5))

    assert loop.variation_intensity(0, 8, 0) == pytest.approx(0.05)
    assert loop.variation_intensity(4, 8, 1) == pytest.approx(0.175)
    assert loop.variation_intensity(7, 8, 3) == pytest.approx(0.3)


def test_disabled_optimizer_returns_base_candidate() -> None:
    evaluator = ConstantEvaluator(0.99)
    loop = OptimizationLoop(evaluator, settings=OptimizerSettings(enabled=False))

    result = loop.optimize(_button())

    assert evaluator.calls == 0
    assert result.quality == 0.3
    assert result.iterations_run == 0
    assert result.candidate.iterations_used == 0
