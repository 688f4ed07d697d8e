"""Multi-factor quality evaluator for candidate parameter sets.

The score is a proxy over declared parameters only, not pixel similarity:

    quality = 0.4 * size + 0.25 * color + 0.2 * typography + 0.15 * content

Color, typography and content add up the weighted sub-checks that could
actually be performed, so a factor only reaches 1.0 when every one of its
checks applies and matches. When none apply the factor is a neutral 0.5. Size
is 0 when the descriptor carries no geometry. Content fields only count when
both sides are truthy, so a declared value of 0 is not compared.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass

from forge_core.colors import color_similarity
from forge_core.normalizer import is_missing
from forge_core.schemas import ElementDescriptor, ElementProperties, ParameterSet

from .base import BaseEvaluator, QualityBreakdown

logger = logging.getLogger(__name__)

NEUTRAL = 0.5
DEFAULT_FONT_SIZE = 14
FONT_SIZE_PENALTY = 3.0
SIZE_PENALTY = 2.0
PARTIAL_CONTENT_MATCH = 0.7
WEIGHT_MISMATCH = 0.5

_LEADING_INT = re.compile(r"^\s*(\d+)")

_Check = tuple[float, float]


@dataclass(frozen=True)
class QualityWeights:
    size: float = 0.4
    color: float = 0.25
    typography: float = 0.2
    content: float = 0.15

    def __post_init__(self) -> None:
        weights = (self.size, self.color, self.typography, self.content)
        if any(weight < 0 for weight in weights):
            raise ValueError("quality weights must be non-negative")
        if not math.isclose(sum(weights), 1.0):
            raise ValueError("quality weights must sum to 1")


def _weighted(checks: list[_Check]) -> float:
    if not checks:
        return NEUTRAL
    return sum(weight * score for weight, score in checks)


def _font_size(value: object) -> int:
    match = _LEADING_INT.match(str(value))
    size = int(match.group(1)) if match else 0
    return size or DEFAULT_FONT_SIZE


def _axis_score(candidate: float, target: float | None) -> float:
    if target is None or target <= 0:
        return 0.0
    relative_error = abs(candidate - target) / target
    return max(0.0, 1.0 - SIZE_PENALTY * relative_error)


def size_score(params: ParameterSet, descriptor: ElementDescriptor) -> float:
    position = descriptor.position
    if position is None:
        return 0.0
    width = _axis_score(params.width, position.width)
    height = _axis_score(params.height, position.height)
    return (width + height) / 2


def color_score(params: ParameterSet, properties: ElementProperties) -> float:
    channels = (
        (properties.color, params.color, 0.5),
        (properties.background_color, params.background_color, 0.3),
        (properties.text_color, params.text_color, 0.2),
    )
    checks: list[_Check] = [
        (weight, color_similarity(target, actual))
        for target, actual, weight in channels
        if not is_missing(target) and not is_missing(actual)
    ]
    return _weighted(checks)


def typography_score(params: ParameterSet, properties: ElementProperties) -> float:
    checks: list[_Check] = []
    if not is_missing(properties.font_size) and not is_missing(params.font_size):
        target = _font_size(properties.font_size)
        error = abs(target - _font_size(params.font_size)) / target
        checks.append((0.4, max(0.0, 1.0 - FONT_SIZE_PENALTY * error)))
    if not is_missing(properties.font_weight) and not is_missing(params.font_weight):
        match = str(properties.font_weight) == str(params.font_weight)
        checks.append((0.3, 1.0 if match else WEIGHT_MISMATCH))
    if not is_missing(properties.text_color) and not is_missing(params.text_color):
        checks.append((0.3, color_similarity(properties.text_color, params.text_color)))
    return _weighted(checks)


def content_score(params: ParameterSet, properties: ElementProperties) -> float:
    fields = (
        (properties.title, params.title, 0.4),
        (properties.text, params.text, 0.3),
        (properties.value, params.value, 0.3),
    )
    checks: list[_Check] = [
        (weight, 1.0 if target == actual else PARTIAL_CONTENT_MATCH)
        for target, actual, weight in fields
        if target and actual
    ]
    return _weighted(checks)


class QualityEvaluator(BaseEvaluator):
    """Deterministic scorer of a parameter set against its descriptor."""

    def __init__(self, weights: QualityWeights | None = None) -> None:
        self.weights: QualityWeights = weights or QualityWeights()

    def breakdown(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> QualityBreakdown:  # pyright: ignore[reportImplicitOverride]
        properties = descriptor.properties
        size = self._guarded("size", lambda: size_score(parameter_set, descriptor), 0.0)
        color = self._guarded("color", lambda: color_score(parameter_set, properties), NEUTRAL)
        typography = self._guarded(
            "typography", lambda: typography_score(parameter_set, properties), NEUTRAL
        )
        content = self._guarded("content", lambda: content_score(parameter_set, properties), NEUTRAL)

        total = (
            size * self.weights.size
            + color * self.weights.color
            + typography * self.weights.typography
            + content * self.weights.content
        )
        if not math.isfinite(total):
            total = 0.0
        return QualityBreakdown(
            size=size,
            color=color,
            typography=typography,
            content=content,
            total=max(0.0, min(1.0, total)),
        )

    def _guarded(self, factor: str, compute: Callable[[], float], fallback: float) -> float:
        try:
            score = float(compute())
        except (TypeError, ValueError, ArithmeticError, AttributeError) as exc:
            logger.debug("%s score degraded to %.2f: %s", factor, fallback, exc)
            return fallback
        if not math.isfinite(score):
            return fallback
        return max(0.0, min(1.0, score))
