"""Descriptor complexity scoring.

The score sizes both the iteration budget of the optimization loop and how many
of a type's key parameters are searched:

- property count x 0.1
- ln(area + 1) x 0.05
- +0.3 when a data blob is present, +0.2 when columns are present

clamped to [0, 1].
"""

from __future__ import annotations

import math
from enum import Enum

from .catalogue import ComponentCatalogue
from .schemas import ElementDescriptor, OptimizerSettings

SIMPLE_BELOW = 0.3
COMPLEX_FROM = 0.7


class ComplexityClass(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"

    @classmethod
    def classify(cls, complexity: float) -> "ComplexityClass":
        if complexity < SIMPLE_BELOW:
            return cls.SIMPLE
        if complexity < COMPLEX_FROM:
            return cls.MEDIUM
        return cls.COMPLEX


def analyze_complexity(descriptor: ElementDescriptor) -> float:
    properties = descriptor.properties
    declared = sum(1 for value in properties.model_dump().values() if value is not None)
    complexity = declared * 0.1

    position = descriptor.position
    width = position.width if position and position.width else 0.0
    height = position.height if position and position.height else 0.0
    complexity += math.log(width * height + 1) * 0.05

    if properties.data:
        complexity += 0.3
    if properties.columns:
        complexity += 0.2
    return min(1.0, complexity)


def select_key_params(
    descriptor: ElementDescriptor,
    catalogue: ComponentCatalogue,
    complexity: float | None = None,
) -> tuple[str, ...]:
    all_params = catalogue.params_for(descriptor.type)
    if complexity is None:
        complexity = analyze_complexity(descriptor)
    if complexity < SIMPLE_BELOW:
        return all_params[:2]
    if complexity > COMPLEX_FROM:
        return all_params
    return all_params[: math.ceil(len(all_params) / 2)]


def max_iterations(complexity: float, settings: OptimizerSettings) -> int:
    budgets = {
        ComplexityClass.SIMPLE: settings.simple_iterations,
        ComplexityClass.MEDIUM: settings.medium_iterations,
        ComplexityClass.COMPLEX: settings.complex_iterations,
    }
    return budgets[ComplexityClass.classify(complexity)]
