"""Base evaluator interfaces and shared types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from forge_core.schemas import ElementDescriptor, ParameterSet


@dataclass(frozen=True)
class QualityBreakdown:
    """Per-factor scores of one parameter set, each on [0, 1]."""

    size: float
    color: float
    typography: float
    content: float
    total: float

    def to_dict(self) -> dict[str, float]:
        return {
            "size": self.size,
            "color": self.color,
            "typography": self.typography,
            "content": self.content,
            "total": self.total,
        }


class BaseEvaluator(ABC):
    """Base class for parameter-set scorers.

    Evaluations must be deterministic and must not raise for malformed input.
    """

    @abstractmethod
    def breakdown(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> QualityBreakdown:
        """Score every factor separately."""

    def evaluate(self, parameter_set: ParameterSet, descriptor: ElementDescriptor) -> float:
        return self.breakdown(parameter_set, descriptor).total
