"""
Evaluator Module

Quality scoring of candidate parameter sets.

This module provides:
- Abstract evaluator interface
- Size, color, typography and content factor scores
- The weighted, never-raising quality evaluator
"""

__version__ = "0.1.0"

from .base import BaseEvaluator, QualityBreakdown
from .quality import QualityEvaluator, QualityWeights

__all__ = [
    "BaseEvaluator",
    "QualityBreakdown",
    "QualityEvaluator",
    "QualityWeights",
]
