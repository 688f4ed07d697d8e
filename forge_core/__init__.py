"""
Forge Core Module

Parameter search for detected UI elements.

This module provides:
- Descriptor, parameter set, candidate and artifact schemas
- The immutable component catalogue
- Descriptor normalization and complexity scoring
- Single-parameter variant generation
- The bounded, stagnation-aware optimization loop
"""

__version__ = "0.1.0"

from .catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from .loop import LoopStatus, OptimizationLoop, OptimizationResult
from .normalizer import base_candidate, normalize
from .schemas import (
    AnalysisJob,
    Candidate,
    ElementDescriptor,
    GeneratedArtifact,
    OptimizerSettings,
    ParameterSet,
)
from .variants import VariantGenerator

__all__ = [
    "AnalysisJob",
    "Candidate",
    "ComponentCatalogue",
    "DEFAULT_CATALOGUE",
    "ElementDescriptor",
    "GeneratedArtifact",
    "LoopStatus",
    "OptimizationLoop",
    "OptimizationResult",
    "OptimizerSettings",
    "ParameterSet",
    "VariantGenerator",
    "base_candidate",
    "normalize",
]
