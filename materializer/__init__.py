"""
Materializer Module

Turns optimized candidates into TSX component source.

This module provides:
- Per-component-type builders producing structured render specs
- A single TSX renderer for components and the job manifest
- Fallback, aggregator and manifest artifacts
"""

__version__ = "0.1.0"

from .builders import BuildContext, build_aggregator_spec, build_render_spec, registered_types
from .materializer import (
    AGGREGATOR_QUALITY,
    FALLBACK_QUALITY,
    MANIFEST_NAME,
    ComponentMaterializer,
)
from .render_spec import Expr, Node, Prop, RenderSpec, Text
from .renderer import render_component, render_manifest

__all__ = [
    "AGGREGATOR_QUALITY",
    "BuildContext",
    "ComponentMaterializer",
    "Expr",
    "FALLBACK_QUALITY",
    "MANIFEST_NAME",
    "Node",
    "Prop",
    "RenderSpec",
    "Text",
    "build_aggregator_spec",
    "build_render_spec",
    "registered_types",
    "render_component",
    "render_manifest",
]
