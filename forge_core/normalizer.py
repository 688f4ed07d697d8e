from __future__ import annotations

from typing import Any

from .catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from .schemas import Candidate, ElementDescriptor, OptimizerSettings, ParameterSet

DEFAULT_WIDTH = 300
DEFAULT_HEIGHT = 200

_STYLE_FIELDS = (
    "color",
    "background_color",
    "text_color",
    "font_size",
    "font_weight",
    "border_radius",
    "border",
    "padding",
    "margin",
    "title",
    "text",
    "value",
)
_STRUCTURED_FIELDS = ("data", "config", "columns")


def is_missing(value: object) -> bool:
    return value is None or value == ""


def _dimension(value: float | None, default: int) -> int:
    if value is None or value == 0:
        return default
    return int(round(value))


def normalize(descriptor: ElementDescriptor) -> ParameterSet:
    """Fill every missing visual property with its default."""
    properties = descriptor.properties
    position = descriptor.position
    values: dict[str, Any] = {
        "width": _dimension(position.width if position else None, DEFAULT_WIDTH),
        "height": _dimension(position.height if position else None, DEFAULT_HEIGHT),
    }
    for name in _STYLE_FIELDS:
        value = getattr(properties, name)
        if not is_missing(value):
            values[name] = value
    for name in _STRUCTURED_FIELDS:
        value = getattr(properties, name)
        if value:
            values[name] = value
    return ParameterSet(**values)


def base_candidate(
    descriptor: ElementDescriptor,
    catalogue: ComponentCatalogue = DEFAULT_CATALOGUE,
    settings: OptimizerSettings | None = None,
) -> Candidate:
    """Map a descriptor onto its component type with the starting quality."""
    settings = settings or OptimizerSettings()
    return Candidate(
        id=descriptor.id,
        type=descriptor.type,
        component_type=catalogue.component_type(descriptor.type),
        name=catalogue.component_name(descriptor.type, descriptor.id),
        parameter_set=normalize(descriptor),
        quality=settings.base_quality,
        iterations_used=0,
    )
