"""Immutable component catalogue shared by the optimizer and the materializer."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

GENERIC_COMPONENT = "GenericComponent"
GENERIC_DISPLAY_NAME = "Component"

_DEFAULT_COMPONENT_TYPES: dict[str, str] = {
    "chart": "ChartComponent",
    "card": "CardComponent",
    "table": "TableComponent",
    "button": "ButtonComponent",
    "header": "HeaderComponent",
    "navigation": "NavigationComponent",
    "sidebar": "SidebarComponent",
    "form": "FormComponent",
    "input": "InputComponent",
    "text": "TextComponent",
    "image": "ImageComponent",
    "container": "ContainerComponent",
}

_DEFAULT_KEY_PARAMS: dict[str, tuple[str, ...]] = {
    "chart": ("width", "height", "color", "data", "config"),
    "card": ("width", "height", "padding", "border_radius", "background_color"),
    "table": ("width", "height", "columns", "data", "styling"),
    "button": ("width", "height", "color", "background_color", "border_radius"),
    "text": ("font_size", "font_weight", "color", "line_height"),
    "image": ("width", "height", "object_fit", "border_radius"),
}

_DEFAULT_DISPLAY_NAMES: dict[str, str] = {
    element_type: component_type.removesuffix("Component")
    for element_type, component_type in _DEFAULT_COMPONENT_TYPES.items()
}

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def pascal_id(identifier: str) -> str:
    """Strip non-alphanumerics and upper-case the first character."""
    cleaned = _NON_ALNUM.sub("", identifier)
    return f"{cleaned[:1].upper()}{cleaned[1:]}"


def _frozen(mapping: Mapping[str, object]) -> MappingProxyType:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ComponentCatalogue:
    """Element type to component type, key parameter and display name tables.

    Instances are read-only; use ``with_overrides`` to derive a variant for a
    job or a test instead of mutating shared state.
    """

    component_types: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_DEFAULT_COMPONENT_TYPES)
    )
    key_params: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _frozen(_DEFAULT_KEY_PARAMS)
    )
    display_names: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_DEFAULT_DISPLAY_NAMES)
    )
    default_key_params: tuple[str, ...] = ("width", "height")

    def __post_init__(self) -> None:
        object.__setattr__(self, "component_types", _frozen(self.component_types))
        object.__setattr__(
            self,
            "key_params",
            _frozen({key: tuple(value) for key, value in self.key_params.items()}),
        )
        object.__setattr__(self, "display_names", _frozen(self.display_names))
        object.__setattr__(self, "default_key_params", tuple(self.default_key_params))

    def component_type(self, element_type: str) -> str:
        return self.component_types.get(element_type, GENERIC_COMPONENT)

    def params_for(self, element_type: str) -> tuple[str, ...]:
        return self.key_params.get(element_type, self.default_key_params)

    def display_name(self, element_type: str) -> str:
        return self.display_names.get(element_type, GENERIC_DISPLAY_NAME)

    def component_name(self, element_type: str, element_id: str) -> str:
        """Deterministic artifact name, e.g. ``button``/``e1`` -> ``ButtonE1``."""
        return f"{self.display_name(element_type)}{pascal_id(element_id)}"

    def with_overrides(
        self,
        component_types: Mapping[str, str] | None = None,
        key_params: Mapping[str, Iterable[str]] | None = None,
        display_names: Mapping[str, str] | None = None,
    ) -> "ComponentCatalogue":
        merged_types = {**self.component_types, **(component_types or {})}
        merged_params = {
            **self.key_params,
            **{key: tuple(value) for key, value in (key_params or {}).items()},
        }
        merged_names = {**self.display_names, **(display_names or {})}
        return ComponentCatalogue(
            component_types=merged_types,
            key_params=merged_params,
            display_names=merged_names,
            default_key_params=self.default_key_params,
        )


DEFAULT_CATALOGUE = ComponentCatalogue()
