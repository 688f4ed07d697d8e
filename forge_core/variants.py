from __future__ import annotations

import re
from collections.abc import Sequence

from .colors import scale_color
from .schemas import Candidate, OptimizerSettings, ParameterSet

DEFAULT_FONT_SIZE = 14

_LEADING_INT = re.compile(r"^\s*(\d+)")
_UNIT_SUFFIX = re.compile(r"([a-zA-Z%]+)\s*$")

_DIMENSIONS = frozenset({"width", "height"})
_COLORS = frozenset({"color", "background_color"})


class VariantGenerator:
    """Produces single-parameter perturbations of a candidate.

    Each (parameter, variation) pair yields one new Candidate whose other
    parameters are copied from the source. Parameters without a variation rule
    yield their current value, so a parameter never contributes zero variants.
    """

    def __init__(self, settings: OptimizerSettings | None = None) -> None:
        self.settings: OptimizerSettings = settings or OptimizerSettings()

    def generate(
        self,
        candidate: Candidate,
        key_params: Sequence[str],
        intensity: float,
    ) -> list[Candidate]:
        self._check_intensity(intensity)
        params = candidate.parameter_set
        variants: list[Candidate] = []
        for name in key_params:
            if name not in ParameterSet.model_fields:
                variants.append(candidate.model_copy())
                continue
            current = getattr(params, name)
            for value in self.variations(name, current, intensity):
                updated = params.model_copy(update={name: value})
                variants.append(candidate.model_copy(update={"parameter_set": updated}))
        return variants

    def variations(self, name: str, value: object, intensity: float) -> list[object]:
        self._check_intensity(intensity)
        if name in _DIMENSIONS and isinstance(value, (int, float)):
            return [int(round(value * factor)) for factor in self.factors(intensity)]
        if name == "font_size":
            return self._font_size_variations(value, intensity)
        if name in _COLORS and isinstance(value, str):
            return self._color_variations(value, intensity)
        return [value]

    def factors(self, intensity: float) -> list[float]:
        return [1 + (factor - 1) * intensity for factor in self.settings.variation_factors]

    def _font_size_variations(self, value: object, intensity: float) -> list[object]:
        text = str(value)
        match = _LEADING_INT.match(text)
        size = int(match.group(1)) if match else 0
        if size == 0:
            size = DEFAULT_FONT_SIZE
        unit_match = _UNIT_SUFFIX.search(text)
        unit = unit_match.group(1) if unit_match else "px"
        return [f"{int(round(size * factor))}{unit}" for factor in self.factors(intensity)]

    def _color_variations(self, value: str, intensity: float) -> list[object]:
        shift = intensity * self.settings.color_shift
        lighter = scale_color(value, 1 + shift)
        darker = scale_color(value, 1 - shift)
        if lighter is None or darker is None:
            return [value]
        return [value, lighter, darker]

    def _check_intensity(self, intensity: float) -> None:
        if not 0 < intensity <= self.settings.max_intensity:
            raise ValueError(
                f"intensity must be in (0, {self.settings.max_intensity}], got {intensity}"
            )
