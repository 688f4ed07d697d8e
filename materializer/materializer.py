from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from forge_core.catalogue import (
    DEFAULT_CATALOGUE,
    GENERIC_COMPONENT,
    ComponentCatalogue,
    pascal_id,
)
from forge_core.schemas import AnalysisJob, Candidate, GeneratedArtifact, ParameterSet

from .builders import BuildContext, build_aggregator_spec, build_render_spec
from .renderer import render_component, render_manifest


FALLBACK_QUALITY = 0.1
AGGREGATOR_QUALITY = 1.0
MANIFEST_NAME = "index"

_FALLBACK_WIDTH = 300
_FALLBACK_HEIGHT = 200


def _positive_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return int(round(value))


def _raw_identity(raw: object, index: int) -> tuple[str, str]:
    element: Mapping[str, object] = raw if isinstance(raw, Mapping) else {}
    element_id = str(element.get("id") or f"element_{index}")
    element_type = str(element.get("type") or "unknown")
    return element_id, element_type


class ComponentMaterializer:
    """Turns optimized candidates into TSX component artifacts."""

    def __init__(
        self,
        catalogue: ComponentCatalogue = DEFAULT_CATALOGUE,
        component_extension: str = ".tsx",
        manifest_extension: str = ".ts",
    ) -> None:
        self.catalogue = catalogue
        self.component_extension = component_extension
        self.manifest_extension = manifest_extension

    def materialize(self, candidate: Candidate) -> GeneratedArtifact:
        ctx = BuildContext(
            name=candidate.name,
            component_type=candidate.component_type,
            element_type=candidate.type,
            element_id=candidate.id,
            params=candidate.parameter_set,
        )
        source = render_component(build_render_spec(ctx))
        return GeneratedArtifact(
            name=candidate.name,
            source_text=source,
            quality=candidate.quality,
            iterations=candidate.iterations_used,
            kind="element",
            element_id=candidate.id,
            component_type=candidate.component_type,
            extension=self.component_extension,
        )

    def fallback_name(self, raw: object, index: int) -> str:
        element_id, element_type = _raw_identity(raw, index)
        return self.catalogue.component_name(element_type, element_id)

    def fallback(self, raw: object, index: int, name: str | None = None) -> GeneratedArtifact:
        """Minimal generic component for an element that could not be optimized.

        Only the raw element's id, type and position are consulted, so this works
        for mappings that failed validation and for non-mapping input alike.
        """
        element_id, element_type = _raw_identity(raw, index)
        position = raw.get("position") if isinstance(raw, Mapping) else None
        position = position if isinstance(position, Mapping) else {}

        params = ParameterSet(
            width=_positive_int(position.get("width"), _FALLBACK_WIDTH),
            height=_positive_int(position.get("height"), _FALLBACK_HEIGHT),
            background_color="#f5f5f5",
            border="1px dashed #ccc",
            text_color="#666666",
        )
        name = name or self.catalogue.component_name(element_type, element_id)
        ctx = BuildContext(
            name=name,
            component_type=GENERIC_COMPONENT,
            element_type=element_type,
            element_id=element_id,
            params=params,
        )
        return GeneratedArtifact(
            name=name,
            source_text=render_component(build_render_spec(ctx)),
            quality=FALLBACK_QUALITY,
            iterations=0,
            kind="fallback",
            element_id=element_id,
            component_type=GENERIC_COMPONENT,
            extension=self.component_extension,
        )

    def aggregate(self, job: AnalysisJob, artifacts: Sequence[GeneratedArtifact]) -> GeneratedArtifact:
        name = f"Main{pascal_id(job.job_id)}"
        component_names = [artifact.name for artifact in artifacts]
        spec = build_aggregator_spec(name, job, component_names)
        return GeneratedArtifact(
            name=name,
            source_text=render_component(spec),
            quality=AGGREGATOR_QUALITY,
            iterations=0,
            kind="aggregator",
            component_type="MainComponent",
            extension=self.component_extension,
        )

    def manifest(
        self,
        artifacts: Sequence[GeneratedArtifact],
        aggregator: GeneratedArtifact | None = None,
    ) -> GeneratedArtifact:
        names = [artifact.name for artifact in artifacts]
        main_name = None
        if aggregator is not None:
            names.append(aggregator.name)
            main_name = aggregator.name
        return GeneratedArtifact(
            name=MANIFEST_NAME,
            source_text=render_manifest(names, main_name),
            quality=AGGREGATOR_QUALITY,
            iterations=0,
            kind="manifest",
            extension=self.manifest_extension,
        )
