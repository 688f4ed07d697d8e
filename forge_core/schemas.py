from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


TBaseSchema = TypeVar("TBaseSchema", bound="BaseSchema")


class BaseSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json()

    def to_dict(self) -> dict[str, object]:
        return self.model_dump()

    @classmethod
    def from_json(cls: type[TBaseSchema], data: str) -> TBaseSchema:
        return cls.model_validate_json(data)

    @classmethod
    def from_dict(cls: type[TBaseSchema], data: Mapping[str, object]) -> TBaseSchema:
        return cls.model_validate(data)


class Position(BaseSchema):
    x: float = 0.0
    y: float = 0.0
    width: float | None = Field(default=None, ge=0)
    height: float | None = Field(default=None, ge=0)


class ElementProperties(BaseSchema):
    """Visual properties declared by the vision analysis for one element."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    title: str | None = None
    text: str | None = None
    value: str | int | float | None = None
    color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    font_size: str | None = None
    font_weight: str | None = None
    border_radius: str | None = None
    border: str | None = None
    padding: str | None = None
    margin: str | None = None
    data: Any = None
    config: dict[str, Any] | None = None
    columns: list[Any] | None = None

    @field_validator("font_size", mode="before")
    @classmethod
    def font_size_units(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}px"
        return value

    @field_validator("font_weight", mode="before")
    @classmethod
    def font_weight_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}"
        return value


class ElementDescriptor(BaseSchema):
    id: str
    type: str
    properties: ElementProperties = Field(default_factory=ElementProperties)
    position: Position | None = None

    @field_validator("id", "type", mode="before")
    @classmethod
    def numbers_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties(cls, value: object) -> object:
        return {} if value is None else value


class ParameterSet(BaseSchema):
    """Fully defaulted parameters a candidate component is rendered from."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    width: int = 300
    height: int = 200
    color: str = "#1976d2"
    background_color: str = "#ffffff"
    text_color: str = "#000000"
    font_size: str = "14px"
    font_weight: str = "400"
    border_radius: str = "4px"
    border: str = "none"
    padding: str = "16px"
    margin: str = "8px"
    title: str = ""
    text: str = ""
    value: str | int | float = ""
    data: Any = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)
    columns: list[Any] = Field(default_factory=list)


class Candidate(BaseSchema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    type: str
    component_type: str
    name: str
    parameter_set: ParameterSet
    quality: float = Field(ge=0.0, le=1.0)
    iterations_used: int = Field(default=0, ge=0)


ArtifactKind = Literal["element", "fallback", "aggregator", "manifest"]


class GeneratedArtifact(BaseSchema):
    name: str
    source_text: str
    quality: float = Field(ge=0.0, le=1.0)
    iterations: int = Field(default=0, ge=0)
    kind: ArtifactKind = "element"
    element_id: str | None = None
    component_type: str | None = None
    extension: str = ".tsx"

    @property
    def filename(self) -> str:
        return f"{self.name}{self.extension}"


class ColorSummary(BaseSchema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    primary: str | None = None
    secondary: str | None = None
    background: str | None = None
    text: str | None = None
    accent: str | None = None


class TypographySummary(BaseSchema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    primary_font: str | None = None
    primary_size: str | None = None
    line_height: str | None = None

    @field_validator("primary_size", "line_height", mode="before")
    @classmethod
    def numbers_as_text(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{value:g}"
        return value


class LayoutSummary(BaseSchema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    type: str | None = None
    direction: str | None = None
    gap: str | None = None
    padding: str | None = None
    justify_content: str | None = None
    align_items: str | None = None


class AnalysisJob(BaseSchema):
    """One unit of work: raw element descriptors plus the page-level summary.

    Elements are kept as raw mappings so each one is validated on its own and
    a malformed element cannot reject the whole job.
    """

    job_id: str = Field(validation_alias=AliasChoices("job_id", "jobId", "imageId", "image_id"))
    elements: list[Any] = Field(default_factory=list)
    colors: ColorSummary = Field(default_factory=ColorSummary)
    typography: TypographySummary = Field(default_factory=TypographySummary)
    layout: LayoutSummary = Field(default_factory=LayoutSummary)
    metadata: dict[str, Any] = Field(default_factory=dict)


class OptimizerSettings(BaseSchema):
    enabled: bool = True
    quality_threshold: float = Field(default=0.95, gt=0.0, le=1.0)
    stagnation_limit: int = Field(default=3, ge=1)
    base_quality: float = Field(default=0.3, ge=0.0, le=1.0)
    base_intensity: float = Field(default=0.05, gt=0.0)
    progress_intensity: float = Field(default=0.15, ge=0.0)
    stagnation_intensity: float = Field(default=0.05, ge=0.0)
    max_intensity: float = Field(default=0.3, gt=0.0, le=1.0)
    variation_factors: tuple[float, ...] = (0.8, 0.9, 0.95, 1.05, 1.1, 1.2)
    color_shift: float = Field(default=0.3, ge=0.0)
    simple_iterations: int = Field(default=5, ge=1)
    medium_iterations: int = Field(default=8, ge=1)
    complex_iterations: int = Field(default=12, ge=1)
