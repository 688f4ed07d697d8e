"""Job configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field, field_validator

from forge_core.catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from forge_core.schemas import BaseSchema, OptimizerSettings


class CatalogueOverrides(BaseSchema):
    """Additions to, or replacements of, the default component tables."""

    component_types: dict[str, str] = Field(default_factory=dict)
    key_params: dict[str, list[str]] = Field(default_factory=dict)
    display_names: dict[str, str] = Field(default_factory=dict)


class JobConfig(BaseSchema):
    """Configuration for one or more component generation jobs."""

    output_dir: str = "generated"
    component_extension: str = ".tsx"
    manifest_extension: str = ".ts"

    write_metrics: bool = True
    write_report: bool = True
    store_enabled: bool = False
    store_path: str | None = None  # defaults to <output_dir>/jobs.db
    show_progress: bool = True

    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)
    catalogue: CatalogueOverrides = Field(default_factory=CatalogueOverrides)

    @field_validator("component_extension", "manifest_extension")
    @classmethod
    def dotted(cls, value: str) -> str:
        if not value:
            raise ValueError("extension must not be empty")
        return value if value.startswith(".") else f".{value}"

    def build_catalogue(self) -> ComponentCatalogue:
        overrides = self.catalogue
        if not (overrides.component_types or overrides.key_params or overrides.display_names):
            return DEFAULT_CATALOGUE
        return DEFAULT_CATALOGUE.with_overrides(
            component_types=overrides.component_types,
            key_params=overrides.key_params,
            display_names=overrides.display_names,
        )

    @property
    def resolved_store_path(self) -> Path:
        if self.store_path:
            return Path(self.store_path)
        return Path(self.output_dir) / "jobs.db"


def load_config(yaml_path: str | Path) -> JobConfig:
    """Load job configuration from YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        JobConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or fails validation
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data or not isinstance(data, dict):
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")

    try:
        return JobConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: JobConfig, yaml_path: str | Path) -> None:
    """Save job configuration to YAML file for reproducibility."""
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
