from forge_core.catalogue import DEFAULT_CATALOGUE, ComponentCatalogue
from forge_core.complexity import (
    ComplexityClass,
    analyze_complexity,
    max_iterations,
    select_key_params,
)
from forge_core.normalizer import base_candidate, normalize
from forge_core.schemas import ElementDescriptor, OptimizerSettings


def _descriptor(**kwargs: object) -> ElementDescriptor:
    data: dict[str, object] = {"id": "e1", "type": "button"}
    data.update(kwargs)
    return ElementDescriptor.from_dict(data)


def test_normalize_fills_defaults() -> None:
    params = normalize(_descriptor())

    assert params.width == 300
    assert params.height == 200
    assert params.color == "#1976d2"
    assert params.background_color == "#ffffff"
    assert params.text_color == "#000000"
    assert params.font_size == "14px"
    assert params.font_weight == "400"
    assert params.border == "none"
    assert params.title == ""
    assert params.data == {}
    assert params.columns == []


def test_normalize_treats_empty_strings_and_zero_size_as_missing() -> None:
    params = normalize(
        _descriptor(
            properties={"color": "", "text": "Save"},
            position={"x": 0, "y": 0, "width": 0, "height": 40.6},
        )
    )

    assert params.color == "#1976d2"
    assert params.text == "Save"
    assert params.width == 300
    assert params.height == 41


def test_base_candidate_uses_catalogue_and_base_quality() -> None:
    candidate = base_candidate(_descriptor(), DEFAULT_CATALOGUE, OptimizerSettings(base_quality=0.25))

    assert candidate.component_type == "ButtonComponent"
    assert candidate.name == "ButtonE1"
    assert candidate.quality == 0.25
    assert candidate.iterations_used == 0


def test_unknown_type_maps_to_generic_component() -> None:
    candidate = base_candidate(ElementDescriptor(id="x-1", type="widget"))

    assert candidate.component_type == "GenericComponent"
    assert candidate.name == "ComponentX1"


def test_catalogue_overrides_do_not_touch_default() -> None:
    custom = DEFAULT_CATALOGUE.with_overrides(
        component_types={"widget": "CardComponent"},
        key_params={"widget": ["padding"]},
        display_names={"widget": "Widget"},
    )

    assert custom.component_type("widget") == "CardComponent"
    assert custom.params_for("widget") == ("padding",)
    assert custom.component_name("widget", "w1") == "WidgetW1"
    assert DEFAULT_CATALOGUE.component_type("widget") == "GenericComponent"
    assert isinstance(custom, ComponentCatalogue)


def test_complexity_of_bare_descriptor_is_zero() -> None:
    assert analyze_complexity(_descriptor()) == 0.0


def test_complexity_counts_properties_area_and_data() -> None:
    descriptor = _descriptor(
        type="table",
        properties={"columns": ["a"], "data": [{"a": 1}]},
        position={"x": 0, "y": 0, "width": 1, "height": 1},
    )

    # 2 properties, ln(2) area term, +0.3 data, +0.2 columns
    assert analyze_complexity(descriptor) > 0.7
    assert ComplexityClass.classify(analyze_complexity(descriptor)) is ComplexityClass.COMPLEX


def test_complexity_is_capped() -> None:
    descriptor = _descriptor(
        properties={
            "title": "a", "text": "b", "color": "#000000", "backgroundColor": "#ffffff",
            "textColor": "#111111", "fontSize": 12, "fontWeight": 400, "padding": "4px",
            "margin": "4px", "border": "none", "data": [1], "columns": ["x"],
        },
        position={"x": 0, "y": 0, "width": 1000, "height": 1000},
    )

    assert analyze_complexity(descriptor) == 1.0


def test_key_param_selection_by_complexity() -> None:
    descriptor = _descriptor()

    assert select_key_params(descriptor, DEFAULT_CATALOGUE, 0.1) == ("width", "height")
    assert select_key_params(descriptor, DEFAULT_CATALOGUE, 0.5) == ("width", "height", "color")
    assert select_key_params(descriptor, DEFAULT_CATALOGUE, 0.9) == (
        "width",
        "height",
        "color",
        "background_color",
        "border_radius",
    )


def test_unknown_type_key_params_default_to_size() -> None:
    descriptor = ElementDescriptor(id="w", type="widget")

    assert select_key_params(descriptor, DEFAULT_CATALOGUE, 0.9) == ("width", "height")


def test_iteration_budget_by_complexity_class() -> None:
    settings = OptimizerSettings()

    assert max_iterations(0.29, settings) == 5
    assert max_iterations(0.3, settings) == 8
    assert max_iterations(0.69, settings) == 8
    assert max_iterations(0.7, settings) == 12
