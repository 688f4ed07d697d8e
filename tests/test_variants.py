import pytest

from forge_core.normalizer import base_candidate
from forge_core.schemas import ElementDescriptor, OptimizerSettings
from forge_core.variants import VariantGenerator


def _candidate(**properties: object):
    descriptor = ElementDescriptor.from_dict(
        {
            "id": "e1",
            "type": "button",
            "properties": properties,
            "position": {"x": 0, "y": 0, "width": 200, "height": 50},
        }
    )
    return base_candidate(descriptor)


def test_dimension_variations() -> None:
    generator = VariantGenerator()

    assert generator.variations("width", 200, 0.3) == [188, 194, 197, 203, 206, 212]


def test_font_size_keeps_unit() -> None:
    generator = VariantGenerator()

    assert generator.variations("font_size", "16px", 0.3) == ["15px", "16px", "16px", "16px", "16px", "17px"]
    assert all(value.endswith("rem") for value in generator.variations("font_size", "20rem", 0.1))


def test_color_variations_are_original_lighter_darker() -> None:
    generator = VariantGenerator()

    original, lighter, darker = generator.variations("color", "#808080", 0.1)

    assert original == "#808080"
    assert lighter == "#848484"
    assert darker == "#7c7c7c"


def test_non_hex_color_yields_original_only() -> None:
    assert VariantGenerator().variations("background_color", "red", 0.1) == ["red"]


def test_other_parameters_are_unchanged_singletons() -> None:
    assert VariantGenerator().variations("border_radius", "4px", 0.1) == ["4px"]


def test_generate_changes_one_parameter_at_a_time() -> None:
    candidate = _candidate(color="#1976d2")

    variants = VariantGenerator().generate(candidate, ("width", "color"), 0.1)

    assert len(variants) == 9
    source = candidate.parameter_set.model_dump()
    for variant in variants:
        changed = {
            key
            for key, value in variant.parameter_set.model_dump().items()
            if source[key] != value
        }
        assert changed <= {"width"} or changed <= {"color"}
        assert variant.id == candidate.id
        assert variant is not candidate


def test_unknown_parameter_yields_copy_of_candidate() -> None:
    candidate = _candidate()

    variants = VariantGenerator().generate(candidate, ("styling",), 0.1)

    assert len(variants) == 1
    assert variants[0] == candidate


def test_source_candidate_is_not_mutated() -> None:
    candidate = _candidate()
    before = candidate.to_dict()

    _ = VariantGenerator().generate(candidate, ("width", "height"), 0.2)

    assert candidate.to_dict() == before


@pytest.mark.parametrize("intensity", [0.0, -0.1, 0.31])
def test_intensity_out_of_range(intensity: float) -> None:
    with pytest.raises(ValueError):
        _ = VariantGenerator().generate(_candidate(), ("width",), intensity)


def test_max_intensity_follows_settings() -> None:
    generator = VariantGenerator(OptimizerSettings(max_intensity=0.5))

    assert len(generator.variations("width", 100, 0.5)) == 6
