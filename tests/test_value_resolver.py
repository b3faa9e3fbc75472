"""Tests for observation value resolution, reference ranges and interpretation."""

import pytest

from obsengine.config import settings
from obsengine.schemas.observations import (
    BooleanValue,
    CodeableValue,
    IntegerValue,
    QuantityValue,
    ReferenceBound,
    ReferenceRange,
    StringValue,
)
from obsengine.services.value_resolver import (
    extract_normal_reference_range,
    is_abnormal_interpretation,
    resolve_observation_value,
)
from tests.conftest import (
    interpretation,
    make_observation,
    quantity,
    reference_range,
)


class TestValuePrecedence:
    """The first present value[x] wins: quantity, codeable, string, boolean, integer."""

    def test_quantity(self):
        obs = make_observation("o", valueQuantity=quantity(120, "mmHg"))
        assert resolve_observation_value(obs) == QuantityValue(value=120, unit="mmHg")

    def test_quantity_wins_over_everything(self):
        obs = make_observation(
            "o",
            valueQuantity=quantity(5),
            valueCodeableConcept={"text": "Yes"},
            valueString="text",
            valueBoolean=True,
            valueInteger=3,
        )
        assert resolve_observation_value(obs).type == "quantity"

    def test_codeable_wins_over_string(self):
        obs = make_observation("o", valueCodeableConcept={"text": "Yes"}, valueString="text")
        assert resolve_observation_value(obs) == CodeableValue(value="Yes")

    def test_string_wins_over_boolean(self):
        obs = make_observation("o", valueString="text", valueBoolean=False)
        assert resolve_observation_value(obs) == StringValue(value="text")

    def test_boolean_wins_over_integer(self):
        obs = make_observation("o", valueBoolean=False, valueInteger=3)
        value = resolve_observation_value(obs)
        assert value == BooleanValue(value=False)
        assert value.value is False

    def test_integer(self):
        obs = make_observation("o", valueInteger=3)
        assert resolve_observation_value(obs) == IntegerValue(value=3)

    def test_no_value(self):
        assert resolve_observation_value(make_observation("o")) is None

    def test_empty_string_value_is_present(self):
        """An empty valueString still counts as a string value."""
        assert resolve_observation_value(make_observation("o", valueString="")) == StringValue(
            value=""
        )


class TestVariantDetails:
    """Per-variant degrade-to-default behavior."""

    def test_quantity_without_value_degrades_to_empty_string(self):
        obs = make_observation("o", valueQuantity={"unit": "mg"})
        assert resolve_observation_value(obs) == QuantityValue(value="", unit="mg")

    def test_quantity_keeps_float(self):
        obs = make_observation("o", valueQuantity=quantity(98.6, "F"))
        assert resolve_observation_value(obs).value == 98.6

    def test_codeable_falls_back_to_first_coding_display(self):
        obs = make_observation(
            "o",
            valueCodeableConcept={"coding": [{"display": "Positive"}, {"display": "Other"}]},
        )
        assert resolve_observation_value(obs) == CodeableValue(value="Positive")

    def test_codeable_without_text_or_display(self):
        obs = make_observation("o", valueCodeableConcept={"coding": [{"code": "10828004"}]})
        assert resolve_observation_value(obs) == CodeableValue(value="")


class TestNormalReferenceRange:
    """Only the range classified 'normal' is attached."""

    def test_selects_normal_among_other_meanings(self):
        obs = make_observation(
            "o",
            valueQuantity=quantity(95, "mg/dL"),
            referenceRange=[
                reference_range("critical", low=quantity(40), high=quantity(400)),
                reference_range("normal", low=quantity(70, "mg/dL"), high=quantity(100, "mg/dL")),
                reference_range("therapeutic", low=quantity(80), high=quantity(130)),
            ],
        )
        value = resolve_observation_value(obs)
        assert value.reference_range == ReferenceRange(
            low=ReferenceBound(value=70, unit="mg/dL"),
            high=ReferenceBound(value=100, unit="mg/dL"),
        )

    def test_ignores_ranges_without_normal_classification(self):
        obs = make_observation(
            "o",
            valueQuantity=quantity(95, "mg/dL"),
            referenceRange=[
                {"low": quantity(70), "high": quantity(100)},
                reference_range("critical", low=quantity(40)),
            ],
        )
        assert resolve_observation_value(obs).reference_range is None

    def test_requires_reference_range_system(self):
        obs = make_observation(
            "o",
            referenceRange=[
                {
                    "type": {"coding": [{"system": "http://example.org/local", "code": "normal"}]},
                    "low": quantity(70),
                }
            ],
        )
        assert extract_normal_reference_range(obs) is None

    def test_normal_range_without_bounds_is_absent(self):
        obs = make_observation("o", referenceRange=[reference_range("normal")])
        assert extract_normal_reference_range(obs) is None

    def test_low_only(self):
        obs = make_observation("o", referenceRange=[reference_range("normal", low=quantity(12))])
        assert extract_normal_reference_range(obs) == ReferenceRange(
            low=ReferenceBound(value=12)
        )

    def test_high_only(self):
        obs = make_observation(
            "o", referenceRange=[reference_range("normal", high=quantity(200, "mg/dL"))]
        )
        assert extract_normal_reference_range(obs) == ReferenceRange(
            high=ReferenceBound(value=200, unit="mg/dL")
        )

    def test_not_attached_to_non_quantity_values(self):
        obs = make_observation(
            "o",
            valueString="trace",
            referenceRange=[reference_range("normal", low=quantity(1))],
        )
        value = resolve_observation_value(obs)
        assert value == StringValue(value="trace")
        assert not hasattr(value, "reference_range")

    @pytest.mark.parametrize("ranges", [None, [], "bad", ["bad"]])
    def test_malformed_reference_ranges(self, ranges):
        obs = make_observation("o", valueQuantity=quantity(1), referenceRange=ranges)
        assert resolve_observation_value(obs).reference_range is None


class TestAbnormalInterpretation:
    """isAbnormal is true only for the abnormal code under the interpretation system."""

    def test_no_interpretation_is_not_abnormal(self):
        obs = make_observation("o", valueQuantity=quantity(95, "mg/dL"))
        assert resolve_observation_value(obs).is_abnormal is False

    def test_abnormal_code_sets_flag(self):
        obs = make_observation(
            "o", valueQuantity=quantity(95, "mg/dL"), interpretation=interpretation("A")
        )
        assert resolve_observation_value(obs).is_abnormal is True

    def test_flag_applies_to_every_variant(self):
        obs = make_observation("o", valueString="cloudy", interpretation=interpretation("A"))
        assert resolve_observation_value(obs).is_abnormal is True

    @pytest.mark.parametrize("code", ["N", "H", "L", "AA", "a"])
    def test_other_codes_are_not_abnormal(self, code):
        obs = make_observation("o", interpretation=interpretation(code))
        assert is_abnormal_interpretation(obs) is False

    def test_requires_interpretation_system(self):
        obs = make_observation("o", interpretation=interpretation("A", system="http://local"))
        assert is_abnormal_interpretation(obs) is False

    def test_any_interpretation_entry_matches(self):
        obs = make_observation(
            "o",
            interpretation=[
                {"text": "see note"},
                {"coding": [{"system": settings.interpretation_system, "code": "A"}]},
            ],
        )
        assert is_abnormal_interpretation(obs) is True

    def test_configured_abnormal_code(self, monkeypatch):
        monkeypatch.setattr(settings, "abnormal_interpretation_code", "HH")
        obs = make_observation("o", interpretation=interpretation("HH"))
        assert is_abnormal_interpretation(obs) is True
