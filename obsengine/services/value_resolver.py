"""Observation value resolution.

Resolves the ``value[x]`` of a FHIR Observation into one ObservationValue
variant. Precedence is fixed and expressed by ``VALUE_RESOLVERS``: the first
resolver whose FHIR field is present wins.

    valueQuantity -> valueCodeableConcept -> valueString -> valueBoolean -> valueInteger

Interpretation is resolved independently of the value type and is attached to
whichever variant wins.
"""

from typing import Any, Callable

from obsengine.config import settings
from obsengine.schemas.observations import (
    BooleanValue,
    CodeableValue,
    IntegerValue,
    ObservationValue,
    QuantityValue,
    ReferenceBound,
    ReferenceRange,
    StringValue,
)
from obsengine.utils.fhir_helpers import extract_first_coding, has_coding, string_or_none


def is_abnormal_interpretation(observation: dict[str, Any]) -> bool:
    """Check whether any interpretation coding carries the abnormal code.

    Absence of interpretation data means not abnormal.
    """
    interpretations = observation.get("interpretation")
    if not isinstance(interpretations, list):
        return False
    return any(
        has_coding(
            interp,
            settings.interpretation_system,
            settings.abnormal_interpretation_code,
        )
        for interp in interpretations
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _reference_bound(quantity: Any) -> ReferenceBound | None:
    if not isinstance(quantity, dict) or not _is_number(quantity.get("value")):
        return None
    return ReferenceBound(value=quantity["value"], unit=string_or_none(quantity.get("unit")))


def extract_normal_reference_range(observation: dict[str, Any]) -> ReferenceRange | None:
    """Pick the reference range classified as 'normal'.

    Ranges under any other meaning (critical, therapeutic, ...) are ignored,
    and a normal range without a single usable bound is treated as absent.

    Args:
        observation: FHIR Observation JSON

    Returns:
        ReferenceRange or None
    """
    ranges = observation.get("referenceRange")
    if not isinstance(ranges, list):
        return None

    normal_range = next(
        (
            rr
            for rr in ranges
            if isinstance(rr, dict)
            and has_coding(
                rr.get("type"),
                settings.reference_range_system,
                settings.normal_reference_range_code,
            )
        ),
        None,
    )
    if normal_range is None:
        return None

    low = _reference_bound(normal_range.get("low"))
    high = _reference_bound(normal_range.get("high"))
    if low is None and high is None:
        return None
    return ReferenceRange(low=low, high=high)


# =============================================================================
# Per-variant resolvers
# =============================================================================


def resolve_quantity(observation: dict[str, Any], is_abnormal: bool) -> QuantityValue | None:
    quantity = observation.get("valueQuantity")
    if not isinstance(quantity, dict):
        return None
    value = quantity.get("value")
    return QuantityValue(
        value=value if _is_number(value) or isinstance(value, str) else "",
        unit=string_or_none(quantity.get("unit")),
        reference_range=extract_normal_reference_range(observation),
        is_abnormal=is_abnormal,
    )


def resolve_codeable(observation: dict[str, Any], is_abnormal: bool) -> CodeableValue | None:
    concept = observation.get("valueCodeableConcept")
    if not isinstance(concept, dict):
        return None
    text = string_or_none(concept.get("text"))
    if text is None:
        text = string_or_none(extract_first_coding(concept).get("display")) or ""
    return CodeableValue(value=text, is_abnormal=is_abnormal)


def resolve_string(observation: dict[str, Any], is_abnormal: bool) -> StringValue | None:
    value = observation.get("valueString")
    if not isinstance(value, str):
        return None
    return StringValue(value=value, is_abnormal=is_abnormal)


def resolve_boolean(observation: dict[str, Any], is_abnormal: bool) -> BooleanValue | None:
    value = observation.get("valueBoolean")
    if not isinstance(value, bool):
        return None
    return BooleanValue(value=value, is_abnormal=is_abnormal)


def resolve_integer(observation: dict[str, Any], is_abnormal: bool) -> IntegerValue | None:
    value = observation.get("valueInteger")
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    return IntegerValue(value=value, is_abnormal=is_abnormal)


VALUE_RESOLVERS: tuple[Callable[[dict[str, Any], bool], ObservationValue | None], ...] = (
    resolve_quantity,
    resolve_codeable,
    resolve_string,
    resolve_boolean,
    resolve_integer,
)


def resolve_observation_value(observation: dict[str, Any]) -> ObservationValue | None:
    """Resolve an Observation's value[x] into a typed ObservationValue.

    Args:
        observation: FHIR Observation JSON

    Returns:
        The first variant present in precedence order, or None when the
        observation carries no supported value.
    """
    is_abnormal = is_abnormal_interpretation(observation)
    for resolver in VALUE_RESOLVERS:
        value = resolver(observation, is_abnormal)
        if value is not None:
            return value
    return None
