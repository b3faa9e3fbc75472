"""Pydantic schemas."""

from obsengine.schemas.observations import (
    BooleanValue,
    CodeableValue,
    EncounterDetails,
    ExtractedObservation,
    ExtractedObservationsResult,
    GroupedObservation,
    IntegerValue,
    ObservationRowCell,
    ObservationsByEncounter,
    ObservationValue,
    QuantityValue,
    ReferenceBound,
    ReferenceRange,
    StringValue,
)

__all__ = [
    "EncounterDetails",
    "ExtractedObservation",
    "ExtractedObservationsResult",
    "GroupedObservation",
    "ObservationRowCell",
    "ObservationsByEncounter",
    "ReferenceBound",
    "ReferenceRange",
    # Value variants
    "BooleanValue",
    "CodeableValue",
    "IntegerValue",
    "ObservationValue",
    "QuantityValue",
    "StringValue",
]
