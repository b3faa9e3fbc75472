"""Extracted observation schemas.

These schemas define the display-ready structure the engine produces from a
bundle of FHIR Observation and Encounter resources: resolved typed values,
reconstructed parent/child groups, and per-encounter buckets.

Design principles:
- Immutable: every model is frozen; outputs are rebuilt per invocation
- Tagged union: ObservationValue is discriminated on ``type`` so the value
  precedence stays auditable and consumers can branch on the variant
- FHIR-agnostic output: no raw FHIR structures leak past extraction
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class EncounterDetails(_FrozenModel):
    """Display metadata of the encounter an observation was recorded in."""

    id: str = Field(description="Encounter FHIR id")
    type: str = Field(description="Encounter type display text")
    date: str | None = Field(default=None, description="Encounter period start (FHIR dateTime)")
    provider: str | None = Field(default=None, description="First participant display name")
    location: str | None = Field(default=None, description="First location display name")


class ReferenceBound(_FrozenModel):
    """One end of a reference range."""

    value: int | float
    unit: str | None = None


class ReferenceRange(_FrozenModel):
    """The 'normal' reference range declared on a quantity observation."""

    low: ReferenceBound | None = None
    high: ReferenceBound | None = None


class _ValueBase(_FrozenModel):
    is_abnormal: bool = Field(
        default=False,
        description="True only when interpretation carries the abnormal code",
    )


class QuantityValue(_ValueBase):
    """valueQuantity. ``value`` is "" when the quantity carries no number."""

    type: Literal["quantity"] = "quantity"
    value: int | float | str
    unit: str | None = None
    reference_range: ReferenceRange | None = None


class CodeableValue(_ValueBase):
    """valueCodeableConcept, resolved to its text or first coding display."""

    type: Literal["codeable"] = "codeable"
    value: str


class StringValue(_ValueBase):
    type: Literal["string"] = "string"
    value: str


class BooleanValue(_ValueBase):
    type: Literal["boolean"] = "boolean"
    value: bool


class IntegerValue(_ValueBase):
    type: Literal["integer"] = "integer"
    value: int


ObservationValue = Annotated[
    Union[QuantityValue, CodeableValue, StringValue, BooleanValue, IntegerValue],
    Field(discriminator="type"),
]


class ExtractedObservation(_FrozenModel):
    """A fully resolved observation.

    ``members`` holds the resolved hasMember children while the observation is
    being partitioned; GroupedObservation promotes them to ``children``.
    """

    id: str
    display: str = ""
    observation_value: ObservationValue | None = None
    effective_date_time: str | None = None
    issued: str | None = None
    encounter: EncounterDetails | None = None
    members: tuple["ExtractedObservation", ...] | None = None

    @property
    def unit(self) -> str | None:
        """Unit of a quantity value, None for every other variant."""
        value = self.observation_value
        if isinstance(value, QuantityValue):
            return value.unit
        return None


class GroupedObservation(ExtractedObservation):
    """A panel observation with at least one resolved child."""

    children: tuple[ExtractedObservation, ...] = Field(min_length=1)


class ExtractedObservationsResult(_FrozenModel):
    """Top-level observations split into standalone leaves and groups."""

    observations: tuple[ExtractedObservation, ...] = ()
    grouped_observations: tuple[GroupedObservation, ...] = ()


class ObservationsByEncounter(_FrozenModel):
    """All top-level observations recorded in one encounter."""

    encounter_id: str
    encounter_details: EncounterDetails | None = None
    observations: tuple[ExtractedObservation, ...] = ()
    grouped_observations: tuple[GroupedObservation, ...] = ()

    @field_validator("encounter_id")
    @classmethod
    def _encounter_id_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("encounter_id must not be empty")
        return v


class ObservationRowCell(_FrozenModel):
    """One display row handed to the rendering layer."""

    index: int
    header: str
    value: str
    provider: str | None = None
    info: str | None = None
    is_abnormal: bool = False
