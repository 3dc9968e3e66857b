"""
Clinical resource Pydantic schemas.

Minimal FHIR-shaped Patient and Condition models: only the fields the
statistics interceptors read are declared, anything else is kept as extra.
"""
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, List, Literal, Optional, Union


class FHIRModel(BaseModel):
    """Base model accepting FHIR camelCase keys as well as field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class Address(FHIRModel):
    """Postal address."""
    line: List[str] = Field(default_factory=list)
    city: str = ""
    state: str = ""
    postal_code: str = ""


class Coding(FHIRModel):
    """A code from a terminology system."""
    system: str = ""
    code: str = ""
    display: Optional[str] = None


class CodeableConcept(FHIRModel):
    """A concept expressed as one or more codings."""
    coding: List[Coding] = Field(default_factory=list)
    text: Optional[str] = None


class Reference(FHIRModel):
    """A reference such as ``Patient/123`` or ``Patient/123/_history/2``."""
    reference: Optional[str] = None
    type: Optional[str] = None

    def _segments(self) -> List[str]:
        if not self.reference:
            return []
        # Version suffix does not change which resource is referenced
        unversioned = self.reference.split("/_history/", 1)[0]
        return [s for s in unversioned.split("/") if s]

    @property
    def referenced_id(self) -> str:
        """Id part of the reference, empty when the reference is blank."""
        segments = self._segments()
        return segments[-1] if segments else ""

    @property
    def referenced_type(self) -> str:
        """Explicit type, or the type segment of a relative reference."""
        if self.type:
            return self.type
        segments = self._segments()
        return segments[-2] if len(segments) > 1 else ""


class Quantity(FHIRModel):
    value: Optional[float] = None
    unit: Optional[str] = None


class Period(FHIRModel):
    """Start and end as FHIR dateTime text, which may be partial (``2016``, ``2016-05``)."""
    start: Optional[str] = None
    end: Optional[str] = None


class Range(FHIRModel):
    low: Optional[Quantity] = None
    high: Optional[Quantity] = None


class Patient(FHIRModel):
    """Demographic subject record."""
    resource_type: Literal["Patient"] = "Patient"
    id: str = ""
    gender: str = ""
    address: List[Address] = Field(default_factory=list)


class Condition(FHIRModel):
    """Clinical observation record."""
    resource_type: Literal["Condition"] = "Condition"
    id: str = ""
    subject: Optional[Reference] = None
    code: Optional[CodeableConcept] = None

    # Any one of these marks the condition as resolved
    abatement_date_time: Optional[str] = None
    abatement_age: Optional[Quantity] = None
    abatement_boolean: Optional[bool] = None
    abatement_period: Optional[Period] = None
    abatement_range: Optional[Range] = None
    abatement_string: str = ""


Resource = Annotated[Union[Patient, Condition], Field(discriminator="resource_type")]

_resource_adapter = TypeAdapter(Resource)


def parse_resource(payload: Dict[str, Any]) -> Union[Patient, Condition]:
    """
    Parse a raw JSON payload into a Patient or Condition.

    Raises pydantic.ValidationError for unknown or missing resourceType.
    """
    return _resource_adapter.validate_python(payload)
