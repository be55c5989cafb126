"""Autofill detection and field-mapping schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldContext(_CamelModel):
    """Where a field sits on the page: its section heading and neighbouring labels."""

    section: str | None = None
    nearby_fields: list[str] = Field(default_factory=list)


class DetectedField(_CamelModel):
    """One candidate input found during a page scan."""

    id: str
    dom_id: str | None = None
    label: str | None = None
    name: str | None = None
    placeholder: str | None = None
    aria_label: str | None = None
    tag: str = "input"
    type: str = "input"
    selector: str
    position: int
    context: FieldContext | None = None
    suggested_profile_field: str | None = None
    hint: str | None = None
    hint_confidence: float | None = None


class SaveMappingRequest(_CamelModel):
    """Save-mapping payload; required fields are checked by the service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    domain: str | None = None
    selector: str | None = None
    profile_field: str | None = None
    dom_id: str | None = None
    dom_name: str | None = None


class FieldMappingRead(_CamelModel):
    """Serialized field mapping."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: str
    domain: str
    selector: str
    profile_field: str
    dom_id: str | None
    dom_name: str | None
    created_at: datetime
    updated_at: datetime


class SaveMappingResult(BaseModel):
    """Save-mapping response body."""

    success: bool = True
    mapping: FieldMappingRead
