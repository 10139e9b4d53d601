# backend/bidding/schemas/base.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..utils.dates import as_utc


def reject_bool(value):
    """Lax float parsing turns JSON true/false into 1.0/0.0"""
    if isinstance(value, bool):
        raise ValueError("Input should be a number")
    return value


class BaseSchema(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

class TimestampMixin(BaseModel):
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def created_at_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

class MessageResponse(BaseModel):
    message: str
