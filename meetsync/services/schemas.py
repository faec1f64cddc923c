"""
Input schemas for the service operations.

Every operation validates its arguments once, here, before any domain logic
runs. Field aliases match the camelCase names clients send.
"""

from datetime import date, time
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..domain.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class CreateMeetingRequest(BaseModel):
    """Arguments of ``create_meeting``."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    creator_name: str = Field(alias="creatorName")
    dates: List[date | str] = Field(min_length=1)
    start_time: time | str = Field(alias="startTime")
    end_time: time | str = Field(alias="endTime")

    @field_validator("name", "creator_name")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Display names must contain something besides whitespace."""
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_present(cls, value: time | str) -> time | str:
        """Reject empty strings; parsing happens in the slot generator."""
        if isinstance(value, str) and not value.strip():
            raise ValueError("is required")
        return value


class VoteRequest(BaseModel):
    """Arguments of ``submit_vote``."""
    model_config = ConfigDict(populate_by_name=True)

    participant_name: str = Field(alias="participantName")
    available_slots: List[str] = Field(alias="availableSlots")

    @field_validator("participant_name")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Names are matched exactly, so only blank names are rejected."""
        if not value.strip():
            raise ValueError("must not be empty")
        return value


def validate_input(schema: Type[SchemaT], data: Dict[str, Any]) -> SchemaT:
    """
    Validate raw arguments against a schema.

    Raises:
        ValidationError: Naming the first field that failed
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or schema.__name__
        raise ValidationError(field, error["msg"]) from exc
