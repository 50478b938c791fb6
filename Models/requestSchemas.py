"""
Request bodies accepted by the messaging API.

Each endpoint that takes a body validates it against exactly one model here,
whether the client posted JSON or form data.
"""
from typing import Optional
from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from Models.messageModel import MAX_CONTENT_LENGTH

CONTENT_REQUIRED = "Message content is required"


class SendMessageRequest(BaseModel):
    """POST /api/messages"""
    model_config = ConfigDict(str_strip_whitespace=True)

    receiver: str = Field(..., description="Receiver user id")
    content: str = Field("", validate_default=True, description="Message text")
    room: Optional[str] = Field(None, description="Room id, derived when omitted")

    @field_validator("receiver")
    @classmethod
    def receiver_is_object_id(cls, value):
        if not ObjectId.is_valid(value):
            raise ValueError("Invalid receiver id")
        return value

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value):
        if not value:
            raise ValueError(CONTENT_REQUIRED)
        if len(value) > MAX_CONTENT_LENGTH:
            raise ValueError(f"Message content must be at most {MAX_CONTENT_LENGTH} characters")
        return value

    @field_validator("room")
    @classmethod
    def empty_room_is_none(cls, value):
        return value or None


def validation_message(err: ValidationError) -> str:
    """First validation problem as a short sentence."""
    first = err.errors()[0]
    if first.get("type") == "value_error":
        return str(first["ctx"]["error"])
    if first.get("loc") == ("content",):
        return CONTENT_REQUIRED
    field = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{field}: {first.get('msg')}"
