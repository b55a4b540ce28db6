from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.config import settings
from app.schemas.user import UserCompact


class MessageCreate(BaseModel):
    message: str = Field(..., max_length=settings.CHAT_MESSAGE_MAX_LENGTH)
    is_action: bool = False

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class MessageResponse(BaseModel):
    message_id: int = Field(validation_alias="id")
    channel_id: int
    user_id: int
    content: str
    is_action: bool
    timestamp: datetime = Field(validation_alias="created_at")
    sender: UserCompact = Field(validation_alias="user")

    model_config = {"from_attributes": True, "populate_by_name": True}
