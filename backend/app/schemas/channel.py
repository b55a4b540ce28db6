from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ChannelCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    description: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_hash_prefixed(cls, v: str) -> str:
        v = v.strip().lower()
        if not v.startswith("#"):
            v = f"#{v}"
        if not v[1:].replace("-", "").replace("_", "").isalnum():
            raise ValueError("Channel name must be alphanumeric with optional hyphens or underscores")
        if v.startswith("#pm_"):
            raise ValueError("The #pm_ prefix is reserved for private messages")
        return v


class ChannelResponse(BaseModel):
    channel_id: int = Field(validation_alias="id")
    name: str
    description: str | None = None
    type: str
    last_message_id: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class PresenceChannel(BaseModel):
    """One visible channel in a user's presence."""

    channel_id: int
    name: str
    description: str | None = None
    type: str
    last_message_id: int | None = None
    last_read_id: int | None = None
    users: list[int] = []
