from datetime import datetime

from pydantic import BaseModel, Field


class RestrictBody(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class SilenceBody(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)
    period: int = Field(..., gt=0, description="Silence length in seconds")


class AccountHistoryResponse(BaseModel):
    id: int
    kind: str
    reason: str
    period: int
    actor_id: int | None = None
    created_at: datetime | None = None
    ends_at: datetime | None = None

    model_config = {"from_attributes": True}
