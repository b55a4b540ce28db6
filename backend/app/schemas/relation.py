from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import UserCompact


class RelationResponse(BaseModel):
    target_id: int
    kind: str
    created_at: datetime | None = None
    target: UserCompact
