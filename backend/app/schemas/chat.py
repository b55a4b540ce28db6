from pydantic import BaseModel

from app.schemas.channel import PresenceChannel
from app.schemas.message import MessageCreate, MessageResponse


class NewPMRequest(MessageCreate):
    target_id: int


class NewPMResponse(BaseModel):
    new_channel_id: int
    presence: list[PresenceChannel]
    message: MessageResponse


class UpdatesResponse(BaseModel):
    presence: list[PresenceChannel]
    messages: list[MessageResponse]
