"""
Chat endpoints.

POST   /api/chat/new                                        — open (or reuse) a PM and send its first message
GET    /api/chat/presence                                   — channels currently visible to the caller
GET    /api/chat/updates?since={message_id}                 — messages newer than the cursor (204 when none)
GET    /api/chat/channels                                   — public channels
POST   /api/chat/channels                                   — create a public channel (site admin)
PUT    /api/chat/channels/{channel_id}/users/{user_id}      — join
DELETE /api/chat/channels/{channel_id}/users/{user_id}      — part
GET    /api/chat/channels/{channel_id}/messages             — channel history
POST   /api/chat/channels/{channel_id}/messages             — send a message
PUT    /api/chat/channels/{channel_id}/mark-as-read/{message_id}
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_acting_user, require_site_admin
from app.config import settings
from app.database import get_db
from app.models.channel_membership import ChannelMembership
from app.models.user import User
from app.schemas.channel import ChannelCreate, ChannelResponse, PresenceChannel
from app.schemas.chat import NewPMRequest, NewPMResponse, UpdatesResponse
from app.schemas.message import MessageCreate, MessageResponse
from app.services import channel_registry, message_store, presence, update_feed

router = APIRouter(prefix="/chat", tags=["chat"])


def _presence_entry(membership: ChannelMembership) -> PresenceChannel:
    channel = membership.channel
    return PresenceChannel(
        channel_id=channel.id,
        name=channel.name,
        description=channel.description,
        type=channel.type,
        last_message_id=channel.last_message_id,
        last_read_id=membership.last_read_id,
        users=channel.member_ids() if channel.is_pm else [],
    )


def _presence(db: Session, user: User) -> list[PresenceChannel]:
    return [_presence_entry(m) for m in presence.get_presence(db, user)]


@router.post("/new", response_model=NewPMResponse)
async def create_pm(
    body: NewPMRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NewPMResponse:
    channel = channel_registry.create_or_get_pm(db, current_user, body.target_id)
    message = message_store.send_message(db, channel, current_user, body.message, body.is_action)
    return NewPMResponse(
        new_channel_id=channel.id,
        presence=_presence(db, current_user),
        message=MessageResponse.model_validate(message),
    )


@router.get("/presence", response_model=list[PresenceChannel])
async def get_presence(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PresenceChannel]:
    return _presence(db, current_user)


@router.get(
    "/updates",
    response_model=UpdatesResponse,
    responses={204: {"description": "No new messages since the cursor"}},
)
async def get_updates(
    since: int = Query(default=0, ge=0, description="Last message id the client has seen"),
    limit: int = Query(default=settings.CHAT_UPDATES_LIMIT, ge=1, le=settings.CHAT_UPDATES_LIMIT),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    memberships, messages = update_feed.get_updates(db, current_user, since, limit)
    if not messages:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return UpdatesResponse(
        presence=[_presence_entry(m) for m in memberships],
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


# ── Channels ──────────────────────────────────────────────────────────────────


@router.get("/channels", response_model=list[ChannelResponse])
async def list_channels(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ChannelResponse]:
    """Public channels anyone can join."""
    return [ChannelResponse.model_validate(c) for c in channel_registry.list_public_channels(db)]


@router.post("/channels", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED)
async def create_channel(
    channel_in: ChannelCreate,
    admin: User = Depends(require_site_admin),
    db: Session = Depends(get_db),
) -> ChannelResponse:
    channel = channel_registry.create_public_channel(db, channel_in.name, channel_in.description)
    return ChannelResponse.model_validate(channel)


@router.put("/channels/{channel_id}/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def join_channel(
    channel_id: int,
    current_user: User = Depends(require_acting_user),
    db: Session = Depends(get_db),
) -> None:
    channel = channel_registry.get_channel(db, channel_id)
    channel_registry.join(db, channel, current_user)


@router.delete("/channels/{channel_id}/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def part_channel(
    channel_id: int,
    current_user: User = Depends(require_acting_user),
    db: Session = Depends(get_db),
) -> None:
    channel = channel_registry.get_channel(db, channel_id)
    channel_registry.part(db, channel, current_user)


@router.get("/channels/{channel_id}/messages", response_model=list[MessageResponse])
async def get_channel_messages(
    channel_id: int,
    since: int | None = Query(default=None, ge=0),
    limit: int = Query(default=settings.CHAT_HISTORY_LIMIT, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MessageResponse]:
    channel = channel_registry.get_channel(db, channel_id)
    messages = message_store.channel_history(db, channel, current_user, since=since, limit=limit)
    return [MessageResponse.model_validate(m) for m in messages]


@router.post("/channels/{channel_id}/messages", response_model=MessageResponse)
async def send_message(
    channel_id: int,
    message_in: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    channel = channel_registry.get_channel(db, channel_id)
    message = message_store.send_message(db, channel, current_user, message_in.message, message_in.is_action)
    return MessageResponse.model_validate(message)


@router.put("/channels/{channel_id}/mark-as-read/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def mark_as_read(
    channel_id: int,
    message_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    channel = channel_registry.get_channel(db, channel_id)
    message_store.mark_as_read(db, channel, current_user, message_id)
