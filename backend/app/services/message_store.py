"""
Message store — appends messages to channels and serves channel history.

Message ids come from the database autoincrement and are the only ordering
key: history and update cursors compare ids, never timestamps.
"""

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core import events
from app.core.exceptions import Forbidden, NotFound
from app.models.channel import Channel
from app.models.message import Message
from app.models.user import User
from app.models.channel_membership import ChannelMembership
from app.services import channel_registry, presence

logger = logging.getLogger(__name__)


def send_message(db: Session, channel: Channel, sender: User, content: str, is_action: bool = False) -> Message:
    """
    Append a message to ``channel``.

    The sender must be a member; a parted PM member may still write, which
    re-opens the conversation for both sides.
    """
    membership = channel_registry.get_membership(db, channel.id, sender.id)
    if membership is None:
        raise Forbidden("You are not a member of this channel")
    if membership.hidden and not channel.is_pm:
        raise Forbidden("You are not a member of this channel")

    if channel.is_pm:
        target_id = channel.counterpart_id(sender.id)
        target = db.query(User).filter(User.id == target_id).first()
        if target is None:
            raise NotFound("User not found")
        channel_registry.ensure_can_pm(db, sender, target)
    else:
        if sender.is_restricted:
            raise Forbidden("You are restricted and cannot send messages")
        if sender.is_silenced:
            raise Forbidden("You are silenced and cannot send messages")

    message = Message(
        content=content.strip(),
        user_id=sender.id,
        channel_id=channel.id,
        is_action=is_action,
    )
    db.add(message)
    db.flush()  # assigns message.id

    channel.last_message_id = message.id
    if channel.is_pm:
        channel_registry.reopen_pm(db, channel)

    db.commit()
    db.refresh(message)
    logger.debug("%s | channel=%s message=%s user=%s", events.MESSAGE_NEW, channel.id, message.id, sender.id)
    return message


def visible_author_filter(viewer_id: int):
    """SQL condition hiding messages of restricted authors from everyone but themselves."""
    return or_(Message.user_id == viewer_id, User.is_restricted == False)  # noqa: E712


def _visible_membership(db: Session, channel: Channel, user: User) -> ChannelMembership:
    """The user's membership, provided the channel is in their presence."""
    membership = channel_registry.get_membership(db, channel.id, user.id)
    if membership is None or membership.hidden:
        raise Forbidden("You are not a member of this channel")
    if channel.is_pm and not presence.is_pm_visible(db, user, channel):
        raise Forbidden("This conversation is not available")
    return membership


def channel_history(
    db: Session,
    channel: Channel,
    viewer: User,
    since: int | None = None,
    limit: int = 50,
) -> list[Message]:
    """
    Messages in ``channel`` visible to ``viewer``, ascending by id.

    With ``since`` only ids strictly greater are returned; without it the
    latest ``limit`` messages are returned.
    """
    _visible_membership(db, channel, viewer)

    query = (
        db.query(Message)
        .join(User, User.id == Message.user_id)
        .filter(Message.channel_id == channel.id, visible_author_filter(viewer.id))
    )
    if since is not None:
        return query.filter(Message.id > since).order_by(Message.id.asc()).limit(limit).all()

    latest = query.order_by(Message.id.desc()).limit(limit).all()
    return list(reversed(latest))


def mark_as_read(db: Session, channel: Channel, user: User, message_id: int) -> None:
    """Move the member's read marker forward to ``message_id``. Never moves it back."""
    membership = _visible_membership(db, channel, user)

    exists = db.query(Message.id).filter(Message.id == message_id, Message.channel_id == channel.id).first()
    if not exists:
        raise NotFound("Message not found in this channel")

    if membership.last_read_id is None or message_id > membership.last_read_id:
        membership.last_read_id = message_id
        db.commit()
