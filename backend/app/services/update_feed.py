"""
Update feed — messages newer than a client-supplied cursor.

The cursor is the last message id the client has seen. Visibility is decided
by the presence service and by the author's restriction state, both read in
the same session transaction as the messages they filter.
"""

from sqlalchemy.orm import Session, contains_eager

from app.config import settings
from app.models.channel_membership import ChannelMembership
from app.models.message import Message
from app.models.user import User
from app.services import presence
from app.services.message_store import visible_author_filter


def get_updates(
    db: Session,
    user: User,
    since: int,
    limit: int | None = None,
) -> tuple[list[ChannelMembership], list[Message]]:
    """
    Return (presence, messages) for ``user``.

    ``messages`` holds every visible message with id > ``since`` in ascending
    id order, capped at ``limit``; an empty list means there is nothing new.
    """
    limit = limit or settings.CHAT_UPDATES_LIMIT
    memberships = presence.get_presence(db, user)
    channel_ids = [m.channel_id for m in memberships]
    if not channel_ids:
        return memberships, []

    messages = (
        db.query(Message)
        .join(User, User.id == Message.user_id)
        .options(contains_eager(Message.user))
        .filter(
            Message.channel_id.in_(channel_ids),
            Message.id > since,
            visible_author_filter(user.id),
        )
        .order_by(Message.id.asc())
        .limit(limit)
        .all()
    )
    return memberships, messages
