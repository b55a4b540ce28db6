"""
Chat presence — the channels currently visible to a user.

A membership is visible when it is not hidden and, for a PM, the counterpart
is active, not restricted, and no block exists between the two users. The
checks are a conjunction evaluated on every call, so a block, restriction or
part takes effect on the next request and is undone the same way.
"""

import logging

from sqlalchemy.orm import Session, contains_eager

from app.models.channel import Channel
from app.models.channel_membership import ChannelMembership
from app.models.user import User
from app.services import relations

logger = logging.getLogger(__name__)


def _visible_counterparts(db: Session, user_id: int, counterpart_ids: set[int]) -> set[int]:
    """The subset of ``counterpart_ids`` that are active, unrestricted and not blocked either way."""
    visible = {
        row.id
        for row in db.query(User.id).filter(
            User.id.in_(counterpart_ids),
            User.is_active == True,  # noqa: E712
            User.is_restricted == False,  # noqa: E712
        )
    }
    return visible - relations.blocked_user_ids(db, user_id)


def is_pm_visible(db: Session, user: User, channel: Channel) -> bool:
    """Whether ``channel`` (a PM) passes the counterpart checks get_presence() applies."""
    counterpart_id = channel.counterpart_id(user.id)
    if counterpart_id is None:
        return False
    return counterpart_id in _visible_counterparts(db, user.id, {counterpart_id})


def get_presence(db: Session, user: User) -> list[ChannelMembership]:
    """Visible memberships of ``user``, ordered by channel id."""
    memberships = (
        db.query(ChannelMembership)
        .join(Channel, Channel.id == ChannelMembership.channel_id)
        .options(contains_eager(ChannelMembership.channel).selectinload(Channel.memberships))
        .filter(
            ChannelMembership.user_id == user.id,
            ChannelMembership.hidden == False,  # noqa: E712
        )
        .order_by(ChannelMembership.channel_id)
        .all()
    )

    counterpart_ids = {
        m.channel.counterpart_id(user.id) for m in memberships if m.channel.is_pm
    }
    counterpart_ids.discard(None)
    if not counterpart_ids:
        return [m for m in memberships if not m.channel.is_pm]

    visible_counterparts = _visible_counterparts(db, user.id, counterpart_ids)
    visible = [
        m
        for m in memberships
        if not m.channel.is_pm or m.channel.counterpart_id(user.id) in visible_counterparts
    ]
    logger.debug("presence user=%s channels=%d hidden=%d", user.id, len(visible), len(memberships) - len(visible))
    return visible
