"""
Channel registry — channels and per-user membership.

PM channels are created lazily by create_or_get_pm() and are unique per user
pair (the pair is encoded in the channel name). Public channels are created by
site admins and joined explicitly.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import events
from app.core.exceptions import Conflict, Forbidden, InvalidArgument, NotFound
from app.models.channel import CHANNEL_PM, CHANNEL_PUBLIC, Channel, pm_channel_name
from app.models.channel_membership import ChannelMembership
from app.models.user import User
from app.services import relations

logger = logging.getLogger(__name__)


# ── Lookups ───────────────────────────────────────────────────────────────────


def get_channel(db: Session, channel_id: int) -> Channel:
    channel = db.query(Channel).filter(Channel.id == channel_id).first()
    if not channel:
        raise NotFound("Channel not found")
    return channel


def get_membership(db: Session, channel_id: int, user_id: int) -> ChannelMembership | None:
    return (
        db.query(ChannelMembership)
        .filter(ChannelMembership.channel_id == channel_id, ChannelMembership.user_id == user_id)
        .first()
    )


def get_visible_user(db: Session, user_id: int) -> User:
    """Active, unrestricted user or NotFound — restricted users look absent to others."""
    user = (
        db.query(User)
        .filter(
            User.id == user_id,
            User.is_active == True,  # noqa: E712
            User.is_restricted == False,  # noqa: E712
        )
        .first()
    )
    if not user:
        raise NotFound("User not found")
    return user


def list_public_channels(db: Session) -> list[Channel]:
    return db.query(Channel).filter(Channel.type == CHANNEL_PUBLIC).order_by(Channel.name).all()


# ── PM permission ─────────────────────────────────────────────────────────────


def ensure_can_pm(db: Session, sender: User, target: User) -> None:
    """
    Raise unless ``sender`` may message ``target`` privately.

    Every check must pass; the first failing one decides the error.
    """
    if not target.is_active or target.is_restricted:
        raise NotFound("User not found")
    if sender.is_restricted:
        raise Forbidden("You are restricted and cannot send private messages")
    if sender.is_silenced:
        raise Forbidden("You are silenced and cannot send messages")
    if relations.is_blocked_between(db, sender.id, target.id):
        raise Forbidden("You cannot message this user")
    if target.pm_friends_only and not relations.is_friend(db, target.id, sender.id):
        raise Forbidden("This user only accepts messages from friends")


# ── Membership ────────────────────────────────────────────────────────────────


def _open_membership(db: Session, channel_id: int, user_id: int) -> ChannelMembership:
    """Get or create a membership row and make sure it is not hidden. Does not commit."""
    membership = get_membership(db, channel_id, user_id)
    if membership is None:
        membership = ChannelMembership(channel_id=channel_id, user_id=user_id, hidden=False)
        db.add(membership)
    else:
        membership.hidden = False
    return membership


def reopen_pm(db: Session, channel: Channel) -> None:
    """Un-hide both sides of a PM. Does not commit."""
    for membership in channel.memberships:
        if membership.hidden:
            membership.hidden = False
            logger.info("%s | channel=%s user=%s", events.PM_REOPENED, channel.id, membership.user_id)


def create_or_get_pm(db: Session, sender: User, target_id: int) -> Channel:
    """
    Return the PM channel between sender and target, creating it if needed.

    Raises InvalidArgument for a self-PM, NotFound for a missing or
    restricted target and Forbidden when ensure_can_pm() refuses.
    """
    if sender.id == target_id:
        raise InvalidArgument("Cannot send a private message to yourself")

    target = db.query(User).filter(User.id == target_id).first()
    if not target:
        raise NotFound("User not found")
    ensure_can_pm(db, sender, target)

    name = pm_channel_name(sender.id, target.id)
    channel = db.query(Channel).filter(Channel.name == name).first()
    if channel is None:
        channel = Channel(name=name, type=CHANNEL_PM, description=f"{sender.username} & {target.username}")
        db.add(channel)
        try:
            db.flush()
        except IntegrityError:
            # Another request created the pair first.
            db.rollback()
            channel = db.query(Channel).filter(Channel.name == name).one()
        else:
            logger.info("%s | channel=%s users=%s,%s", events.PM_CREATED, channel.id, sender.id, target.id)

    _open_membership(db, channel.id, sender.id)
    _open_membership(db, channel.id, target.id)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request added the same membership first.
        db.rollback()
        channel = db.query(Channel).filter(Channel.name == name).one()
        _open_membership(db, channel.id, sender.id)
        _open_membership(db, channel.id, target.id)
        db.commit()
    db.refresh(channel)
    return channel


def join(db: Session, channel: Channel, user: User) -> ChannelMembership:
    """Idempotently add ``user`` to ``channel`` (re-opening a parted PM)."""
    if channel.type == CHANNEL_PM:
        if get_membership(db, channel.id, user.id) is None:
            raise Forbidden("Cannot join another user's private conversation")
    elif channel.type != CHANNEL_PUBLIC:
        raise Forbidden("Channel cannot be joined")

    membership = _open_membership(db, channel.id, user.id)
    try:
        db.commit()
    except IntegrityError:
        # Joined concurrently; the row exists now.
        db.rollback()
        membership = _open_membership(db, channel.id, user.id)
        db.commit()
    db.refresh(membership)
    logger.info("%s | channel=%s user=%s", events.CHANNEL_JOINED, channel.id, user.id)
    return membership


def part(db: Session, channel: Channel, user: User) -> None:
    """Leave a channel. PMs are hidden (history kept); public memberships are removed."""
    membership = get_membership(db, channel.id, user.id)
    if membership is None:
        return

    if channel.type == CHANNEL_PM:
        membership.hidden = True
    else:
        db.delete(membership)
    db.commit()
    logger.info("%s | channel=%s user=%s", events.CHANNEL_PARTED, channel.id, user.id)


# ── Public channels ───────────────────────────────────────────────────────────


def create_public_channel(db: Session, name: str, description: str | None = None) -> Channel:
    if db.query(Channel).filter(Channel.name == name).first():
        raise Conflict("A channel with this name already exists")

    channel = Channel(name=name, description=description, type=CHANNEL_PUBLIC)
    db.add(channel)
    db.commit()
    db.refresh(channel)
    logger.info("%s | channel=%s name=%s", events.CHANNEL_CREATED, channel.id, name)
    return channel
