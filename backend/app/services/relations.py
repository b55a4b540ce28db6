"""
Relation queries — the only module that reads or writes user_relations.

Callers ask typed questions ("is there a block between these two?") instead
of traversing ORM relationships, so visibility rules stay independent of how
relations are stored.
"""

import enum
import logging

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from app.core import events
from app.models.user_relation import RELATION_BLOCK, RELATION_FRIEND, UserRelation

logger = logging.getLogger(__name__)


class RelationKind(str, enum.Enum):
    FRIEND = RELATION_FRIEND
    BLOCK = RELATION_BLOCK


def relation_of(db: Session, user_id: int, zebra_id: int) -> RelationKind | None:
    """The directed relation user_id → zebra_id, if any."""
    row = (
        db.query(UserRelation.kind)
        .filter(UserRelation.user_id == user_id, UserRelation.zebra_id == zebra_id)
        .first()
    )
    return RelationKind(row.kind) if row else None


def is_friend(db: Session, user_id: int, zebra_id: int) -> bool:
    """True when user_id has friended zebra_id (directed)."""
    return relation_of(db, user_id, zebra_id) == RelationKind.FRIEND


def is_blocked_between(db: Session, a: int, b: int) -> bool:
    """True when either user blocks the other."""
    return (
        db.query(UserRelation.id)
        .filter(
            UserRelation.kind == RELATION_BLOCK,
            or_(
                and_(UserRelation.user_id == a, UserRelation.zebra_id == b),
                and_(UserRelation.user_id == b, UserRelation.zebra_id == a),
            ),
        )
        .first()
        is not None
    )


def blocked_user_ids(db: Session, user_id: int) -> set[int]:
    """Ids of every user with a block in either direction with ``user_id``."""
    rows = (
        db.query(UserRelation.user_id, UserRelation.zebra_id)
        .filter(
            UserRelation.kind == RELATION_BLOCK,
            or_(UserRelation.user_id == user_id, UserRelation.zebra_id == user_id),
        )
        .all()
    )
    return {row.zebra_id if row.user_id == user_id else row.user_id for row in rows}


def list_relations(db: Session, user_id: int, kind: RelationKind) -> list[UserRelation]:
    return (
        db.query(UserRelation)
        .filter(UserRelation.user_id == user_id, UserRelation.kind == kind.value)
        .order_by(UserRelation.zebra_id)
        .all()
    )


def set_relation(db: Session, user_id: int, zebra_id: int, kind: RelationKind) -> UserRelation:
    """Create or overwrite the directed relation; a block replaces a friendship and vice versa."""
    relation = (
        db.query(UserRelation)
        .filter(UserRelation.user_id == user_id, UserRelation.zebra_id == zebra_id)
        .first()
    )
    if relation:
        relation.kind = kind.value
    else:
        relation = UserRelation(user_id=user_id, zebra_id=zebra_id, kind=kind.value)
        db.add(relation)
    db.commit()
    db.refresh(relation)
    logger.info("%s | user=%s zebra=%s kind=%s", events.RELATION_SET, user_id, zebra_id, kind.value)
    return relation


def remove_relation(db: Session, user_id: int, zebra_id: int, kind: RelationKind) -> bool:
    """Delete the relation if it is of ``kind``. Returns whether anything was removed."""
    deleted = (
        db.query(UserRelation)
        .filter(
            UserRelation.user_id == user_id,
            UserRelation.zebra_id == zebra_id,
            UserRelation.kind == kind.value,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info("%s | user=%s zebra=%s kind=%s", events.RELATION_REMOVED, user_id, zebra_id, kind.value)
    return bool(deleted)
