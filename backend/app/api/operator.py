"""
Operator endpoints — accessible only to users with is_site_admin = True.

Moderation actions change what other users can see immediately: presence and
update feeds evaluate restriction and silence state on every request, so there
is nothing to invalidate here.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_site_admin
from app.core import events
from app.database import get_db
from app.models.account_history import HISTORY_NOTE, HISTORY_RESTRICTION, HISTORY_SILENCE, UserAccountHistory
from app.models.user import User
from app.schemas.moderation import AccountHistoryResponse, RestrictBody, SilenceBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/operator", tags=["operator"])


def _get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ── User Moderation ───────────────────────────────────────────────────────────


@router.post("/users/{user_id}/restrict")
async def restrict_user(
    user_id: int,
    body: RestrictBody,
    admin: User = Depends(require_site_admin),
    db: Session = Depends(get_db),
):
    """
    Restrict a user. Their PMs disappear from counterparts' presence and
    their messages from everyone else's feeds. Reversible via /unrestrict.
    Cannot restrict another site admin or yourself.
    """
    user = _get_user(db, user_id)
    if user.is_site_admin:
        raise HTTPException(status_code=403, detail="Cannot restrict a site admin")
    if user.id == admin.id:
        raise HTTPException(status_code=400, detail="Cannot restrict yourself")

    user.is_restricted = True
    db.add(UserAccountHistory(user_id=user.id, kind=HISTORY_RESTRICTION, reason=body.reason, actor_id=admin.id))
    db.commit()
    logger.info("%s | user=%s actor=%s reason=%s", events.USER_RESTRICTED, user.id, admin.id, body.reason)
    return {"status": "restricted", "user_id": user_id}


@router.post("/users/{user_id}/unrestrict")
async def unrestrict_user(
    user_id: int,
    admin: User = Depends(require_site_admin),
    db: Session = Depends(get_db),
):
    """Lift a restriction. Hidden conversations and messages become visible again."""
    user = _get_user(db, user_id)

    user.is_restricted = False
    db.add(UserAccountHistory(user_id=user.id, kind=HISTORY_NOTE, reason="Restriction lifted", actor_id=admin.id))
    db.commit()
    logger.info("%s | user=%s actor=%s", events.USER_UNRESTRICTED, user.id, admin.id)
    return {"status": "active", "user_id": user_id}


@router.post("/users/{user_id}/silence")
async def silence_user(
    user_id: int,
    body: SilenceBody,
    admin: User = Depends(require_site_admin),
    db: Session = Depends(get_db),
):
    """Bar a user from sending messages for ``period`` seconds. Existing messages stay visible."""
    user = _get_user(db, user_id)
    if user.is_site_admin:
        raise HTTPException(status_code=403, detail="Cannot silence a site admin")

    db.add(
        UserAccountHistory(
            user_id=user.id,
            kind=HISTORY_SILENCE,
            reason=body.reason,
            period=body.period,
            actor_id=admin.id,
        )
    )
    db.commit()
    logger.info("%s | user=%s actor=%s period=%ss", events.USER_SILENCED, user.id, admin.id, body.period)
    return {"status": "silenced", "user_id": user_id, "period": body.period}


@router.get("/users/{user_id}/history", response_model=list[AccountHistoryResponse])
async def user_history(
    user_id: int,
    admin: User = Depends(require_site_admin),
    db: Session = Depends(get_db),
) -> list[AccountHistoryResponse]:
    user = _get_user(db, user_id)
    return [AccountHistoryResponse.model_validate(h) for h in user.account_histories]
