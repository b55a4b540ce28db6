"""
Friend and block lists.

GET    /api/friends              GET    /api/blocks
PUT    /api/friends/{user_id}    PUT    /api/blocks/{user_id}
DELETE /api/friends/{user_id}    DELETE /api/blocks/{user_id}

A user holds at most one relation towards another: blocking a friend replaces
the friendship, and friending a blocked user lifts the block.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.relation import RelationResponse
from app.schemas.user import UserCompact
from app.services import channel_registry, relations
from app.services.relations import RelationKind

router = APIRouter(tags=["relations"])


def _list(db: Session, user: User, kind: RelationKind) -> list[RelationResponse]:
    return [
        RelationResponse(
            target_id=r.zebra_id,
            kind=r.kind,
            created_at=r.created_at,
            target=UserCompact.model_validate(r.zebra),
        )
        for r in relations.list_relations(db, user.id, kind)
    ]


def _set(db: Session, user: User, target_id: int, kind: RelationKind) -> None:
    if target_id == user.id:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Cannot target yourself")
    channel_registry.get_visible_user(db, target_id)
    relations.set_relation(db, user.id, target_id, kind)


@router.get("/friends", response_model=list[RelationResponse])
async def list_friends(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RelationResponse]:
    return _list(db, current_user, RelationKind.FRIEND)


@router.put("/friends/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_friend(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    _set(db, current_user, user_id, RelationKind.FRIEND)


@router.delete("/friends/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    relations.remove_relation(db, current_user.id, user_id, RelationKind.FRIEND)


@router.get("/blocks", response_model=list[RelationResponse])
async def list_blocks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RelationResponse]:
    return _list(db, current_user, RelationKind.BLOCK)


@router.put("/blocks/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_block(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    _set(db, current_user, user_id, RelationKind.BLOCK)


@router.delete("/blocks/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_block(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> None:
    relations.remove_relation(db, current_user.id, user_id, RelationKind.BLOCK)
