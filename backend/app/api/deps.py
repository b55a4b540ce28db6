from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.exceptions import Unauthenticated
from app.database import get_db
from app.models.user import User
from app.services import auth_service

# auto_error=False: a missing Authorization header resolves to anonymous
# instead of HTTPBearer's own 403, so every protected route answers 401.
security = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> User | None:
    """The acting user, or None for an anonymous caller."""
    if credentials is None:
        return None
    return auth_service.get_user_from_token(credentials.credentials, db)


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    if user is None:
        raise Unauthenticated("Invalid authentication credentials")
    return user


def require_acting_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Guards routes of the form /.../users/{user_id}: a user may only change
    their own membership.
    """
    if user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot act on behalf of another user")
    return current_user


def require_site_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Verifies the current user is a site-level admin (is_site_admin = True).
    Used on /api/operator/ endpoints and public channel creation.
    Returns 403 for any non-admin.
    """
    if not current_user.is_site_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Operator access required")
    return current_user
