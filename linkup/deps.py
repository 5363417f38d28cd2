from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from linkup.core import security
from linkup.core.config import settings
from linkup.db.session import get_db
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.services.user import get_user

# auto_error is off so a missing header is answered with 401 instead of FastAPI's 403
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> User:
    """
    Dependency for getting current authenticated user
    """
    if not token:
        raise _unauthorized("Not authenticated")

    user_id = security.verify_access_token(token)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = get_user(db, user_id=user_id)
    if not user:
        raise _unauthorized("User not found")

    if user.is_banned:
        raise _unauthorized("User is banned")

    return user


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Dependency for routes restricted to administrators
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user
