"""Username/password authentication, session tokens and password resets"""
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from linkup.core import security
from linkup.core.config import settings
from linkup.modules.auth.schemas.auth import RegisterRequest
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.services.user import (
    create_user,
    get_user,
    get_user_by_email,
    get_user_by_login,
    set_password,
)
from linkup.modules.notifications.services.notification_events import create_welcome_notification

logger = logging.getLogger(__name__)


def register_user(db: Session, user_in: RegisterRequest) -> User:
    user = create_user(
        db,
        username=user_in.username,
        email=user_in.email,
        password=user_in.password,
        profile_name=user_in.profile_name,
    )
    create_welcome_notification(db, user.id, user.username)
    return user


def authenticate(db: Session, username_or_email: str, password: str) -> Optional[User]:
    """Return the user if the credentials match, otherwise None"""
    user = get_user_by_login(db, username_or_email)
    if not user:
        logger.info(f"Login attempt for unknown account '{username_or_email}'")
        return None
    if not security.verify_password(password, user.hashed_password):
        logger.info(f"Invalid password for user {user.id}")
        return None
    return user


def issue_tokens(db: Session, user: User) -> Dict[str, str]:
    """Create a new access/refresh pair; only the latest refresh token stays valid"""
    access_token = security.create_access_token(user.id)
    refresh_token = security.create_refresh_token(user.id)
    user.refresh_token = refresh_token
    db.commit()
    db.refresh(user)
    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer",
    }


def get_user_for_refresh_token(db: Session, refresh_token: str) -> Optional[User]:
    user_id = security.decode_token(refresh_token, security.REFRESH_TOKEN)
    if user_id is None:
        return None
    user = get_user(db, user_id)
    if not user or user.refresh_token != refresh_token:
        logger.warning(f"Refresh token for user {user_id} is not the current one")
        return None
    return user


def revoke_refresh_token(db: Session, user: User) -> None:
    user.refresh_token = None
    db.commit()


def start_password_reset(db: Session, email: str) -> Optional[Tuple[User, str]]:
    """Store a fresh reset code for the account, if there is one"""
    user = get_user_by_email(db, email)
    if not user or user.is_banned:
        return None

    code = security.generate_reset_code()
    user.reset_code = security.get_password_hash(code)
    user.reset_code_expires_at = datetime.utcnow() + timedelta(minutes=settings.RESET_CODE_EXPIRE_MINUTES)
    user.reset_token = None
    db.commit()
    return user, code


def verify_reset_code(db: Session, email: str, code: str) -> Optional[str]:
    """Exchange a valid reset code for a short-lived reset token"""
    user = get_user_by_email(db, email)
    if not user or not user.reset_code or not user.reset_code_expires_at:
        return None
    if user.reset_code_expires_at < datetime.utcnow():
        logger.info(f"Expired reset code used for user {user.id}")
        return None
    if not security.verify_password(code, user.reset_code):
        return None

    reset_token = security.create_reset_token(user.id)
    user.reset_code = None
    user.reset_code_expires_at = None
    user.reset_token = reset_token
    db.commit()
    return reset_token


def reset_password(db: Session, reset_token: str, new_password: str) -> Optional[User]:
    user_id = security.decode_token(reset_token, security.RESET_TOKEN)
    if user_id is None:
        return None
    user = get_user(db, user_id)
    # Each reset token can only be used once
    if not user or user.reset_token != reset_token:
        return None

    user.reset_token = None
    set_password(db, user, new_password)
    logger.info(f"Password reset for user {user.id}")
    return user
