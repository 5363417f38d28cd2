# Implements security-related functionality:
# JWT access, refresh and password-reset tokens
# Password hashing and verification using bcrypt
# One-time password reset codes
# Provides core security functions used by the authentication module

from datetime import datetime, timedelta
from typing import Any, Optional, Union
import secrets
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext

from linkup.core.config import settings

logger = logging.getLogger("linkup")

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"
RESET_TOKEN = "reset"


def _secret_for(token_type: str) -> str:
    return settings.REFRESH_SECRET_KEY if token_type == REFRESH_TOKEN else settings.SECRET_KEY


def _create_token(subject: Union[str, Any], token_type: str, expires_delta: timedelta) -> str:
    now = datetime.utcnow()
    to_encode = {
        "sub": str(subject),
        "type": token_type,
        "iss": settings.TOKEN_ISSUER,
        "iat": now,
        "exp": now + expires_delta,
        # keeps two tokens issued in the same second distinct
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=settings.ALGORITHM)


def create_access_token(subject: Union[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    return _create_token(subject, ACCESS_TOKEN, expires_delta)


def create_refresh_token(subject: Union[str, Any]) -> str:
    return _create_token(subject, REFRESH_TOKEN, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def create_reset_token(subject: Union[str, Any]) -> str:
    return _create_token(subject, RESET_TOKEN, timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES))


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> Optional[str]:
    """Return the subject of a valid token of the given type, or None.

    Signature, expiry and issuer are checked by python-jose; the token type
    claim is checked here so a refresh token cannot be used as an access token.
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(token_type),
            algorithms=[settings.ALGORITHM],
            issuer=settings.TOKEN_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"JWT verification error: {e}")
        return None

    if payload.get("type") != token_type:
        logger.warning(f"Expected {token_type} token, got {payload.get('type')}")
        return None

    user_id = payload.get("sub")
    if user_id is None:
        logger.warning("Token payload missing 'sub' field")
        return None
    return user_id


def verify_access_token(token: str) -> Optional[str]:
    return decode_token(token, ACCESS_TOKEN)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def generate_reset_code() -> str:
    """Four digit code mailed to the user for password resets."""
    return f"{secrets.randbelow(10000):04d}"
