from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, field_validator

from linkup.core.validators import (
    CODE_MESSAGE,
    EMAIL_MESSAGE,
    PASSWORD_MESSAGE,
    USERNAME_MESSAGE,
    validate_email,
    validate_password,
    validate_username,
    validate_verification_code,
)
from linkup.modules.user_management.schemas.user import User


def _check_email(v: str) -> str:
    if not isinstance(v, str) or not validate_email(v.strip()):
        raise ValueError(EMAIL_MESSAGE)
    return v.strip()


def _check_password(v: str) -> str:
    if not validate_password(v):
        raise ValueError(PASSWORD_MESSAGE)
    return v


Email = Annotated[EmailStr, BeforeValidator(_check_email), AfterValidator(lambda v: v.lower())]
Password = Annotated[str, AfterValidator(_check_password)]


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class AuthResponse(Token):
    user: User


class RegisterRequest(BaseModel):
    username: str
    email: Email
    password: Password
    profile_name: Optional[str] = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        if not validate_username(v):
            raise ValueError(USERNAME_MESSAGE)
        return v


class LoginRequest(BaseModel):
    username_or_email: str
    password: str

    @field_validator("username_or_email")
    @classmethod
    def strip_identifier(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username or email is required")
        return v


class RefreshRequest(BaseModel):
    refresh_token: str


class ForgotPasswordRequest(BaseModel):
    email: Email


class ForgotPasswordResponse(BaseModel):
    message: str
    code_sent: bool


class VerifyCodeRequest(BaseModel):
    email: Email
    code: str

    @field_validator("code")
    @classmethod
    def check_code(cls, v: str) -> str:
        if not validate_verification_code(v):
            raise ValueError(CODE_MESSAGE)
        return v


class VerifyCodeResponse(BaseModel):
    message: str
    reset_token: str


class ResetPasswordRequest(BaseModel):
    reset_token: str
    new_password: Password


class TokenValidation(BaseModel):
    valid: bool
    user_id: str
    username: str
    email: str
    role: str
