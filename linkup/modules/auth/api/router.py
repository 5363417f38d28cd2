"""Authentication router: registration, login, token refresh and password reset"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
import logging

from linkup.core.email import EmailService, get_email_service
from linkup.db.session import get_db
from linkup.deps import get_current_user
from linkup.modules.auth.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
    Token,
    TokenValidation,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from linkup.modules.auth.services import auth as auth_service
from linkup.modules.user_management.models.user import User
from linkup.modules.user_management.schemas.user import User as UserSchema
from linkup.modules.user_management.services.user import is_email_taken, is_username_taken

router = APIRouter()
logger = logging.getLogger(__name__)

GENERIC_RESET_MESSAGE = "If an account exists for this email, a verification code has been sent."


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def register(*, db: Session = Depends(get_db), user_in: RegisterRequest) -> AuthResponse:
    """Create an account and sign it in"""
    if is_username_taken(db, user_in.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username is already taken",
        )
    if is_email_taken(db, user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email is already registered",
        )

    try:
        user = auth_service.register_user(db, user_in)
    except IntegrityError as e:
        # A concurrent registration took the username or email after the checks above
        db.rollback()
        logger.warning(f"Registration of {user_in.username} lost a uniqueness race: {e.orig}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or email is already registered",
        )
    tokens = auth_service.issue_tokens(db, user)
    return AuthResponse(**tokens, user=UserSchema.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(*, db: Session = Depends(get_db), credentials: LoginRequest) -> AuthResponse:
    user = auth_service.authenticate(db, credentials.username_or_email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account has been banned",
        )

    tokens = auth_service.issue_tokens(db, user)
    return AuthResponse(**tokens, user=UserSchema.model_validate(user))


@router.post("/refresh", response_model=Token)
def refresh_tokens(*, db: Session = Depends(get_db), body: RefreshRequest) -> Token:
    user = auth_service.get_user_for_refresh_token(db, body.refresh_token)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.is_banned:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This account has been banned",
        )
    return Token(**auth_service.issue_tokens(db, user))


@router.post("/logout")
def logout(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> dict:
    auth_service.revoke_refresh_token(db, current_user)
    return {"message": "Logged out"}


@router.get("/validate-token", response_model=TokenValidation)
def validate_token(current_user: User = Depends(get_current_user)) -> TokenValidation:
    """Validate the current user's token and return user information"""
    return TokenValidation(
        valid=True,
        user_id=current_user.id,
        username=current_user.username,
        email=current_user.email,
        role=current_user.role,
    )


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
async def forgot_password(
    *,
    db: Session = Depends(get_db),
    body: ForgotPasswordRequest,
    email_service: EmailService = Depends(get_email_service),
) -> ForgotPasswordResponse:
    """Mail a reset code. The message is the same whether or not the account exists."""
    result = auth_service.start_password_reset(db, body.email)
    if result is None:
        return ForgotPasswordResponse(message=GENERIC_RESET_MESSAGE, code_sent=False)

    user, code = result
    sent = await email_service.send_password_reset_code(user.email, code)
    if not sent:
        logger.error(f"Password reset code for user {user.id} could not be delivered")
    return ForgotPasswordResponse(message=GENERIC_RESET_MESSAGE, code_sent=sent)


@router.post("/verify-code", response_model=VerifyCodeResponse)
def verify_code(*, db: Session = Depends(get_db), body: VerifyCodeRequest) -> VerifyCodeResponse:
    reset_token = auth_service.verify_reset_code(db, body.email, body.code)
    if not reset_token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired verification code",
        )
    return VerifyCodeResponse(message="Code verified", reset_token=reset_token)


@router.post("/reset-password")
def reset_password(*, db: Session = Depends(get_db), body: ResetPasswordRequest) -> dict:
    user = auth_service.reset_password(db, body.reset_token, body.new_password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired reset token",
        )
    return {"message": "Password has been reset"}
