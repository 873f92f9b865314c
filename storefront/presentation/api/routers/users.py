"""API router for user registration, authentication and password management."""

from fastapi import APIRouter, Depends, status

from ....application.services.account_service import AccountService
from ....core.dependencies import get_account_service
from ....domain.models import User
from ...api.dependencies import require_session_token
from ...api.schemas.user_schemas import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ResendVerificationRequest,
    ResetPasswordRequest,
    UserLoginRequest,
    UserRegisterRequest,
)

router = APIRouter(tags=["Users"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: UserRegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    """Register a new user and send the verification email."""
    user = accounts.register(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
    )
    return {
        "message": "User registered successfully. Please check your email to verify your account.",
        "data": _serialize_user(user),
    }


@router.get("/verify/user/{token}")
def verify_user(
    token: str,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    user = accounts.verify(token)
    return {"message": "Account verified successfully", "data": _serialize_user(user)}


@router.post("/verify/resend")
def resend_verification(
    payload: ResendVerificationRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    accounts.resend_verification(payload.email)
    return {"message": "Verification email sent"}


@router.post("/login")
def login(
    payload: UserLoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    token = accounts.login(payload.username, payload.password)
    user = accounts.get_user(token)
    return {
        "message": "Login successful",
        "data": {"userName": user.username, "token": token, "tokenType": "bearer"},
    }


@router.get("/users")
def get_users(accounts: AccountService = Depends(get_account_service)) -> dict:
    users = accounts.get_users()
    return {
        "message": f"All users in the database: {len(users)}",
        "data": [_serialize_user(user) for user in users],
    }


@router.get("/user")
def get_user(
    session_token: str = Depends(require_session_token),
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    user = accounts.get_user(session_token)
    return {"message": "User details retrieved successfully", "data": _serialize_user(user)}


@router.post("/forgot/password", status_code=status.HTTP_201_CREATED)
def forgot_password(
    payload: ForgotPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    accounts.forgot_password(payload.email)
    return {"message": "Password reset link sent to your email"}


@router.post("/reset/password/{token}")
def reset_password(
    token: str,
    payload: ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    accounts.reset_password(token, payload.new_password, payload.confirm_password)
    return {"message": "Password reset successfully"}


@router.post("/change/password")
def change_password(
    payload: ChangePasswordRequest,
    session_token: str = Depends(require_session_token),
    accounts: AccountService = Depends(get_account_service),
) -> dict:
    accounts.change_password(
        session_token,
        current_password=payload.password,
        new_password=payload.new_password,
        confirm_password=payload.confirm_password,
    )
    return {"message": "Password changed successfully"}


def _serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "userName": user.username,
        "email": user.email,
        "isVerified": user.is_verified,
        "createdAt": user.created_at.replace(microsecond=0).isoformat(),
        "updatedAt": user.updated_at.replace(microsecond=0).isoformat(),
    }
