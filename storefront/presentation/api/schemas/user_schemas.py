"""Pydantic schemas for account API endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _CamelCaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UserRegisterRequest(_CamelCaseRequest):
    """Request schema for user registration."""

    username: str = Field(alias="userName")
    email: EmailStr
    password: str
    confirm_password: str = Field(alias="confirmPassword")


class UserLoginRequest(_CamelCaseRequest):
    """Request schema for user login."""

    username: str = Field(alias="userName")
    password: str


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(_CamelCaseRequest):
    new_password: str = Field(alias="newPassword")
    confirm_password: str = Field(alias="confirmPassword")


class ChangePasswordRequest(_CamelCaseRequest):
    password: str
    new_password: str = Field(alias="newPassword")
    confirm_password: str = Field(alias="confirmPassword")


class ResendVerificationRequest(BaseModel):
    """Request schema to resend the verification email."""

    email: EmailStr
