from __future__ import annotations

from datetime import datetime

from pydantic import Field

from studydesk.models.common import WireModel


class User(WireModel):
    id: str = Field(alias="_id")
    username: str
    email: str
    profile_image: str | None = Field(default=None, alias="profileImage")
    created_at: datetime | None = Field(default=None, alias="createdAt")


class AuthResult(WireModel):
    token: str
    user: User


class LoginRequest(WireModel):
    email: str
    password: str


class RegisterRequest(WireModel):
    username: str
    email: str
    password: str


class PasswordChangeRequest(WireModel):
    current_password: str = Field(alias="currentPassword")
    new_password: str = Field(alias="newPassword")
    confirm_new_password: str = Field(alias="confirmNewPassword")


class ProfileUpdate(WireModel):
    username: str | None = None
    email: str | None = None
    profile_image: str | None = Field(default=None, alias="profileImage")


class SessionSnapshot(WireModel):
    authenticated: bool
    user: User | None = None
