"""
Authentication schemas: registration, login and the current-user view.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LoginRequest(BaseModel):
    """User login request schema."""

    username: str = Field(min_length=3, max_length=50, description="Username")
    password: str = Field(min_length=8, max_length=128, description="User password")

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "john_doe", "password": "securepassword123"}}
    )


class RegisterRequest(BaseModel):
    """User registration request schema."""

    username: str = Field(min_length=3, max_length=50, description="Unique username")
    password: str = Field(min_length=8, max_length=128, description="User password")
    confirm_password: str = Field(min_length=8, max_length=128, description="Password confirmation")
    full_name: Optional[str] = Field(default=None, max_length=100, description="Full name (optional)")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Username can only contain letters, numbers, hyphens, and underscores")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "new_user",
                "password": "securepassword123",
                "confirm_password": "securepassword123",
                "full_name": "New User",
            }
        }
    )


class UserResponse(BaseModel):
    """Public user data."""

    id: uuid.UUID
    username: str
    full_name: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """JWT token response schema."""

    access_token: str = Field(description="JWT access token; also used as ?token= on the realtime socket")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserResponse


class PasswordChangeRequest(BaseModel):
    """Password change request schema."""

    current_password: str = Field(description="Current password")
    new_password: str = Field(min_length=8, max_length=128, description="New password")
    confirm_new_password: str = Field(min_length=8, max_length=128, description="New password confirmation")

    @model_validator(mode="after")
    def new_passwords_match(self):
        if self.new_password != self.confirm_new_password:
            raise ValueError("New passwords do not match")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "current_password": "oldpassword123",
                "new_password": "newsecurepassword123",
                "confirm_new_password": "newsecurepassword123",
            }
        }
    )


class UserUpdateRequest(BaseModel):
    """Profile update: username and/or full name."""

    username: Optional[str] = Field(default=None, min_length=3, max_length=50, description="Username")
    full_name: Optional[str] = Field(default=None, max_length=100, description="Full name")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        if v is not None and not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError("Username can only contain letters, numbers, hyphens, and underscores")
        return v

    model_config = ConfigDict(
        json_schema_extra={"example": {"username": "newusername", "full_name": "New Full Name"}}
    )
