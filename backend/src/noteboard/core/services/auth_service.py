"""Authentication service implementation."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...security import blacklist_token, create_access_token, hash_password, verify_password
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Username/password accounts with JWT access tokens."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> UserResponse:
        if await self.user_repo.is_username_taken(request.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken"
            )

        user = await self.user_repo.create_user(
            {
                "username": request.username,
                "password_hash": hash_password(request.password),
                "full_name": request.full_name,
                "is_active": True,
            }
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return UserResponse.model_validate(user)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        user = await self.user_repo.get_by_username(request.username)
        # same answer for unknown user and wrong password
        if not user or not user.can_login() or not verify_password(request.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        access_token = create_access_token(data={"sub": str(user.id)})
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return UserResponse.model_validate(user)

    async def update_user_profile(self, user_id: UUID, request: UserUpdateRequest) -> UserResponse:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if request.username and request.username != user.username:
            if await self.user_repo.is_username_taken(request.username):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken"
                )

        update_data = {}
        if request.username and request.username != user.username:
            update_data["username"] = request.username
        if request.full_name is not None:
            update_data["full_name"] = request.full_name

        if update_data:
            user = await self.user_repo.update_user(user_id, update_data)
            logger.info(
                "Profile updated", extra={"user_id": str(user_id), "fields": sorted(update_data)}
            )
        return UserResponse.model_validate(user)

    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> bool:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        if not verify_password(request.current_password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect"
            )

        await self.user_repo.update_user(user_id, {"password_hash": hash_password(request.new_password)})
        logger.info("Password changed", extra={"user_id": str(user_id)})
        return True

    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Blacklist the access token; False when Redis could not record it."""
        revoked = await blacklist_token(access_token)
        if not revoked:
            logger.warning("Logout could not blacklist token", extra={"user_id": str(user_id)})
        return revoked
