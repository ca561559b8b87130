"""Authentication service with business logic."""

from fastapi import HTTPException, status

from finsmart.core.exceptions import ConflictError
from finsmart.core.security import (
    create_access_token,
    create_refresh_token,
    get_user_id_from_token,
    hash_password,
    verify_password,
)
from finsmart.models.user import User
from finsmart.repositories.user import UserRepository
from finsmart.schemas.auth import TokenPair


class AuthService:
    """Service for authentication operations."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def register(self, email: str, password: str, full_name: str) -> User:
        """
        Register a new user.

        Raises:
            ConflictError: If email already exists (AUTH_001)
        """
        email = email.lower()
        if await self.user_repo.email_exists(email):
            raise ConflictError("AUTH_001")

        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name.strip(),
        )
        return await self.user_repo.create(user)

    async def login(self, email: str, password: str) -> TokenPair:
        """
        Authenticate user and return JWT tokens.

        Raises:
            HTTPException: 401 on bad credentials, 403 for deactivated users
        """
        user = await self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is deactivated",
            )

        return TokenPair(
            access_token=create_access_token(user.id),
            refresh_token=create_refresh_token(user.id),
        )

    async def refresh_tokens(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair using refresh token.

        Raises:
            HTTPException: If refresh token is invalid or the user is gone/inactive
        """
        try:
            user_id = get_user_id_from_token(refresh_token, expected_type="refresh")
        except Exception:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired refresh token",
            )

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is deactivated",
            )

        return TokenPair(
            access_token=create_access_token(user.id),
            refresh_token=create_refresh_token(user.id),
        )
