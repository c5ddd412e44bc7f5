"""Admin authentication service."""

from typing import Any

import structlog

from catalog_admin.domain.entities import AdminUser
from catalog_admin.domain.exceptions import AuthenticationError, ValidationError
from catalog_admin.infrastructure.config import Settings
from catalog_admin.infrastructure.repositories import CatalogStore
from catalog_admin.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = structlog.get_logger()


class AuthService:
    """Issues and verifies admin access tokens."""

    def __init__(self, store: CatalogStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    async def login(self, email: Any, password: Any) -> str:
        """Exchange admin credentials for an access token.

        Args:
            email: Admin email; compared case-insensitively.
            password: Plain-text password.

        Returns:
            Signed access token.

        Raises:
            ValidationError: If either credential is missing.
            AuthenticationError: If the credentials do not match an admin.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        admin = await self.store.admins.get_by_email(str(email).strip().lower())
        if admin is None or not verify_password(str(password), admin.password_hash):
            logger.warning("Failed admin login", email=str(email))
            raise AuthenticationError("Invalid credentials")

        logger.info("Admin logged in", admin_id=admin.id)
        return create_access_token(
            admin.id,
            self.settings.jwt_secret,
            algorithm=self.settings.jwt_algorithm,
            expires_minutes=self.settings.jwt_expires_minutes,
        )

    def verify_token(self, token: str) -> dict[str, Any]:
        """Decode a bearer token.

        Raises:
            AuthenticationError: If the token is invalid or expired.
        """
        return decode_access_token(
            token, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm
        )

    async def ensure_default_admin(self) -> AdminUser | None:
        """Create the configured default admin if it does not exist.

        Returns:
            The created admin, or None if one already existed.
        """
        email = self.settings.default_admin_email.strip().lower()
        if await self.store.admins.get_by_email(email) is not None:
            return None

        admin = await self.store.admins.add(
            AdminUser(
                email=email,
                password_hash=hash_password(self.settings.default_admin_password),
            )
        )
        logger.info("Seeded default admin", email=email)
        return admin
