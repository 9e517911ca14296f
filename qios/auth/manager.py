import logging
import uuid
from typing import Optional

from fastapi import Request
from fastapi_users import BaseUserManager, UUIDIDMixin
from sqlalchemy.future import select

from qios.core.config import settings
from qios.models.user import User

log = logging.getLogger(__name__)


class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.jwt_secret
    verification_token_secret = settings.jwt_secret

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.user_db.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def authenticate_username(self, username: str, password: str) -> Optional[User]:
        """Username + password login; fastapi-users' own authenticate() is email-based."""
        user = await self.get_by_username(username)
        if user is None:
            # Hash anyway so unknown usernames cost the same as wrong passwords
            self.password_helper.hash(password)
            return None

        verified, updated_hash = self.password_helper.verify_and_update(
            password, user.hashed_password
        )
        if not verified:
            return None
        if updated_hash is not None:
            await self.user_db.update(user, {"hashed_password": updated_hash})
        return user

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        log.info("User registered: %s <%s>", user.username, user.email)
