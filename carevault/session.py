import re
from enum import Enum
from typing import Optional

from carevault.core.config import get_logger
from carevault.core.storage import BaseKeyValueStore, StorageKeys

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Role(str, Enum):
    ADMIN = "admin"
    NURSE = "nurse"


class Session:
    """Mock sign-in state kept in the key-value store. Nothing is verified."""

    def __init__(self, storage: BaseKeyValueStore):
        self.storage = storage

    async def login(self, role, email: str) -> Role:
        if not EMAIL_PATTERN.match(email or ""):
            raise ValueError(f"Invalid email address: {email!r}")
        role = Role(role)
        await self.storage.set(StorageKeys.USER_ROLE, role.value)
        await self.storage.set(StorageKeys.USER_EMAIL, email)
        await self.storage.set(StorageKeys.IS_AUTHENTICATED, "true")
        logger.info(f"Signed in to the {role.value} portal")
        return role

    async def logout(self) -> None:
        # Signing out wipes the whole profile, data included
        await self.storage.clear()

    async def is_authenticated(self) -> bool:
        return await self.storage.get(StorageKeys.IS_AUTHENTICATED) == "true"

    async def role(self) -> Optional[Role]:
        stored = await self.storage.get(StorageKeys.USER_ROLE)
        try:
            return Role(stored) if stored else None
        except ValueError:
            return None

    async def email(self) -> Optional[str]:
        return await self.storage.get(StorageKeys.USER_EMAIL)

    async def require_role(self, role) -> None:
        if not await self.is_authenticated() or await self.role() != Role(role):
            raise PermissionError(f"{Role(role).value} access required")
