import abc
from typing import Optional


class StorageKeys:
    """Names of the values the app keeps in its key-value store."""
    PATIENTS = "patients"
    MEDICAL_RECORDS = "medicalRecords"
    USER_ROLE = "userRole"
    USER_EMAIL = "userEmail"
    IS_AUTHENTICATED = "isAuthenticated"
    SYNC_STATUS = "syncStatus"
    LAST_SYNC = "lastSync"


class BaseKeyValueStore(abc.ABC):
    """Abstract interface for the string key-value store backing all app state."""

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Returns the value stored under key, or None when absent."""
        pass

    @abc.abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Stores value under key, overwriting any previous value."""
        pass

    @abc.abstractmethod
    async def remove(self, key: str) -> None:
        """Deletes key. Removing a missing key is a no-op."""
        pass

    @abc.abstractmethod
    async def clear(self) -> None:
        """Deletes every key owned by this store."""
        pass
