"""
Local storage interfaces - abstractions over the browser-storage equivalent.
This allows swapping implementations (file directory -> in-memory -> keyring, etc.)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, List
from core.domain.models import UserData, UserProfile


class IKeyValueStorage(ABC):
    """String key -> JSON text store, shaped after window.localStorage"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Get raw stored text, None if missing"""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store text under key. Raises StorageError if it cannot be persisted"""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove key if present. Raises StorageError on I/O failure"""
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """List stored keys"""
        pass


class IUserDataCache(ABC):
    """Interface for the local copy of a user's data"""

    @abstractmethod
    def read(self, user_id: str) -> Optional[UserData]:
        """Get cached record, None if missing or unreadable"""
        pass

    @abstractmethod
    def write(self, user_id: str, record: UserData) -> UserData:
        """Stamp lastUpdated and persist. Returns the stamped record"""
        pass

    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Drop the cached record"""
        pass


class IMockSessionStore(ABC):
    """Interface for the persisted mock-mode user"""

    @abstractmethod
    def load(self) -> Optional[UserProfile]:
        """Get stored mock user, None if missing or unreadable"""
        pass

    @abstractmethod
    def save(self, user: UserProfile) -> bool:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class IActionLog(ABC):
    """Interface for the user action audit trail"""

    @abstractmethod
    def record(self, action: str, user_id: Optional[str] = None, **data: Any) -> Dict[str, Any]:
        pass
