from core.interfaces.storage import (
    IKeyValueStorage,
    IUserDataCache,
    IMockSessionStore,
    IActionLog,
)
from core.interfaces.remote import ISessionProvider, IServerClient

__all__ = [
    # Local storage
    "IKeyValueStorage",
    "IUserDataCache",
    "IMockSessionStore",
    "IActionLog",
    # Remote
    "ISessionProvider",
    "IServerClient",
]
