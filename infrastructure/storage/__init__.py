from infrastructure.storage.key_value_storage import JsonFileStorage, InMemoryStorage
from infrastructure.storage.user_data_cache import LocalUserDataCache, user_data_key
from infrastructure.storage.mock_session_store import MockSessionStore
from infrastructure.storage.action_log import ActionLog

__all__ = [
    "JsonFileStorage",
    "InMemoryStorage",
    "LocalUserDataCache",
    "user_data_key",
    "MockSessionStore",
    "ActionLog",
]
