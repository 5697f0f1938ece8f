"""
Web loader - initializes storage, backend clients, and services.
"""

from config.settings import settings
from config.features import features
from core.domain.models import SessionMode
from core.domain.session import SessionContext

# Infrastructure
from infrastructure.database import SupabaseSessionProvider
from infrastructure.remote import ServerClient
from infrastructure.storage import (
    JsonFileStorage,
    LocalUserDataCache,
    MockSessionStore,
    ActionLog,
)

# Core services
from core.services import UserDataService, AuthService


# === SESSION MODE ===
context = SessionContext(
    mode=SessionMode.LOCAL_MOCK if features.FORCE_LOCAL_MODE else SessionMode.REMOTE_BACKEND
)


# === LOCAL STORAGE ===
storage = JsonFileStorage(settings.storage_dir)
user_data_cache = LocalUserDataCache(storage)
mock_sessions = MockSessionStore(storage)
action_log = ActionLog(storage)


# === BACKEND ===
session_provider = SupabaseSessionProvider()
server_client = ServerClient(session_provider)


# === BUSINESS SERVICES ===
user_data_service = UserDataService(server=server_client, cache=user_data_cache, context=context)
auth_service = AuthService(
    session_provider=session_provider,
    server=server_client,
    user_data=user_data_service,
    mock_sessions=mock_sessions,
    action_log=action_log,
    context=context,
)
