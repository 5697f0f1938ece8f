"""
Shared fakes for the backend, the auth provider and local storage.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import pytest

from core.domain.models import RemoteSession, SessionMode
from core.domain.results import Ok, Unavailable, RemoteResult
from core.domain.session import SessionContext
from core.interfaces.remote import IServerClient, ISessionProvider
from core.services.auth_service import AuthService
from core.services.user_data_service import UserDataService
from infrastructure.storage import (
    InMemoryStorage,
    LocalUserDataCache,
    MockSessionStore,
    ActionLog,
)

REMOTE_PROFILE = {
    "id": "remote-user-1",
    "name": "Remote User",
    "email": "remote@sportsbuddy.com",
    "skillLevel": "advanced",
    "sports": ["Tennis"],
}


class FakeServer(IServerClient):
    """In-process stand-in for the edge function"""

    def __init__(self, available: bool = True):
        self.available = available
        self.user_data: Dict[str, Dict[str, Any]] = {}
        self.profile: Optional[Dict[str, Any]] = dict(REMOTE_PROFILE)
        self.signup_status = 200
        self.calls: List[Tuple[str, str]] = []

    async def call(self, endpoint, method="GET", json=None, headers=None, timeout=None) -> RemoteResult:
        self.calls.append((method, endpoint))
        if not self.available:
            return Unavailable.synthetic("offline")

        if endpoint.startswith("/user-data/") and method == "GET":
            user_id = endpoint.rsplit("/", 1)[-1]
            if user_id not in self.user_data:
                return Unavailable(status=404, reason="User data not found")
            return Ok(status=200, payload={"userData": self.user_data[user_id]})
        if endpoint == "/user-data" and method == "PUT":
            self.user_data[json["userId"]] = json["userData"]
            return Ok(status=200, payload={"success": True})
        if endpoint == "/profile" and method == "GET":
            if self.profile is None:
                return Unavailable(status=401, reason="Unauthorized")
            return Ok(status=200, payload={"profile": self.profile})
        if endpoint == "/profile" and method == "PUT":
            self.profile = {**self.profile, **json}
            return Ok(status=200, payload={"profile": self.profile})
        if endpoint == "/signup":
            if self.signup_status != 200:
                return Unavailable(status=self.signup_status, reason="User already exists")
            return Ok(status=200, payload={"user": {"email": json["email"]}})
        if endpoint in ("/change-password", "/reset-password"):
            return Ok(status=200, payload={"success": True})
        return Unavailable(status=404, reason="Not found")

    def count(self, method: str, prefix: str) -> int:
        return sum(1 for m, e in self.calls if m == method and e.startswith(prefix))

    async def get_profile(self):
        return await self.call("/profile")

    async def update_profile(self, changes):
        return await self.call("/profile", method="PUT", json=changes)

    async def signup(self, email, password, name):
        return await self.call("/signup", method="POST", json={"email": email, "password": password, "name": name})

    async def change_password(self, current_password, new_password):
        return await self.call("/change-password", method="POST",
                               json={"currentPassword": current_password, "newPassword": new_password})

    async def reset_password(self, email):
        return await self.call("/reset-password", method="POST", json={"email": email})

    async def get_user_data(self, user_id):
        return await self.call(f"/user-data/{user_id}")

    async def put_user_data(self, user_id, user_data):
        return await self.call("/user-data", method="PUT", json={"userId": user_id, "userData": user_data})


class FakeSessionProvider(ISessionProvider):
    """Configurable auth backend: a session, an error, or a hang"""

    def __init__(self, session: Optional[RemoteSession] = None, delay: float = 0.0,
                 error: Optional[Exception] = None):
        self.session = session
        self.delay = delay
        self.error = error
        self.sign_in_error: Optional[Exception] = None
        self.calls: List[str] = []

    async def get_session(self):
        self.calls.append("get_session")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.session

    async def sign_in_with_password(self, email, password):
        self.calls.append("sign_in")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.sign_in_error:
            raise self.sign_in_error
        self.session = RemoteSession(access_token="token-123", user_id="remote-user-1", email=email)
        return self.session

    async def sign_out(self):
        self.calls.append("sign_out")
        self.session = None


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def cache(storage):
    return LocalUserDataCache(storage)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def context():
    return SessionContext()


@pytest.fixture
def user_data_service(server, cache, context):
    return UserDataService(server=server, cache=cache, context=context)


@pytest.fixture
def session_provider():
    return FakeSessionProvider()


def build_auth_service(session_provider, server, user_data_service, storage, context, **kwargs):
    return AuthService(
        session_provider=session_provider,
        server=server,
        user_data=user_data_service,
        mock_sessions=MockSessionStore(storage),
        action_log=ActionLog(storage, limit=100, persist=True),
        context=context,
        session_restore_timeout=kwargs.pop("session_restore_timeout", 0.05),
        login_timeout=kwargs.pop("login_timeout", 0.05),
        **kwargs,
    )


@pytest.fixture
def auth_service(session_provider, server, user_data_service, storage, context):
    return build_auth_service(session_provider, server, user_data_service, storage, context)


@pytest.fixture
def mock_context():
    return SessionContext(mode=SessionMode.LOCAL_MOCK)
