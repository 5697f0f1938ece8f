"""
Supabase client initialization.
Single point of auth backend connection.
"""

from supabase import create_client, Client
import asyncio
import concurrent.futures
import logging
from functools import wraps
from typing import Optional
from config.settings import settings
from core.domain.models import RemoteSession
from core.interfaces.remote import ISessionProvider

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def get_supabase() -> Client:
    """
    Lazily create the shared Supabase client.
    Created on first use so the app can still start (in mock mode) without credentials.
    """
    global _client
    if _client is None:
        if not settings.supabase_project_id or not settings.supabase_anon_key:
            raise RuntimeError(
                "Supabase credentials not configured "
                "(SUPABASE_PROJECT_ID, SUPABASE_ANON_KEY)"
            )
        _client = create_client(settings.supabase_url, settings.supabase_anon_key)
    return _client


# Dedicated bounded thread pool for auth calls - the Supabase Python SDK is
# synchronous and must not block the event loop.
_auth_executor = concurrent.futures.ThreadPoolExecutor(
    max_workers=4,
    thread_name_prefix="supabase-auth",
)


def run_sync(func):
    """
    Decorator to run synchronous Supabase operations in async context.
    Uses a dedicated bounded thread pool instead of the default executor.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(_auth_executor, lambda: func(*args, **kwargs))
    return wrapper


def _to_session(session) -> Optional[RemoteSession]:
    """Convert SDK session object to RemoteSession"""
    if session is None or not getattr(session, "access_token", None):
        return None
    user = getattr(session, "user", None)
    return RemoteSession(
        access_token=session.access_token,
        user_id=str(user.id) if user is not None else None,
        email=getattr(user, "email", None),
    )


class SupabaseSessionProvider(ISessionProvider):
    """Supabase Auth implementation of the session provider"""

    def __init__(self, client_factory=get_supabase):
        self._client_factory = client_factory

    @run_sync
    def _get_session_sync(self):
        return self._client_factory().auth.get_session()

    async def get_session(self) -> Optional[RemoteSession]:
        return _to_session(await self._get_session_sync())

    @run_sync
    def _sign_in_sync(self, email: str, password: str):
        return self._client_factory().auth.sign_in_with_password(
            {"email": email, "password": password}
        )

    async def sign_in_with_password(self, email: str, password: str) -> Optional[RemoteSession]:
        response = await self._sign_in_sync(email, password)
        return _to_session(getattr(response, "session", None))

    @run_sync
    def _sign_out_sync(self) -> None:
        self._client_factory().auth.sign_out()

    async def sign_out(self) -> None:
        await self._sign_out_sync()
        logger.debug("[SUPABASE] Signed out")
