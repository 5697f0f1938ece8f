"""
HTTP client for the backend edge function.

Every call is bounded by a timeout and never raises: network errors,
timeouts and session lookup failures come back as Unavailable results,
the same shape a degraded backend would produce.
"""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from config.settings import settings
from core.domain.constants import PUBLIC_ENDPOINTS
from core.domain.results import Ok, Unavailable, RemoteResult
from core.interfaces.remote import IServerClient, ISessionProvider

logger = logging.getLogger(__name__)


class ServerClient(IServerClient):
    """Authenticated calls to the app's REST function"""

    def __init__(
        self,
        session_provider: Optional[ISessionProvider],
        base_url: str = settings.server_base_url,
        anon_key: str = settings.supabase_anon_key,
        request_timeout: float = settings.request_timeout,
        session_lookup_timeout: float = settings.session_lookup_timeout,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.session_provider = session_provider
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.request_timeout = request_timeout
        self.session_lookup_timeout = session_lookup_timeout
        self._http = http_client or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _bearer_token(self, endpoint: str) -> str:
        """Session access token, or the anon key when there is none"""
        if endpoint in PUBLIC_ENDPOINTS or self.session_provider is None:
            return self.anon_key
        try:
            session = await asyncio.wait_for(
                self.session_provider.get_session(),
                timeout=self.session_lookup_timeout,
            )
        except asyncio.TimeoutError:
            logger.debug(f"[SERVER] Session lookup timed out for {endpoint}, using anon key")
            return self.anon_key
        except Exception as e:
            logger.debug(f"[SERVER] Session lookup failed for {endpoint}, using anon key: {e}")
            return self.anon_key
        return session.access_token if session else self.anon_key

    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        timeout = self.request_timeout if timeout is None else timeout
        try:
            token = await self._bearer_token(endpoint)
            request_headers = {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {token}",
                **(headers or {}),
            }
            response = await asyncio.wait_for(
                self._http.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    json=json,
                    headers=request_headers,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.debug(f"[SERVER] {method} {endpoint} timed out after {timeout}s")
            return Unavailable.synthetic("Server request timeout")
        except httpx.HTTPError as e:
            logger.debug(f"[SERVER] {method} {endpoint} failed: {e}")
            return Unavailable.synthetic(f"Network error: {e}")
        except Exception as e:
            logger.warning(f"[SERVER] {method} {endpoint} unexpected error: {e}")
            return Unavailable.synthetic(f"Request failed: {e}")

        return self._to_result(method, endpoint, response)

    def _to_result(self, method: str, endpoint: str, response: httpx.Response) -> RemoteResult:
        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None
            if response.is_success:
                logger.debug(f"[SERVER] {method} {endpoint} returned a non-JSON body")
                return Unavailable.synthetic("Malformed response body")

        if response.is_success:
            return Ok(status=response.status_code, payload=payload)

        body = payload if isinstance(payload, dict) else {}
        reason = body.get("error") or body.get("message") or response.reason_phrase
        logger.debug(f"[SERVER] {method} {endpoint} -> {response.status_code}: {reason}")
        return Unavailable(status=response.status_code, reason=str(reason), payload=body)

    # === ENDPOINTS ===

    async def health(self) -> RemoteResult:
        return await self.call("/health")

    async def signup(self, email: str, password: str, name: str) -> RemoteResult:
        return await self.call(
            "/signup", method="POST",
            json={"email": email, "password": password, "name": name},
        )

    async def change_password(self, current_password: str, new_password: str) -> RemoteResult:
        return await self.call(
            "/change-password", method="POST",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def reset_password(self, email: str) -> RemoteResult:
        return await self.call("/reset-password", method="POST", json={"email": email})

    async def get_profile(self) -> RemoteResult:
        return await self.call("/profile")

    async def update_profile(self, changes: Dict[str, Any]) -> RemoteResult:
        return await self.call("/profile", method="PUT", json=changes)

    async def get_user_data(self, user_id: str) -> RemoteResult:
        return await self.call(f"/user-data/{quote(user_id, safe='')}")

    async def put_user_data(self, user_id: str, user_data: Dict[str, Any]) -> RemoteResult:
        return await self.call(
            "/user-data", method="PUT",
            json={"userId": user_id, "userData": user_data},
        )

    async def list_events(self) -> RemoteResult:
        return await self.call("/events")

    async def create_event(self, event: Dict[str, Any]) -> RemoteResult:
        return await self.call("/events", method="POST", json=event)

    async def update_event(self, event_id: str, changes: Dict[str, Any]) -> RemoteResult:
        return await self.call(f"/events/{quote(event_id, safe='')}", method="PUT", json=changes)

    async def delete_event(self, event_id: str) -> RemoteResult:
        return await self.call(f"/events/{quote(event_id, safe='')}", method="DELETE")
