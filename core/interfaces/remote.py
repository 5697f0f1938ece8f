"""
Remote interfaces - abstract contract for the auth backend and the REST functions.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from core.domain.models import RemoteSession
from core.domain.results import RemoteResult


class ISessionProvider(ABC):
    """Auth backend: session lookup, password sign-in, sign-out"""

    @abstractmethod
    async def get_session(self) -> Optional[RemoteSession]:
        """Current session, None if nobody is signed in. May raise on backend errors"""
        pass

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> Optional[RemoteSession]:
        """Sign in, None if no session came back. May raise on bad credentials"""
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        pass


class IServerClient(ABC):
    """Authenticated calls to the backend function. Never raises"""

    @abstractmethod
    async def call(
        self,
        endpoint: str,
        method: str = "GET",
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> RemoteResult:
        pass

    @abstractmethod
    async def get_profile(self) -> RemoteResult:
        pass

    @abstractmethod
    async def update_profile(self, changes: Dict[str, Any]) -> RemoteResult:
        pass

    @abstractmethod
    async def signup(self, email: str, password: str, name: str) -> RemoteResult:
        pass

    @abstractmethod
    async def change_password(self, current_password: str, new_password: str) -> RemoteResult:
        pass

    @abstractmethod
    async def reset_password(self, email: str) -> RemoteResult:
        pass

    @abstractmethod
    async def get_user_data(self, user_id: str) -> RemoteResult:
        pass

    @abstractmethod
    async def put_user_data(self, user_id: str, user_data: Dict[str, Any]) -> RemoteResult:
        pass
