"""
Auth service - session bootstrap, login/logout/register.

Tries the Supabase backend first; any failure on the auth path flips the
shared SessionContext to local mock mode for the rest of the process and
continues against the demo allow-list and the locally stored mock user.
"""

import asyncio
import logging
import time
from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError

from config.settings import settings
from config.features import features
from core.domain.constants import DEMO_ACCOUNTS, MOCK_USER_ID_PREFIX, AVATAR_URL_TEMPLATE
from core.domain.models import (
    AuthState, BootstrapState, UserProfile, UserProfileUpdate, SkillLevel,
)
from core.domain.results import payload_field, RemoteResult
from core.domain.session import SessionContext
from core.interfaces.remote import IServerClient, ISessionProvider
from core.interfaces.storage import IActionLog, IMockSessionStore
from core.services.user_data_service import UserDataService

logger = logging.getLogger(__name__)


def find_demo_account(email: str, password: str) -> Optional[UserProfile]:
    """Match credentials against the demo allow-list"""
    for account in DEMO_ACCOUNTS:
        if account["email"] == email and account["password"] == password:
            return UserProfile.model_validate(account["profile"])
    return None


def new_mock_user(email: str, name: str) -> UserProfile:
    return UserProfile(
        id=f"{MOCK_USER_ID_PREFIX}{int(time.time() * 1000)}",
        name=name,
        email=email,
        avatar_url=AVATAR_URL_TEMPLATE.format(seed=email),
        skill_level=SkillLevel.BEGINNER,
        joined_date=date.today(),
    )


def _profile_from(result: RemoteResult) -> Optional[UserProfile]:
    raw = payload_field(result, "profile")
    if raw is None:
        return None
    try:
        return UserProfile.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"[AUTH] Backend returned an invalid profile: {e}")
        return None


class AuthService:
    """Service for authentication and the current user's profile"""

    def __init__(
        self,
        session_provider: ISessionProvider,
        server: IServerClient,
        user_data: UserDataService,
        mock_sessions: IMockSessionStore,
        action_log: IActionLog,
        context: SessionContext,
        session_restore_timeout: float = settings.session_restore_timeout,
        login_timeout: float = settings.login_timeout,
        mock_auth_enabled: bool = features.MOCK_AUTH_ENABLED,
    ):
        self.session_provider = session_provider
        self.server = server
        self.user_data = user_data
        self.mock_sessions = mock_sessions
        self.action_log = action_log
        self.context = context
        self.session_restore_timeout = session_restore_timeout
        self.login_timeout = login_timeout
        self.mock_auth_enabled = mock_auth_enabled
        self.state = AuthState()

    @property
    def user(self) -> Optional[UserProfile]:
        return self.state.user

    def _transition(self, new_state: BootstrapState) -> None:
        logger.info(f"[AUTH] {self.state.bootstrap_state.value} -> {new_state.value}")
        self.state.bootstrap_state = new_state

    def _set_user(self, user: Optional[UserProfile], bootstrap_state: BootstrapState) -> AuthState:
        self.state = AuthState(
            user=user,
            is_loading=False,
            is_authenticated=user is not None,
            bootstrap_state=self.state.bootstrap_state,
        )
        self._transition(bootstrap_state)
        return self.state

    # === BOOTSTRAP ===

    async def bootstrap(self) -> AuthState:
        """Restore whatever session exists at startup"""
        self.state = AuthState()
        if not self.context.is_remote:
            return await self._restore_mock_session()

        self._transition(BootstrapState.RESTORING_REMOTE)
        try:
            session = await asyncio.wait_for(
                self.session_provider.get_session(),
                timeout=self.session_restore_timeout,
            )
        except asyncio.TimeoutError:
            self.context.fall_back_to_mock("session check timeout")
            return await self._restore_mock_session()
        except Exception as e:
            logger.debug(f"[AUTH] Session check error, using mock auth: {e}")
            self.context.fall_back_to_mock(f"session check error: {e}")
            return await self._restore_mock_session()

        if session is None:
            return self._set_user(None, BootstrapState.UNAUTHENTICATED)

        result = await self.server.get_profile()
        profile = _profile_from(result)
        if profile is None:
            reason = result.reason if not result.ok else "missing profile"
            self.context.fall_back_to_mock(f"profile fetch failed: {reason}")
            return await self._restore_mock_session()

        await self.user_data.load(profile.id)
        self.action_log.record("SESSION_RESTORED", user_id=profile.id)
        return self._set_user(profile, BootstrapState.REMOTE_RESTORED)

    async def _restore_mock_session(self) -> AuthState:
        self._transition(BootstrapState.FALLING_BACK_TO_MOCK)
        user = self.mock_sessions.load()
        if user is None:
            return self._set_user(None, BootstrapState.UNAUTHENTICATED)

        await self.user_data.load(user.id)
        self.action_log.record("MOCK_SESSION_RESTORED", user_id=user.id)
        return self._set_user(user, BootstrapState.MOCK_RESTORED)

    # === LOGIN / LOGOUT ===

    async def login(self, email: str, password: str) -> bool:
        self.action_log.record("LOGIN_ATTEMPT", email=email)

        if not self.context.is_remote:
            return await self._login_with_mock(email, password)

        try:
            session = await asyncio.wait_for(
                self.session_provider.sign_in_with_password(email, password),
                timeout=self.login_timeout,
            )
        except asyncio.TimeoutError:
            self.context.fall_back_to_mock("login timeout")
            return await self._login_with_mock(email, password)
        except Exception as e:
            logger.debug(f"[AUTH] Backend login failed, trying mock auth: {e}")
            self.context.fall_back_to_mock(f"login error: {e}")
            return await self._login_with_mock(email, password)

        if session is None:
            self.context.fall_back_to_mock("login returned no session")
            return await self._login_with_mock(email, password)

        result = await self.server.get_profile()
        profile = _profile_from(result)
        if profile is None:
            logger.error("[AUTH] Failed to fetch profile after login")
            await self._remote_sign_out()
            self.context.fall_back_to_mock("profile fetch failed after login")
            return await self._login_with_mock(email, password)

        self._set_user(profile, BootstrapState.REMOTE_RESTORED)
        await self.user_data.load(profile.id)
        self.action_log.record(
            "LOGIN_SUCCESS", user_id=profile.id,
            user_type="admin" if profile.is_admin else "user",
        )
        return True

    async def _login_with_mock(self, email: str, password: str) -> bool:
        profile = find_demo_account(email, password) if self.mock_auth_enabled else None
        if profile is None:
            self.action_log.record("LOGIN_FAILED", email=email, reason="Invalid credentials")
            return False

        self._set_user(profile, BootstrapState.MOCK_RESTORED)
        self.mock_sessions.save(profile)
        await self.user_data.load(profile.id)
        self.action_log.record("MOCK_LOGIN_SUCCESS", user_id=profile.id)
        return True

    async def _remote_sign_out(self) -> None:
        try:
            await self.session_provider.sign_out()
        except Exception as e:
            logger.debug(f"[AUTH] Backend sign-out error: {e}")

    async def logout(self) -> None:
        user = self.state.user
        self.action_log.record("LOGOUT", user_id=user.id if user else None)

        # Local data goes first, before the user reference is dropped
        if user is not None:
            self.user_data.clear(user.id)

        if self.context.is_remote:
            await self._remote_sign_out()

        self.mock_sessions.clear()
        self._set_user(None, BootstrapState.UNAUTHENTICATED)

    # === REGISTRATION ===

    async def register(self, email: str, password: str, name: str) -> bool:
        self.action_log.record("REGISTER_ATTEMPT", email=email, name=name)

        if not self.context.is_remote:
            return await self._register_mock(email, name)

        result = await self.server.signup(email, password, name)
        if not result.ok:
            if result.is_outage:
                self.context.fall_back_to_mock(f"signup unavailable: {result.reason}")
                return await self._register_mock(email, name)
            logger.error(f"[AUTH] Registration error: {result.reason}")
            self.action_log.record("REGISTER_FAILED", email=email, reason=result.reason)
            return False

        # Auto-login with the new credentials; no mock fallback here since
        # the account now exists remotely
        try:
            session = await asyncio.wait_for(
                self.session_provider.sign_in_with_password(email, password),
                timeout=self.login_timeout,
            )
        except asyncio.TimeoutError:
            logger.error("[AUTH] Auto-login after registration timed out")
            return False
        except Exception as e:
            logger.error(f"[AUTH] Auto-login after registration failed: {e}")
            return False
        if session is None:
            logger.error("[AUTH] Auto-login after registration returned no session")
            return False

        profile = _profile_from(await self.server.get_profile())
        if profile is None:
            logger.error("[AUTH] Failed to fetch profile after registration")
            return False

        self._set_user(profile, BootstrapState.REMOTE_RESTORED)
        await self.user_data.load(profile.id)
        self.action_log.record("REGISTER_SUCCESS", user_id=profile.id)
        return True

    async def _register_mock(self, email: str, name: str) -> bool:
        if not self.mock_auth_enabled:
            self.action_log.record("REGISTER_FAILED", email=email, reason="Mock auth disabled")
            return False
        user = new_mock_user(email, name)
        self._set_user(user, BootstrapState.MOCK_RESTORED)
        self.mock_sessions.save(user)
        await self.user_data.load(user.id)
        self.action_log.record("MOCK_REGISTER_SUCCESS", user_id=user.id)
        return True

    # === PROFILE ===

    async def update_user(self, changes: Dict[str, Any]) -> Optional[UserProfile]:
        """Update the signed-in user's profile; falls back to a local update"""
        if self.state.user is None:
            return None
        update = UserProfileUpdate.model_validate(changes)

        if self.context.is_remote:
            result = await self.server.update_profile(update.model_dump(mode="json", by_alias=True, exclude_unset=True))
            profile = _profile_from(result)
            if profile is not None:
                self.state.user = profile
                self.action_log.record("USER_UPDATED", user_id=profile.id, fields=sorted(changes))
                return profile
            logger.error("[AUTH] Failed to update user profile, updating locally")

        return self._update_user_locally(update)

    def _update_user_locally(self, update: UserProfileUpdate) -> UserProfile:
        user = self.state.user.model_copy(update=update.model_dump(exclude_unset=True))
        self.state.user = user
        self.mock_sessions.save(user)
        self.action_log.record("USER_UPDATED", user_id=user.id, local=True)
        return user

    async def change_password(self, current_password: str, new_password: str) -> bool:
        if not self.context.is_remote or self.state.user is None:
            return False
        result = await self.server.change_password(current_password, new_password)
        if not result.ok:
            logger.info(f"[AUTH] Password change rejected: {result.reason}")
        return result.ok

    async def reset_password(self, email: str) -> bool:
        if not self.context.is_remote:
            return False
        result = await self.server.reset_password(email)
        return result.ok
