"""
Session context - explicit holder of the process-wide SessionMode.

Passed to the auth service, the user data service and the web adapter
instead of living in a module global, so tests can inject either mode.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from core.domain.models import SessionMode

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    mode: SessionMode = SessionMode.REMOTE_BACKEND
    fallback_reason: Optional[str] = None

    @property
    def is_remote(self) -> bool:
        return self.mode == SessionMode.REMOTE_BACKEND

    def fall_back_to_mock(self, reason: str) -> None:
        """One-way switch to local mock mode for the rest of the process"""
        if not self.is_remote:
            return
        self.mode = SessionMode.LOCAL_MOCK
        self.fallback_reason = reason
        logger.info(f"[SESSION] Switching to local mock mode: {reason}")
