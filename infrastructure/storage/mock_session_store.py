"""
Persisted "mockUser" session used while running without the backend.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from core.domain.constants import MOCK_USER_KEY
from core.domain.errors import StorageError
from core.domain.models import UserProfile
from core.interfaces.storage import IKeyValueStorage, IMockSessionStore

logger = logging.getLogger(__name__)


class MockSessionStore(IMockSessionStore):
    """Saves and restores the signed-in mock user"""

    def __init__(self, storage: IKeyValueStorage):
        self.storage = storage

    def load(self) -> Optional[UserProfile]:
        raw = self.storage.get_item(MOCK_USER_KEY)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"[MOCK_SESSION] Error parsing mock user: {e}")
            return None

    def save(self, user: UserProfile) -> bool:
        try:
            self.storage.set_item(MOCK_USER_KEY, json.dumps(user.to_storage()))
            return True
        except StorageError as e:
            logger.error(f"[MOCK_SESSION] Failed to persist mock user: {e}")
            return False

    def clear(self) -> None:
        try:
            self.storage.remove_item(MOCK_USER_KEY)
        except StorageError as e:
            logger.error(f"[MOCK_SESSION] Failed to clear mock user: {e}")
