"""
Local cache of per-user data, kept in key-value storage.
"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from core.domain.constants import USER_DATA_KEY_PREFIX
from core.domain.errors import StorageError
from core.domain.models import UserData, utcnow
from core.interfaces.storage import IKeyValueStorage, IUserDataCache

logger = logging.getLogger(__name__)


def user_data_key(user_id: str) -> str:
    return f"{USER_DATA_KEY_PREFIX}{user_id}"


class LocalUserDataCache(IUserDataCache):
    """UserData records stored as JSON under sportsbuddy_user_data_<id>"""

    def __init__(self, storage: IKeyValueStorage):
        self.storage = storage

    def read(self, user_id: str) -> Optional[UserData]:
        raw = self.storage.get_item(user_data_key(user_id))
        if raw is None:
            return None
        try:
            return UserData.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            # Corrupt cache is treated as no cache
            logger.error(f"[CACHE] Unreadable user data for {user_id}, ignoring: {e}")
            return None

    def write(self, user_id: str, record: UserData) -> UserData:
        """Persist record. Raises StorageError if the value could not be stored"""
        # lastUpdated never goes backwards, even if the clock does
        stamped = record.model_copy(update={"last_updated": max(utcnow(), record.last_updated)})
        self.storage.set_item(user_data_key(user_id), json.dumps(stamped.to_storage()))
        return stamped

    def clear(self, user_id: str) -> None:
        try:
            self.storage.remove_item(user_data_key(user_id))
        except StorageError as e:
            logger.error(f"[CACHE] Failed to clear user data for {user_id}: {e}")
