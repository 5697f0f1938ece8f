"""
Action log - audit trail of user-facing actions (login, logout, updates).

Every entry goes to the application log; the last N entries are also kept
in local storage so they survive restarts.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from config.features import features
from core.domain.constants import ACTION_LOG_KEY
from core.domain.errors import StorageError
from core.interfaces.storage import IActionLog, IKeyValueStorage

logger = logging.getLogger(__name__)


class ActionLog(IActionLog):

    def __init__(
        self,
        storage: IKeyValueStorage,
        limit: int = features.ACTION_LOG_LIMIT,
        persist: bool = features.ACTION_LOG_ENABLED,
    ):
        self.storage = storage
        self.limit = limit
        self.persist = persist

    def entries(self) -> List[Dict[str, Any]]:
        raw = self.storage.get_item(ACTION_LOG_KEY)
        if not raw:
            return []
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("[ACTION_LOG] Stored log is corrupt, starting fresh")
            return []
        return entries if isinstance(entries, list) else []

    def record(self, action: str, user_id: Optional[str] = None, **data: Any) -> Dict[str, Any]:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
            "data": data or None,
            "user": user_id,
        }
        logger.info(f"[ACTION] {action} user={user_id} data={data}")

        if self.persist:
            entries = self.entries()
            entries.append(entry)
            try:
                self.storage.set_item(ACTION_LOG_KEY, json.dumps(entries[-self.limit:], default=str))
            except StorageError as e:
                logger.warning(f"[ACTION_LOG] Could not persist {action}: {e}")
        return entry
