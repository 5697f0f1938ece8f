"""
User data service - keeps a user's interaction state in sync between the
backend and the local cache.

Reads are remote-first: backend, then local cache, then an empty record.
Writes are local-first: the cache write is what counts, the backend sync
is best effort and never fails the call.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError

from core.domain.errors import StorageError
from core.domain.models import UserData, UserDataUpdate
from core.domain.results import payload_field
from core.domain.session import SessionContext
from core.interfaces.remote import IServerClient
from core.interfaces.storage import IUserDataCache

logger = logging.getLogger(__name__)

Update = Union[UserData, UserDataUpdate, Dict[str, Any]]


def _added(ids: list, item: str) -> list:
    return ids if item in ids else [*ids, item]


def _removed(ids: list, item: str) -> list:
    return [i for i in ids if i != item]


class UserDataService:
    """Service for loading and mutating per-user data"""

    def __init__(self, server: IServerClient, cache: IUserDataCache, context: SessionContext):
        self.server = server
        self.cache = cache
        self.context = context
        # In-memory copy per user, refreshed on every load/save
        self._records: Dict[str, UserData] = {}

    async def _fetch_remote(self, user_id: str) -> Optional[UserData]:
        if not self.context.is_remote:
            return None

        result = await self.server.get_user_data(user_id)
        if not result.ok:
            logger.debug(f"[USER_DATA] Remote load failed for {user_id}: {result.reason}")
            return None

        raw = payload_field(result, "userData")
        if raw is None:
            logger.debug(f"[USER_DATA] Remote returned no userData for {user_id}")
            return None
        try:
            return UserData.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"[USER_DATA] Remote userData for {user_id} is invalid: {e}")
            return None

    async def load(self, user_id: str) -> UserData:
        """Get the freshest available record. Never raises for remote or cache problems"""
        record = await self._fetch_remote(user_id)
        if record is not None:
            # Mirror into the cache so the next offline start sees it
            try:
                record = self.cache.write(user_id, record)
            except StorageError as e:
                logger.error(f"[USER_DATA] Could not mirror remote data for {user_id}: {e}")
        else:
            record = self.cache.read(user_id)
            if record is None:
                logger.debug(f"[USER_DATA] No stored data for {user_id}, starting empty")
                record = UserData()

        self._records[user_id] = record
        return record

    async def save(self, user_id: str, update: Update) -> bool:
        """
        Merge update into the current record and persist it.

        Returns True when the local write succeeded, whatever happened
        with the backend sync.
        """
        current = await self.load(user_id)

        if isinstance(update, UserData):
            changes = update.model_dump()
        else:
            if isinstance(update, dict):
                update = UserDataUpdate.model_validate(update)
            changes = update.model_dump(exclude_unset=True)
        changes.pop("last_updated", None)

        merged = UserData.model_validate({**current.model_dump(), **changes})

        try:
            merged = self.cache.write(user_id, merged)
        except StorageError as e:
            logger.error(f"[USER_DATA] Local save failed for {user_id}: {e}")
            return False
        self._records[user_id] = merged

        if self.context.is_remote:
            result = await self.server.put_user_data(user_id, merged.to_storage())
            if result.ok:
                logger.debug(f"[USER_DATA] Synced {user_id} to backend")
            else:
                logger.debug(f"[USER_DATA] Backend sync failed for {user_id}, saved locally only: {result.reason}")
        return True

    async def _mutate(self, user_id: str, action: str, mutation: Callable[[UserData], UserDataUpdate]) -> bool:
        """Load, apply mutation, and save only if something changed"""
        data = await self.load(user_id)
        update = mutation(data)
        changes = update.model_dump(exclude_unset=True)
        if all(getattr(data, field) == value for field, value in changes.items()):
            logger.debug(f"[USER_DATA] {action} for {user_id} is a no-op")
            return True
        return await self.save(user_id, update)

    # === DOMAIN ACTIONS ===

    async def join_event(self, user_id: str, event_id: str) -> bool:
        return await self._mutate(user_id, "join_event", lambda d: UserDataUpdate(
            events=_added(d.events, event_id),
        ))

    async def leave_event(self, user_id: str, event_id: str) -> bool:
        # Leaving also drops authorship so createdEvents stays a subset of events
        return await self._mutate(user_id, "leave_event", lambda d: UserDataUpdate(
            events=_removed(d.events, event_id),
            created_events=_removed(d.created_events, event_id),
        ))

    async def like_match(self, user_id: str, match_id: str) -> bool:
        return await self._mutate(user_id, "like_match", lambda d: UserDataUpdate(
            liked_matches=_added(d.liked_matches, match_id),
            passed_matches=_removed(d.passed_matches, match_id),
        ))

    async def pass_match(self, user_id: str, match_id: str) -> bool:
        return await self._mutate(user_id, "pass_match", lambda d: UserDataUpdate(
            passed_matches=_added(d.passed_matches, match_id),
            liked_matches=_removed(d.liked_matches, match_id),
        ))

    async def reset_passed_matches(self, user_id: str) -> bool:
        return await self._mutate(user_id, "reset_passed_matches", lambda d: UserDataUpdate(
            passed_matches=[],
        ))

    async def mark_event_created(self, user_id: str, event_id: str) -> bool:
        return await self._mutate(user_id, "mark_event_created", lambda d: UserDataUpdate(
            created_events=_added(d.created_events, event_id),
            events=_added(d.events, event_id),
        ))

    async def unlock_achievement(self, user_id: str, achievement_id: str) -> bool:
        return await self._mutate(user_id, "unlock_achievement", lambda d: UserDataUpdate(
            achievements=_added(d.achievements, achievement_id),
        ))

    # === IN-MEMORY QUERIES ===

    def current(self, user_id: str) -> Optional[UserData]:
        """Last loaded/saved record, without touching any store"""
        return self._records.get(user_id)

    def has_joined_event(self, user_id: str, event_id: str) -> bool:
        data = self.current(user_id)
        return data is not None and event_id in data.events

    def has_liked_match(self, user_id: str, match_id: str) -> bool:
        data = self.current(user_id)
        return data is not None and match_id in data.liked_matches

    def has_passed_match(self, user_id: str, match_id: str) -> bool:
        data = self.current(user_id)
        return data is not None and match_id in data.passed_matches

    def clear(self, user_id: str) -> None:
        """Forget the local copy (used on logout). The backend copy is kept"""
        self._records.pop(user_id, None)
        self.cache.clear(user_id)
