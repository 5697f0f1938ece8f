"""
Tests for local storage: key-value backends, the user data cache,
the mock session store and the action log.
"""
import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.constants import ACTION_LOG_KEY, MOCK_USER_KEY
from core.domain.errors import StorageError
from core.domain.models import SessionMode, UserData, UserProfile
from core.domain.session import SessionContext
from core.services.user_data_service import UserDataService
from infrastructure.storage import (
    ActionLog,
    InMemoryStorage,
    JsonFileStorage,
    LocalUserDataCache,
    MockSessionStore,
    user_data_key,
)

from tests.conftest import FakeServer


class TestJsonFileStorage:

    def test__set_get_remove(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path / "store")

        assert storage.get_item("missing") is None
        storage.set_item("sportsbuddy_user_data_u1", '{"events": []}')

        assert storage.get_item("sportsbuddy_user_data_u1") == '{"events": []}'
        assert storage.keys() == ["sportsbuddy_user_data_u1"]

        storage.remove_item("sportsbuddy_user_data_u1")
        assert storage.get_item("sportsbuddy_user_data_u1") is None
        # Removing twice is fine
        storage.remove_item("sportsbuddy_user_data_u1")

    def test__keys_with_unsafe_characters(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)

        storage.set_item("user/../odd key", "1")

        assert storage.keys() == ["user/../odd key"]
        assert storage.get_item("user/../odd key") == "1"
        assert len(list(tmp_path.iterdir())) == 1

    def test__overwrite_leaves_no_temp_files(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)

        storage.set_item("k", "first")
        storage.set_item("k", "second")

        assert storage.get_item("k") == "second"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test__two_instances_share_directory(self, tmp_path) -> None:
        first = JsonFileStorage(tmp_path)
        second = JsonFileStorage(tmp_path)

        first.set_item("mockUser", "{}")

        assert second.get_item("mockUser") == "{}"

    def test__undecodable_file_reads_as_absent(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        storage.set_item(MOCK_USER_KEY, "{}")
        (tmp_path / f"{MOCK_USER_KEY}.json").write_bytes(b"\xff\xfe")

        assert storage.get_item(MOCK_USER_KEY) is None
        assert MockSessionStore(storage).load() is None

    def test__undecodable_cache_and_log_read_as_absent(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        cache = LocalUserDataCache(storage)
        cache.write("u1", UserData(events=["evt-1"]))
        (tmp_path / f"{user_data_key('u1')}.json").write_bytes(b'{"events": ["\xff\xfe"]}')
        (tmp_path / f"{ACTION_LOG_KEY}.json").write_bytes(b"\xff\xfe")

        assert cache.read("u1") is None
        log = ActionLog(storage, limit=10, persist=True)
        entry = log.record("LOGIN_ATTEMPT", email="demo@sportsbuddy.com")
        assert log.entries() == [entry]

    @pytest.mark.asyncio
    async def test__undecodable_cache_loads_empty_record(self, tmp_path) -> None:
        storage = JsonFileStorage(tmp_path)
        (tmp_path / f"{user_data_key('u1')}.json").write_bytes(b'{"events": ["\xff\xfe"]}')
        service = UserDataService(
            server=FakeServer(available=False),
            cache=LocalUserDataCache(storage),
            context=SessionContext(mode=SessionMode.REMOTE_BACKEND),
        )

        data = await service.load("u1")

        assert data.events == []

    def test__failed_write_cleanup_still_raises_storage_error(self, tmp_path, monkeypatch) -> None:
        storage = JsonFileStorage(tmp_path)

        def fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", fail)
        monkeypatch.setattr(os, "unlink", fail)

        with pytest.raises(StorageError):
            storage.set_item("k", "value")


class TestLocalUserDataCache:

    def test__read_missing_returns_none(self, cache) -> None:
        assert cache.read("nobody") is None

    def test__write_then_read(self, cache) -> None:
        cache.write("u1", UserData(events=["evt-1"], liked_matches=["m-1"]))

        data = cache.read("u1")

        assert data.events == ["evt-1"]
        assert data.liked_matches == ["m-1"]

    def test__write_uses_namespaced_key_and_camel_case(self, storage, cache) -> None:
        cache.write("u1", UserData(created_events=["evt-2"]))

        stored = json.loads(storage.get_item("sportsbuddy_user_data_u1"))

        assert stored["createdEvents"] == ["evt-2"]
        assert stored["events"] == ["evt-2"]
        assert "lastUpdated" in stored

    def test__write_stamps_last_updated(self, cache) -> None:
        old = datetime(2020, 1, 1, tzinfo=timezone.utc)

        stamped = cache.write("u1", UserData(last_updated=old))

        assert stamped.last_updated > old
        assert cache.read("u1").last_updated == stamped.last_updated

    def test__write_never_moves_last_updated_backwards(self, cache) -> None:
        future = datetime.now(timezone.utc) + timedelta(days=1)

        stamped = cache.write("u1", UserData(last_updated=future))

        assert stamped.last_updated == future

    def test__corrupt_json_is_treated_as_absent(self, storage, cache) -> None:
        storage.set_item(user_data_key("u1"), "{broken")

        assert cache.read("u1") is None

    def test__wrong_shape_is_treated_as_absent(self, storage, cache) -> None:
        storage.set_item(user_data_key("u1"), json.dumps(["not", "a", "record"]))

        assert cache.read("u1") is None

    def test__clear(self, cache) -> None:
        cache.write("u1", UserData())

        cache.clear("u1")

        assert cache.read("u1") is None

    def test__users_are_isolated(self, cache) -> None:
        cache.write("u1", UserData(events=["evt-1"]))
        cache.write("u2", UserData(events=["evt-2"]))

        cache.clear("u1")

        assert cache.read("u2").events == ["evt-2"]


class TestUserDataInvariants:

    def test__duplicates_are_dropped_in_order(self) -> None:
        data = UserData(events=["b", "a", "b"], achievements=["x", "x"])

        assert data.events == ["b", "a"]
        assert data.achievements == ["x"]

    def test__created_events_are_joined(self) -> None:
        data = UserData.model_validate({"events": ["evt-1"], "createdEvents": ["evt-2"]})

        assert data.events == ["evt-1", "evt-2"]

    def test__liked_wins_over_passed(self) -> None:
        data = UserData.model_validate({"likedMatches": ["m-1"], "passedMatches": ["m-1", "m-2"]})

        assert data.liked_matches == ["m-1"]
        assert data.passed_matches == ["m-2"]


class TestMockSessionStore:

    def test__save_load_clear(self, storage) -> None:
        store = MockSessionStore(storage)
        user = UserProfile(id="mock-user-1", name="Sam", email="sam@example.com")

        assert store.save(user) is True
        assert store.load() == user

        store.clear()
        assert store.load() is None

    def test__unparsable_user_is_ignored(self, storage) -> None:
        storage.set_item(MOCK_USER_KEY, "not json")

        assert MockSessionStore(storage).load() is None


class TestActionLog:

    def test__record_persists_entry(self, storage) -> None:
        log = ActionLog(storage, limit=100, persist=True)

        entry = log.record("LOGIN_ATTEMPT", email="demo@sportsbuddy.com")

        assert entry["action"] == "LOGIN_ATTEMPT"
        assert log.entries() == [entry]

    def test__keeps_only_latest_entries(self, storage) -> None:
        log = ActionLog(storage, limit=3, persist=True)

        for i in range(5):
            log.record("EVENT", user_id=str(i))

        assert [e["user"] for e in log.entries()] == ["2", "3", "4"]

    def test__persist_disabled(self) -> None:
        storage = InMemoryStorage()
        log = ActionLog(storage, persist=False)

        log.record("LOGOUT", user_id="u1")

        assert storage.get_item(ACTION_LOG_KEY) is None
