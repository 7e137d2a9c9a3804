"""Tests for domain-driven cache invalidation."""

import logging
from unittest.mock import AsyncMock

import pytest

from cacheaside import CacheInvalidator, CacheStore, InvalidationResult


async def seed(store: CacheStore, *keys: str) -> None:
    for key in keys:
        await store.set(key, {"key": key})


async def remaining(store: CacheStore) -> list[str]:
    return sorted(await store.keys())


class TestInvalidate:
    """Tests for the generic key/pattern deletion."""

    async def test_keys_and_patterns(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "user:1", "users:list:page:1:limit:50", "users:list:page:2:limit:50")

        result = await invalidator.invalidate(keys=["user:1"], patterns=["users:list:*"])

        assert result.deleted == 3
        assert result.ok
        assert await remaining(store) == []

    async def test_idempotent(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "user:1")

        await invalidator.invalidate(keys=["user:1"])
        result = await invalidator.invalidate(keys=["user:1"])

        assert result.deleted == 0
        assert result.ok

    async def test_failing_step_does_not_stop_the_rest(self, caplog: pytest.LogCaptureFixture):
        """A failing deletion is logged and the other steps still run."""
        store = AsyncMock(spec=CacheStore)
        store.delete.side_effect = [RuntimeError("boom"), 1]
        store.delete_pattern.side_effect = [RuntimeError("boom"), 4]
        invalidator = CacheInvalidator(store)

        with caplog.at_level(logging.WARNING):
            result = await invalidator.invalidate(
                keys=["user:1", "profile:1"],
                patterns=["users:list:*", "dashboard:*"],
            )

        assert result.deleted == 5
        assert result.failed == ["user:1", "users:list:*"]
        assert not result.ok
        assert store.delete.await_count == 2
        assert store.delete_pattern.await_count == 2
        assert "user:1" in caplog.text
        assert "users:list:*" in caplog.text

    async def test_unavailable_store_records_failed_steps(self, unavailable_store: CacheStore):
        """An outage is reported in the result but never raised."""
        invalidator = CacheInvalidator(unavailable_store)

        result = await invalidator.invalidate(keys=["user:1"], patterns=["users:list:*"])

        assert result.deleted == 0
        assert not result.ok
        assert result.failed == ["user:1", "users:list:*"]

    async def test_unavailable_store_domain_invalidation(self, unavailable_store: CacheStore):
        invalidator = CacheInvalidator(unavailable_store)

        result = await invalidator.invalidate_all_user_related("42")

        assert not result.ok
        assert result.failed == [
            "user:42",
            "profile:42",
            "user:42:permissions",
            "user:42:groups",
            "users:list:*",
            "dashboard:overview",
            "dashboard:*",
        ]

    async def test_invalidate_by_pattern(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "system-analytics:users:days:7", "system-analytics:logins", "groups:all")

        result = await invalidator.invalidate_by_pattern("system-analytics:*")

        assert result.deleted == 2
        assert await remaining(store) == ["groups:all"]


class TestInvalidationResult:
    def test_merge(self):
        first = InvalidationResult(deleted=2)
        second = InvalidationResult(deleted=1, failed=["dashboard:*"])

        merged = first.merge(second)

        assert merged is first
        assert merged.deleted == 3
        assert merged.failed == ["dashboard:*"]

    def test_failed_lists_are_not_shared(self):
        InvalidationResult().failed.append("x")

        assert InvalidationResult().failed == []


class TestUserInvalidation:
    """Tests for user-related invalidation."""

    async def test_invalidate_user(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "user:42", "profile:42", "user:42:permissions", "user:43")

        await invalidator.invalidate_user("42")

        assert await remaining(store) == ["user:42:permissions", "user:43"]

    async def test_invalidate_users_list(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(
            store,
            "users:list:page:1:limit:50",
            "users:list:page:1:limit:50:search:alice",
            "user:1",
        )

        result = await invalidator.invalidate_users_list()

        assert result.deleted == 2
        assert await remaining(store) == ["user:1"]

    async def test_invalidate_one_users_permissions(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "user:1:permissions",
            "user:1:groups",
            "user:2:permissions",
            "user:2:groups",
        )

        await invalidator.invalidate_user_permissions("1")

        assert await remaining(store) == ["user:2:groups", "user:2:permissions"]

    async def test_invalidate_all_users_permissions(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "user:1:permissions",
            "user:1:groups",
            "user:2:permissions",
            "user:2",
        )

        result = await invalidator.invalidate_user_permissions()

        assert result.deleted == 3
        assert await remaining(store) == ["user:2"]

    async def test_invalidate_all_user_related(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "user:42",
            "profile:42",
            "user:42:permissions",
            "user:42:groups",
            "users:list:page:1:limit:50",
            "dashboard:overview",
            "dashboard:users_by_status",
            "user:7",
            "user:7:permissions",
            "groups:all",
        )

        result = await invalidator.invalidate_all_user_related("42")

        assert result.ok
        assert await remaining(store) == ["groups:all", "user:7", "user:7:permissions"]

    async def test_invalidate_all_user_related_without_id(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(store, "user:42", "users:list:page:1:limit:50", "dashboard:overview")

        await invalidator.invalidate_all_user_related()

        assert await remaining(store) == ["user:42"]


class TestGroupAndPermissionInvalidation:
    async def test_invalidate_groups(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "groups:all", "group:3", "group:3:permissions", "group:4")

        await invalidator.invalidate_groups("3")

        assert await remaining(store) == ["group:4"]

    async def test_invalidate_groups_without_id(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(store, "groups:all", "group:3")

        await invalidator.invalidate_groups()

        assert await remaining(store) == ["group:3"]

    async def test_invalidate_group_permissions(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "group:3",
            "group:3:permissions",
            "groups:all",
            "user:1:permissions",
            "user:1:groups",
            "user:1",
        )

        await invalidator.invalidate_group_permissions("3")

        assert await remaining(store) == ["user:1"]

    async def test_invalidate_permissions(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(
            store,
            "permission:9",
            "permissions:all",
            "user:1:permissions",
            "user:1:groups",
            "permission:10",
        )

        await invalidator.invalidate_permissions("9")

        assert await remaining(store) == ["permission:10", "user:1:groups"]


class TestOtherDomains:
    async def test_invalidate_dashboard(self, store: CacheStore, invalidator: CacheInvalidator):
        await seed(store, "dashboard:overview", "dashboard:logins_per_day", "project:information")

        result = await invalidator.invalidate_dashboard()

        assert result.deleted == 2
        assert await remaining(store) == ["project:information"]

    async def test_invalidate_notifications(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "notification:5",
            "notification:6",
            "notifications:unread-count",
            "notifications:status:all:type:all:priority:all:limit:50:offset:0",
        )

        await invalidator.invalidate_notifications("5")

        assert await remaining(store) == ["notification:6"]

    async def test_invalidate_activity_logs(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(
            store,
            "activity:logs:limit:100:offset:0",
            "activity:logs:user:1:limit:100",
            "activity:statistics",
            "activity:statistics:user:1",
            "activity:other",
        )

        await invalidator.invalidate_activity_logs()

        assert await remaining(store) == ["activity:other"]

    async def test_invalidate_project_information(
        self, store: CacheStore, invalidator: CacheInvalidator
    ):
        await seed(store, "project:information", "dashboard:overview")

        await invalidator.invalidate_project_information()

        assert await remaining(store) == ["dashboard:overview"]
