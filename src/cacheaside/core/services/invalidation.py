"""Domain-driven cache invalidation.

Each public coroutine maps one kind of data change to the exact keys
and the key patterns whose cached values it makes stale. Call them
after the mutation has been committed.

Invalidation is best effort. Every deletion step runs on its own: a
failing step is logged and skipped, the following steps still run, and
nothing is raised to the caller. Stale data that survives a failed
step expires with its TTL.

Pattern map:

- user changed: user:{id}, profile:{id}, user:{id}:permissions,
  user:{id}:groups, users:list:*, dashboard:*
- permissions of all users: user:*:permissions, user:*:groups
- group changed: group:{id}, group:{id}:permissions, groups:all
- permission changed: permission:{id}, permissions:all,
  user:*:permissions
- notifications: notification:{id}, notifications:*
- activity logs: activity:logs:*, activity:statistics,
  activity:statistics:*
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from cacheaside.core.services.cache_store import CacheStore
from cacheaside.infrastructure.key_builders.default import DefaultKeyBuilder

logger = logging.getLogger(__name__)


@dataclass
class InvalidationResult:
    """Outcome of one invalidation call."""

    deleted: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "InvalidationResult") -> "InvalidationResult":
        self.deleted += other.deleted
        self.failed.extend(other.failed)
        return self


class CacheInvalidator:
    """Deletes the cache entries that depend on a changed entity."""

    def __init__(
        self,
        store: CacheStore,
        keys: DefaultKeyBuilder | None = None,
    ) -> None:
        self._store = store
        self._keys = keys or DefaultKeyBuilder()

    @property
    def keys(self) -> DefaultKeyBuilder:
        return self._keys

    async def invalidate(
        self,
        keys: Iterable[str] = (),
        patterns: Iterable[str] = (),
    ) -> InvalidationResult:
        """Delete exact keys first, then every key matching the patterns.

        Args:
            keys: Exact cache keys.
            patterns: Glob patterns for families of keys.

        Returns:
            Total deleted count and the keys/patterns whose deletion failed.
        """
        result = InvalidationResult()

        for key in keys:
            try:
                result.deleted += await self._store.delete(key, raise_errors=True)
            except Exception as e:
                logger.warning("Failed to invalidate cache key %s: %s", key, e)
                result.failed.append(key)

        for pattern in patterns:
            try:
                deleted = await self._store.delete_pattern(pattern, raise_errors=True)
            except Exception as e:
                logger.warning("Failed to invalidate cache pattern %s: %s", pattern, e)
                result.failed.append(pattern)
                continue
            result.deleted += deleted
            logger.debug("Cache pattern %s invalidated (%d keys)", pattern, deleted)

        return result

    async def invalidate_by_pattern(self, pattern: str) -> InvalidationResult:
        return await self.invalidate(patterns=[pattern])

    async def invalidate_user(self, user_id: str) -> InvalidationResult:
        """Invalidate a single user's record and profile."""
        result = await self.invalidate(
            keys=[self._keys.user(user_id), self._keys.user_profile(user_id)]
        )
        logger.debug("User cache invalidated: %s", user_id)
        return result

    async def invalidate_users_list(self) -> InvalidationResult:
        """Invalidate every page of every filtered user list."""
        return await self.invalidate(patterns=[self._keys.users_list_pattern()])

    async def invalidate_user_permissions(self, user_id: str | None = None) -> InvalidationResult:
        """Invalidate resolved permissions and group memberships.

        With a user id only that user's entries go; without one, every
        user's entries go.
        """
        if user_id is not None:
            return await self.invalidate(
                keys=[
                    self._keys.user_permissions(user_id),
                    self._keys.user_groups(user_id),
                ]
            )
        return await self.invalidate(
            patterns=[
                self._keys.all_user_permissions_pattern(),
                self._keys.all_user_groups_pattern(),
            ]
        )

    async def invalidate_all_user_related(self, user_id: str | None = None) -> InvalidationResult:
        """Invalidate everything a user create, update or delete affects.

        This is the main call after any user mutation. User lists and
        dashboard statistics are always dropped because they aggregate
        over all users.
        """
        result = InvalidationResult()
        if user_id is not None:
            result.merge(await self.invalidate_user(user_id))
            result.merge(await self.invalidate_user_permissions(user_id))
        result.merge(await self.invalidate_users_list())
        result.merge(await self.invalidate_dashboard())
        return result

    async def invalidate_groups(self, group_id: str | None = None) -> InvalidationResult:
        keys = [self._keys.groups()]
        if group_id is not None:
            keys[:0] = [self._keys.group(group_id), self._keys.group_permissions(group_id)]
        return await self.invalidate(keys=keys)

    async def invalidate_group_permissions(self, group_id: str) -> InvalidationResult:
        """Invalidate a group after its permission set changed.

        Every member's resolved permissions derive from the group, and
        membership is not indexed, so all users' permission caches go.
        """
        result = await self.invalidate_groups(group_id)
        return result.merge(await self.invalidate_user_permissions())

    async def invalidate_permissions(self, permission_id: str | None = None) -> InvalidationResult:
        keys = [self._keys.permissions()]
        if permission_id is not None:
            keys.insert(0, self._keys.permission(permission_id))
        return await self.invalidate(
            keys=keys,
            patterns=[self._keys.all_user_permissions_pattern()],
        )

    async def invalidate_dashboard(self) -> InvalidationResult:
        return await self.invalidate(
            keys=[self._keys.dashboard_overview()],
            patterns=[self._keys.dashboard_pattern()],
        )

    async def invalidate_notifications(
        self, notification_id: str | None = None
    ) -> InvalidationResult:
        keys = [self._keys.notification(notification_id)] if notification_id is not None else []
        return await self.invalidate(keys=keys, patterns=[self._keys.notifications_pattern()])

    async def invalidate_activity_logs(self) -> InvalidationResult:
        # The unfiltered statistics key has no suffix, so the pattern misses it.
        return await self.invalidate(
            keys=[self._keys.activity_statistics()],
            patterns=[
                self._keys.activity_logs_pattern(),
                self._keys.activity_statistics_pattern(),
            ],
        )

    async def invalidate_project_information(self) -> InvalidationResult:
        return await self.invalidate(keys=[self._keys.project_information()])
