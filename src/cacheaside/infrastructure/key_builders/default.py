"""Default key builder implementation.

Centralises every cache key and invalidation pattern the application
uses, so readers and invalidators always agree on the namespace.
"""

import re
from typing import Any

from cacheaside.core.entities.cache_key import WILDCARD, build_key, build_pattern

# Keys holding per-user data. Only their owner may inspect them.
PRIVATE_KEY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^session:"),
    re.compile(r"^session_token:"),
    re.compile(r"^refresh_token:"),
    re.compile(r"^user_sessions:"),
    re.compile(r"^blacklisted_token:"),
    re.compile(r"^blacklist:"),
    re.compile(r"^profile:"),
    re.compile(r"^user:[^:]+:permissions$"),
    re.compile(r"^user:[^:]+:groups$"),
)


def is_private_key(key: str) -> bool:
    """Return True if the key caches data belonging to a single user."""
    return any(pattern.search(key) for pattern in PRIVATE_KEY_PATTERNS)


def _flag(value: bool | str | None) -> str | None:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value or None


def _labelled(label: str, value: Any) -> str | None:
    if value is None or value == "":
        return None
    return f"{label}:{value}"


class DefaultKeyBuilder:
    """Builds the application's cache keys and patterns.

    All keys follow `resource:identifier:params`. An optional namespace
    prefix is prepended to every key and pattern, which lets several
    deployments share one Redis database.
    """

    def __init__(self, namespace: str = "") -> None:
        """Initialize the key builder.

        Args:
            namespace: Prefix for all cache keys. Empty means none.
        """
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    def key(self, prefix: str, *parts: Any) -> str:
        """Build a namespaced key from a resource prefix and qualifiers."""
        return build_key(self._namespace, prefix, *parts)

    def pattern(self, prefix: str, *parts: Any) -> str:
        """Build a namespaced pattern matching keys nested under prefix."""
        return build_pattern(self._namespace, prefix, *parts)

    def strip_namespace(self, key: str) -> str:
        """Return key without this builder's namespace prefix."""
        if self._namespace and key.startswith(f"{self._namespace}:"):
            return key[len(self._namespace) + 1 :]
        return key

    def is_private(self, key: str) -> bool:
        """Classify a key built by this builder as private or public."""
        return is_private_key(self.strip_namespace(key))

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def user(self, user_id: str) -> str:
        return self.key("user", user_id)

    def user_groups(self, user_id: str) -> str:
        return self.key("user", user_id, "groups")

    def user_permissions(self, user_id: str) -> str:
        return self.key("user", user_id, "permissions")

    def user_profile(self, user_id: str) -> str:
        return self.key("profile", user_id)

    def users_list(
        self,
        page: int = 1,
        limit: int = 50,
        search: str | None = None,
        auth_type: str | None = None,
        status: str | None = None,
        gender: str | None = None,
        is_active: bool | str | None = None,
        is_verified: bool | str | None = None,
    ) -> str:
        """Key for one page of the filtered user list.

        Filters are emitted in a fixed order and search text is
        lowercased and trimmed, so equivalent requests share a key.
        """
        search = search.strip().lower() if search else None
        return self.key(
            "users:list",
            f"page:{page}",
            f"limit:{limit}",
            _labelled("search", search),
            _labelled("auth_type", auth_type),
            _labelled("status", status),
            _labelled("gender", gender),
            _labelled("is_active", _flag(is_active)),
            _labelled("is_verified", _flag(is_verified)),
        )

    def users_list_pattern(self) -> str:
        return self.pattern("users:list")

    def all_users_pattern(self) -> str:
        """Every per-user key, including groups and permissions."""
        return self.pattern("user")

    def all_user_permissions_pattern(self) -> str:
        return self.key("user", WILDCARD, "permissions")

    def all_user_groups_pattern(self) -> str:
        return self.key("user", WILDCARD, "groups")

    # -------------------------------------------------------------------------
    # Groups and permissions
    # -------------------------------------------------------------------------

    def groups(self) -> str:
        return self.key("groups", "all")

    def group(self, group_id: str) -> str:
        return self.key("group", group_id)

    def group_permissions(self, group_id: str) -> str:
        return self.key("group", group_id, "permissions")

    def permissions(self) -> str:
        return self.key("permissions", "all")

    def permission(self, permission_id: str) -> str:
        return self.key("permission", permission_id)

    # -------------------------------------------------------------------------
    # Dashboard, project and system analytics
    # -------------------------------------------------------------------------

    def dashboard_overview(self) -> str:
        return self.key("dashboard", "overview")

    def dashboard_statistics(self, statistic: str) -> str:
        return self.key("dashboard", statistic)

    def dashboard_pattern(self) -> str:
        return self.pattern("dashboard")

    def project_information(self) -> str:
        return self.key("project", "information")

    def system_analytics(self, kind: str, params: dict[str, Any] | None = None) -> str:
        """Key for a system analytics panel; params keep insertion order."""
        extra = [f"{name}:{value}" for name, value in (params or {}).items()]
        return self.key("system-analytics", kind, *extra)

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def notifications(
        self,
        status: str | None = None,
        notification_type: str | None = None,
        priority: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> str:
        return self.key(
            "notifications",
            f"status:{status or 'all'}",
            f"type:{notification_type or 'all'}",
            f"priority:{priority or 'all'}",
            f"limit:{limit}",
            f"offset:{offset}",
        )

    def notifications_unread_count(self) -> str:
        return self.key("notifications", "unread-count")

    def notification(self, notification_id: str) -> str:
        return self.key("notification", notification_id)

    def notifications_pattern(self) -> str:
        return self.pattern("notifications")

    # -------------------------------------------------------------------------
    # Activity logs
    # -------------------------------------------------------------------------

    def activity_logs(
        self,
        user_id: str | None = None,
        level: str | None = None,
        action: str | None = None,
        module: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> str:
        return self.key(
            "activity:logs",
            _labelled("user", user_id),
            _labelled("level", level),
            _labelled("action", action),
            _labelled("module", module),
            f"limit:{limit}",
            f"offset:{offset}",
        )

    def user_activity_logs(self, user_id: str, filters: dict[str, Any] | None = None) -> str:
        extra = [_labelled(name, value) for name, value in (filters or {}).items()]
        return self.key("activity:logs", f"user:{user_id}", *extra)

    def activity_logs_pattern(self) -> str:
        return self.pattern("activity:logs")

    def activity_statistics(
        self,
        user_id: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> str:
        return self.key(
            "activity:statistics",
            _labelled("user", user_id),
            _labelled("start", start_date),
            _labelled("end", end_date),
        )

    def activity_statistics_pattern(self) -> str:
        return self.pattern("activity:statistics")
