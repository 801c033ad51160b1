"""User theme registry domain models."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class ChangeAction(str, Enum):
    """Kind of change recorded in the registry changelog."""

    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


@dataclass(frozen=True)
class ChangelogEntry:
    """One approved change, kept forever in the registry changelog."""

    action: ChangeAction
    token: str
    value: str | None = None
    previous: str | None = None
    recorded_at: datetime | None = None


@dataclass
class UserRegistry:
    """Overrides layered on top of the compiled token set.

    ``tokens`` maps token name to override value; ``removed`` lists names
    whose override was explicitly reverted to the system default.
    """

    tokens: dict[str, str] = field(default_factory=dict)
    removed: list[str] = field(default_factory=list)
    changelog: list[ChangelogEntry] = field(default_factory=list)

    @property
    def override_count(self) -> int:
        return len(self.tokens)

    def overrides(self, name: str) -> bool:
        return name in self.tokens

    def copy(self) -> "UserRegistry":
        return UserRegistry(
            tokens=dict(self.tokens),
            removed=list(self.removed),
            changelog=list(self.changelog),
        )


__all__ = ["ChangeAction", "ChangelogEntry", "UserRegistry"]
