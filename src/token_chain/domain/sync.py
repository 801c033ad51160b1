"""External tokens and the diff between them and the local stylesheet."""

from dataclasses import dataclass, field
from enum import Enum

from token_chain.domain.tiers import Tier


@dataclass(frozen=True)
class ExternalToken:
    """One entry of an external export, in both source and internal form.

    ``tier`` is None when the first name segment is not one of the tiers an
    external source may define.
    """

    source_name: str
    source_value: str
    name: str
    value: str
    reference: str | None = None
    tier: Tier | None = None


class DiffCategory(str, Enum):
    NEW = "new"
    MODIFIED = "modified"
    REMOVED = "removed"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffEntry:
    """A classified token.

    ``old_value`` is the local stylesheet value (None for NEW);
    ``new_value`` is the external value (None for REMOVED).
    """

    category: DiffCategory
    name: str
    old_value: str | None = None
    new_value: str | None = None


@dataclass
class TokenDiff:
    new: list[DiffEntry] = field(default_factory=list)
    modified: list[DiffEntry] = field(default_factory=list)
    removed: list[DiffEntry] = field(default_factory=list)
    unchanged: list[DiffEntry] = field(default_factory=list)

    @property
    def pending_count(self) -> int:
        """Changes a reviewer might act on (unchanged excluded)."""
        return len(self.new) + len(self.modified) + len(self.removed)

    @property
    def in_sync(self) -> bool:
        return self.pending_count == 0

    def entries(self, category: DiffCategory) -> list[DiffEntry]:
        return {
            DiffCategory.NEW: self.new,
            DiffCategory.MODIFIED: self.modified,
            DiffCategory.REMOVED: self.removed,
            DiffCategory.UNCHANGED: self.unchanged,
        }[category]


__all__ = ["DiffCategory", "DiffEntry", "ExternalToken", "TokenDiff"]
