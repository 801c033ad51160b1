"""Merge approved diff entries into the user theme registry."""

from collections.abc import Iterable
from datetime import UTC, datetime

from token_chain.domain.registry import ChangeAction, ChangelogEntry, UserRegistry
from token_chain.domain.sync import DiffCategory, DiffEntry
from token_chain.logging_config import get_logger

logger = get_logger(__name__)


def merge_registry(
    registry: UserRegistry,
    accepted: Iterable[DiffEntry],
    now: datetime | None = None,
) -> UserRegistry:
    """Apply accepted entries to a copy of ``registry``.

    NEW and MODIFIED entries set the override and clear any earlier removal.
    REMOVED entries drop the override and record the name as removed. Every
    entry appends one changelog record; earlier records are kept.

    Args:
        registry: Registry as loaded; not mutated.
        accepted: Approved entries, in review order.
        now: Timestamp for the new changelog records.

    Returns:
        The merged registry.
    """
    merged = registry.copy()
    recorded_at = now or datetime.now(UTC)
    changes = 0

    for entry in accepted:
        previous = merged.tokens.get(entry.name)

        if entry.category is DiffCategory.REMOVED:
            merged.tokens.pop(entry.name, None)
            if entry.name not in merged.removed:
                merged.removed.append(entry.name)
            merged.changelog.append(
                ChangelogEntry(
                    action=ChangeAction.REMOVE,
                    token=entry.name,
                    previous=previous,
                    recorded_at=recorded_at,
                )
            )
        elif entry.category in (DiffCategory.NEW, DiffCategory.MODIFIED):
            if entry.new_value is None:
                raise ValueError(f"Accepted entry {entry.name} has no value")
            if entry.category is DiffCategory.MODIFIED:
                action = ChangeAction.UPDATE
                if previous is None:
                    previous = entry.old_value
            else:
                action = ChangeAction.ADD
            merged.tokens[entry.name] = entry.new_value
            if entry.name in merged.removed:
                merged.removed.remove(entry.name)
            merged.changelog.append(
                ChangelogEntry(
                    action=action,
                    token=entry.name,
                    value=entry.new_value,
                    previous=previous,
                    recorded_at=recorded_at,
                )
            )
        else:
            continue
        changes += 1

    logger.info(
        "registry_merged",
        changes=changes,
        overrides=merged.override_count,
        removed=len(merged.removed),
    )
    return merged


__all__ = ["merge_registry"]
