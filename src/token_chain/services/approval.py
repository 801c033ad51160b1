"""Human review of a token diff.

The review is an explicit state machine that performs no I/O. A prompter
supplies one decision per pending item; the console prompter lives in the
CLI package and tests drive the session with scripted decisions.

States::

    CATEGORY_QUEUE --open_category--> ITEM_PENDING --decide--> ITEM_DECIDED
          ^                                                        |
          +---------------------- advance (category done) --------+
    any category left? no -> FINISHED;  decide(ABORT) -> FINISHED
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from token_chain.domain.registry import UserRegistry
from token_chain.domain.sync import DiffCategory, DiffEntry, TokenDiff
from token_chain.exceptions import ReviewStateError
from token_chain.logging_config import get_logger

logger = get_logger(__name__)

REVIEW_ORDER: tuple[DiffCategory, ...] = (
    DiffCategory.NEW,
    DiffCategory.MODIFIED,
    DiffCategory.REMOVED,
)


class Decision(str, Enum):
    """Reviewer answer for the current item."""

    ACCEPT = "accept"
    REJECT = "reject"
    ACCEPT_ALL = "accept_all"  # remaining items in this category
    REJECT_ALL = "reject_all"  # remaining items in this category
    ABORT = "abort"


class ReviewState(str, Enum):
    CATEGORY_QUEUE = "category_queue"
    ITEM_PENDING = "item_pending"
    ITEM_DECIDED = "item_decided"
    FINISHED = "finished"


@dataclass
class ReviewOutcome:
    """Result of a review.

    ``undecided`` holds entries never answered because the review was
    aborted, or removals batch mode never offers.
    """

    accepted: list[DiffEntry] = field(default_factory=list)
    rejected: list[DiffEntry] = field(default_factory=list)
    undecided: list[DiffEntry] = field(default_factory=list)
    aborted: bool = False

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def skipped_count(self) -> int:
        return len(self.rejected) + len(self.undecided)

    def accepted_in(self, category: DiffCategory) -> list[DiffEntry]:
        return [entry for entry in self.accepted if entry.category is category]


class ReviewPrompter(Protocol):
    """Source of review decisions."""

    def begin_category(self, category: DiffCategory, entries: Sequence[DiffEntry]) -> None:
        ...

    def ask(self, entry: DiffEntry, index: int, total: int) -> Decision:
        ...


def removable_overrides(diff: TokenDiff, registry: UserRegistry) -> list[DiffEntry]:
    """REMOVED entries the reviewer can act on: tokens the registry overrides.

    Other removed tokens are informational; nothing local is ever deleted.
    """
    return [entry for entry in diff.removed if registry.overrides(entry.name)]


class ReviewSession:
    """State machine for one review pass.

    Categories are visited in ``REVIEW_ORDER``; empty categories are
    skipped. Accepted entries keep review order.
    """

    def __init__(self, queues: Mapping[DiffCategory, Sequence[DiffEntry]]) -> None:
        self._queues: list[tuple[DiffCategory, list[DiffEntry]]] = [
            (category, list(queues[category]))
            for category in REVIEW_ORDER
            if queues.get(category)
        ]
        self._category_index = -1
        self._item_index = 0
        self.state = ReviewState.CATEGORY_QUEUE
        self.outcome = ReviewOutcome()

    @classmethod
    def from_diff(cls, diff: TokenDiff, registry: UserRegistry) -> "ReviewSession":
        return cls(
            {
                DiffCategory.NEW: diff.new,
                DiffCategory.MODIFIED: diff.modified,
                DiffCategory.REMOVED: removable_overrides(diff, registry),
            }
        )

    @property
    def finished(self) -> bool:
        return self.state is ReviewState.FINISHED

    @property
    def pending_total(self) -> int:
        return sum(len(entries) for _, entries in self._queues)

    @property
    def category(self) -> DiffCategory | None:
        if 0 <= self._category_index < len(self._queues):
            return self._queues[self._category_index][0]
        return None

    @property
    def _entries(self) -> list[DiffEntry]:
        return self._queues[self._category_index][1]

    @property
    def current(self) -> DiffEntry:
        self._require(ReviewState.ITEM_PENDING, "read the current item")
        return self._entries[self._item_index]

    @property
    def position(self) -> tuple[int, int]:
        """1-based index of the current item and its category size."""
        self._require(ReviewState.ITEM_PENDING, "read the position")
        return self._item_index + 1, len(self._entries)

    def category_entries(self) -> list[DiffEntry]:
        self._require(ReviewState.ITEM_PENDING, "read the category")
        return list(self._entries)

    def open_category(self) -> DiffCategory | None:
        """Move to the next non-empty category, or finish when none is left."""
        self._require(ReviewState.CATEGORY_QUEUE, "open a category")
        self._category_index += 1
        if self._category_index >= len(self._queues):
            self.state = ReviewState.FINISHED
            return None
        self._item_index = 0
        self.state = ReviewState.ITEM_PENDING
        return self.category

    def decide(self, decision: Decision) -> None:
        self._require(ReviewState.ITEM_PENDING, f"apply {decision.value}")
        entries = self._entries
        remaining = entries[self._item_index :]

        if decision is Decision.ABORT:
            later = [
                entry
                for _, queue in self._queues[self._category_index + 1 :]
                for entry in queue
            ]
            self.outcome.undecided.extend(remaining + later)
            self.outcome.aborted = True
            self.state = ReviewState.FINISHED
            logger.info(
                "review_aborted",
                accepted=self.outcome.accepted_count,
                undecided=len(self.outcome.undecided),
            )
            return

        if decision is Decision.ACCEPT:
            self.outcome.accepted.append(remaining[0])
        elif decision is Decision.REJECT:
            self.outcome.rejected.append(remaining[0])
        elif decision is Decision.ACCEPT_ALL:
            self.outcome.accepted.extend(remaining)
            self._item_index = len(entries) - 1
        elif decision is Decision.REJECT_ALL:
            self.outcome.rejected.extend(remaining)
            self._item_index = len(entries) - 1

        self.state = ReviewState.ITEM_DECIDED

    def advance(self) -> None:
        self._require(ReviewState.ITEM_DECIDED, "advance")
        self._item_index += 1
        if self._item_index < len(self._entries):
            self.state = ReviewState.ITEM_PENDING
        else:
            self.state = ReviewState.CATEGORY_QUEUE

    def _require(self, state: ReviewState, action: str) -> None:
        if self.state is not state:
            raise ReviewStateError(action, self.state.value)


def run_review(session: ReviewSession, prompter: ReviewPrompter) -> ReviewOutcome:
    """Drive a session to completion with decisions from ``prompter``."""
    while not session.finished:
        if session.state is ReviewState.CATEGORY_QUEUE:
            category = session.open_category()
            if category is not None:
                prompter.begin_category(category, session.category_entries())
        elif session.state is ReviewState.ITEM_PENDING:
            index, total = session.position
            session.decide(prompter.ask(session.current, index, total))
        else:
            session.advance()
    return session.outcome


def batch_review(diff: TokenDiff, registry: UserRegistry) -> ReviewOutcome:
    """Non-interactive review: accept every NEW and MODIFIED entry.

    Removals always need an explicit decision, so they are left undecided.
    """
    return ReviewOutcome(
        accepted=[*diff.new, *diff.modified],
        undecided=removable_overrides(diff, registry),
    )


__all__ = [
    "Decision",
    "REVIEW_ORDER",
    "ReviewOutcome",
    "ReviewPrompter",
    "ReviewSession",
    "ReviewState",
    "batch_review",
    "removable_overrides",
    "run_review",
]
