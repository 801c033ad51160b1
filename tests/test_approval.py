"""Tests for the review state machine."""

import pytest

from token_chain.domain.registry import UserRegistry
from token_chain.domain.sync import DiffCategory, DiffEntry, TokenDiff
from token_chain.exceptions import ReviewStateError
from token_chain.services.approval import (
    Decision,
    ReviewSession,
    ReviewState,
    batch_review,
    removable_overrides,
    run_review,
)
from token_chain.services.registry_merge import merge_registry


class ScriptedPrompter:
    def __init__(self, *decisions: Decision) -> None:
        self.decisions = list(decisions)
        self.asked: list[DiffEntry] = []
        self.categories: list[DiffCategory] = []

    def begin_category(self, category, entries):
        self.categories.append(category)

    def ask(self, entry, index, total):
        self.asked.append(entry)
        return self.decisions.pop(0)


def new(name: str, value: str = "1px") -> DiffEntry:
    return DiffEntry(DiffCategory.NEW, name, new_value=value)


def modified(name: str) -> DiffEntry:
    return DiffEntry(DiffCategory.MODIFIED, name, old_value="1px", new_value="2px")


def removed(name: str) -> DiffEntry:
    return DiffEntry(DiffCategory.REMOVED, name, old_value="1px")


@pytest.fixture
def three_new() -> list[DiffEntry]:
    return [new("--component-a"), new("--component-b"), new("--component-c")]


class TestReviewSession:
    def test_abort_on_second_of_three_new(self, three_new):
        session = ReviewSession({DiffCategory.NEW: three_new})
        prompter = ScriptedPrompter(Decision.ACCEPT, Decision.ABORT)

        outcome = run_review(session, prompter)

        assert outcome.aborted
        assert outcome.accepted == [three_new[0]]
        assert outcome.undecided == three_new[1:]
        assert prompter.asked == three_new[:2]

        merged = merge_registry(UserRegistry(), outcome.accepted)
        assert merged.tokens == {"--component-a": "1px"}

    def test_visits_categories_in_order(self):
        session = ReviewSession(
            {
                DiffCategory.REMOVED: [removed("--semantic-r")],
                DiffCategory.MODIFIED: [modified("--semantic-m")],
                DiffCategory.NEW: [new("--component-n")],
            }
        )
        prompter = ScriptedPrompter(Decision.ACCEPT, Decision.REJECT, Decision.ACCEPT)

        outcome = run_review(session, prompter)

        assert prompter.categories == [
            DiffCategory.NEW,
            DiffCategory.MODIFIED,
            DiffCategory.REMOVED,
        ]
        assert [e.name for e in outcome.accepted] == ["--component-n", "--semantic-r"]
        assert [e.name for e in outcome.rejected] == ["--semantic-m"]
        assert not outcome.aborted

    def test_accept_all_covers_rest_of_category_only(self, three_new):
        session = ReviewSession(
            {DiffCategory.NEW: three_new, DiffCategory.MODIFIED: [modified("--semantic-m")]}
        )
        prompter = ScriptedPrompter(Decision.REJECT, Decision.ACCEPT_ALL, Decision.REJECT)

        outcome = run_review(session, prompter)

        assert outcome.accepted == three_new[1:]
        assert [e.name for e in outcome.rejected] == ["--component-a", "--semantic-m"]
        assert len(prompter.asked) == 3

    def test_reject_all_skips_rest_of_category(self, three_new):
        prompter = ScriptedPrompter(Decision.REJECT_ALL)

        outcome = run_review(ReviewSession({DiffCategory.NEW: three_new}), prompter)

        assert outcome.rejected == three_new
        assert outcome.accepted == []
        assert outcome.skipped_count == 3

    def test_abort_keeps_completed_categories(self, three_new):
        session = ReviewSession(
            {
                DiffCategory.NEW: three_new,
                DiffCategory.MODIFIED: [modified("--semantic-m"), modified("--semantic-n")],
                DiffCategory.REMOVED: [removed("--semantic-r")],
            }
        )
        prompter = ScriptedPrompter(Decision.ACCEPT_ALL, Decision.ABORT)

        outcome = run_review(session, prompter)

        assert outcome.accepted == three_new
        assert [e.name for e in outcome.undecided] == [
            "--semantic-m",
            "--semantic-n",
            "--semantic-r",
        ]

    def test_empty_session_finishes_without_prompting(self):
        prompter = ScriptedPrompter()
        session = ReviewSession({})

        outcome = run_review(session, prompter)

        assert session.finished
        assert outcome.accepted == []
        assert prompter.asked == []

    def test_manual_transitions(self, three_new):
        session = ReviewSession({DiffCategory.NEW: three_new[:1]})

        assert session.state is ReviewState.CATEGORY_QUEUE
        assert session.open_category() is DiffCategory.NEW
        assert session.state is ReviewState.ITEM_PENDING
        assert session.position == (1, 1)
        session.decide(Decision.ACCEPT)
        assert session.state is ReviewState.ITEM_DECIDED
        session.advance()
        assert session.state is ReviewState.CATEGORY_QUEUE
        assert session.open_category() is None
        assert session.finished

    def test_invalid_transitions_raise(self, three_new):
        session = ReviewSession({DiffCategory.NEW: three_new})

        with pytest.raises(ReviewStateError):
            session.decide(Decision.ACCEPT)
        with pytest.raises(ReviewStateError):
            session.advance()

        session.open_category()
        with pytest.raises(ReviewStateError):
            session.open_category()

        session.decide(Decision.ABORT)
        with pytest.raises(ReviewStateError, match="finished"):
            _ = session.current


class TestRemovableOverrides:
    def test_only_registry_overrides_are_reviewable(self):
        diff = TokenDiff(removed=[removed("--semantic-a"), removed("--semantic-b")])
        registry = UserRegistry(tokens={"--semantic-b": "#fff"})

        assert [e.name for e in removable_overrides(diff, registry)] == ["--semantic-b"]

    def test_from_diff_builds_removed_queue(self):
        diff = TokenDiff(removed=[removed("--semantic-a")])

        session = ReviewSession.from_diff(diff, UserRegistry())

        assert session.pending_total == 0


class TestBatchReview:
    def test_accepts_new_and_modified_never_removed(self):
        diff = TokenDiff(
            new=[new("--component-n")],
            modified=[modified("--semantic-m")],
            removed=[removed("--semantic-r")],
        )
        registry = UserRegistry(tokens={"--semantic-r": "#000"})

        outcome = batch_review(diff, registry)

        assert [e.name for e in outcome.accepted] == ["--component-n", "--semantic-m"]
        assert outcome.accepted_in(DiffCategory.REMOVED) == []
        assert [e.name for e in outcome.undecided] == ["--semantic-r"]
