"""Tests for the diff engine."""

from token_chain.domain.sync import DiffCategory
from token_chain.domain.tokens import Token
from token_chain.schemas import ExportEntry
from token_chain.services.diff import diff_tokens
from token_chain.services.normalizer import normalize_batch


def external(*pairs: tuple[str, str]):
    return normalize_batch(ExportEntry(name=name, value=value) for name, value in pairs)


class TestDiffTokens:
    def test_new_component_against_existing_chain(self, local_tokens, scenario_export):
        batch = external(*((t["name"], t["value"]) for t in scenario_export))

        diff = diff_tokens(local_tokens, batch)

        assert [e.name for e in diff.new] == ["--component-card-bg"]
        assert diff.new[0].new_value == "var(--semantic-color-brand)"
        assert [e.name for e in diff.unchanged] == [
            "--primitive-color-blue-600",
            "--semantic-color-brand",
        ]
        assert diff.modified == []
        assert diff.removed == []

    def test_modified_compares_exact_text(self, local_tokens):
        diff = diff_tokens(local_tokens, external(("primitive.color.blue.600", "#2563EB")))

        assert len(diff.modified) == 1
        entry = diff.modified[0]
        assert entry.category is DiffCategory.MODIFIED
        assert entry.old_value == "#2563eb"
        assert entry.new_value == "#2563EB"

    def test_removed_is_local_only_and_skips_base(self, local_tokens):
        diff = diff_tokens(local_tokens, external(("primitive.color.blue.600", "#2563eb")))

        assert [e.name for e in diff.removed] == ["--semantic-color-brand"]
        assert diff.removed[0].old_value == "var(--primitive-color-blue-600)"

    def test_self_diff_is_all_unchanged(self):
        batch = external(
            ("primitive.a", "1px"),
            ("semantic.b", "{primitive.a}"),
            ("component.c", "{semantic.b}"),
        )
        local = {token.name: Token(token.name, token.value) for token in batch}

        diff = diff_tokens(local, batch)

        assert diff.in_sync
        assert len(diff.unchanged) == 3

    def test_is_idempotent(self, local_tokens, scenario_export):
        batch = external(*((t["name"], t["value"]) for t in scenario_export))

        assert diff_tokens(local_tokens, batch) == diff_tokens(local_tokens, batch)

    def test_pending_count(self, local_tokens):
        diff = diff_tokens(
            local_tokens,
            external(("primitive.color.blue.600", "#000"), ("component.x", "{semantic.color.brand}")),
        )

        assert diff.pending_count == 3
        assert diff.entries(DiffCategory.NEW) == diff.new
