"""Diff between the compiled stylesheet and an external token batch."""

from collections.abc import Mapping, Sequence

from token_chain.domain.sync import DiffCategory, DiffEntry, ExternalToken, TokenDiff
from token_chain.domain.tiers import EXTERNAL_TIERS
from token_chain.domain.tokens import Token


def diff_tokens(
    local: Mapping[str, Token], external: Sequence[ExternalToken]
) -> TokenDiff:
    """Classify every externally managed token.

    Only local tokens in a tier an external source manages take part; base
    and unprefixed tokens are never compared. Values compare as exact text.

    NEW, MODIFIED and UNCHANGED follow external order; REMOVED follows
    local order and is informational only.
    """
    diff = TokenDiff()
    managed = {
        name: token for name, token in local.items() if token.tier in EXTERNAL_TIERS
    }
    external_names: set[str] = set()

    for token in external:
        external_names.add(token.name)
        current = managed.get(token.name)
        if current is None:
            diff.new.append(
                DiffEntry(DiffCategory.NEW, token.name, new_value=token.value)
            )
        elif current.value != token.value:
            diff.modified.append(
                DiffEntry(
                    DiffCategory.MODIFIED,
                    token.name,
                    old_value=current.value,
                    new_value=token.value,
                )
            )
        else:
            diff.unchanged.append(
                DiffEntry(
                    DiffCategory.UNCHANGED,
                    token.name,
                    old_value=current.value,
                    new_value=token.value,
                )
            )

    for name, token in managed.items():
        if name not in external_names:
            diff.removed.append(
                DiffEntry(DiffCategory.REMOVED, name, old_value=token.value)
            )

    return diff


__all__ = ["diff_tokens"]
