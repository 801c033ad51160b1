"""External token normalization and the external ingestion gate.

External sources name tokens in dot notation (``semantic.color.brand``) and
express references as ``{primitive.color.blue.600}``. Both are converted to
the stylesheet's custom property form before anything is compared.
"""

import re
from collections.abc import Iterable, Sequence

from token_chain.domain.sync import ExternalToken
from token_chain.domain.tiers import CODE_ONLY_TIERS, EXTERNAL_POLICY, EXTERNAL_TIERS, Tier
from token_chain.domain.validation import IssueKind, ValidationIssue
from token_chain.exceptions import ArchitectureViolationError
from token_chain.logging_config import get_logger
from token_chain.schemas import ExportEntry
from token_chain.services.dependency_graph import find_cycles
from token_chain.services.tier_rules import cycle_issues

logger = get_logger(__name__)

REFERENCE_VALUE = re.compile(r"^\{(.+)\}$")


def to_internal_name(dotted: str) -> str:
    """``semantic.color.brand`` -> ``--semantic-color-brand``."""
    return "--" + dotted.replace(".", "-")


def extract_reference(value: str) -> str | None:
    """Internal name targeted by an exact ``{a.b}`` value, else None."""
    match = REFERENCE_VALUE.match(value)
    return to_internal_name(match.group(1)) if match else None


def to_internal_value(value: str) -> str:
    """Convert an exact ``{a.b}`` reference to ``var(--a-b)``.

    Anything else, including values that merely contain braces, is
    returned verbatim.
    """
    reference = extract_reference(value)
    return f"var({reference})" if reference else value


def external_tier(dotted: str) -> Tier | None:
    tier = Tier.from_segment(dotted.split(".", 1)[0])
    return tier if tier in EXTERNAL_TIERS else None


def normalize(source_name: str, source_value: str) -> ExternalToken:
    return ExternalToken(
        source_name=source_name,
        source_value=source_value,
        name=to_internal_name(source_name),
        value=to_internal_value(source_value),
        reference=extract_reference(source_value),
        tier=external_tier(source_name),
    )


def normalize_batch(entries: Iterable[ExportEntry]) -> list[ExternalToken]:
    return [normalize(entry.name, entry.value) for entry in entries]


def _check_token(token: ExternalToken) -> ValidationIssue | None:
    if token.tier is None:
        return ValidationIssue(
            kind=IssueKind.UNKNOWN_TIER,
            subjects=(token.source_name,),
            message=f"Unknown tier: {token.source_name}",
            detail=(
                'Token name must start with "primitive.", "semantic.", '
                'or "component."'
            ),
        )

    reference = token.reference
    if reference is None:
        return None

    ref_tier = Tier.from_name(reference)
    if ref_tier is Tier.UNKNOWN:
        return ValidationIssue(
            kind=IssueKind.TIER_VIOLATION,
            subjects=(token.source_name, reference),
            message=f"Unknown ref tier: {token.source_name}",
            detail=f'Referenced "{reference}" has no recognized tier prefix',
        )

    if ref_tier in CODE_ONLY_TIERS:
        return ValidationIssue(
            kind=IssueKind.TIER_VIOLATION,
            subjects=(token.source_name, reference),
            message=f"Invalid ref tier: {token.source_name} → {reference}",
            detail=(
                f'"{ref_tier.value}" tokens are code-only and must not be '
                "referenced from external exports"
            ),
        )

    if not EXTERNAL_POLICY.allows(token.tier, ref_tier):
        return ValidationIssue(
            kind=IssueKind.TIER_VIOLATION,
            subjects=(token.source_name, reference),
            message=f"Tier violation: {token.source_name} → {reference}",
            detail=(
                f"{token.tier.value} token references a {ref_tier.value} token. "
                f"Allowed: {EXTERNAL_POLICY.describe_allowed(token.tier)}"
            ),
        )
    return None


def _duplicate_issues(tokens: Sequence[ExternalToken]) -> list[ValidationIssue]:
    seen: set[str] = set()
    reported: set[str] = set()
    issues: list[ValidationIssue] = []
    for token in tokens:
        if token.source_name in seen and token.source_name not in reported:
            reported.add(token.source_name)
            issues.append(
                ValidationIssue(
                    kind=IssueKind.DUPLICATE_TOKEN,
                    subjects=(token.source_name,),
                    message=f"Duplicate token: {token.source_name}",
                    detail="Each token may appear only once per export",
                )
            )
        seen.add(token.source_name)
    return issues


def external_cycles(tokens: Sequence[ExternalToken]) -> list[list[str]]:
    edges = {
        token.name: [token.reference] if token.reference else []
        for token in tokens
    }
    return find_cycles(edges)


def validate_external(tokens: Sequence[ExternalToken]) -> list[ValidationIssue]:
    """Check an external batch against the external tier policy.

    Per token: the name must carry an external tier, and a reference must
    target a known, non code-only tier the chain allows. Duplicate names and
    cycles within the batch are errors too.

    Returns:
        Every issue found, in token order; empty when the batch is clean.
    """
    issues: list[ValidationIssue] = []
    for token in tokens:
        issue = _check_token(token)
        if issue is not None:
            issues.append(issue)
    issues.extend(_duplicate_issues(tokens))
    issues.extend(cycle_issues(external_cycles(tokens)))
    return issues


def ensure_valid(tokens: Sequence[ExternalToken]) -> None:
    """Reject the whole batch when any external token breaks the contract.

    Raises:
        ArchitectureViolationError: Carrying every issue found.
    """
    issues = validate_external(tokens)
    if issues:
        logger.warning("external_batch_rejected", violations=len(issues))
        raise ArchitectureViolationError(issues)
    logger.debug("external_batch_accepted", tokens=len(tokens))


__all__ = [
    "REFERENCE_VALUE",
    "ensure_valid",
    "external_cycles",
    "external_tier",
    "extract_reference",
    "normalize",
    "normalize_batch",
    "to_internal_name",
    "to_internal_value",
    "validate_external",
]
