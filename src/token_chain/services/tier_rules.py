"""Tier rule engine for the compiled stylesheet.

Six rules run over every extraction, regardless of earlier failures:

1. missing-reference: ``var(--x)`` where ``--x`` is never defined.
2. circular-dependency: a token depending on itself, directly or not.
3. tier-violation: a reference the tier table does not allow.
4. orphan-token: defined but referenced by nothing (warning).
5. unused-semantic: semantic token no component or rule consumes (warning).
6. direct-primitive-usage: a non-root rule consuming a primitive.
"""

from token_chain.domain.tiers import LOCAL_POLICY, Tier, TierPolicy
from token_chain.domain.tokens import StylesheetExtraction
from token_chain.domain.validation import IssueKind, ValidationIssue, ValidationReport
from token_chain.logging_config import get_logger
from token_chain.services.dependency_graph import DependencyGraph, build_graph, find_cycles

logger = get_logger(__name__)

RULE_CONSUMER = "(css rule)"


def find_missing_references(extraction: StylesheetExtraction) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    defined = extraction.definitions

    for token in defined.values():
        for dep in token.refs:
            if dep not in defined:
                issues.append(
                    ValidationIssue(
                        kind=IssueKind.MISSING_REFERENCE,
                        subjects=(dep, token.name),
                        message=f"Missing reference: {dep}",
                        detail=(
                            f"Referenced by {token.name} (line {token.line}) "
                            "but not defined anywhere"
                        ),
                    )
                )

    for used in extraction.rule_usages:
        if used not in defined:
            issues.append(
                ValidationIssue(
                    kind=IssueKind.MISSING_REFERENCE,
                    subjects=(used,),
                    message=f"Missing reference: {used}",
                    detail=f"Referenced by {RULE_CONSUMER} but not defined anywhere",
                )
            )
    return issues


def cycle_issues(cycles: list[list[str]]) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            kind=IssueKind.CIRCULAR_DEPENDENCY,
            subjects=tuple(cycle),
            message=f"Circular dependency: {' → '.join(cycle)}",
        )
        for cycle in cycles
    ]


def find_tier_violations(
    extraction: StylesheetExtraction, policy: TierPolicy = LOCAL_POLICY
) -> list[ValidationIssue]:
    """Check every reference inside a definition against the tier table.

    Unknown-tier tokens are not checked. Primitives may hold raw values
    only, so every reference they make is a violation.
    """
    issues: list[ValidationIssue] = []

    for token in extraction.definitions.values():
        if token.tier is Tier.UNKNOWN:
            continue
        for dep in token.refs:
            dep_tier = Tier.from_name(dep)
            if policy.allows(token.tier, dep_tier):
                continue
            issues.append(
                ValidationIssue(
                    kind=IssueKind.TIER_VIOLATION,
                    subjects=(token.name, dep),
                    message=(
                        f"Tier violation: {token.name} ({token.tier.value}) "
                        f"references {dep} ({dep_tier.value})"
                    ),
                    detail=(
                        f"line {token.line}, {token.tier.value} tokens may only "
                        f"reference: {policy.describe_allowed(token.tier)}"
                    ),
                )
            )
    return issues


def find_orphans(
    extraction: StylesheetExtraction, graph: DependencyGraph
) -> list[ValidationIssue]:
    referenced = graph.referenced_names()
    return [
        ValidationIssue(
            kind=IssueKind.ORPHAN_TOKEN,
            subjects=(name,),
            message=f"Orphan token: {name}",
            detail="Defined but not referenced by any token or CSS rule",
        )
        for name in extraction.definitions
        if name not in referenced and not extraction.is_used_in_rules(name)
    ]


def find_unused_semantics(
    extraction: StylesheetExtraction, graph: DependencyGraph
) -> list[ValidationIssue]:
    used_by_components = {
        dep
        for name, deps in graph.edges.items()
        if Tier.from_name(name) is Tier.COMPONENT
        for dep in deps
        if Tier.from_name(dep) is Tier.SEMANTIC
    }
    return [
        ValidationIssue(
            kind=IssueKind.UNUSED_SEMANTIC,
            subjects=(token.name,),
            message=f"Unused semantic: {token.name}",
            detail="Not consumed by any component token or CSS rule",
        )
        for token in extraction.definitions.values()
        if token.tier is Tier.SEMANTIC
        and token.name not in used_by_components
        and not extraction.is_used_in_rules(token.name)
    ]


def find_direct_primitive_usage(extraction: StylesheetExtraction) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            kind=IssueKind.DIRECT_PRIMITIVE_USAGE,
            subjects=(usage.token,),
            message=f"Direct primitive in CSS rule: var({usage.token})",
            detail=(
                f"line {usage.line}, use a --component-* token instead\n"
                f"     context: {usage.context}"
            ),
        )
        for usage in extraction.primitive_usages
    ]


def validate_tokens(
    extraction: StylesheetExtraction, policy: TierPolicy = LOCAL_POLICY
) -> ValidationReport:
    """Run every rule and collect the findings into one report.

    Args:
        extraction: Parsed stylesheet.
        policy: Tier table to enforce; the local one unless testing.

    Returns:
        The report; ``report.passed`` is False when any error was found.
    """
    graph = build_graph(extraction.definitions.values())
    cycles = find_cycles(graph)

    issues = [
        *find_missing_references(extraction),
        *cycle_issues(cycles),
        *find_tier_violations(extraction, policy),
        *find_direct_primitive_usage(extraction),
        *find_orphans(extraction, graph),
        *find_unused_semantics(extraction, graph),
    ]
    report = ValidationReport(
        token_count=extraction.token_count,
        rule_usage_count=extraction.rule_usage_count,
        cycles=cycles,
        issues=issues,
    )
    logger.info(
        "tokens_validated",
        tokens=report.token_count,
        errors=len(report.errors),
        warnings=len(report.warnings),
    )
    return report


__all__ = [
    "RULE_CONSUMER",
    "cycle_issues",
    "find_direct_primitive_usage",
    "find_missing_references",
    "find_orphans",
    "find_tier_violations",
    "find_unused_semantics",
    "validate_tokens",
]
