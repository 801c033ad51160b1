"""Validation issues and the ordered report they are collected into."""

from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Errors block the run; warnings are reported only."""

    ERROR = "error"
    WARNING = "warning"


class IssueKind(str, Enum):
    """Validation issue taxonomy."""

    MISSING_REFERENCE = "missing-reference"
    CIRCULAR_DEPENDENCY = "circular-dependency"
    TIER_VIOLATION = "tier-violation"
    DIRECT_PRIMITIVE_USAGE = "direct-primitive-usage"
    UNKNOWN_TIER = "unknown-tier"
    DUPLICATE_TOKEN = "duplicate-token"
    ORPHAN_TOKEN = "orphan-token"
    UNUSED_SEMANTIC = "unused-semantic"

    @property
    def severity(self) -> Severity:
        if self in _WARNING_KINDS:
            return Severity.WARNING
        return Severity.ERROR


_WARNING_KINDS = frozenset({IssueKind.ORPHAN_TOKEN, IssueKind.UNUSED_SEMANTIC})

# Report order for errors; warnings follow in their own order.
ERROR_ORDER: tuple[IssueKind, ...] = (
    IssueKind.UNKNOWN_TIER,
    IssueKind.DUPLICATE_TOKEN,
    IssueKind.MISSING_REFERENCE,
    IssueKind.CIRCULAR_DEPENDENCY,
    IssueKind.TIER_VIOLATION,
    IssueKind.DIRECT_PRIMITIVE_USAGE,
)
WARNING_ORDER: tuple[IssueKind, ...] = (
    IssueKind.ORPHAN_TOKEN,
    IssueKind.UNUSED_SEMANTIC,
)


@dataclass(frozen=True)
class ValidationIssue:
    kind: IssueKind
    subjects: tuple[str, ...]
    message: str
    detail: str | None = None

    @property
    def severity(self) -> Severity:
        return self.kind.severity

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass
class ValidationReport:
    """Outcome of running every rule over one token set.

    Issues are grouped by kind in a fixed order so identical input always
    renders an identical report.
    """

    token_count: int = 0
    rule_usage_count: int = 0
    cycles: list[list[str]] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [
            issue
            for kind in ERROR_ORDER
            for issue in self.issues
            if issue.kind is kind
        ]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [
            issue
            for kind in WARNING_ORDER
            for issue in self.issues
            if issue.kind is kind
        ]

    @property
    def passed(self) -> bool:
        return not self.errors

    def of_kind(self, kind: IssueKind) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.kind is kind]


__all__ = [
    "ERROR_ORDER",
    "IssueKind",
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "WARNING_ORDER",
]
