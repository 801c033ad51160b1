from token_chain.domain.registry import ChangeAction, ChangelogEntry, UserRegistry
from token_chain.domain.sync import DiffCategory, DiffEntry, ExternalToken, TokenDiff
from token_chain.domain.tiers import (
    EXTERNAL_POLICY,
    EXTERNAL_TIERS,
    LOCAL_POLICY,
    Tier,
    TierPolicy,
    build_policy,
)
from token_chain.domain.tokens import PrimitiveUsage, StylesheetExtraction, Token
from token_chain.domain.validation import (
    IssueKind,
    Severity,
    ValidationIssue,
    ValidationReport,
)

__all__ = [
    "ChangeAction",
    "ChangelogEntry",
    "DiffCategory",
    "DiffEntry",
    "EXTERNAL_POLICY",
    "EXTERNAL_TIERS",
    "ExternalToken",
    "IssueKind",
    "LOCAL_POLICY",
    "PrimitiveUsage",
    "Severity",
    "StylesheetExtraction",
    "Tier",
    "TierPolicy",
    "Token",
    "TokenDiff",
    "UserRegistry",
    "ValidationIssue",
    "ValidationReport",
    "build_policy",
]
