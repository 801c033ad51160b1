"""Plain-text reports printed by the CLI.

Renderers return text and never print, so every report can be asserted in
tests without capturing stdout.
"""

from collections.abc import Callable, Sequence
from pathlib import Path

from token_chain.domain.sync import DiffCategory, TokenDiff
from token_chain.domain.validation import IssueKind, ValidationIssue, ValidationReport
from token_chain.services.approval import ReviewOutcome
from token_chain.services.dependency_graph import ChainLink

SEP = "─" * 60
PASS = "✔"
FAIL = "✖"
WARN = "⚠"
INFO = "·"


def _issue_lines(issue: ValidationIssue, marker: str, indent: str) -> list[str]:
    lines = [f"{indent}{marker} {issue.message}"]
    if issue.detail:
        lines.append(f"{indent}     {issue.detail}")
    return lines


def render_validation_report(report: ValidationReport, source: str) -> str:
    """Full validation report: cycle status, errors, warnings, then a verdict."""
    errors = report.errors
    warnings = report.warnings

    lines = [
        "",
        SEP,
        "Token Validation Report",
        f"Source  : {source}",
        f"Tokens  : {report.token_count} defined    Rule usages: {report.rule_usage_count}",
        SEP,
        "",
    ]
    if report.has_cycles:
        lines.append(f"{FAIL} Circular dependencies detected ({len(report.cycles)})")
    else:
        lines.append(f"{PASS} No circular dependencies")
    lines.append("")

    if errors:
        for issue in errors:
            lines.extend(_issue_lines(issue, FAIL, ""))
        lines.append("")

    if warnings:
        for issue in warnings:
            lines.extend(_issue_lines(issue, WARN, ""))
        lines.append("")

    lines.append(SEP)
    if errors:
        lines.append(f"Build FAILED: {len(errors)} error(s)  {len(warnings)} warning(s)")
        lines.append("Fix errors above before building.")
    else:
        lines.append(f"Build PASSED: 0 errors  {len(warnings)} warning(s)")
    lines.extend([SEP, ""])
    return "\n".join(lines)


def render_stylesheet_missing(candidates: Sequence[str]) -> str:
    lines = ["", "No compiled stylesheet found. Checked:"]
    lines.extend(f"    {candidate}" for candidate in candidates)
    lines.append("Build the stylesheet first. Skipping; nothing to check.")
    return "\n".join(lines)


def render_architecture_violations(issues: Sequence[ValidationIssue]) -> str:
    lines: list[str] = []
    if any(issue.kind is IssueKind.CIRCULAR_DEPENDENCY for issue in issues):
        lines.append(f"{FAIL} Circular dependencies detected in external tokens")
    else:
        lines.append(f"{PASS} No circular dependencies in external tokens")
    lines.extend(["", f"Architecture Violations ({len(issues)})"])
    for issue in issues:
        lines.extend(_issue_lines(issue, FAIL, "  "))
    lines.extend(["", SEP, "Sync BLOCKED: architecture violations detected"])
    lines.extend(["Fix the external token structure before syncing.", SEP, ""])
    return "\n".join(lines)


def render_sync_header(title: str, export: str, stylesheet: str) -> str:
    return "\n".join(
        ["", SEP, title, f"Export source : {export}", f"CSS source    : {stylesheet}", SEP, ""]
    )


def render_diff(diff: TokenDiff) -> str:
    """Dry-run diff listing and pending-change footer."""
    lines = [f"{PASS} No circular dependencies in external tokens", ""]

    if diff.new:
        lines.append(f"New Tokens ({len(diff.new)})")
        lines.extend(f"  + {entry.name}" for entry in diff.new)
        lines.append("")
    if diff.modified:
        lines.append(f"Modified Tokens ({len(diff.modified)})")
        for entry in diff.modified:
            lines.append(f"  ~ {entry.name}")
            lines.append(f"      code    : {entry.old_value}")
            lines.append(f"      external: {entry.new_value}")
        lines.append("")
    if diff.removed:
        lines.append(f"Removed Tokens ({len(diff.removed)})")
        lines.extend(f"  - {entry.name}" for entry in diff.removed)
        lines.append("")

    if diff.in_sync:
        lines.extend([f"{PASS} All {len(diff.unchanged)} tokens match, no changes", ""])
    else:
        lines.extend([f"Unchanged: {len(diff.unchanged)} tokens", ""])

    lines.append(SEP)
    if diff.in_sync:
        lines.append("Sync SAFE: tokens are in sync")
    else:
        lines.append("Sync SAFE: no architectural violations")
        lines.append(
            f"Changes pending: {diff.pending_count}  (new: {len(diff.new)}  "
            f"modified: {len(diff.modified)}  removed: {len(diff.removed)})"
        )
    lines.extend([SEP, ""])
    return "\n".join(lines)


def render_diff_counts(diff: TokenDiff) -> str:
    return "\n".join(
        [
            "Diff against compiled CSS:",
            f"  {INFO} NEW        {len(diff.new):<6} (external only)",
            f"  {INFO} MODIFIED   {len(diff.modified):<6} (in both, value differs)",
            f"  {INFO} REMOVED    {len(diff.removed):<6} (local only, informational)",
            f"  {INFO} UNCHANGED  {len(diff.unchanged)}",
            "",
        ]
    )


def render_apply_summary(
    written: Sequence[Path], outcome: ReviewOutcome, relative: Callable[[Path], str]
) -> str:
    """Files written plus the accepted changes per category.

    Args:
        written: Paths written, in order.
        outcome: The review outcome that was applied.
        relative: Callable turning a path into its display form.
    """
    lines = [f"{PASS} {relative(path)}" for path in written]
    lines.append("")

    sections = (
        ("Added", "+", DiffCategory.NEW),
        ("Updated", "~", DiffCategory.MODIFIED),
        ("Removed from user theme", "-", DiffCategory.REMOVED),
    )
    for title, marker, category in sections:
        entries = outcome.accepted_in(category)
        if entries:
            lines.append(f"  {title} ({len(entries)})")
            lines.extend(f"    {marker} {entry.name}" for entry in entries)
            lines.append("")

    if outcome.skipped_count:
        lines.extend([f"  {WARN} Skipped: {outcome.skipped_count} token(s)", ""])

    lines.extend(
        [SEP, f"{PASS} Theme sync complete: {outcome.accepted_count} token(s) applied", SEP, ""]
    )
    return "\n".join(lines)


def render_trace(chain: Sequence[ChainLink]) -> str:
    """One line per hop, ending with the literal the chain resolves to."""
    lines: list[str] = []
    for depth, link in enumerate(chain):
        indent = "  " * depth
        arrow = "" if depth == 0 else "→ "
        if link.value is None:
            lines.append(f"{indent}{arrow}{link.name}  {FAIL} not defined")
        else:
            lines.append(f"{indent}{arrow}{link.name}: {link.value}")
    return "\n".join(lines)


__all__ = [
    "FAIL",
    "INFO",
    "PASS",
    "SEP",
    "WARN",
    "render_apply_summary",
    "render_architecture_violations",
    "render_diff",
    "render_diff_counts",
    "render_stylesheet_missing",
    "render_sync_header",
    "render_trace",
    "render_validation_report",
]
