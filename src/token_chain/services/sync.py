"""Per-run orchestration of the validate, sync and apply workflows.

Every command builds one RunContext from a fresh Settings instance; nothing
is cached between runs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from token_chain.config import Settings
from token_chain.domain.registry import UserRegistry
from token_chain.domain.sync import ExternalToken, TokenDiff
from token_chain.domain.tokens import StylesheetExtraction
from token_chain.domain.validation import ValidationReport
from token_chain.logging_config import get_logger
from token_chain.parsers.export_parser import ExportParser
from token_chain.parsers.stylesheet_parser import StylesheetParser, find_stylesheet
from token_chain.repositories.registry_store import JsonRegistryStore
from token_chain.services.approval import ReviewOutcome
from token_chain.services.artifacts import (
    CSS_FILENAME,
    ArtifactPaths,
    ThemeTarget,
    render_artifacts,
    write_artifacts,
)
from token_chain.services.diff import diff_tokens
from token_chain.services.normalizer import ensure_valid, normalize_batch
from token_chain.services.registry_merge import merge_registry
from token_chain.services.tier_rules import validate_tokens

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunContext:
    """Resolved inputs and outputs for one command invocation."""

    project_root: Path
    stylesheet_candidates: list[Path]
    export_path: Path
    registry_path: Path
    css_path: Path
    scss_path: Path
    target: ThemeTarget

    @classmethod
    def from_settings(cls, settings: Settings) -> "RunContext":
        """Resolve every configured path against the project root."""
        return cls(
            project_root=settings.project_root,
            stylesheet_candidates=settings.resolved_stylesheet_candidates,
            export_path=settings.resolve(settings.export_file),
            registry_path=settings.resolve(settings.registry_path),
            css_path=settings.resolve(settings.output_dir) / CSS_FILENAME,
            scss_path=settings.resolve(settings.scss_path),
            target=ThemeTarget(theme_name=settings.theme_name, scope=settings.scope),
        )

    def relative(self, path: Path) -> str:
        """Path as shown in reports: relative to the project root if inside it."""
        try:
            return path.resolve().relative_to(self.project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    @property
    def artifact_paths(self) -> ArtifactPaths:
        return ArtifactPaths(css=self.css_path, scss=self.scss_path, registry=self.registry_path)


@dataclass
class SyncPlan:
    """A validated external batch and its diff against the stylesheet."""

    stylesheet: Path
    export: Path
    extraction: StylesheetExtraction
    external: list[ExternalToken]
    diff: TokenDiff


@dataclass
class ApplyResult:
    registry: UserRegistry
    written: list[Path] = field(default_factory=list)


def load_stylesheet(context: RunContext) -> tuple[Path, StylesheetExtraction]:
    """Locate and parse the compiled stylesheet.

    Raises:
        StylesheetNotFoundError: If no candidate exists.
    """
    path = find_stylesheet(context.stylesheet_candidates)
    return path, StylesheetParser().parse_file(path)


def run_validation(context: RunContext) -> tuple[Path, ValidationReport]:
    path, extraction = load_stylesheet(context)
    return path, validate_tokens(extraction)


def prepare_sync(
    context: RunContext, stylesheet: Path, extraction: StylesheetExtraction
) -> SyncPlan:
    """Read the export, gate the external batch and diff it.

    Args:
        context: Run context naming the export file.
        stylesheet: Path the extraction came from.
        extraction: Parsed compiled stylesheet (see ``load_stylesheet``).

    Raises:
        ExportNotFoundError: If the export file is missing.
        ExportFormatError: If the export cannot be parsed.
        ArchitectureViolationError: If the batch breaks the tier contract;
            nothing is diffed.
    """
    entries = ExportParser().parse_file(context.export_path)
    external = normalize_batch(entries)
    ensure_valid(external)
    diff = diff_tokens(extraction.definitions, external)
    logger.info(
        "sync_diff_computed",
        new=len(diff.new),
        modified=len(diff.modified),
        removed=len(diff.removed),
        unchanged=len(diff.unchanged),
    )
    return SyncPlan(
        stylesheet=stylesheet,
        export=context.export_path,
        extraction=extraction,
        external=external,
        diff=diff,
    )


def load_registry(context: RunContext) -> UserRegistry:
    """Raises RegistryLoadError if an existing registry is unreadable."""
    return JsonRegistryStore(context.registry_path).load()


def apply_outcome(
    context: RunContext,
    plan: SyncPlan,
    registry: UserRegistry,
    outcome: ReviewOutcome,
    now: datetime | None = None,
) -> ApplyResult:
    """Merge accepted entries and publish all artifacts.

    Raises:
        ArtifactWriteError: If a file cannot be written.
    """
    merged = merge_registry(registry, outcome.accepted, now)
    bundle = render_artifacts(
        merged,
        context.target,
        context.artifact_paths,
        JsonRegistryStore(context.registry_path),
        source=context.relative(plan.export),
        stylesheet=context.relative(plan.stylesheet),
        scss_label=context.relative(context.scss_path),
        now=now,
    )
    written = write_artifacts(bundle)
    return ApplyResult(registry=merged, written=written)


__all__ = [
    "ApplyResult",
    "RunContext",
    "SyncPlan",
    "apply_outcome",
    "load_registry",
    "load_stylesheet",
    "prepare_sync",
    "run_validation",
]
