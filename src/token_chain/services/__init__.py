from token_chain.services.approval import (
    Decision,
    ReviewOutcome,
    ReviewPrompter,
    ReviewSession,
    ReviewState,
    batch_review,
    removable_overrides,
    run_review,
)
from token_chain.services.artifacts import (
    ArtifactBundle,
    ArtifactPaths,
    ThemeTarget,
    render_artifacts,
    write_artifacts,
)
from token_chain.services.dependency_graph import DependencyGraph, build_graph, find_cycles
from token_chain.services.diff import diff_tokens
from token_chain.services.normalizer import (
    ensure_valid,
    normalize_batch,
    to_internal_name,
    to_internal_value,
    validate_external,
)
from token_chain.services.registry_merge import merge_registry
from token_chain.services.sync import RunContext, SyncPlan, apply_outcome, prepare_sync
from token_chain.services.tier_rules import validate_tokens

__all__ = [
    "ArtifactBundle",
    "ArtifactPaths",
    "Decision",
    "DependencyGraph",
    "ReviewOutcome",
    "ReviewPrompter",
    "ReviewSession",
    "ReviewState",
    "RunContext",
    "SyncPlan",
    "ThemeTarget",
    "apply_outcome",
    "batch_review",
    "build_graph",
    "diff_tokens",
    "ensure_valid",
    "find_cycles",
    "merge_registry",
    "normalize_batch",
    "prepare_sync",
    "removable_overrides",
    "render_artifacts",
    "run_review",
    "to_internal_name",
    "to_internal_value",
    "validate_external",
    "validate_tokens",
    "write_artifacts",
]
