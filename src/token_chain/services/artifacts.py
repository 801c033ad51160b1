"""Rendering and writing of the user theme artifacts.

All three files are rendered in memory first. They are then written in a
fixed order (CSS, SCSS, registry) through a sibling temp file and an atomic
rename, so a reader never sees a half-written file and the registry only
changes once both theme files are in place.
"""

import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path, PurePath

from token_chain.config import ThemeScope
from token_chain.domain.registry import UserRegistry
from token_chain.exceptions import ArtifactWriteError
from token_chain.logging_config import get_logger
from token_chain.repositories.interfaces import RegistryRepository
from token_chain.schemas import RegistryMeta

logger = get_logger(__name__)

CSS_FILENAME = "user-theme.css"
REGENERATE_HINT = "token-chain apply"
EMPTY_OVERRIDES = "(no token overrides — all tokens use system defaults)"


@dataclass(frozen=True)
class ThemeTarget:
    theme_name: str = "user"
    scope: ThemeScope = ThemeScope.ROOT

    @property
    def selector(self) -> str:
        if self.scope is ThemeScope.ATTR:
            return f'[data-theme="{self.theme_name}"]'
        return ":root"


@dataclass(frozen=True)
class ArtifactPaths:
    css: Path
    scss: Path
    registry: Path


@dataclass(frozen=True)
class Artifact:
    path: Path
    content: str


@dataclass(frozen=True)
class ArtifactBundle:
    css: Artifact
    scss: Artifact
    registry: Artifact

    def in_write_order(self) -> tuple[Artifact, ...]:
        return (self.css, self.scss, self.registry)


def _timestamp(moment: datetime) -> str:
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _declarations(tokens: Mapping[str, str]) -> list[str]:
    width = max((len(name) for name in tokens), default=0)
    return [
        f"    {name}:{' ' * (width - len(name) + 1)}{value};"
        for name, value in tokens.items()
    ]


def _layer_block(selector: str, declarations: list[str]) -> list[str]:
    return ["@layer themes {", "", f"  {selector} {{", *declarations, "  }", "", "}", ""]


def render_theme_css(
    tokens: Mapping[str, str],
    target: ThemeTarget,
    source: str,
    generated_at: datetime,
) -> str:
    """Render the override stylesheet linked after the compiled one."""
    header = "\n".join(
        [
            "/* Design System — User Theme",
            f" * Generated : {_timestamp(generated_at)}",
            f" * Source    : {PurePath(source).name}",
            f" * Tokens    : {len(tokens)}",
            f" * Scope     : {target.selector}",
            " *",
            f" * DO NOT EDIT MANUALLY — regenerate with: {REGENERATE_HINT}",
            " */",
        ]
    )
    if not tokens:
        return f"{header}\n\n/* {EMPTY_OVERRIDES} */\n"
    return "\n".join([header, "", *_layer_block(target.selector, _declarations(tokens))])


def render_theme_scss(
    tokens: Mapping[str, str],
    target: ThemeTarget,
    source: str,
    generated_at: datetime,
    scss_path: str = "scss/themes/_user-theme.scss",
) -> str:
    """Render the same override block as an SCSS partial."""
    rule = "// " + "=" * 77
    declarations = _declarations(tokens) if tokens else [f"    // {EMPTY_OVERRIDES}"]
    return "\n".join(
        [
            rule,
            "// USER THEME",
            f"// FILE: {scss_path}",
            "// LAYER: themes",
            "//",
            f"// Generated : {_timestamp(generated_at)}",
            f"// Source    : {PurePath(source).name}",
            f"// Tokens    : {len(tokens)}",
            f"// Scope     : {target.selector}",
            "//",
            "// To include in the SCSS build pipeline, add to scss/themes/_index.scss:",
            "//   @use 'user-theme';",
            "//",
            f"// DO NOT EDIT MANUALLY — regenerate with: {REGENERATE_HINT}",
            rule,
            "",
            *_layer_block(target.selector, declarations),
        ]
    )


def render_artifacts(
    registry: UserRegistry,
    target: ThemeTarget,
    paths: ArtifactPaths,
    store: RegistryRepository,
    *,
    source: str,
    stylesheet: str,
    scss_label: str | None = None,
    now: datetime | None = None,
) -> ArtifactBundle:
    """Render every artifact for ``registry`` without touching the disk.

    Args:
        registry: Merged registry to publish.
        target: Theme name and scope, which decide the selector.
        paths: Destination of each file.
        store: Serializer for the registry snapshot.
        source: Export path recorded as provenance.
        stylesheet: Compiled stylesheet path recorded as provenance.
        scss_label: Path shown in the SCSS header; defaults to ``paths.scss``.
        now: Generation timestamp.
    """
    generated_at = now or datetime.now(UTC)
    meta = RegistryMeta(
        generated_at=generated_at,
        source=source,
        stylesheet=stylesheet,
        theme_name=target.theme_name,
        scope=target.scope.value,
        selector=target.selector,
    )
    return ArtifactBundle(
        css=Artifact(
            paths.css, render_theme_css(registry.tokens, target, source, generated_at)
        ),
        scss=Artifact(
            paths.scss,
            render_theme_scss(
                registry.tokens,
                target,
                source,
                generated_at,
                scss_label or paths.scss.as_posix(),
            ),
        ),
        registry=Artifact(paths.registry, store.serialize(registry, meta)),
    )


def _write_atomic(artifact: Artifact) -> None:
    artifact.path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=artifact.path.parent, prefix=f".{artifact.path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(artifact.content)
        os.replace(tmp_name, artifact.path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_artifacts(bundle: ArtifactBundle) -> list[Path]:
    """Write the bundle in order, stopping at the first failure.

    Returns:
        Paths written, in order.

    Raises:
        ArtifactWriteError: Naming the failed file and the files already
            written. Written files are not rolled back.
    """
    written: list[Path] = []
    for artifact in bundle.in_write_order():
        try:
            _write_atomic(artifact)
        except OSError as e:
            logger.error(
                "artifact_write_failed",
                path=str(artifact.path),
                error=str(e),
                written=[str(p) for p in written],
            )
            raise ArtifactWriteError(artifact.path, str(e), written) from e
        written.append(artifact.path)
        logger.info("artifact_written", path=str(artifact.path), bytes=len(artifact.content))
    return written


__all__ = [
    "Artifact",
    "ArtifactBundle",
    "ArtifactPaths",
    "CSS_FILENAME",
    "ThemeTarget",
    "render_artifacts",
    "render_theme_css",
    "render_theme_scss",
    "write_artifacts",
]
