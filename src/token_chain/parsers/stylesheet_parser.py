"""Compiled stylesheet parser for custom property tokens."""

import re
from collections.abc import Sequence
from pathlib import Path

from token_chain.domain.tiers import Tier
from token_chain.domain.tokens import PrimitiveUsage, StylesheetExtraction, Token
from token_chain.exceptions import StylesheetNotFoundError
from token_chain.logging_config import get_logger

logger = get_logger(__name__)

VAR_REFERENCE = re.compile(r"var\(\s*(--[\w-]+)")
DEFINITION = re.compile(r"^(--[\w-]+)\s*:\s*(.+?)\s*;")
LAYER_OPEN = re.compile(r"^@layer\s+([\w-]+)\s*\{")
ROOT_OPEN = re.compile(r"^:root\s*\{")

CONTEXT_LIMIT = 100


def extract_references(value: str) -> tuple[str, ...]:
    """Return the primary argument of every ``var()`` in a value.

    Handles ``var(--x)``, ``var(--x, fallback)`` and ``var(--x, var(--y))``;
    nested fallbacks are references too.
    """
    return tuple(VAR_REFERENCE.findall(value))


def _excerpt(line: str) -> str:
    if len(line) > CONTEXT_LIMIT:
        return line[: CONTEXT_LIMIT - 3] + "…"
    return line


class StylesheetParser:
    """Line-oriented parser for expanded (non-minified) compiled CSS.

    A single forward pass tracks brace depth and the enclosing ``@layer``
    names. Declarations inside ``:root`` blocks are token definitions;
    ``var()`` references anywhere else inside a rule are rule usages.

    Assumes one declaration per line and no braces inside multi-line
    comments. The upstream compiler guarantees both; neither is checked.
    """

    def parse(self, css: str) -> StylesheetExtraction:
        """Parse stylesheet text.

        Args:
            css: Expanded stylesheet source.

        Returns:
            Definitions, rule usages and direct primitive usages.
        """
        result = StylesheetExtraction()

        depth = 0
        in_root = False
        root_depth = -1
        layers: list[tuple[str, int]] = []

        for line_number, raw in enumerate(css.split("\n"), start=1):
            line = raw.strip()
            if not line or line.startswith("/*") or line.startswith("//"):
                continue

            layer_match = LAYER_OPEN.match(line)
            opens_root = not in_root and ROOT_OPEN.match(line) is not None

            depth += raw.count("{") - raw.count("}")

            if layer_match:
                layers.append((layer_match.group(1), depth))
            while layers and depth < layers[-1][1]:
                layers.pop()

            if opens_root:
                in_root = True
                root_depth = depth
            if in_root and depth < root_depth:
                in_root = False
                root_depth = -1

            layer = layers[-1][0] if layers else None

            if in_root:
                self._collect_definition(result, line, line_number, layer)
            elif depth > 0:
                self._collect_usages(result, line, line_number)

        logger.debug(
            "stylesheet_parsed",
            tokens=result.token_count,
            rule_usages=result.rule_usage_count,
            primitive_usages=len(result.primitive_usages),
        )
        return result

    def parse_file(self, path: Path) -> StylesheetExtraction:
        """Parse a stylesheet file from disk."""
        return self.parse(path.read_text(encoding="utf-8"))

    def _collect_definition(
        self,
        result: StylesheetExtraction,
        line: str,
        line_number: int,
        layer: str | None,
    ) -> None:
        match = DEFINITION.match(line)
        if match is None:
            return
        name, value = match.group(1), match.group(2)
        if name in result.definitions:
            # First definition wins; the tokens layer is emitted first.
            logger.debug(
                "duplicate_definition_ignored",
                token=name,
                line=line_number,
                first_line=result.definitions[name].line,
            )
            return
        result.definitions[name] = Token(
            name=name,
            value=value,
            refs=extract_references(value),
            line=line_number,
            layer=layer,
        )

    def _collect_usages(
        self, result: StylesheetExtraction, line: str, line_number: int
    ) -> None:
        for name in VAR_REFERENCE.findall(line):
            result.rule_usages.setdefault(name, None)
            if Tier.from_name(name) is Tier.PRIMITIVE:
                result.primitive_usages.append(
                    PrimitiveUsage(token=name, line=line_number, context=_excerpt(line))
                )


def extract_tokens(css: str) -> StylesheetExtraction:
    """Parse stylesheet text with a default parser."""
    return StylesheetParser().parse(css)


def find_stylesheet(candidates: Sequence[Path]) -> Path:
    """Return the first existing candidate.

    Raises:
        StylesheetNotFoundError: If no candidate exists.
    """
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    raise StylesheetNotFoundError(candidates)


__all__ = [
    "StylesheetParser",
    "extract_references",
    "extract_tokens",
    "find_stylesheet",
]
