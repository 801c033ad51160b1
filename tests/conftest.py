import json
from pathlib import Path

import pytest

from token_chain.domain.tokens import Token

CLEAN_CSS = "\n".join(
    [
        "/* Compiled design system */",
        "@layer tokens {",
        "  :root {",
        "    --primitive-color-blue-600: #2563eb;",
        "    --primitive-space-4: 16px;",
        "    --semantic-color-brand: var(--primitive-color-blue-600);",
        "    --semantic-space-md: var(--primitive-space-4);",
        "    --component-button-bg: var(--semantic-color-brand);",
        "    --component-button-padding: var(--semantic-space-md);",
        "  }",
        "}",
        "@layer components {",
        "  .button {",
        "    background: var(--component-button-bg);",
        "    padding: var(--component-button-padding);",
        "  }",
        "}",
        "",
    ]
)


def write_export(path: Path, tokens: list[dict[str, str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"tokens": tokens}), encoding="utf-8")
    return path


@pytest.fixture
def clean_css() -> str:
    return CLEAN_CSS


@pytest.fixture
def local_tokens() -> dict[str, Token]:
    return {
        "--primitive-color-blue-600": Token("--primitive-color-blue-600", "#2563eb"),
        "--semantic-color-brand": Token(
            "--semantic-color-brand",
            "var(--primitive-color-blue-600)",
            refs=("--primitive-color-blue-600",),
        ),
        "--base-radius": Token("--base-radius", "4px"),
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Design system root holding a compiled stylesheet."""
    stylesheet = tmp_path / "dist" / "ds-preview.css"
    stylesheet.parent.mkdir(parents=True)
    stylesheet.write_text(CLEAN_CSS, encoding="utf-8")
    return tmp_path


@pytest.fixture
def scenario_export() -> list[dict[str, str]]:
    """Primitive and semantic already defined locally, one new component."""
    return [
        {"name": "primitive.color.blue.600", "value": "#2563eb"},
        {"name": "semantic.color.brand", "value": "{primitive.color.blue.600}"},
        {"name": "component.card.bg", "value": "{semantic.color.brand}"},
    ]
