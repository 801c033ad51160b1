"""End-to-end tests for the token-chain command line."""

import builtins
import json
import logging

import pytest

from conftest import write_export
from token_chain import __version__
from token_chain.cli import build_parser, cmd_trace, main

REGISTRY = "preview/data/user-theme.registry.json"


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    level = root.level
    before = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in before:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ("TOKEN_CHAIN_PROJECT_ROOT", "TOKEN_CHAIN_THEME_NAME", "TOKEN_CHAIN_SCOPE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def answers(monkeypatch):
    """Replace stdin prompts with scripted answers."""
    queue: list = []

    def fake_input(prompt: str = "") -> str:
        answer = queue.pop(0)
        if isinstance(answer, type) and issubclass(answer, BaseException):
            raise answer()
        return answer

    monkeypatch.setattr(builtins, "input", fake_input)
    return queue


def run(project, *argv: str) -> int:
    return main(["--root", str(project), *argv])


def three_components(project):
    return write_export(
        project / "figma-export.json",
        [
            {"name": "component.a", "value": "{semantic.color.brand}"},
            {"name": "component.b", "value": "{semantic.color.brand}"},
            {"name": "component.c", "value": "{semantic.color.brand}"},
        ],
    )


def registry_tokens(project) -> dict:
    return json.loads((project / REGISTRY).read_text(encoding="utf-8"))["tokens"]


class TestGeneralCommands:
    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert f"token-chain v{__version__}" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: token-chain" in capsys.readouterr().out


class TestValidateCommand:
    def test_clean_stylesheet_passes(self, project, capsys):
        assert run(project, "validate") == 0

        out = capsys.readouterr().out
        assert "No circular dependencies" in out
        assert "Build PASSED: 0 errors  0 warning(s)" in out
        assert "Source  : dist/ds-preview.css" in out

    def test_missing_reference_fails(self, project, capsys):
        css = project / "broken.css"
        css.write_text(
            ":root {\n  --semantic-color-danger: var(--primitive-color-red-900);\n}\n",
            encoding="utf-8",
        )

        assert run(project, "validate", "--css", str(css)) == 1
        out = capsys.readouterr().out
        assert "Missing reference: --primitive-color-red-900" in out
        assert "Build FAILED: 1 error(s)" in out

    def test_missing_stylesheet_is_a_soft_skip(self, tmp_path, capsys):
        assert run(tmp_path, "validate") == 0
        out = capsys.readouterr().out
        assert "No compiled stylesheet found" in out
        assert "dist/ds-preview.css" in out

    def test_falls_back_to_second_candidate(self, tmp_path, clean_css, capsys):
        css = tmp_path / "preview" / "css" / "ds-preview.css"
        css.parent.mkdir(parents=True)
        css.write_text(clean_css, encoding="utf-8")

        assert run(tmp_path, "validate") == 0
        assert "preview/css/ds-preview.css" in capsys.readouterr().out


class TestTraceCommand:
    def test_follows_chain_to_literal(self, project, capsys):
        assert run(project, "trace", "component-button-bg") == 0

        assert capsys.readouterr().out.splitlines() == [
            "--component-button-bg: var(--semantic-color-brand)",
            "  → --semantic-color-brand: var(--primitive-color-blue-600)",
            "    → --primitive-color-blue-600: #2563eb",
        ]

    def test_unknown_token(self, project, capsys):
        assert run(project, "trace", "component-ghost") == 1
        assert "Token not defined: --component-ghost" in capsys.readouterr().out

    def test_dashed_name_is_rejected_by_the_parser(self, project):
        with pytest.raises(SystemExit) as exc_info:
            run(project, "trace", "--component-ghost")

        assert exc_info.value.code == 2

    def test_command_accepts_dashed_name(self, project, capsys):
        args = build_parser().parse_args(["--root", str(project), "trace", "x"])
        args.token = "--component-button-bg"

        assert cmd_trace(args) == 0
        assert capsys.readouterr().out.startswith("--component-button-bg:")


class TestSyncCommand:
    def test_dry_run_lists_new_token(self, project, scenario_export, capsys):
        write_export(project / "figma-export.json", scenario_export)

        assert run(project, "sync") == 0

        out = capsys.readouterr().out
        assert "New Tokens (1)" in out
        assert "+ --component-card-bg" in out
        assert "Sync SAFE: no architectural violations" in out
        assert not (project / REGISTRY).exists()

    def test_code_only_tier_blocks_sync(self, project, capsys):
        write_export(
            project / "figma-export.json",
            [
                {"name": "primitive.space.4", "value": "16px"},
                {"name": "base.z-index.modal", "value": "1000"},
            ],
        )

        assert run(project, "sync") == 1

        captured = capsys.readouterr()
        assert "Unknown tier: base.z-index.modal" in captured.out
        assert "Sync BLOCKED" in captured.out
        assert "New Tokens" not in captured.out
        assert "external_batch_rejected" in captured.err

    def test_explicit_export_path(self, project, scenario_export, capsys):
        export = write_export(project / "exports" / "tokens.json", scenario_export)

        assert run(project, "sync", str(export)) == 0
        assert "Export source : exports/tokens.json" in capsys.readouterr().out

    def test_missing_export(self, project, capsys):
        assert run(project, "sync") == 1
        assert "Token export not found" in capsys.readouterr().out

    def test_malformed_export(self, project, capsys):
        (project / "figma-export.json").write_text("{}", encoding="utf-8")

        assert run(project, "sync") == 1
        assert "Failed to parse token export" in capsys.readouterr().out

    def test_missing_stylesheet_is_a_soft_skip(self, tmp_path, scenario_export):
        write_export(tmp_path / "figma-export.json", scenario_export)

        assert run(tmp_path, "sync") == 0


class TestApplyCommand:
    def test_yes_writes_all_artifacts(self, project, scenario_export, capsys):
        write_export(project / "figma-export.json", scenario_export)

        assert run(project, "apply", "--yes") == 0

        css = (project / "dist" / "user-theme.css").read_text(encoding="utf-8")
        assert "--component-card-bg: var(--semantic-color-brand);" in css
        assert (project / "scss" / "themes" / "_user-theme.scss").exists()
        assert registry_tokens(project) == {
            "--component-card-bg": "var(--semantic-color-brand)"
        }
        assert "Theme sync complete: 1 token(s) applied" in capsys.readouterr().out

    def test_quit_before_any_approval_writes_nothing(self, project, scenario_export, answers):
        write_export(project / "figma-export.json", scenario_export)
        answers.append("q")

        assert run(project, "apply") == 2
        assert not (project / "dist" / "user-theme.css").exists()
        assert not (project / REGISTRY).exists()

    def test_quit_after_partial_review_applies_accepted(self, project, answers, capsys):
        three_components(project)
        answers.extend(["y", "q"])

        assert run(project, "apply") == 0

        assert registry_tokens(project) == {"--component-a": "var(--semantic-color-brand)"}
        out = capsys.readouterr().out
        assert "Quit after partial review" in out
        assert "Skipped: 2 token(s)" in out

    def test_interrupt_applies_accepted_and_exits_130(self, project, answers):
        three_components(project)
        answers.extend(["y", KeyboardInterrupt])

        assert run(project, "apply") == 130
        assert registry_tokens(project) == {"--component-a": "var(--semantic-color-brand)"}

    def test_interrupt_before_any_approval(self, project, answers):
        three_components(project)
        answers.append(KeyboardInterrupt)

        assert run(project, "apply") == 130
        assert not (project / REGISTRY).exists()

    def test_accept_all_then_merge_with_existing_registry(self, project, answers):
        three_components(project)
        answers.append("a")
        assert run(project, "apply") == 0

        write_export(
            project / "figma-export.json",
            [{"name": "component.d", "value": "{semantic.space.md}"}],
        )
        answers.append("y")
        assert run(project, "apply") == 0

        tokens = registry_tokens(project)
        assert list(tokens) == ["--component-a", "--component-b", "--component-c", "--component-d"]

    def test_removing_an_override(self, project, answers):
        write_export(
            project / "figma-export.json",
            [{"name": "semantic.color.brand", "value": "#ff0000"}],
        )
        assert run(project, "apply", "--yes") == 0
        assert registry_tokens(project) == {"--semantic-color-brand": "#ff0000"}

        write_export(
            project / "figma-export.json",
            [{"name": "primitive.color.blue.600", "value": "#2563eb"}],
        )
        answers.append("y")
        assert run(project, "apply") == 0

        snapshot = json.loads((project / REGISTRY).read_text(encoding="utf-8"))
        assert snapshot["tokens"] == {}
        assert snapshot["removed"] == ["--semantic-color-brand"]
        assert snapshot["changelog"][-1]["action"] == "remove"
        assert snapshot["changelog"][-1]["previous"] == "#ff0000"
        assert "(no token overrides" in (project / "dist" / "user-theme.css").read_text(
            encoding="utf-8"
        )

    def test_yes_skips_removals(self, project, capsys):
        write_export(
            project / "figma-export.json",
            [{"name": "semantic.color.brand", "value": "#ff0000"}],
        )
        assert run(project, "apply", "--yes") == 0
        write_export(
            project / "figma-export.json",
            [{"name": "primitive.color.blue.600", "value": "#1d4ed8"}],
        )

        assert run(project, "apply", "--yes") == 0

        assert "1 removal(s) skipped" in capsys.readouterr().out
        assert registry_tokens(project) == {
            "--semantic-color-brand": "#ff0000",
            "--primitive-color-blue-600": "#1d4ed8",
        }

    def test_nothing_pending(self, project, capsys):
        write_export(
            project / "figma-export.json",
            [{"name": "primitive.color.blue.600", "value": "#2563eb"}],
        )

        assert run(project, "apply") == 0
        assert "No pending changes" in capsys.readouterr().out
        assert not (project / "dist" / "user-theme.css").exists()

    def test_attribute_scope_and_theme(self, project, scenario_export):
        write_export(project / "figma-export.json", scenario_export)

        assert run(project, "apply", "--yes", "--scope", "attr", "--theme", "brand") == 0

        css = (project / "dist" / "user-theme.css").read_text(encoding="utf-8")
        assert '[data-theme="brand"] {' in css
        snapshot = json.loads((project / REGISTRY).read_text(encoding="utf-8"))
        assert snapshot["meta"]["theme_name"] == "brand"

    def test_invalid_theme_name(self, project, scenario_export, capsys):
        write_export(project / "figma-export.json", scenario_export)

        assert run(project, "apply", "--yes", "--theme", 'a"b') == 1
        assert "Invalid configuration" in capsys.readouterr().out

    def test_corrupt_registry(self, project, scenario_export, capsys):
        write_export(project / "figma-export.json", scenario_export)
        registry = project / REGISTRY
        registry.parent.mkdir(parents=True)
        registry.write_text("{not json", encoding="utf-8")

        assert run(project, "apply", "--yes") == 1
        assert "Could not load registry" in capsys.readouterr().out
        assert registry.read_text(encoding="utf-8") == "{not json"

    def test_architecture_violation_blocks_apply(self, project, capsys):
        write_export(
            project / "figma-export.json",
            [{"name": "component.card.bg", "value": "{primitive.color.blue.600}"}],
        )

        assert run(project, "apply", "--yes") == 1
        assert "Sync BLOCKED" in capsys.readouterr().out
        assert not (project / "dist" / "user-theme.css").exists()

    def test_custom_output_locations(self, project, scenario_export):
        write_export(project / "figma-export.json", scenario_export)
        out_dir = project / "build"
        registry = project / "theme.json"

        assert (
            run(project, "apply", "--yes", "--out", str(out_dir), "--registry", str(registry))
            == 0
        )
        assert (out_dir / "user-theme.css").exists()
        assert registry.exists()

    def test_missing_stylesheet_is_a_soft_skip(self, tmp_path, scenario_export):
        write_export(tmp_path / "figma-export.json", scenario_export)

        assert run(tmp_path, "apply", "--yes") == 0
        assert not (tmp_path / REGISTRY).exists()

    def test_project_dotenv_applies_when_run_from_elsewhere(
        self, project, scenario_export, monkeypatch
    ):
        write_export(project / "figma-export.json", scenario_export)
        (project / ".env").write_text(
            "TOKEN_CHAIN_THEME_NAME=brand\nTOKEN_CHAIN_SCOPE=attr\n", encoding="utf-8"
        )
        elsewhere = project / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        assert run(project, "apply", "--yes") == 0

        css = (project / "dist" / "user-theme.css").read_text(encoding="utf-8")
        assert '[data-theme="brand"] {' in css
