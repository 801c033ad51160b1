"""Helpers shared by the CLI command modules."""

import argparse
from pathlib import Path

from token_chain.config import Settings, load_settings
from token_chain.services.sync import RunContext


def cli_path(value: str | None) -> Path | None:
    """Paths given on the command line are relative to the working directory."""
    if value is None:
        return None
    return Path(value).absolute()


def settings_from_args(args: argparse.Namespace, **overrides: object) -> Settings:
    """Build this run's settings; explicit flags beat environment values."""
    return load_settings(
        project_root=cli_path(getattr(args, "root", None)),
        log_level=getattr(args, "log_level", None),
        **overrides,
    )


def context_from_args(args: argparse.Namespace, **overrides: object) -> RunContext:
    css = cli_path(getattr(args, "css", None))
    if css is not None:
        overrides["stylesheet_candidates"] = [css]
    return RunContext.from_settings(settings_from_args(args, **overrides))
