"""Command-line interface package for token-chain.

Commands are organized into submodules:
- validate_commands: Stylesheet validation and token tracing
- sync_commands: External export dry run and reviewed apply
- prompts: Interactive review prompter

The entry point and all command functions are re-exported here.
"""

from token_chain.cli._main import build_parser, cmd_version, main
from token_chain.cli.sync_commands import cmd_apply, cmd_sync
from token_chain.cli.validate_commands import cmd_trace, cmd_validate

__all__ = [
    "build_parser",
    "cmd_apply",
    "cmd_sync",
    "cmd_trace",
    "cmd_validate",
    "cmd_version",
    "main",
]
