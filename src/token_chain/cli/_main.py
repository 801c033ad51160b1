"""Argument parsing and the ``token-chain`` entry point."""

import argparse
import sys

from pydantic import ValidationError

from token_chain import __version__
from token_chain.cli._common import settings_from_args
from token_chain.cli.sync_commands import cmd_apply, cmd_sync
from token_chain.cli.validate_commands import cmd_trace, cmd_validate
from token_chain.config import LogLevel, ThemeScope
from token_chain.exceptions import EXIT_INTERRUPTED, EXIT_OK, EXIT_VIOLATION
from token_chain.logging_config import LogContext, configure_logging, get_logger

logger = get_logger(__name__)


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    print(f"token-chain v{__version__}")
    return EXIT_OK


def _describe_settings_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "settings"
    return f"{location}: {first['msg']}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="token-chain",
        description="Design token tier-chain validation and reviewed external sync",
    )
    parser.add_argument(
        "--root",
        "-C",
        help="Design system project root (default: current directory)",
        default=None,
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        type=str.upper,
        help="Log level for diagnostics on stderr",
        default=None,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    # validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Validate the token chain of the compiled stylesheet"
    )
    validate_parser.add_argument(
        "--css",
        help="Compiled stylesheet to check (default: first configured candidate)",
        default=None,
    )
    validate_parser.set_defaults(func=cmd_validate)

    # trace command
    trace_parser = subparsers.add_parser(
        "trace", help="Show how a token resolves through the chain"
    )
    trace_parser.add_argument(
        "token",
        help="Token name without the leading dashes, e.g. component-button-bg",
    )
    trace_parser.add_argument("--css", help="Compiled stylesheet", default=None)
    trace_parser.set_defaults(func=cmd_trace)

    # sync command
    sync_parser = subparsers.add_parser(
        "sync", help="Dry run: validate an external export and show the diff"
    )
    sync_parser.add_argument(
        "export",
        nargs="?",
        help="External token export (default: figma-export.json in the project root)",
        default=None,
    )
    sync_parser.add_argument("--css", help="Compiled stylesheet", default=None)
    sync_parser.set_defaults(func=cmd_sync)

    # apply command
    apply_parser = subparsers.add_parser(
        "apply", help="Review an external export and write the user theme"
    )
    apply_parser.add_argument(
        "export",
        nargs="?",
        help="External token export (default: figma-export.json in the project root)",
        default=None,
    )
    apply_parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Accept every new and modified token without prompting",
    )
    apply_parser.add_argument("--theme", help="User theme name", default=None)
    apply_parser.add_argument(
        "--scope",
        choices=[scope.value for scope in ThemeScope],
        help="root: override :root; attr: scope to [data-theme=NAME]",
        default=None,
    )
    apply_parser.add_argument(
        "--out", help="Directory receiving user-theme.css", default=None
    )
    apply_parser.add_argument("--registry", help="User theme registry file", default=None)
    apply_parser.add_argument("--css", help="Compiled stylesheet", default=None)
    apply_parser.set_defaults(func=cmd_apply)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        configure_logging(settings_from_args(args))
        with LogContext(command=args.command):
            result: int = args.func(args)
    except ValidationError as e:
        print(f"Error: Invalid configuration: {_describe_settings_error(e)}")
        return EXIT_VIOLATION
    except KeyboardInterrupt:
        print("")
        print("Interrupted")
        return EXIT_INTERRUPTED

    logger.debug("command_finished", command=args.command, exit_code=result)
    return result


if __name__ == "__main__":
    sys.exit(main())
