"""Stylesheet validation CLI commands for token-chain."""

import argparse

from token_chain.cli._common import context_from_args
from token_chain.exceptions import (
    EXIT_OK,
    EXIT_VIOLATION,
    StylesheetNotFoundError,
    TokenChainError,
)
from token_chain.logging_config import get_logger
from token_chain.services.dependency_graph import build_graph
from token_chain.services.reporting import (
    render_stylesheet_missing,
    render_trace,
    render_validation_report,
)
from token_chain.services.sync import load_stylesheet, run_validation

logger = get_logger(__name__)


def cmd_validate(args: argparse.Namespace) -> int:
    """Check the compiled stylesheet against the tier rules."""
    context = context_from_args(args)
    try:
        path, report = run_validation(context)
    except StylesheetNotFoundError as e:
        print(render_stylesheet_missing([context.relative(c) for c in e.candidates]))
        return e.exit_code
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Could not read stylesheet: {e}")
        return EXIT_VIOLATION
    except TokenChainError as e:
        print(f"Error: {e.message}")
        return e.exit_code

    print(render_validation_report(report, context.relative(path)))
    return EXIT_OK if report.passed else EXIT_VIOLATION


def cmd_trace(args: argparse.Namespace) -> int:
    """Print the reference chain of one token down to its literal value."""
    name = args.token if args.token.startswith("--") else f"--{args.token}"
    context = context_from_args(args)
    try:
        _, extraction = load_stylesheet(context)
    except StylesheetNotFoundError as e:
        print(render_stylesheet_missing([context.relative(c) for c in e.candidates]))
        return e.exit_code
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Could not read stylesheet: {e}")
        return EXIT_VIOLATION

    if name not in extraction.definitions:
        print(f"Error: Token not defined: {name}")
        return EXIT_VIOLATION

    graph = build_graph(extraction.definitions.values())
    print(render_trace(graph.trace(name)))
    return EXIT_OK
