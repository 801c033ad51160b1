"""External token sync CLI commands for token-chain."""

import argparse

from token_chain.cli._common import cli_path, context_from_args
from token_chain.cli.prompts import ConsolePrompter
from token_chain.exceptions import (
    EXIT_ABORTED,
    EXIT_INTERRUPTED,
    EXIT_OK,
    EXIT_VIOLATION,
    ArchitectureViolationError,
    ArtifactWriteError,
    StylesheetNotFoundError,
    TokenChainError,
)
from token_chain.logging_config import get_logger
from token_chain.services.approval import ReviewSession, batch_review, run_review
from token_chain.services.reporting import (
    FAIL,
    INFO,
    PASS,
    SEP,
    WARN,
    render_apply_summary,
    render_architecture_violations,
    render_diff,
    render_diff_counts,
    render_stylesheet_missing,
    render_sync_header,
)
from token_chain.services.sync import (
    RunContext,
    apply_outcome,
    load_registry,
    load_stylesheet,
    prepare_sync,
)

logger = get_logger(__name__)


def _load_stylesheet_or_report(context: RunContext):
    """Return (path, extraction), or an exit code after printing why not."""
    try:
        return load_stylesheet(context)
    except StylesheetNotFoundError as e:
        print(render_stylesheet_missing([context.relative(c) for c in e.candidates]))
        return e.exit_code
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Could not read stylesheet: {e}")
        return EXIT_VIOLATION


def cmd_sync(args: argparse.Namespace) -> int:
    """Dry run: validate an external export and show its diff. Writes nothing."""
    context = context_from_args(args, export_file=cli_path(args.export))
    loaded = _load_stylesheet_or_report(context)
    if isinstance(loaded, int):
        return loaded
    stylesheet, extraction = loaded

    print(
        render_sync_header(
            "External Token Sync Dry Run",
            context.relative(context.export_path),
            context.relative(stylesheet),
        )
    )
    try:
        plan = prepare_sync(context, stylesheet, extraction)
    except ArchitectureViolationError as e:
        print(render_architecture_violations(e.issues))
        return e.exit_code
    except TokenChainError as e:
        print(f"{FAIL} {e.message}")
        return e.exit_code

    print(render_diff(plan.diff))
    return EXIT_OK


def cmd_apply(args: argparse.Namespace) -> int:
    """Review an external export and write the approved user theme."""
    context = context_from_args(
        args,
        export_file=cli_path(args.export),
        registry_path=cli_path(args.registry),
        output_dir=cli_path(args.out),
        theme_name=args.theme,
        scope=args.scope,
    )
    loaded = _load_stylesheet_or_report(context)
    if isinstance(loaded, int):
        return loaded
    stylesheet, extraction = loaded

    print(
        render_sync_header(
            "Theme Sync Apply",
            context.relative(context.export_path),
            context.relative(stylesheet),
        )
    )
    print(f"  Theme name   : {context.target.theme_name}")
    print(f"  Token scope  : {context.target.selector}")
    print(f"  Mode         : {'non-interactive (--yes)' if args.yes else 'interactive'}")
    print("")

    try:
        plan = prepare_sync(context, stylesheet, extraction)
    except ArchitectureViolationError as e:
        print(render_architecture_violations(e.issues))
        return e.exit_code
    except TokenChainError as e:
        print(f"{FAIL} {e.message}")
        return e.exit_code

    print(f"{PASS} Architecture valid")
    print("")
    print(render_diff_counts(plan.diff))

    try:
        registry = load_registry(context)
    except TokenChainError as e:
        print(f"{FAIL} {e.message}")
        return e.exit_code

    if registry.override_count:
        print(f"{INFO} Existing user theme: {registry.override_count} token(s) will be merged")
        print("")

    interrupted = False
    if args.yes:
        outcome = batch_review(plan.diff, registry)
        if not outcome.accepted:
            print(f"{PASS} No new or modified tokens, nothing to apply.")
            return EXIT_OK
        print(f"{INFO} --yes: applying {outcome.accepted_count} change(s) without prompts")
        if outcome.undecided:
            print(
                f"{WARN} {len(outcome.undecided)} removal(s) skipped, "
                "rerun without --yes to review them"
            )
        print("")
    else:
        session = ReviewSession.from_diff(plan.diff, registry)
        if session.pending_total == 0:
            print(f"{PASS} No pending changes, nothing to apply.")
            return EXIT_OK

        print(f"Review queue: {session.pending_total} change(s)")
        print("  At each prompt: [y]es  [n]o  [a]ll  [s]kip all  [q]uit")
        prompter = ConsolePrompter(registry)
        outcome = run_review(session, prompter)
        interrupted = prompter.interrupted

        if outcome.aborted and not outcome.accepted:
            print("")
            print("Quit, no changes approved. Nothing was written.")
            return EXIT_INTERRUPTED if interrupted else EXIT_ABORTED
        if outcome.aborted:
            print("")
            print(
                f"Quit after partial review. {outcome.accepted_count} approved "
                "change(s) will be applied."
            )

    if not outcome.accepted:
        print("")
        print(f"{INFO} No changes approved, nothing to write.")
        return EXIT_OK

    print("")
    print(SEP)
    print(f"Applying {outcome.accepted_count} change(s)...")
    print("")

    try:
        result = apply_outcome(context, plan, registry, outcome)
    except ArtifactWriteError as e:
        print(f"{FAIL} {e.message}")
        for path in e.written:
            print(f"  already written: {context.relative(path)}")
        print("  Remaining files were not written; written files were kept.")
        return e.exit_code

    print(render_apply_summary(result.written, outcome, context.relative))
    return EXIT_INTERRUPTED if interrupted else EXIT_OK
