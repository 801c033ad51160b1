"""Interactive console prompter for the review workflow."""

from collections.abc import Callable, Sequence

from token_chain.domain.registry import UserRegistry
from token_chain.domain.sync import DiffCategory, DiffEntry
from token_chain.services.approval import Decision
from token_chain.services.reporting import SEP

PROMPT = "  {verb}? [y]es  [n]o  [a]ll  [s]kip all  [q]uit > "

ANSWERS: dict[str, Decision] = {
    "": Decision.ACCEPT,
    "y": Decision.ACCEPT,
    "yes": Decision.ACCEPT,
    "n": Decision.REJECT,
    "no": Decision.REJECT,
    "a": Decision.ACCEPT_ALL,
    "all": Decision.ACCEPT_ALL,
    "s": Decision.REJECT_ALL,
    "skip": Decision.REJECT_ALL,
    "q": Decision.ABORT,
    "quit": Decision.ABORT,
}

_TITLES = {
    DiffCategory.NEW: "NEW Tokens",
    DiffCategory.MODIFIED: "MODIFIED Tokens",
    DiffCategory.REMOVED: "User theme overrides not present in the export",
}


def parse_answer(answer: str) -> Decision | None:
    """Map a typed answer to a decision; None when unrecognised."""
    return ANSWERS.get(answer.strip().lower())


class ConsolePrompter:
    """Asks on stdin, one item at a time.

    Ctrl+C and end-of-input both end the review with ABORT; Ctrl+C also
    sets ``interrupted`` so the caller can exit with 130.
    """

    def __init__(
        self,
        registry: UserRegistry,
        input_fn: Callable[[str], str] | None = None,
    ) -> None:
        self.registry = registry
        self.interrupted = False
        self._input_fn = input_fn

    def begin_category(self, category: DiffCategory, entries: Sequence[DiffEntry]) -> None:
        print("")
        print(SEP)
        print(f"{_TITLES[category]} ({len(entries)})")
        if category is DiffCategory.REMOVED:
            print("Removing will revert each token to its system default.")
        print(SEP)

    def ask(self, entry: DiffEntry, index: int, total: int) -> Decision:
        print("")
        self._show(entry, index, total)
        verb = "Remove" if entry.category is DiffCategory.REMOVED else "Apply"
        read = self._input_fn or input

        while True:
            try:
                answer = read(PROMPT.format(verb=verb))
            except KeyboardInterrupt:
                print("")
                self.interrupted = True
                return Decision.ABORT
            except EOFError:
                print("")
                return Decision.ABORT

            decision = parse_answer(answer)
            if decision is not None:
                return decision
            print("  Please answer y, n, a, s or q.")

    def _show(self, entry: DiffEntry, index: int, total: int) -> None:
        position = f"  [{index} of {total}]"
        if entry.category is DiffCategory.NEW:
            print(f"{position}  + {entry.name}")
            print(f"              value: {entry.new_value}")
        elif entry.category is DiffCategory.MODIFIED:
            print(f"{position}  ~ {entry.name}")
            print(f"              current:  {entry.old_value}")
            print(f"              proposed: {entry.new_value}")
        else:
            print(f"{position}  - {entry.name}")
            print(f"              your override:   {self.registry.tokens.get(entry.name)}")
            print(f"              system default:  {entry.old_value}")


__all__ = ["ANSWERS", "ConsolePrompter", "PROMPT", "parse_answer"]
