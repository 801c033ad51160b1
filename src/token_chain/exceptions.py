"""Exception hierarchy for token-chain.

All application exceptions inherit from TokenChainError.
This allows catching every expected failure with a single base class
while preserving specificity for individual error types. Each class
carries the process exit code the CLI should return for it.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from token_chain.domain.validation import ValidationIssue


EXIT_OK = 0
EXIT_VIOLATION = 1
EXIT_ABORTED = 2
EXIT_INTERRUPTED = 130


class TokenChainError(Exception):
    """Base exception for all token-chain errors.

    Includes an error_code for structured logs and extra context.
    """

    error_code: str = "TOKEN_CHAIN_ERROR"
    exit_code: int = EXIT_VIOLATION

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        exit_code: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        if exit_code is not None:
            self.exit_code = exit_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for structured logging."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Input Errors
# =============================================================================


class InputError(TokenChainError):
    """Base exception for unreadable or malformed inputs."""

    error_code = "INPUT_ERROR"


class StylesheetNotFoundError(InputError):
    """Raised when none of the stylesheet candidates exists.

    Callers treat this as a soft skip, not a failure.
    """

    error_code = "STYLESHEET_NOT_FOUND"
    exit_code = EXIT_OK

    def __init__(self, candidates: Sequence[Path]) -> None:
        super().__init__(
            "No compiled stylesheet found",
            context={"candidates": [str(c) for c in candidates]},
        )
        self.candidates = list(candidates)


class ExportNotFoundError(InputError):
    """Raised when the external token export file does not exist."""

    error_code = "EXPORT_NOT_FOUND"

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"Token export not found: {path}",
            context={"path": str(path)},
        )
        self.path = path


class ExportFormatError(InputError):
    """Raised when the token export cannot be parsed or misses fields."""

    error_code = "EXPORT_PARSE_FAILURE"

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Failed to parse token export: {reason}",
            context={"reason": reason},
        )
        self.reason = reason


# =============================================================================
# Architecture Errors
# =============================================================================


class ArchitectureViolationError(TokenChainError):
    """Raised when an external batch breaks the tier contract.

    Carries every issue found so the whole batch can be reported at once.
    """

    error_code = "ARCHITECTURE_VIOLATION"

    def __init__(self, issues: Sequence["ValidationIssue"]) -> None:
        super().__init__(
            f"External token batch rejected: {len(issues)} violation(s)",
            context={"violations": len(issues)},
        )
        self.issues = list(issues)


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(TokenChainError):
    """Base exception for user theme registry errors."""

    error_code = "REGISTRY_ERROR"


class RegistryLoadError(RegistryError):
    """Raised when an existing registry file cannot be read or parsed."""

    error_code = "REGISTRY_LOAD_ERROR"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            f"Could not load registry {path}: {reason}",
            context={"path": str(path), "reason": reason},
        )
        self.path = path


# =============================================================================
# Review Errors
# =============================================================================


class ReviewStateError(TokenChainError):
    """Raised when the review state machine receives an invalid transition."""

    error_code = "REVIEW_STATE_ERROR"

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            f"Cannot {action} while review is {state}",
            context={"action": action, "state": state},
        )


# =============================================================================
# Output Errors
# =============================================================================


class ArtifactWriteError(TokenChainError):
    """Raised when an output artifact cannot be written.

    Files written before the failure are listed in ``written``; they are
    not rolled back.
    """

    error_code = "ARTIFACT_WRITE_ERROR"

    def __init__(self, path: Path, reason: str, written: Sequence[Path]) -> None:
        super().__init__(
            f"Failed to write {path}: {reason}",
            context={
                "path": str(path),
                "reason": reason,
                "written": [str(p) for p in written],
            },
        )
        self.path = path
        self.written = list(written)
