"""Reader for external token export files."""

from pathlib import Path

from pydantic import ValidationError

from token_chain.exceptions import ExportFormatError, ExportNotFoundError
from token_chain.schemas import ExportDocument, ExportEntry


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "(root)"
    return f"{location}: {first['msg']} ({error.error_count()} problem(s) total)"


class ExportParser:
    """Parser for a JSON export shaped as ``{"tokens": [{name, value}, ...]}``.

    The whole document is validated before any entry is returned, so a
    malformed file never yields a partial batch.
    """

    def parse(self, text: str) -> list[ExportEntry]:
        """Parse export JSON text.

        Raises:
            ExportFormatError: If the text is not JSON, lacks the ``tokens``
                list, or any entry lacks a non-empty name or a string value.
        """
        try:
            document = ExportDocument.model_validate_json(text)
        except ValidationError as e:
            raise ExportFormatError(_describe(e)) from e
        return document.tokens

    def parse_file(self, path: Path) -> list[ExportEntry]:
        """Parse an export file from disk.

        Raises:
            ExportNotFoundError: If the file does not exist.
            ExportFormatError: If the file cannot be read or validated.
        """
        if not path.is_file():
            raise ExportNotFoundError(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ExportFormatError(str(e)) from e
        return self.parse(text)


__all__ = ["ExportParser"]
