"""Long-term file memory - append-only text shared across sessions."""

from pathlib import Path

from memoria.core.errors import ExternalServiceError
from memoria.core.logging import get_logger

logger = get_logger("memory.file")


def _as_line(note: str) -> str:
    """Fold a note onto one line so each append is a single line."""
    return " ".join(note.split())


class FileMemory:
    """Flat append-only note file.

    Each note is written with a single write() on an append-mode handle, so
    appends from separate processes never interleave mid-line. Nothing is
    ever rewritten or deleted.
    """

    def __init__(self, path: Path):
        self.path = path

    def append(self, note: str) -> str:
        """Append one note line, return the stored line."""
        line = f"- {_as_line(note)}"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error(f"Failed to append to {self.path}: {e}")
            raise ExternalServiceError("file memory", f"cannot open {self.path}: {e}") from e
        logger.debug(f"Appended note to {self.path}")
        return line

    def read(self) -> str:
        """Whole file content verbatim; a missing file reads as empty."""
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise ExternalServiceError("file memory", f"cannot open {self.path}: {e}") from e

    def render(self, limit: int | None = None) -> str:
        """File content for prompt context, optionally only the last lines."""
        content = self.read().rstrip("\n")
        if limit is None or not content:
            return content
        return "\n".join(content.split("\n")[-limit:])
