"""Short-term note memory."""


class NoteMemory:
    """Ordered in-process notes; lives and dies with one conversation loop."""

    def __init__(self) -> None:
        self._notes: list[str] = []

    def __len__(self) -> int:
        return len(self._notes)

    def add(self, note: str) -> None:
        self._notes.append(note)

    def all(self) -> list[str]:
        return list(self._notes)

    def render(self, limit: int | None = None) -> str:
        """Bulleted list of notes in insertion order."""
        notes = self._notes if limit is None else self._notes[-limit:]
        return "\n".join(f"- {note}" for note in notes)
