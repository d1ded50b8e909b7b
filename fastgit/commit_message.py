"""Editable commit message draft: a summary line and a description body.

Cursors are character indices into the focused field.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CommitDraft:
    summary: str = ""
    description: str = ""
    summary_cursor: int = 0
    description_cursor: int = 0
    focus_description: bool = False

    def clear(self) -> None:
        self.summary = ""
        self.description = ""
        self.summary_cursor = 0
        self.description_cursor = 0
        self.focus_description = False

    def toggle_focus(self) -> None:
        self.focus_description = not self.focus_description

    def _field(self) -> tuple[str, int]:
        if self.focus_description:
            return self.description, self.description_cursor
        return self.summary, self.summary_cursor

    def _store(self, text: str, cursor: int) -> None:
        cursor = max(0, min(cursor, len(text)))
        if self.focus_description:
            self.description, self.description_cursor = text, cursor
        else:
            self.summary, self.summary_cursor = text, cursor

    def insert(self, ch: str) -> None:
        text, cursor = self._field()
        self._store(text[:cursor] + ch + text[cursor:], cursor + len(ch))

    def backspace(self) -> None:
        text, cursor = self._field()
        if cursor <= 0:
            return
        self._store(text[: cursor - 1] + text[cursor:], cursor - 1)

    def delete(self) -> None:
        text, cursor = self._field()
        if cursor >= len(text):
            return
        self._store(text[:cursor] + text[cursor + 1 :], cursor)

    def move_cursor(self, delta: int) -> None:
        text, cursor = self._field()
        self._store(text, cursor + delta)

    def is_ready(self) -> bool:
        return bool(self.summary.strip())
