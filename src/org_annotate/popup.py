"""
Popup view for a single annotation body.

There is one reusable popup per presenter: show() replaces its content.
The popup is read-only and offers one action, copying its text.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Clipboard:
    """In-process clipboard keeping a ring of copied strings."""

    def __init__(self, max_entries: int = 60) -> None:
        self.max_entries = max_entries
        self._entries: list[str] = []

    def copy(self, text: str) -> None:
        self._entries.insert(0, text)
        del self._entries[self.max_entries :]

    def paste(self) -> str | None:
        """Get the most recently copied text, or None if nothing was copied."""
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)


class Popup:
    """A transient, read-only view sized to its content.

    Example:
        >>> popup = Popup()
        >>> popup.show("remember this")
        >>> popup.size
        (13, 1)
        >>> popup.copy()
        'remember this'
    """

    def __init__(self, clipboard: Clipboard | None = None) -> None:
        self.clipboard = clipboard or Clipboard()
        self.content = ""
        self.visible = False

    @property
    def read_only(self) -> bool:
        return True

    @property
    def size(self) -> tuple[int, int]:
        """Get (width, height) needed to show the content."""
        lines = self.content.splitlines() or [""]
        return max(len(line) for line in lines), len(lines)

    def show(self, body: str) -> None:
        self.content = body
        self.visible = True
        logger.debug("Showing popup of size %s", self.size)

    def hide(self) -> None:
        self.visible = False

    def copy(self) -> str:
        """Copy the content, without trailing whitespace, to the clipboard."""
        text = self.content.rstrip()
        self.clipboard.copy(text)
        return text
