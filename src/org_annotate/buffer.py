"""
In-memory Org document buffer.

OrgBuffer stands in for an editor buffer: it holds the document text, a
point (cursor), an optional mark delimiting the active selection, and the
live positions handed out to scanners. Every mutation goes through
replace(), which is a single atomic text replacement.
"""

from __future__ import annotations

import logging
import weakref
from pathlib import Path

from .positions import LivePosition

logger = logging.getLogger(__name__)


class OrgBuffer:
    """Mutable Org document text with point, mark and live positions.

    Example:
        >>> buf = OrgBuffer("Some text.", name="notes.org")
        >>> buf.set_region(5, 9)
        >>> buf.region()
        (5, 9)
    """

    def __init__(self, text: str = "", name: str = "*scratch*", path: str | Path | None = None):
        """Initialize the buffer.

        Args:
            text: Initial document text
            name: Buffer name, used as the document identity for view state
            path: File the buffer visits, if any
        """
        self._text = text
        self.name = name
        self.path = Path(path) if path is not None else None
        self._point = 0
        self._mark: int | None = None
        self._positions: weakref.WeakSet[LivePosition] = weakref.WeakSet()

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = "utf-8") -> OrgBuffer:
        """Load a buffer visiting `path`, named after the file."""
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Org file not found: {path}")
        text = file_path.read_text(encoding=encoding)
        logger.debug("Loaded %d characters from %s", len(text), file_path)
        return cls(text, name=file_path.name, path=file_path)

    def save(self, path: str | Path | None = None, encoding: str = "utf-8") -> Path:
        """Write the buffer text to `path` (default: the visited file)."""
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError(f"Buffer '{self.name}' is not visiting a file")
        target.write_text(self._text, encoding=encoding)
        logger.debug("Saved %s", target)
        return target

    @property
    def text(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def substring(self, start: int, end: int) -> str:
        return self._text[start:end]

    # ------------------------------------------------------------------
    # Point and mark
    # ------------------------------------------------------------------

    @property
    def point(self) -> int:
        return self._point

    @point.setter
    def point(self, offset: int) -> None:
        self._point = self._clamp(offset)

    def set_region(self, start: int, end: int) -> None:
        """Select the text between `start` and `end`, leaving point at `end`."""
        self._mark = self._clamp(start)
        self._point = self._clamp(end)

    def deactivate_mark(self) -> None:
        self._mark = None

    def region(self) -> tuple[int, int] | None:
        """Get the active selection as (start, end), or None.

        An empty selection counts as no selection.
        """
        if self._mark is None or self._mark == self._point:
            return None
        return min(self._mark, self._point), max(self._mark, self._point)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def position(self, offset: int, advance: bool = False) -> LivePosition:
        """Create a live position at `offset` that follows later edits.

        With `advance`, text inserted exactly at the position ends up
        before it, which keeps a handle on the start of a line attached
        to that line.
        """
        pos = LivePosition(self, self._clamp(offset), advance)
        self._positions.add(pos)
        return pos

    def replace(self, start: int, end: int, new_text: str) -> None:
        """Replace text in [start, end) with `new_text` in one step.

        Live positions before `start` are untouched, those at or after `end`
        shift by the length difference, and those strictly inside a deleted
        span become invalid.
        """
        if not 0 <= start <= end <= len(self._text):
            raise ValueError(f"Invalid range [{start}, {end}) for buffer of length {len(self)}")

        self._text = self._text[:start] + new_text + self._text[end:]
        delta = len(new_text) - (end - start)

        for pos in list(self._positions):
            pos._adjust(start, end, len(new_text))

        if self._point >= end and not (start == end == self._point):
            self._point += delta
        elif start < self._point < end:
            self._point = start + len(new_text)

        if self._mark is not None:
            if self._mark > end or (self._mark == end and end > start):
                self._mark += delta
            elif start < self._mark < end:
                self._mark = start

        logger.debug(
            "Replaced [%d, %d) in %s with %d characters", start, end, self.name, len(new_text)
        )

    def insert(self, new_text: str) -> None:
        """Insert `new_text` at point, leaving point after it."""
        at = self._point
        self.replace(at, at, new_text)
        self._point = at + len(new_text)

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self._text)))

    def __repr__(self) -> str:
        return f"<OrgBuffer {self.name}: {len(self._text)} chars, point={self._point}>"
