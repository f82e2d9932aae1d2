"""
Position handles that survive edits elsewhere in a buffer.

The scanner and the view model hold on to markers between user actions.
Raw offsets would go stale as soon as text is inserted above a marker, so
every located marker carries a StablePosition instead. LivePosition is the
implementation used by OrgBuffer: the buffer moves every live position it
knows about when it replaces text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .errors import InvalidPositionError

if TYPE_CHECKING:
    from .buffer import OrgBuffer


@runtime_checkable
class StablePosition(Protocol):
    """A handle into a document that remains valid across unrelated edits."""

    def resolve(self) -> int | None:
        """Return the current offset, or None if the text was deleted."""
        ...


class LivePosition:
    """A position tracked by its buffer.

    Example:
        >>> buf = OrgBuffer("abc [[note:x]]")
        >>> pos = buf.position(4)
        >>> buf.replace(0, 0, "123")
        >>> pos.resolve()
        7
    """

    def __init__(self, buffer: OrgBuffer, offset: int, advance: bool = False) -> None:
        """Initialize the position.

        Args:
            buffer: Buffer the offset refers to
            offset: Initial offset
            advance: Whether text inserted exactly at this position goes
                before it (the position moves) rather than after it
        """
        self._buffer = buffer
        self._offset: int | None = offset
        self.advance = advance

    @property
    def buffer(self) -> OrgBuffer:
        """Get the buffer this position belongs to."""
        return self._buffer

    @property
    def valid(self) -> bool:
        return self._offset is not None

    @property
    def offset(self) -> int:
        """Get the current offset.

        Raises:
            InvalidPositionError: If the text at this position was deleted
        """
        if self._offset is None:
            raise InvalidPositionError(
                f"Position in buffer '{self._buffer.name}' points into deleted text"
            )
        return self._offset

    def resolve(self) -> int | None:
        return self._offset

    def _adjust(self, start: int, end: int, length: int) -> None:
        """Move this position after text in [start, end) became `length` chars."""
        if self._offset is None or self._offset < start:
            return
        if start == end:
            # Pure insertion at this position moves it only when it advances
            if self._offset > start or self.advance:
                self._offset += length
        elif self._offset >= end:
            self._offset += length - (end - start)
        else:
            self._offset = None

    def __repr__(self) -> str:
        where = self._offset if self._offset is not None else "invalid"
        return f"<LivePosition {self._buffer.name}:{where}>"
