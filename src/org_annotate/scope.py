"""
Scan scopes: the whole document or one subtree.

A subtree scope keeps a live position on its heading, so the region is
re-derived from the current text each time it is resolved. That is what
lets a view refresh after edits without tracking staleness. The position
advances on insertion, so text inserted right before the heading line
stays in the previous subtree.

Supported scope specifications for Scope.parse():
- None: the whole document
- "section:Title": the subtree of the first heading titled "Title"
- int: the subtree containing that offset
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from . import outline

if TYPE_CHECKING:
    from .buffer import OrgBuffer
    from .positions import LivePosition


@dataclass(frozen=True)
class Scope:
    """The region of a buffer a scan is restricted to.

    Attributes:
        heading: Live position of the subtree's heading (None for whole document)
        title: Title of that heading
        ordinal: Number of earlier headings with the same title, so repeated
            titles such as "Notes" still give distinct scopes
    """

    heading: LivePosition | None = None
    title: str | None = None
    ordinal: int = 0

    @classmethod
    def whole(cls) -> Scope:
        return cls()

    @classmethod
    def subtree_at(cls, buffer: OrgBuffer, offset: int) -> Scope:
        """Scope to the subtree containing `offset`.

        Raises:
            OutlineError: If `offset` lies before the first heading
        """
        return cls._for_heading(buffer, outline.heading_at(buffer.text, offset))

    @classmethod
    def section(cls, buffer: OrgBuffer, title: str) -> Scope:
        """Scope to the subtree of the heading titled `title`."""
        return cls._for_heading(buffer, outline.find_heading(buffer.text, title))

    @classmethod
    def _for_heading(cls, buffer: OrgBuffer, heading: outline.Heading) -> Scope:
        return cls(
            heading=buffer.position(heading.begin, advance=True),
            title=heading.title,
            ordinal=outline.heading_ordinal(buffer.text, heading),
        )

    @classmethod
    def parse(cls, buffer: OrgBuffer, spec: str | int | None) -> Scope:
        """Convert a scope specification to a Scope.

        Raises:
            ValueError: If the specification is not understood
        """
        if spec is None:
            return cls.whole()
        if isinstance(spec, int):
            return cls.subtree_at(buffer, spec)
        if isinstance(spec, str) and spec.startswith("section:"):
            return cls.section(buffer, spec[8:])
        raise ValueError(f"Invalid scope specification: {spec!r}")

    @property
    def is_whole(self) -> bool:
        return self.heading is None

    @property
    def key(self) -> tuple[str, int] | None:
        """Identity of this scope within its buffer: (title, ordinal), or None."""
        if self.title is None:
            return None
        return self.title, self.ordinal

    def bounds(self, buffer: OrgBuffer) -> tuple[int, int]:
        """Resolve the region covered by this scope in the current text."""
        if self.heading is None:
            return 0, len(buffer)
        start = self.heading.offset
        heading = outline.heading_at(buffer.text, start)
        return heading.begin, outline.subtree_end(buffer.text, heading)

    def describe(self) -> str:
        return "whole document" if self.title is None else f"subtree '{self.title}'"
