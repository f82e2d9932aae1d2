"""
Org outline structure: headings and subtree bounds.

A subtree runs from its heading line to the next heading at or above its
level, or to the end of the document.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .errors import OutlineError

# "* Title", "** TODO Title :tag:"; the stars must be followed by a blank
HEADING_PATTERN = re.compile(r"^(?P<stars>\*+)[ \t]+(?P<title>.*?)[ \t]*$", re.MULTILINE)

_TAGS_PATTERN = re.compile(r"[ \t]+:[\w@#%:]+:$")


@dataclass(frozen=True)
class Heading:
    """A heading line.

    Attributes:
        level: Number of leading stars
        title: Heading text without stars and trailing tags
        begin: Offset of the first star
        line_end: Offset of the end of the heading line
    """

    level: int
    title: str
    begin: int
    line_end: int


def iter_headings(text: str, start: int = 0) -> Iterator[Heading]:
    """Iterate headings at or after `start` in document order."""
    for match in HEADING_PATTERN.finditer(text, start):
        title = _TAGS_PATTERN.sub("", match.group("title"))
        yield Heading(
            level=len(match.group("stars")),
            title=title,
            begin=match.start(),
            line_end=match.end(),
        )


def heading_at(text: str, offset: int) -> Heading:
    """Get the heading of the subtree containing `offset`.

    Raises:
        OutlineError: If `offset` lies before the first heading
    """
    current: Heading | None = None
    for heading in iter_headings(text):
        if heading.begin > offset:
            break
        current = heading
    if current is None:
        raise OutlineError(f"Position {offset} is before the first heading")
    return current


def find_heading(text: str, title: str) -> Heading:
    """Find the first heading whose title equals `title`.

    Raises:
        OutlineError: If no heading has that title
    """
    titles = []
    for heading in iter_headings(text):
        if heading.title == title:
            return heading
        titles.append(heading.title)
    msg = f"No heading titled '{title}'"
    if titles:
        msg += f"\n\nAvailable headings: {', '.join(titles)}"
    raise OutlineError(msg)


def subtree_end(text: str, heading: Heading) -> int:
    """Offset where the subtree rooted at `heading` ends."""
    for other in iter_headings(text, heading.line_end):
        if other.begin > heading.begin and other.level <= heading.level:
            return other.begin
    return len(text)


def subtree_bounds(text: str, offset: int) -> tuple[int, int]:
    """Get (start, end) of the subtree containing `offset`."""
    heading = heading_at(text, offset)
    return heading.begin, subtree_end(text, heading)


def heading_ordinal(text: str, heading: Heading) -> int:
    """Count the headings before `heading` that carry the same title."""
    return sum(
        1
        for other in iter_headings(text)
        if other.begin < heading.begin and other.title == heading.title
    )
