"""
Org bracket-link grammar.

This module is the host-format capability the annotation core consumes:
it recognizes [[target][description]] and [[target]] links, escapes and
unescapes link targets the way Org 9.3+ does (backslashes before square
brackets), and builds link strings. It knows nothing about annotations.

Link Syntax Reference:
    - With description: [[target][description]]
    - Without description: [[target]]
    - Escaped target: [[note:see \\[1\\]][text]]
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

# Characters a description may span, stopping at structural boundaries:
# a blank line, a heading line or a list-item bullet line.
_BOUNDARY = r"\n[ \t]*(?:\n|\*+[ \t]|[-+][ \t]|\d+[.)][ \t])"

# Org's bracket-link regexp. A target character is anything but a bracket
# or backslash, a backslash run escaping a bracket, or a backslash run not
# followed by a bracket. Targets never span lines.
LINK_PATTERN = re.compile(
    r"\[\["
    r"(?P<target>(?:[^\[\]\\\n]|\\(?:\\\\)*[\[\]]|\\+[^\[\]\n])+)"
    r"\]"
    r"(?:\[(?P<description>(?:(?!" + _BOUNDARY + r")[\s\S])+?)\])?"
    r"\]"
)

_ESCAPE_PATTERN = re.compile(r"(\\*)([\[\]]|\Z)")
_UNESCAPE_PATTERN = re.compile(r"(\\+)(?=[\[\]]|\Z)")
_BLANKS_PATTERN = re.compile(r"[ \t]*")
_DOUBLE_BRACKET_PATTERN = re.compile(r"\](?=\])")
_BROKEN_BRACKET_PATTERN = re.compile(r"\]\u200b(?=\])")

# Zero-width space, used by Org to break "]]" inside descriptions
ZERO_WIDTH_SPACE = "\u200b"


@dataclass(frozen=True)
class LinkElement:
    """A bracket link found in document text.

    Attributes:
        target: Raw (still escaped) link target
        description: Description text, or None for [[target]] links
        begin: Offset of the opening "[["
        end: Offset just past the closing "]]"
        contents_begin: Offset where the description starts (None without one)
        contents_end: Offset where the description ends (None without one)
        post_blank: Number of spaces and tabs following the link
    """

    target: str
    description: str | None
    begin: int
    end: int
    contents_begin: int | None = None
    contents_end: int | None = None
    post_blank: int = 0

    @property
    def path(self) -> str:
        """Get the unescaped link target."""
        return unescape_link(self.target)

    def covers(self, offset: int) -> bool:
        """Check whether `offset` lies on the link text."""
        return self.begin <= offset < self.end


def parse_links(text: str, start: int = 0, end: int | None = None) -> Iterator[LinkElement]:
    """Iterate bracket links in text[start:end] in document order.

    Args:
        text: Document text
        start: Region start offset
        end: Region end offset (default: end of text)

    Yields:
        LinkElement for each link lying entirely inside the region
    """
    if end is None:
        end = len(text)

    for match in LINK_PATTERN.finditer(text, start, end):
        blanks = _BLANKS_PATTERN.match(text, match.end(), end)
        post_blank = blanks.end() - blanks.start() if blanks else 0

        description = match.group("description")
        if description is None:
            yield LinkElement(
                target=match.group("target"),
                description=None,
                begin=match.start(),
                end=match.end(),
                post_blank=post_blank,
            )
        else:
            yield LinkElement(
                target=match.group("target"),
                description=description,
                begin=match.start(),
                end=match.end(),
                contents_begin=match.start("description"),
                contents_end=match.end("description"),
                post_blank=post_blank,
            )


def link_at(text: str, offset: int) -> LinkElement | None:
    """Find the link covering `offset`, if any."""
    for link in parse_links(text):
        if link.begin > offset:
            break
        if link.covers(offset):
            return link
    return None


def escape_link(target: str) -> str:
    """Escape square brackets in a link target.

    Backslashes directly preceding a bracket or the end of the target are
    doubled, and each bracket gets a backslash in front.

    Example:
        >>> escape_link("see [1]")
        'see \\\\[1\\\\]'
    """

    def _escape(match: re.Match[str]) -> str:
        slashes, bracket = match.group(1), match.group(2)
        if bracket:
            return slashes * 2 + "\\" + bracket
        return slashes * 2

    return _ESCAPE_PATTERN.sub(_escape, target)


def unescape_link(target: str) -> str:
    """Reverse escape_link()."""
    return _UNESCAPE_PATTERN.sub(lambda m: "\\" * (len(m.group(1)) // 2), target)


def make_link(target: str, description: str | None = None) -> str:
    """Build a bracket link from an unescaped target.

    A "]]" inside the description, or a trailing "]", is broken with a
    zero-width space so the description cannot close the link early.
    """
    link = f"[[{escape_link(target)}]"
    if description:
        safe = _DOUBLE_BRACKET_PATTERN.sub("]" + ZERO_WIDTH_SPACE, description)
        if safe.endswith("]"):
            safe += ZERO_WIDTH_SPACE
        link += f"[{safe}]"
    return link + "]"


def restore_description(description: str) -> str:
    """Undo the zero-width spaces make_link() puts into a description."""
    restored = _BROKEN_BRACKET_PATTERN.sub("]", description)
    if restored.endswith(f"]{ZERO_WIDTH_SPACE}"):
        restored = restored[:-1]
    return restored
