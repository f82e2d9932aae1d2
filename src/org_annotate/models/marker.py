"""
Marker model classes for annotations embedded in Org text.

A Marker is what a link decodes to; a LocatedMarker adds where it was
found. Neither is stored anywhere: the document text is the only store,
and located markers are derived fresh by every scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from org_annotate.constants import COMMENT_PREFIX, NO_TEXT_LABEL, NOTE_PREFIX

if TYPE_CHECKING:
    from org_annotate.buffer import OrgBuffer
    from org_annotate.positions import LivePosition
    from org_annotate.scope import Scope

_NEWLINES = re.compile(r"\s*\n\s*")


class MarkerKind(Enum):
    """Annotation flavors.

    The two flavors behave identically; the kind only selects the link
    prefix and the default export styling.

    Attributes:
        NOTE: [[note:...]] links
        COMMENT: [[comment:...]] links
    """

    NOTE = NOTE_PREFIX
    COMMENT = COMMENT_PREFIX

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Uppercase label used by exporters, e.g. "NOTE"."""
        return self.value.upper()

    @classmethod
    def from_name(cls, name: str) -> MarkerKind:
        """Look up a kind by its prefix, case-insensitively.

        Raises:
            ValueError: If `name` is not a known kind
        """
        try:
            return cls(name.lower())
        except ValueError:
            valid = ", ".join(k.value for k in cls)
            raise ValueError(f"Unknown annotation kind '{name}' (expected one of: {valid})")


def collapse_newlines(text: str) -> str:
    """Replace each newline, with its surrounding whitespace, by one space."""
    return _NEWLINES.sub(" ", text)


@dataclass(frozen=True)
class Marker:
    """An annotation decoded from a link.

    Attributes:
        kind: Annotation flavor
        body: Annotation text, unescaped
        displayed_text: Document text the annotation is attached to, or None
    """

    kind: MarkerKind
    body: str
    displayed_text: str | None = None


@dataclass
class LocatedMarker:
    """A marker together with where a scan found it.

    Attributes:
        marker: The decoded marker
        position: Live position at the start of the link
        buffer: Buffer the scan ran over
        scope: Scope the scan was restricted to
    """

    marker: Marker
    position: LivePosition
    buffer: OrgBuffer
    scope: Scope

    @property
    def kind(self) -> MarkerKind:
        return self.marker.kind

    @property
    def body(self) -> str:
        return self.marker.body

    @property
    def displayed_text(self) -> str | None:
        return self.marker.displayed_text

    @property
    def label(self) -> str:
        """Displayed text on one line, or the no-text sentinel."""
        if not self.marker.displayed_text:
            return NO_TEXT_LABEL
        return collapse_newlines(self.marker.displayed_text)

    @property
    def offset(self) -> int:
        """Current offset of the link start.

        Raises:
            InvalidPositionError: If the marker text has been deleted
        """
        return self.position.offset

    def as_row(self) -> tuple[str, str]:
        """Get the (displayed text, body) pair shown in the list view."""
        return self.label, self.body
