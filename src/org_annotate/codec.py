"""
Encoding of annotations into Org link targets.

An annotation lives in the target of an ordinary bracket link, after a
reserved link type:

    [[note:remember this][important]]
    [[comment:check the figures]]

The body is escaped with the link grammar's own escaping, so any text
without newlines survives a round trip. Newlines cannot appear in a link
target and are collapsed to single spaces.
"""

from __future__ import annotations

from .constants import LINK_TYPE_SEPARATOR
from .links import escape_link, restore_description, unescape_link
from .models.marker import Marker, MarkerKind, collapse_newlines


def encode(kind: MarkerKind, body: str) -> str:
    """Build the escaped link target for an annotation.

    Args:
        kind: Annotation flavor, which selects the link prefix
        body: Annotation text as entered by the user

    Returns:
        Escaped link target, e.g. "note:see \\[1\\]"

    Example:
        >>> encode(MarkerKind.NOTE, "remember\\nthis")
        'note:remember this'
    """
    return escape_link(kind.prefix + LINK_TYPE_SEPARATOR + collapse_newlines(body))


def decode(
    target: str, description: str | None = None, kind: MarkerKind | None = None
) -> Marker | None:
    """Decode an escaped link target into a Marker.

    Args:
        target: Raw link target as it appears in the document
        description: The link description, if any; zero-width spaces
            breaking "]]" are removed
        kind: Only recognize this flavor (default: any flavor)

    Returns:
        The decoded Marker, or None when the link is not an annotation
    """
    path = unescape_link(target)
    link_type, sep, body = path.partition(LINK_TYPE_SEPARATOR)
    if not sep:
        return None

    for candidate in MarkerKind:
        if link_type == candidate.prefix:
            if kind is not None and candidate is not kind:
                return None
            if description:
                description = restore_description(description)
            return Marker(kind=candidate, body=collapse_newlines(body), displayed_text=description)
    return None


def is_marker_target(target: str, kind: MarkerKind | None = None) -> bool:
    """Check whether a raw link target carries an annotation."""
    return decode(target, kind=kind) is not None
