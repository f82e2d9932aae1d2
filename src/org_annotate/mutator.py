"""
Inserting, editing and deleting annotation markers.

Every mutation is one OrgBuffer.replace() call. Preconditions are checked
before the replacement, so a failed command leaves the text untouched and
live positions outside the replaced span stay valid.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .codec import encode
from .links import make_link, restore_description, unescape_link
from .models.marker import MarkerKind
from .scanner import marker_link_at

if TYPE_CHECKING:
    from .buffer import OrgBuffer
    from .positions import LivePosition

logger = logging.getLogger(__name__)

# Host link-editing flow: receives the unescaped target and the description,
# returns the new pair.
LinkEditor = Callable[[str, str | None], tuple[str, str | None]]


def insert_annotation(
    buffer: OrgBuffer, body: str, kind: MarkerKind = MarkerKind.NOTE
) -> LivePosition:
    """Insert an annotation at the selection or at point.

    With an active selection, the selected text becomes the displayed text
    of the new marker. Without one, a marker with no displayed text is
    inserted at point.

    Args:
        buffer: Buffer to edit
        body: Annotation text; newlines are collapsed to spaces
        kind: Annotation flavor

    Returns:
        Live position at the start of the new link

    Raises:
        ValueError: If `body` is empty or only whitespace

    Example:
        >>> buf = OrgBuffer("Some important text.")
        >>> buf.set_region(5, 14)
        >>> _ = insert_annotation(buf, "remember this")
        >>> buf.text
        'Some [[note:remember this][important]] text.'
    """
    if not body or not body.strip():
        raise ValueError("Annotation text cannot be empty")

    target = unescape_link(encode(kind, body))
    region = buffer.region()
    if region is not None:
        start, end = region
        link = make_link(target, buffer.substring(start, end))
    else:
        start = end = buffer.point
        link = make_link(target)

    buffer.replace(start, end, link)
    buffer.deactivate_mark()
    buffer.point = start + len(link)
    logger.debug("Inserted %s annotation at %d in %s", kind.prefix, start, buffer.name)
    return buffer.position(start)


def edit_annotation(
    buffer: OrgBuffer,
    edit: LinkEditor,
    offset: int | None = None,
    kind: MarkerKind | None = None,
) -> LivePosition:
    """Run the link-editing flow on the annotation at `offset` (default: point).

    Args:
        buffer: Buffer to edit
        edit: Callable receiving the link target (e.g. "note:body") and the
            description, returning the replacement pair
        offset: Position on the annotation
        kind: Only accept annotations of this flavor

    Returns:
        Live position at the start of the rewritten link

    Raises:
        NotAMarkerError: If no annotation of the kind is at `offset`
    """
    link, _ = marker_link_at(buffer, offset, kind)
    description = restore_description(link.description) if link.description else None
    target, description = edit(link.path, description)
    new_link = make_link(target, description)

    buffer.replace(link.begin, link.end, new_link)
    logger.debug("Edited annotation at %d in %s", link.begin, buffer.name)
    return buffer.position(link.begin)


def delete_annotation(
    buffer: OrgBuffer, offset: int | None = None, kind: MarkerKind | None = None
) -> str:
    """Replace the annotation at `offset` (default: point) with its text.

    A marker with displayed text collapses to that text; if blanks followed
    the link, exactly one space is kept so the text does not merge with the
    next word. A marker without displayed text is removed, and the text
    around it is left alone.

    Returns:
        The text that replaced the marker

    Raises:
        NotAMarkerError: If no annotation of the kind is at `offset`; the
            buffer is not modified
    """
    link, marker = marker_link_at(buffer, offset, kind)

    if marker.displayed_text:
        end = link.end + link.post_blank
        replacement = marker.displayed_text
        if link.post_blank:
            replacement += " "
    else:
        end = link.end
        replacement = ""

    buffer.replace(link.begin, end, replacement)
    logger.debug("Deleted %s annotation at %d in %s", marker.kind.prefix, link.begin, buffer.name)
    return replacement
