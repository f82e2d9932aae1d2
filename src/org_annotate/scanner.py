"""
Locating annotation markers in a buffer.

scan() walks every bracket link in a scope, decodes its target and yields
the annotations among them. It is a generator: each call re-walks the
current text, nothing is cached between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING

from .codec import decode
from .errors import NotAMarkerError
from .links import LinkElement, link_at, parse_links
from .models.marker import LocatedMarker, Marker, MarkerKind
from .scope import Scope

if TYPE_CHECKING:
    from .buffer import OrgBuffer

logger = logging.getLogger(__name__)


def scan(
    buffer: OrgBuffer, scope: Scope | None = None, kind: MarkerKind | None = None
) -> Iterator[LocatedMarker]:
    """Yield annotation markers in document order.

    Args:
        buffer: Buffer to scan
        scope: Region to restrict the scan to (default: whole document)
        kind: Only yield markers of this flavor (default: all flavors)

    Yields:
        LocatedMarker for each annotation link, with a live position at the
        start of the link

    Example:
        >>> buf = OrgBuffer("Some [[note:remember this][important]] text.")
        >>> [m.as_row() for m in scan(buf)]
        [('important', 'remember this')]
    """
    scope = scope or Scope.whole()
    start, end = scope.bounds(buffer)
    logger.debug("Scanning %s of %s for %s markers", scope.describe(), buffer.name, kind or "all")

    for link in parse_links(buffer.text, start, end):
        marker = decode(link.target, link.description, kind=kind)
        if marker is None:
            continue
        yield LocatedMarker(
            marker=marker,
            position=buffer.position(link.begin),
            buffer=buffer,
            scope=scope,
        )


def marker_link_at(
    buffer: OrgBuffer, offset: int | None = None, kind: MarkerKind | None = None
) -> tuple[LinkElement, Marker]:
    """Find the annotation link covering `offset` (default: point).

    Raises:
        NotAMarkerError: If there is no link there, or the link is not an
            annotation of the requested kind
    """
    if offset is None:
        offset = buffer.point
    kind_name = kind.prefix if kind else None

    link = link_at(buffer.text, offset)
    if link is None:
        raise NotAMarkerError(offset, kind_name)

    marker = decode(link.target, link.description, kind=kind)
    if marker is None:
        raise NotAMarkerError(offset, kind_name, target=link.path)
    return link, marker


def annotation_at(
    buffer: OrgBuffer, offset: int | None = None, kind: MarkerKind | None = None
) -> LocatedMarker:
    """Get the annotation covering `offset` (default: point) as a LocatedMarker.

    Raises:
        NotAMarkerError: If no annotation of the requested kind is there
    """
    link, marker = marker_link_at(buffer, offset, kind)
    return LocatedMarker(
        marker=marker,
        position=buffer.position(link.begin),
        buffer=buffer,
        scope=Scope.whole(),
    )
