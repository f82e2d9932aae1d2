"""
Model classes for org_annotate.
"""

from org_annotate.models.marker import LocatedMarker, Marker, MarkerKind

__all__ = [
    "Marker",
    "MarkerKind",
    "LocatedMarker",
]
