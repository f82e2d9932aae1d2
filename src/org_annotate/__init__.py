"""
org_annotate - Notes and comments embedded in Org documents as links.

An annotation is an ordinary Org bracket link with a reserved link type,
so the document text itself is the only store:

    Some [[note:remember this][important]] text.

Example:
    >>> from org_annotate import OrgBuffer, AnnotationCommands
    >>> buf = OrgBuffer("Some important text.")
    >>> buf.set_region(5, 14)
    >>> commands = AnnotationCommands()
    >>> _ = commands.insert(buf, "remember this")
    >>> commands.export(buf, "latex")
    'Some important\\\\marginpar{\\\\footnotesize remember this} text.'
"""

__version__ = "0.1.0"
__all__ = [
    "OrgBuffer",
    "LivePosition",
    "StablePosition",
    "Marker",
    "MarkerKind",
    "LocatedMarker",
    "Scope",
    "encode",
    "decode",
    "scan",
    "annotation_at",
    "insert_annotation",
    "edit_annotation",
    "delete_annotation",
    "ExportDispatcher",
    "OdtCommentFormatter",
    "export_text",
    "ViewState",
    "ViewStore",
    "build",
    "refresh",
    "to_table",
    "Popup",
    "Clipboard",
    "AnnotateConfig",
    "load_config",
    "AnnotationCommands",
    "OrgAnnotateError",
    "NotAMarkerError",
    "TextNotFoundError",
    "OutlineError",
    "InvalidPositionError",
    "ConfigError",
]

from .buffer import OrgBuffer
from .codec import decode, encode
from .commands import AnnotationCommands
from .config import AnnotateConfig, load_config
from .errors import (
    ConfigError,
    InvalidPositionError,
    NotAMarkerError,
    OrgAnnotateError,
    OutlineError,
    TextNotFoundError,
)
from .export import ExportDispatcher, OdtCommentFormatter, export_text
from .models.marker import LocatedMarker, Marker, MarkerKind
from .mutator import delete_annotation, edit_annotation, insert_annotation
from .popup import Clipboard, Popup
from .positions import LivePosition, StablePosition
from .scanner import annotation_at, scan
from .scope import Scope
from .view import ViewState, ViewStore, build, refresh, to_table
