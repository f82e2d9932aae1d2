"""
AnnotationCommands: the user-facing annotation commands.

This class ties the codec, scanner, mutator, view store, popup and export
dispatcher together for one annotation flavor, the way an editor binds
them to commands.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import view
from .config import AnnotateConfig
from .export import ExportDispatcher, export_text
from .models.marker import LocatedMarker, MarkerKind
from .mutator import LinkEditor, delete_annotation, edit_annotation, insert_annotation
from .popup import Popup
from .scanner import annotation_at
from .scope import Scope

if TYPE_CHECKING:
    from .buffer import OrgBuffer
    from .positions import LivePosition

logger = logging.getLogger(__name__)


class AnnotationCommands:
    """Annotation commands for one flavor.

    Example:
        >>> commands = AnnotationCommands(AnnotateConfig(kind=MarkerKind.COMMENT))
        >>> buf = OrgBuffer("Check the totals.")
        >>> buf.set_region(10, 16)
        >>> _ = commands.insert(buf, "they do not add up")
        >>> buf.text
        'Check the [[comment:they do not add up][totals]].'
    """

    def __init__(
        self,
        config: AnnotateConfig | None = None,
        dispatcher: ExportDispatcher | None = None,
        popup: Popup | None = None,
    ) -> None:
        """Initialize the commands.

        Args:
            config: Settings (default: AnnotateConfig())
            dispatcher: Export dispatcher (default: built from the config)
            popup: Popup used by follow() (default: a new Popup)
        """
        self.config = config or AnnotateConfig()
        self.dispatcher = dispatcher or self.config.dispatcher()
        self.popup = popup or Popup()
        self.views = view.ViewStore(self.config.max_text_width, self.config.no_text_label)

    @property
    def kind(self) -> MarkerKind:
        return self.config.kind

    def insert(self, buffer: OrgBuffer, body: str) -> LivePosition:
        """Insert-Annotation: annotate the selection, or insert at point."""
        return insert_annotation(buffer, body, self.kind)

    def edit(
        self, buffer: OrgBuffer, editor: LinkEditor, offset: int | None = None
    ) -> LivePosition:
        """Edit-Annotation: hand the link at point to `editor` and rewrite it."""
        return edit_annotation(buffer, editor, offset, self.kind)

    def delete(self, buffer: OrgBuffer, offset: int | None = None) -> str:
        """Delete-Annotation-At-Point.

        Raises:
            NotAMarkerError: If point is not on an annotation of this flavor
        """
        return delete_annotation(buffer, offset, self.kind)

    def list(self, buffer: OrgBuffer, scope: Scope | None = None) -> view.ViewState | None:
        """List-Annotations for the whole document or one subtree.

        Returns:
            The view state, or None (after logging a status message) when
            there is nothing to list
        """
        state = self.views.open(buffer, scope, self.kind)
        if state.is_empty:
            logger.info("No %ss found in %s", self.kind.prefix, state.scope.describe())
            self.views.close(state)
            return None
        return state

    def refresh(self, state: view.ViewState) -> view.ViewState | None:
        result = self.views.refresh(state)
        if result is None:
            logger.info("No %ss left in %s", self.kind.prefix, state.scope.describe())
        return result

    def delete_row(self, state: view.ViewState, index: int) -> view.ViewState | None:
        """Delete the annotation on row `index` of a view and refresh it."""
        row = state.row(index)
        self.delete(row.buffer, row.offset)
        return self.refresh(state)

    def export_list_as_table(self, buffer: OrgBuffer, scope: Scope | None = None) -> str:
        """Export-List-As-Table: an Org table of (text, annotation) rows."""
        state = view.build(
            buffer, scope, self.kind, self.config.max_text_width, self.config.no_text_label
        )
        return view.org_table(view.to_table(state))

    def follow(self, buffer: OrgBuffer, offset: int | None = None) -> LocatedMarker:
        """Show the body of the annotation at point in the popup.

        Raises:
            NotAMarkerError: If point is not on an annotation of this flavor
        """
        marker = annotation_at(buffer, offset, self.kind)
        self.popup.show(marker.body)
        return marker

    def export(self, buffer: OrgBuffer, backend: str) -> str:
        """Render the buffer text with every annotation exported for `backend`."""
        return export_text(buffer.text, backend, self.dispatcher, self.kind)
