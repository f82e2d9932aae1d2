"""
Aggregate list of the annotations in a document or subtree.

build() scans once and returns a ViewState with the rows and the column
layout; refresh() rescans the same buffer and scope in place. There is no
incremental update: any edit to the source requires a refresh, and a
refresh that finds nothing returns None so the presenter can close.

ViewStore keeps one ViewState per (buffer, scope, kind), so listing the
annotations of two subtrees gives two independent views.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .constants import (
    BODY_COLUMN_TITLE,
    MAX_TEXT_WIDTH,
    NO_TEXT_LABEL,
    ORG_TABLE_BAR,
    TEXT_COLUMN_TITLE,
)
from .models.marker import LocatedMarker, MarkerKind, collapse_newlines
from .scanner import scan
from .scope import Scope

if TYPE_CHECKING:
    from .buffer import OrgBuffer

logger = logging.getLogger(__name__)

ViewKey = tuple[str, tuple[str, int] | None, MarkerKind]


def display_width(text: str) -> int:
    """Number of terminal columns `text` occupies; wide and fullwidth characters take two."""
    return sum(2 if unicodedata.east_asian_width(char) in "WF" else 1 for char in text)


def fit(text: str, width: int) -> str:
    """Pad or truncate `text` (with an ellipsis) to exactly `width` columns."""
    if display_width(text) > width:
        while text and display_width(text) > width - 1:
            text = text[:-1]
        text += "…"
    return text + " " * (width - display_width(text))


@dataclass(frozen=True)
class Column:
    """Column spec for the tabular presenter.

    Attributes:
        title: Column header
        width: Display width (0 means take the remaining width)
        sortable: Whether the presenter may sort on this column
    """

    title: str
    width: int
    sortable: bool = True


@dataclass
class ViewState:
    """Rows and layout of one aggregate view.

    Attributes:
        buffer: Buffer the rows were scanned from
        scope: Scope the rows were restricted to
        kind: Annotation flavor listed
        rows: Located markers in document order
        text_width: Width of the displayed-text column
        max_width: Upper bound applied to text_width
        no_text_label: Shown for markers without displayed text
    """

    buffer: OrgBuffer
    scope: Scope
    kind: MarkerKind
    rows: list[LocatedMarker] = field(default_factory=list)
    text_width: int = 0
    max_width: int = MAX_TEXT_WIDTH
    no_text_label: str = NO_TEXT_LABEL

    @property
    def key(self) -> ViewKey:
        return (self.buffer.name, self.scope.key, self.kind)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def columns(self) -> tuple[Column, Column]:
        return (
            Column(TEXT_COLUMN_TITLE, self.text_width),
            Column(BODY_COLUMN_TITLE, 0, sortable=False),
        )

    def label(self, row: LocatedMarker) -> str:
        if not row.displayed_text:
            return self.no_text_label
        return collapse_newlines(row.displayed_text)

    def entries(self) -> list[tuple[str, str]]:
        """Get (displayed text, body) pairs in row order."""
        return [(self.label(row), row.body) for row in self.rows]

    def row(self, index: int) -> LocatedMarker:
        """Get the marker shown on row `index` (the presenter's selection)."""
        return self.rows[index]


def _populate(state: ViewState) -> ViewState:
    state.rows = list(scan(state.buffer, state.scope, state.kind))
    widest = max((display_width(state.label(row)) for row in state.rows), default=0)
    state.text_width = min(max(widest, len(TEXT_COLUMN_TITLE)), state.max_width)
    logger.debug(
        "Built view of %d %s annotations for %s",
        len(state.rows),
        state.kind.prefix,
        state.scope.describe(),
    )
    return state


def build(
    buffer: OrgBuffer,
    scope: Scope | None = None,
    kind: MarkerKind = MarkerKind.NOTE,
    max_width: int = MAX_TEXT_WIDTH,
    no_text_label: str = NO_TEXT_LABEL,
) -> ViewState:
    """Scan `buffer` once and lay out the rows.

    The result may have no rows; that is a normal state.
    """
    state = ViewState(
        buffer=buffer,
        scope=scope or Scope.whole(),
        kind=kind,
        max_width=max_width,
        no_text_label=no_text_label,
    )
    return _populate(state)


def refresh(state: ViewState) -> ViewState | None:
    """Rescan the buffer and scope of `state`, replacing its rows in place.

    Returns:
        The same ViewState, or None if no annotations remain
    """
    _populate(state)
    return None if state.is_empty else state


def jump(state: ViewState, index: int) -> int:
    """Move the source buffer's point to the marker on row `index`.

    Returns:
        The new point

    Raises:
        InvalidPositionError: If the marker was deleted since the last refresh
    """
    offset = state.row(index).offset
    state.buffer.point = offset
    return offset


def _tsv_cell(text: str) -> str:
    return text.replace("\t", " ")


def to_table(state: ViewState) -> str:
    """Render the rows as tab-separated "displayed text<TAB>body" lines.

    Tabs inside a cell become spaces so every line keeps two fields.
    """
    lines = []
    for text, body in state.entries():
        lines.append(f"{_tsv_cell(text)}\t{_tsv_cell(body)}\n")
    return "".join(lines)


def org_table(tsv: str) -> str:
    """Convert tab-separated lines into an aligned Org table.

    A "|" inside a cell is written as the \\vert{} entity so it cannot
    start a new column.
    """
    rows = [
        [cell.replace("|", ORG_TABLE_BAR) for cell in line.split("\t")]
        for line in tsv.splitlines()
        if line
    ]
    if not rows:
        return ""
    ncols = max(len(cells) for cells in rows)
    rows = [cells + [""] * (ncols - len(cells)) for cells in rows]
    widths = [max(display_width(cells[i]) for cells in rows) for i in range(ncols)]
    lines = []
    for cells in rows:
        padded = " | ".join(fit(cell, width) for cell, width in zip(cells, widths))
        lines.append(f"| {padded} |")
    return "\n".join(lines) + "\n"


class ViewStore:
    """View states keyed by (buffer name, scope key, kind).

    Example:
        >>> store = ViewStore()
        >>> state = store.open(buf)
        >>> store.get(buf) is state
        True
    """

    def __init__(self, max_width: int = MAX_TEXT_WIDTH, no_text_label: str = NO_TEXT_LABEL):
        self.max_width = max_width
        self.no_text_label = no_text_label
        self._views: dict[ViewKey, ViewState] = {}

    @staticmethod
    def key_for(
        buffer: OrgBuffer, scope: Scope | None = None, kind: MarkerKind = MarkerKind.NOTE
    ) -> ViewKey:
        return (buffer.name, (scope or Scope.whole()).key, kind)

    def open(
        self,
        buffer: OrgBuffer,
        scope: Scope | None = None,
        kind: MarkerKind = MarkerKind.NOTE,
    ) -> ViewState:
        """Build, or rebuild, the view for this buffer and scope."""
        state = build(buffer, scope, kind, self.max_width, self.no_text_label)
        self._views[state.key] = state
        return state

    def get(
        self,
        buffer: OrgBuffer,
        scope: Scope | None = None,
        kind: MarkerKind = MarkerKind.NOTE,
    ) -> ViewState | None:
        return self._views.get(self.key_for(buffer, scope, kind))

    def refresh(self, state: ViewState) -> ViewState | None:
        """Refresh `state`, dropping it from the store when it becomes empty."""
        result = refresh(state)
        if result is None:
            self._views.pop(state.key, None)
        return result

    def close(self, state: ViewState) -> None:
        self._views.pop(state.key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._views

    def __len__(self) -> int:
        return len(self._views)
