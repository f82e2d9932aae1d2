"""
Rendering annotation markers for export backends.

The host exporter hands every annotation link it meets to
ExportDispatcher.render() together with the backend it is producing. The
dispatcher looks the backend up in its formatter mapping and calls the
formatter with (body, displayed_text). Backends without a usable formatter
degrade to the displayed text; export never fails because of an annotation.

Default formatters:
    - html: tooltip (<abbr title="body">) followed by the displayed text
    - latex: margin note (notes) or footnote (comments)
    - odt: office:annotation / office:annotation-end pair around the text
"""

from __future__ import annotations

import html
import importlib
import itertools
import logging
import re
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from lxml import etree

from .codec import decode
from .constants import (
    ODT_ANNOTATION_NAME_PREFIX,
    ODT_NSMAP,
    OFFICE_NAMESPACE,
    dc_tag,
    office_tag,
    text_tag,
)
from .links import parse_links
from .models.marker import MarkerKind

logger = logging.getLogger(__name__)

Formatter = Callable[[str, str | None], str]

# Characters XML 1.0 does not allow (tab, newline and carriage return are fine)
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ud800-\udfff\ufffe\uffff]")

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def sanitize_xml_text(text: str) -> str:
    """Remove characters that aren't valid in XML."""
    return _XML_ILLEGAL.sub("", text)


def latex_escape(text: str) -> str:
    """Escape LaTeX special characters in plain text."""
    return "".join(_LATEX_SPECIALS.get(char, char) for char in text)


# =============================================================================
# Formatters
# =============================================================================


def html_tooltip(label: str = "NOTE", css_class: str = "org-note") -> Formatter:
    """Create an HTML formatter showing the body as a tooltip on `label`."""

    def _format(body: str, displayed_text: str | None) -> str:
        tooltip = (
            f'<span class="{css_class}">'
            f'<abbr title="{html.escape(body, quote=True)}">{label}</abbr>'
            f"</span>"
        )
        if displayed_text:
            return f"{tooltip} {displayed_text}"
        return tooltip

    return _format


def latex_marginpar(body: str, displayed_text: str | None) -> str:
    return f"{displayed_text or ''}\\marginpar{{\\footnotesize {latex_escape(body)}}}"


def latex_footnote(body: str, displayed_text: str | None) -> str:
    return f"{displayed_text or ''}\\footnote{{{latex_escape(body)}}}"


def plain_text(body: str, displayed_text: str | None) -> str:
    """Drop the annotation and keep only the displayed text."""
    return displayed_text or ""


class OdtCommentFormatter:
    """Formatter producing ODF document comments.

    The comment and its end tag share an office:name built from a counter,
    so every comment in one export run gets its own name. Call reset() at
    the start of a run.

    Example:
        >>> fmt = OdtCommentFormatter(author="Ann")
        >>> fmt("check this", "figure 3")  # doctest: +ELLIPSIS
        '<office:annotation ... office:name="__Annot__1">...figure 3<office:annotation-end .../>'
    """

    def __init__(self, author: str = "", clock: Callable[[], datetime] | None = None) -> None:
        self.author = author
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._counter = itertools.count(1)

    def reset(self) -> None:
        self._counter = itertools.count(1)

    def next_name(self) -> str:
        return f"{ODT_ANNOTATION_NAME_PREFIX}{next(self._counter)}"

    def __call__(self, body: str, displayed_text: str | None) -> str:
        name = self.next_name()

        annotation = etree.Element(office_tag("annotation"), nsmap=ODT_NSMAP)
        annotation.set(office_tag("name"), name)
        if self.author:
            creator = etree.SubElement(annotation, dc_tag("creator"))
            creator.text = sanitize_xml_text(self.author)
        date = etree.SubElement(annotation, dc_tag("date"))
        date.text = self._clock().strftime("%Y-%m-%dT%H:%M:%S")
        paragraph = etree.SubElement(annotation, text_tag("p"))
        paragraph.text = sanitize_xml_text(body)
        if displayed_text:
            annotation.tail = sanitize_xml_text(displayed_text)

        end = etree.Element(office_tag("annotation-end"), nsmap={"office": OFFICE_NAMESPACE})
        end.set(office_tag("name"), name)

        # tostring() includes the tail, so the displayed text comes out escaped
        opening = etree.tostring(annotation, encoding="unicode")
        return opening + etree.tostring(end, encoding="unicode")


# Builtin formatters by name: factory(kind, author) -> formatter
BUILTIN_FORMATTERS: dict[str, Callable[[MarkerKind, str], Formatter]] = {
    "tooltip": lambda kind, author: html_tooltip(kind.label, f"org-{kind.prefix}"),
    "marginpar": lambda kind, author: latex_marginpar,
    "footnote": lambda kind, author: latex_footnote,
    "odt-comment": lambda kind, author: OdtCommentFormatter(author=author),
    "plain": lambda kind, author: plain_text,
}

_DEFAULT_STYLES: dict[MarkerKind, dict[str, str]] = {
    MarkerKind.NOTE: {"html": "tooltip", "latex": "marginpar", "odt": "odt-comment"},
    MarkerKind.COMMENT: {"html": "tooltip", "latex": "footnote", "odt": "odt-comment"},
}


def resolve_formatter(spec: str, kind: MarkerKind = MarkerKind.NOTE, author: str = "") -> Any:
    """Resolve a formatter name from configuration.

    Args:
        spec: A builtin name ("tooltip", "marginpar", "footnote",
            "odt-comment", "plain") or an import path "package.module:function"
        kind: Annotation flavor the formatter is for
        author: Author name for formatters that record one

    Returns:
        The resolved object; it is not checked for callability here

    Raises:
        ValueError: If `spec` is neither a builtin name nor an import path
        ImportError: If the module in an import path cannot be imported
    """
    if spec in BUILTIN_FORMATTERS:
        return BUILTIN_FORMATTERS[spec](kind, author)

    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        valid = ", ".join(BUILTIN_FORMATTERS)
        raise ValueError(f"Unknown formatter '{spec}' (builtin: {valid}; or 'module:function')")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ValueError(f"Module '{module_name}' has no attribute '{attr}'")


def default_formatters(kind: MarkerKind = MarkerKind.NOTE, author: str = "") -> dict[str, Any]:
    """Fresh default formatter mapping for html, latex and odt."""
    return {
        backend: resolve_formatter(name, kind, author)
        for backend, name in _DEFAULT_STYLES[kind].items()
    }


# =============================================================================
# Dispatcher
# =============================================================================


class ExportDispatcher:
    """Maps export backends to formatters.

    Example:
        >>> dispatcher = ExportDispatcher.for_kind(MarkerKind.NOTE)
        >>> dispatcher.render("html", "remember this", "important")
        '<span class="org-note"><abbr title="remember this">NOTE</abbr></span> important'
        >>> dispatcher.render("markdown", "remember this", "important")
        'important'
    """

    def __init__(self, formatters: Mapping[str, Any] | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            formatters: Mapping from backend identifier to formatter. Values
                that are not callable are kept but treated as unregistered.
        """
        self.formatters: dict[str, Any] = dict(formatters or {})

    @classmethod
    def for_kind(
        cls,
        kind: MarkerKind = MarkerKind.NOTE,
        author: str = "",
        overrides: Mapping[str, Any] | None = None,
    ) -> ExportDispatcher:
        """Create a dispatcher with the default formatters of `kind`.

        Args:
            kind: Annotation flavor
            author: Author recorded by document-comment formatters
            overrides: Backend -> formatter (or builtin name / import path)
                entries replacing or extending the defaults
        """
        formatters = default_formatters(kind, author)
        for backend, formatter in (overrides or {}).items():
            if isinstance(formatter, str):
                formatter = resolve_formatter(formatter, kind, author)
            formatters[backend] = formatter
        return cls(formatters)

    def register(self, backend: str, formatter: Any) -> None:
        self.formatters[backend] = formatter

    def formatter_for(self, backend: str) -> Formatter | None:
        """Get the formatter for `backend`, or None if none is usable."""
        formatter = self.formatters.get(backend)
        if formatter is None or not callable(formatter):
            return None
        return formatter

    def render(self, backend: str, body: str, displayed_text: str | None = None) -> str:
        """Render one annotation for `backend`.

        Falls back to the displayed text (or "") when no callable formatter
        is registered for the backend.
        """
        formatter = self.formatter_for(backend)
        if formatter is None:
            logger.debug("No formatter for backend '%s', keeping displayed text", backend)
            return displayed_text or ""
        return formatter(body, displayed_text)

    def start_run(self) -> None:
        """Reset per-run state, such as document-comment name counters."""
        for formatter in self.formatters.values():
            reset = getattr(formatter, "reset", None)
            if callable(reset):
                reset()


def export_text(
    text: str,
    backend: str,
    dispatcher: ExportDispatcher,
    kind: MarkerKind | None = None,
) -> str:
    """Replace every annotation link in `text` with its rendering.

    Ordinary links, and annotations of other kinds when `kind` is given,
    are copied through unchanged. The dispatcher is called once per
    annotation, in document order, within a single export run.
    """
    dispatcher.start_run()
    parts: list[str] = []
    last = 0
    count = 0

    for link in parse_links(text):
        marker = decode(link.target, link.description, kind=kind)
        if marker is None:
            continue
        parts.append(text[last : link.begin])
        parts.append(dispatcher.render(backend, marker.body, marker.displayed_text))
        last = link.end
        count += 1

    parts.append(text[last:])
    logger.debug("Exported %d annotations for backend '%s'", count, backend)
    return "".join(parts)
