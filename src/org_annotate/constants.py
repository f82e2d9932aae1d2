"""
Centralized constants for annotation markers and the aggregate view.

Import from here to keep the link prefixes, display defaults and export
labels consistent across the scanner, the view model and the exporters.
"""

# =============================================================================
# Marker Link Prefixes
# =============================================================================

NOTE_PREFIX = "note"
COMMENT_PREFIX = "comment"

# Separator between a link type and the rest of the target
LINK_TYPE_SEPARATOR = ":"


# =============================================================================
# Aggregate View
# =============================================================================

# Shown in place of the displayed text of a marker without a description
NO_TEXT_LABEL = "[no text]"

# Upper bound for the width of the displayed-text column
MAX_TEXT_WIDTH = 40

TEXT_COLUMN_TITLE = "Text"
BODY_COLUMN_TITLE = "Annotation"

# Org entity written for a literal "|" inside a table cell
ORG_TABLE_BAR = "\\vert{}"


# =============================================================================
# Export
# =============================================================================

# Prefix of the office:name attribute shared by a comment and its end tag
ODT_ANNOTATION_NAME_PREFIX = "__Annot__"

OFFICE_NAMESPACE = "urn:oasis:names:tc:opendocument:xmlns:office:1.0"
TEXT_NAMESPACE = "urn:oasis:names:tc:opendocument:xmlns:text:1.0"
DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"

ODT_NSMAP = {
    "office": OFFICE_NAMESPACE,
    "text": TEXT_NAMESPACE,
    "dc": DC_NAMESPACE,
}


def office_tag(tag: str) -> str:
    """Create a Clark-notation tag in the ODF office namespace."""
    return f"{{{OFFICE_NAMESPACE}}}{tag}"


def text_tag(tag: str) -> str:
    """Create a Clark-notation tag in the ODF text namespace."""
    return f"{{{TEXT_NAMESPACE}}}{tag}"


def dc_tag(tag: str) -> str:
    """Create a Clark-notation tag in the Dublin Core namespace."""
    return f"{{{DC_NAMESPACE}}}{tag}"


# =============================================================================
# Configuration
# =============================================================================

CONFIG_ENV_VAR = "ORG_ANNOTATE_CONFIG"
