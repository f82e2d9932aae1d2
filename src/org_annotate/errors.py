"""
Custom exception classes for org_annotate package.

These exceptions provide helpful error messages when annotation commands
are invoked somewhere they cannot apply. Empty scans and export backends
without a formatter are ordinary states and never raise.
"""


class OrgAnnotateError(Exception):
    """Base exception for all org_annotate errors."""

    pass


class NotAMarkerError(OrgAnnotateError):
    """Raised when no annotation marker exists at the requested position.

    The document is never modified when this is raised.

    Attributes:
        offset: The buffer offset that was inspected
        kind: The annotation kind that was expected (None for any kind)
        target: Target of the ordinary link found there, if any
    """

    def __init__(self, offset: int, kind: str | None = None, target: str | None = None) -> None:
        self.offset = offset
        self.kind = kind
        self.target = target
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message describing what was found instead."""
        what = f"{self.kind} annotation" if self.kind else "annotation"
        msg = f"No {what} at position {self.offset}"
        if self.target is not None:
            msg += f" (found ordinary link '{self.target}')"
        return msg


class TextNotFoundError(OrgAnnotateError):
    """Raised when anchor text for a command cannot be found.

    Attributes:
        text: The text that was being searched for
        suggestions: List of helpful suggestions for resolving the issue
    """

    def __init__(self, text: str, suggestions: list[str] | None = None) -> None:
        self.text = text
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format a helpful error message with suggestions."""
        msg = f"Could not find '{self.text}'"

        if self.suggestions:
            msg += "\n\nSuggestions:\n"
            for suggestion in self.suggestions:
                msg += f"  • {suggestion}\n"

        return msg


class OutlineError(OrgAnnotateError):
    """Raised when a subtree scope cannot be resolved.

    This occurs when the position lies before the first heading or when
    no heading carries the requested title.
    """

    pass


class InvalidPositionError(OrgAnnotateError):
    """Raised when dereferencing a position whose text has been deleted.

    Using such a handle is a programming error: callers must rescan after
    mutating the region a handle points into.
    """

    pass


class ConfigError(OrgAnnotateError):
    """Raised when a configuration file cannot be loaded.

    Attributes:
        errors: List of specific problems found in the file (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)
