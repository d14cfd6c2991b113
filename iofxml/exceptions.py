"""Exception hierarchy for the iofxml tools.

Every error carries structured context and a correction hint so the CLI can
report which input (file, event or class listing) was at fault.
"""

from typing import Any


class IofXmlError(Exception):
    """Base exception for failed downloads and merges.

    The CLI turns any of these into exit status 1, printing `message` and
    `suggestion` and logging `to_dict()`.

    Attributes:
        message: What went wrong, naming the file or listing involved.
        error_data: Paths, URLs or element names behind the failure.
        suggestion: What the operator can change before running again.
    """

    def __init__(
        self,
        message: str,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize the error.

        Args:
            message: Human-readable error message.
            error_data: Structured context (paths, URLs, element names, etc.).
            suggestion: Actionable correction hint.
        """
        super().__init__(message)
        self.message = message
        self.error_data = error_data or {}
        self.suggestion = suggestion

    def __str__(self) -> str:
        """Return formatted error message with suggestion if available."""
        base = self.message
        if self.suggestion:
            return f"{base}\nSuggestion: {self.suggestion}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to structured dictionary for logging.

        Returns:
            Dictionary with error type, message, data, and suggestion.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_data": self.error_data,
            "suggestion": self.suggestion,
        }


class ParseError(IofXmlError):
    """Input text is not well-formed XML.

    Examples:
        - Truncated download
        - HTML error page returned instead of XML
        - Hand-edited file with unbalanced tags
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line: int | None = None,
        column: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize parse error.

        Args:
            message: Human-readable error message.
            source: File path or URL the text came from.
            line: Line of the first syntax error, if known.
            column: Column of the first syntax error, if known.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"source": source, "line": line, "column": column})

        default_suggestion = suggestion or (
            f"Check that {source} is a complete IOF XML file."
            if source
            else "Check that the input is a complete XML document."
        )

        super().__init__(message, data, default_suggestion)
        self.source = source
        self.line = line
        self.column = column


class StructureError(IofXmlError):
    """Well-formed XML that lacks a required element.

    Examples:
        - Merge base without a ClassResult element
        - Merge supplement without any PersonResult element
        - Event or Class listing entry without Id or Name
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        element: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize structure error.

        Args:
            message: Human-readable error message.
            source: File path, URL or listing context ("Event", "Class").
            element: Name of the missing element.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"source": source, "element": element})

        default_suggestion = suggestion or (
            f"Make sure {source} contains a <{element}> element."
            if source and element
            else "The document does not have the expected IOF XML structure."
        )

        super().__init__(message, data, default_suggestion)
        self.source = source
        self.element = element


class NetworkError(IofXmlError):
    """HTTP/connection failures. Never retried.

    Examples:
        - HTTP 404/500 from the results service
        - Connection refused or DNS resolution failure
        - Connection dropped while streaming a result file
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize network error.

        Args:
            message: Human-readable error message.
            url: The URL that failed.
            status_code: HTTP status code if applicable.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update({"url": url, "status_code": status_code})

        default_suggestion = suggestion or (
            "Check network connectivity and run the command again. "
            "If the error persists, the results service may be unavailable."
        )

        super().__init__(message, data, default_suggestion)
        self.url = url
        self.status_code = status_code


class UserCancellation(IofXmlError):
    """The operator aborted an interactive selection."""

    def __init__(self, message: str = "Cancelled.", stage: str | None = None):
        super().__init__(message, {"stage": stage})
        self.stage = stage


class ArgumentError(IofXmlError):
    """A command was called with arguments it cannot work with.

    Raised before any request is sent or any file is read, e.g. for a
    --date that is not YYYY-MM-DD or a merge with fewer than two inputs.
    """

    def __init__(
        self,
        message: str,
        parameter: str | None = None,
        expected_format: str | None = None,
        example: str | None = None,
        error_data: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        """Initialize argument error.

        Args:
            message: Human-readable error message.
            parameter: Parameter name that's invalid.
            expected_format: Expected format for the parameter.
            example: Example of valid value.
            error_data: Additional context.
            suggestion: How to resolve the error.
        """
        data = error_data or {}
        data.update(
            {
                "parameter": parameter,
                "expected_format": expected_format,
                "example": example,
            }
        )

        if suggestion:
            default_suggestion = suggestion
        elif expected_format and example:
            default_suggestion = f"Expected {expected_format}, e.g. '{example}'."
        else:
            default_suggestion = (
                "Run 'iofxml --help' for the winsplits and merge usage."
            )

        super().__init__(message, data, default_suggestion)
        self.parameter = parameter
        self.expected_format = expected_format
        self.example = example
