"""Custom exceptions for cardlink.

This module defines a hierarchy of custom exceptions for better error
categorization and handling throughout the application.
"""


class CardlinkError(Exception):
    """Base exception for all cardlink errors.

    Parameters
    ----------
    message : str
        Error message describing what went wrong.
    details : dict, optional
        Additional structured information about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Dictionary containing additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        """Format error message with optional details.

        Returns
        -------
        str
            Formatted error message.
        """
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(CardlinkError):
    """Configuration loading or validation error.

    Raised when:
    - Configuration files are invalid YAML
    - Configuration values have the wrong type
    """

    pass


class ValidationError(CardlinkError):
    """Input validation error.

    Raised when:
    - A LinkMetadata record violates its invariants
    - An encode call receives no records
    """

    pass


class DecodeError(CardlinkError):
    """A card block could not be decoded.

    Parameters
    ----------
    message : str
        Error message describing the decode failure.
    line : int, optional
        Line number (1-based, relative to the block body) of the offending line.

    Attributes
    ----------
    line : int or None
        Line number if known.
    """

    def __init__(self, message: str, line: int | None = None):
        details = {}
        if line is not None:
            details["line"] = line

        super().__init__(message, details)
        self.line = line


class MalformedBlockError(DecodeError):
    """Block delimiters or line syntax cannot be parsed.

    Raised when:
    - A block has no closing fence
    - A line has no ``key:`` separator or an invalid key
    - Indentation is not a whole number of levels
    - A quoted value is not a valid quoted string
    """

    pass


class MissingRequiredFieldError(DecodeError):
    """A block parsed syntactically but a record lacks a required key.

    Parameters
    ----------
    field : str
        Name of the missing field.
    line : int, optional
        Line on which the incomplete record starts.
    """

    def __init__(self, field: str, line: int | None = None):
        super().__init__(f"Required field '{field}' is missing", line)
        self.field = field


class MetadataRetrievalError(CardlinkError):
    """Error fetching link metadata from a remote page.

    Parameters
    ----------
    message : str
        Error message describing the failure.
    url : str, optional
        URL that was requested.
    status_code : int, optional
        HTTP status code from the response.

    Attributes
    ----------
    url : str or None
        URL that was requested.
    status_code : int or None
        HTTP status code if available.
    """

    def __init__(self, message: str, url: str | None = None, status_code: int | None = None):
        details = {}
        if url:
            details["url"] = url
        if status_code:
            details["status_code"] = status_code

        super().__init__(message, details)
        self.url = url
        self.status_code = status_code
