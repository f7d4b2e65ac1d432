"""
Exception hierarchy for the qBittorrent SDK.

Everything the SDK raises derives from QBittorrentError:

- InvalidArgumentError: programmer errors (missing builder field, bad chunk size,
  mutating a read-only collection). Also a ValueError.
- RequestValidationError: a built request failed field validation. Carries the
  full ValidationResult so callers can report every problem at once.
- HydrationError: raw API data could not be turned into models. Response
  wrappers convert it into a failed response instead of letting it escape.
- TransportError and subclasses: failures talking to the Web API.
"""

from typing import Any, List, Optional


class QBittorrentError(Exception):
    """Base class for all SDK errors."""


class InvalidArgumentError(QBittorrentError, ValueError):
    """An argument was invalid in a way that indicates a programming error."""

    def __init__(self, message: str, parameter: Optional[str] = None):
        super().__init__(message)
        self.parameter = parameter

    @classmethod
    def out_of_range(cls, parameter: str, value: Any, minimum: Any = None, maximum: Any = None):
        if minimum is not None and maximum is not None:
            bounds = f"between {minimum} and {maximum}"
        elif minimum is not None:
            bounds = f"at least {minimum}"
        else:
            bounds = f"at most {maximum}"
        return cls(f"Parameter '{parameter}' must be {bounds}, got {value!r}", parameter)


class MissingParameterError(InvalidArgumentError):
    """A required builder field was never set."""

    def __init__(self, parameter: str):
        super().__init__(f"Missing required parameter: {parameter}", parameter)


class ReadOnlyCollectionError(InvalidArgumentError):
    """A mutating operation was attempted on a frozen collection."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation}: collection is read-only")
        self.operation = operation


class RequestValidationError(QBittorrentError):
    """A request failed validation; ``result`` holds every error and warning."""

    def __init__(self, result, message: Optional[str] = None):
        self.result = result
        first = result.get_first_error()
        if message is None:
            message = f"Request validation failed: {first}" if first else "Request validation failed"
        super().__init__(message)

    @property
    def errors(self) -> List[str]:
        return self.result.get_errors()

    @property
    def warnings(self) -> List[str]:
        return self.result.get_warnings()


class HydrationError(QBittorrentError):
    """Raw API data could not be converted into a model."""

    def __init__(self, message: str, index: Optional[int] = None):
        if index is not None:
            message = f"Item {index}: {message}"
        super().__init__(message)
        self.index = index


class TransportError(QBittorrentError):
    """Base class for failures while talking to the Web API."""


class NetworkError(TransportError):
    """The Web API could not be reached."""


class ApiError(TransportError):
    """The Web API answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """Login was rejected or the session is not authorized."""
