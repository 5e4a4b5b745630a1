"""Custom exceptions for the Replicate client."""

from typing import Any, Optional


class ReplicateClientError(Exception):
    """Base exception for all Replicate client errors."""

    pass


class ValidationError(ReplicateClientError):
    """Raised when a model identifier or request option is invalid."""

    pass


class RequestError(ReplicateClientError):
    """Raised when an HTTP request fails or the API returns a non-2xx status.

    The underlying ``requests`` exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(RequestError):
    """Raised when the API answers 404 for an endpoint."""

    def __init__(self, path: str):
        super().__init__(
            f"Endpoint not found: {path}. Please check the API documentation "
            f"for available endpoints.",
            status_code=404,
        )
        self.path = path


class DecodeError(ReplicateClientError):
    """Raised when a response body is not valid JSON."""

    pass


class PredictionError(ReplicateClientError):
    """Raised when a prediction ends in a terminal state other than succeeded."""

    def __init__(self, message: str, prediction: Any = None):
        super().__init__(message)
        self.prediction = prediction


class PredictionFailedError(PredictionError):
    """Raised when a prediction reaches the ``failed`` status."""

    pass


class PredictionCanceledError(PredictionError):
    """Raised when a prediction reaches the ``canceled`` status."""

    pass
