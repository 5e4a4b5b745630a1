"""Utility modules for the Replicate client."""

from replicate_client.utils.exceptions import (
    DecodeError,
    NotFoundError,
    PredictionCanceledError,
    PredictionError,
    PredictionFailedError,
    ReplicateClientError,
    RequestError,
    ValidationError,
)

__all__ = [
    "ReplicateClientError",
    "ValidationError",
    "RequestError",
    "NotFoundError",
    "DecodeError",
    "PredictionError",
    "PredictionFailedError",
    "PredictionCanceledError",
]
