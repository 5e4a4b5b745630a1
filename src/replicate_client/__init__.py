"""Replicate Client - HTTP API client for the Replicate inference platform."""

__version__ = "0.1.0"

from replicate_client.auth import AuthHandler, BearerTokenAuth
from replicate_client.client import ReplicateClient
from replicate_client.hooks import ErrorLoggingClient, log_errors
from replicate_client.types import (
    Account,
    Collection,
    Deployment,
    Model,
    ModelReference,
    ModelVersion,
    Page,
    Prediction,
    PredictionStatus,
    RunOptions,
    RunResult,
    Training,
    WaitOptions,
    WebhookSigningSecret,
)

__all__ = [
    "__version__",
    # Client
    "ReplicateClient",
    # Authentication
    "AuthHandler",
    "BearerTokenAuth",
    # Error logging
    "ErrorLoggingClient",
    "log_errors",
    # Options
    "RunOptions",
    "WaitOptions",
    "ModelReference",
    # Results
    "RunResult",
    "Prediction",
    "PredictionStatus",
    "Model",
    "ModelVersion",
    "Deployment",
    "Training",
    "Collection",
    "Account",
    "WebhookSigningSecret",
    "Page",
]
