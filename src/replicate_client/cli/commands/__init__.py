"""CLI commands for the Replicate client."""

from replicate_client.cli.commands.common import CLISettings
from replicate_client.cli.commands.prediction_commands import (
    predictions_cancel,
    predictions_get,
    predictions_list,
    predictions_wait,
    run,
)
from replicate_client.cli.commands.resource_commands import (
    account,
    collections_get,
    collections_list,
    deployments_create,
    deployments_delete,
    deployments_get,
    deployments_list,
    deployments_predict,
    deployments_update,
    models_get,
    models_search,
    trainings_cancel,
    trainings_create,
    trainings_get,
    trainings_list,
    webhooks_secret,
)

__all__ = [
    "CLISettings",
    "run",
    "predictions_get",
    "predictions_list",
    "predictions_cancel",
    "predictions_wait",
    "deployments_list",
    "deployments_get",
    "deployments_create",
    "deployments_update",
    "deployments_delete",
    "deployments_predict",
    "trainings_list",
    "trainings_get",
    "trainings_create",
    "trainings_cancel",
    "collections_list",
    "collections_get",
    "models_get",
    "models_search",
    "account",
    "webhooks_secret",
]
