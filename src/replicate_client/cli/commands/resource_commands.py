"""Deployment, training, collection, model, account and webhook commands."""

import click

from replicate_client.cli.commands.common import (
    echo_result,
    get_client,
    handle_errors,
    parse_inputs,
    parse_json_option,
)
from replicate_client.types import ModelReference, RunOptions


# Deployments


@click.command("list")
@click.pass_context
@handle_errors
def deployments_list(ctx):
    """List deployments owned by the account."""
    echo_result(get_client(ctx).list_deployments())


@click.command("get")
@click.argument("owner")
@click.argument("name")
@click.pass_context
@handle_errors
def deployments_get(ctx, owner, name):
    """Show a deployment."""
    echo_result(get_client(ctx).get_deployment(owner, name))


@click.command("create")
@click.option("--data", "data_json", required=True, help="Deployment definition as a JSON object")
@click.pass_context
@handle_errors
def deployments_create(ctx, data_json):
    """Create a deployment.

    \b
    Example:
        replicate-client deployments create --data \\
            '{"name": "my-app", "model": "owner/model", "version": "5c7d...",
              "hardware": "gpu-t4", "min_instances": 0, "max_instances": 1}'
    """
    echo_result(get_client(ctx).create_deployment(parse_json_option(data_json, "--data")))


@click.command("update")
@click.argument("owner")
@click.argument("name")
@click.option("--data", "data_json", required=True, help="Fields to update as a JSON object")
@click.pass_context
@handle_errors
def deployments_update(ctx, owner, name, data_json):
    """Update a deployment."""
    echo_result(
        get_client(ctx).update_deployment(owner, name, parse_json_option(data_json, "--data"))
    )


@click.command("delete")
@click.argument("owner")
@click.argument("name")
@click.confirmation_option(prompt="Delete this deployment?")
@click.pass_context
@handle_errors
def deployments_delete(ctx, owner, name):
    """Delete a deployment."""
    get_client(ctx).delete_deployment(owner, name)
    click.echo(click.style(f"✓ Deleted deployment {owner}/{name}", fg="green"))


@click.command("predict")
@click.argument("owner")
@click.argument("name")
@click.option("-i", "--input", "inputs", multiple=True, help="Model input as KEY=VALUE (repeatable)")
@click.option("--input-json", help="Model input as a JSON object")
@click.option("--webhook", help="URL to receive prediction updates")
@click.pass_context
@handle_errors
def deployments_predict(ctx, owner, name, inputs, input_json, webhook):
    """Create a prediction on a deployment without waiting for it."""
    options = RunOptions(input=parse_inputs(inputs, input_json), webhook=webhook)
    echo_result(get_client(ctx).create_deployment_prediction(owner, name, options))


# Trainings


@click.command("list")
@click.pass_context
@handle_errors
def trainings_list(ctx):
    """List trainings."""
    echo_result(get_client(ctx).list_trainings())


@click.command("get")
@click.argument("training_id")
@click.pass_context
@handle_errors
def trainings_get(ctx, training_id):
    """Show a training."""
    echo_result(get_client(ctx).get_training(training_id))


@click.command("create")
@click.argument("model")
@click.option("--data", "data_json", required=True, help="Training request as a JSON object")
@click.pass_context
@handle_errors
def trainings_create(ctx, model, data_json):
    """Start a training from a model version.

    \b
    MODEL: owner/name:version

    \b
    Example:
        replicate-client trainings create owner/model:5c7d5dc6 --data \\
            '{"destination": "me/my-model", "input": {"train_data": "https://..."}}'
    """
    ref = ModelReference.parse(model)
    if not ref.version:
        raise click.UsageError("Trainings need a model version: owner/name:version")

    echo_result(
        get_client(ctx).create_training(
            ref.owner, ref.name, ref.version, parse_json_option(data_json, "--data")
        )
    )


@click.command("cancel")
@click.argument("training_id")
@click.pass_context
@handle_errors
def trainings_cancel(ctx, training_id):
    """Cancel a training."""
    get_client(ctx).cancel_training(training_id)
    click.echo(click.style(f"✓ Canceled training {training_id}", fg="green"))


# Collections


@click.command("list")
@click.pass_context
@handle_errors
def collections_list(ctx):
    """List collections."""
    echo_result(get_client(ctx).list_collections())


@click.command("get")
@click.argument("slug")
@click.pass_context
@handle_errors
def collections_get(ctx, slug):
    """Show a collection and its models."""
    echo_result(get_client(ctx).get_collection(slug))


# Models


@click.command("get")
@click.argument("model")
@click.pass_context
@handle_errors
def models_get(ctx, model):
    """Show a model.

    \b
    MODEL: owner/name
    """
    ref = ModelReference.parse(model)
    echo_result(get_client(ctx).get_model(ref.owner, ref.name))


@click.command("search")
@click.argument("query")
@click.pass_context
@handle_errors
def models_search(ctx, query):
    """Search public models."""
    echo_result(get_client(ctx).search_models(query))


# Account and webhooks


@click.command("account")
@click.pass_context
@handle_errors
def account(ctx):
    """Show the account that owns the API token."""
    echo_result(get_client(ctx).get_current_account())


@click.command("secret")
@click.pass_context
@handle_errors
def webhooks_secret(ctx):
    """Show the webhook signing secret."""
    echo_result(get_client(ctx).get_webhook_signing_secret())
