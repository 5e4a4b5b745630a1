"""Prediction commands for the Replicate CLI."""

import click

from replicate_client.cli.commands.common import (
    CLISettings,
    echo_result,
    get_client,
    handle_errors,
    parse_inputs,
)
from replicate_client.types import RunOptions, WaitOptions


def _progress_printer(prediction):
    click.echo(f"  {prediction.id}: {prediction.status}", err=True)


@click.command("run")
@click.argument("model")
@click.option(
    "-i",
    "--input",
    "inputs",
    multiple=True,
    help="Model input as KEY=VALUE (repeatable). Values are parsed as JSON when possible",
)
@click.option(
    "--input-json",
    help="Model input as a JSON object (e.g., '{\"prompt\": \"a cat\"}')",
)
@click.option(
    "--webhook",
    help="URL to receive prediction updates",
)
@click.option(
    "--webhook-event",
    "webhook_events",
    multiple=True,
    type=click.Choice(["start", "output", "logs", "completed"]),
    help="Webhook event to send (repeatable)",
)
@click.option(
    "--prefer-wait",
    is_flag=True,
    help="Ask the API to hold the initial response until the prediction is further along. "
    "Polls at the default 1s interval; cannot be combined with --interval",
)
@click.option(
    "--interval",
    type=float,
    help="Seconds between status polls (or set REPLICATE_POLL_INTERVAL, default: 1)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(),
    help="Save output JSON to file instead of printing it",
)
@click.pass_context
@handle_errors
def run(ctx, model, inputs, input_json, webhook, webhook_events, prefer_wait, interval, output):
    """Run a model and wait for its output.

    \b
    MODEL: owner/name or owner/name:version

    \b
    Examples:
        # Latest version of a model
        replicate-client run stability-ai/sdxl -i prompt="an astronaut"

        # Pinned version, faster polling
        replicate-client run owner/model:5c7d5dc6 --input-json '{"steps": 20}' --interval 0.5
    """
    settings = ctx.find_object(CLISettings) or CLISettings()
    if prefer_wait and interval is not None:
        raise click.UsageError("--prefer-wait polls at the default interval; drop --interval")
    client = get_client(ctx)

    options = RunOptions(
        input=parse_inputs(inputs, input_json),
        webhook=webhook,
        webhook_events_filter=list(webhook_events) or None,
    )
    if prefer_wait:
        options.wait = True
    else:
        options.wait = WaitOptions(interval=settings.config.get_poll_interval(interval))

    if settings.verbose:
        click.echo(f"Running {model}", err=True)

    result = client.run(
        model,
        options,
        progress=_progress_printer if settings.verbose else None,
    )
    echo_result(result, output)


@click.command("get")
@click.argument("prediction_id")
@click.pass_context
@handle_errors
def predictions_get(ctx, prediction_id):
    """Show a prediction."""
    echo_result(get_client(ctx).get_prediction(prediction_id))


@click.command("list")
@click.pass_context
@handle_errors
def predictions_list(ctx):
    """List recent predictions."""
    echo_result(get_client(ctx).list_predictions())


@click.command("cancel")
@click.argument("prediction_id")
@click.pass_context
@handle_errors
def predictions_cancel(ctx, prediction_id):
    """Cancel a running prediction."""
    echo_result(get_client(ctx).cancel_prediction(prediction_id))


@click.command("wait")
@click.argument("prediction_id")
@click.option(
    "--interval",
    type=float,
    help="Seconds between status polls (or set REPLICATE_POLL_INTERVAL, default: 1)",
)
@click.pass_context
@handle_errors
def predictions_wait(ctx, prediction_id, interval):
    """Wait for a prediction to finish and show it.

    Failed and canceled predictions are printed, not treated as errors.
    """
    settings = ctx.find_object(CLISettings) or CLISettings()
    client = get_client(ctx)

    prediction = client.get_prediction(prediction_id)
    prediction = client.wait(
        prediction,
        WaitOptions(interval=settings.config.get_poll_interval(interval)),
        progress=_progress_printer if settings.verbose else None,
    )
    echo_result(prediction)
