"""Main CLI entry point for the Replicate client."""

import logging

import click

from replicate_client import __version__
from replicate_client.cli import commands


@click.group()
@click.version_option(version=__version__, prog_name='replicate-client')
@click.option(
    "--api-token",
    help="Replicate API token (or set REPLICATE_API_TOKEN in .env)",
)
@click.option(
    "--base-url",
    help="API base URL (or set REPLICATE_BASE_URL in .env)",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True),
    help="Path to .env file (default: searches current dir and parents)",
)
@click.option(
    "--profile",
    help="Profile name from YAML config (e.g., prod, staging)",
)
@click.option(
    "--config-file",
    type=click.Path(exists=True),
    help="Path to YAML config file (default: replicate-client.yaml or replicate.yaml)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx, api_token, base_url, env_file, profile, config_file, verbose):
    """Replicate Client - run and manage models on Replicate.

    Credentials can be provided via CLI options or .env file.
    CLI options take precedence over .env values.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = commands.CLISettings(
        api_token=api_token,
        base_url=base_url,
        env_file=env_file,
        profile=profile,
        config_file=config_file,
        verbose=verbose,
    )


@cli.group()
def predictions():
    """Inspect, cancel and wait on predictions."""
    pass


predictions.add_command(commands.predictions_get)
predictions.add_command(commands.predictions_list)
predictions.add_command(commands.predictions_cancel)
predictions.add_command(commands.predictions_wait)


@cli.group()
def deployments():
    """Manage deployments and run predictions against them."""
    pass


deployments.add_command(commands.deployments_list)
deployments.add_command(commands.deployments_get)
deployments.add_command(commands.deployments_create)
deployments.add_command(commands.deployments_update)
deployments.add_command(commands.deployments_delete)
deployments.add_command(commands.deployments_predict)


@cli.group()
def trainings():
    """Create, inspect and cancel trainings."""
    pass


trainings.add_command(commands.trainings_list)
trainings.add_command(commands.trainings_get)
trainings.add_command(commands.trainings_create)
trainings.add_command(commands.trainings_cancel)


@cli.group()
def collections():
    """Browse model collections."""
    pass


collections.add_command(commands.collections_list)
collections.add_command(commands.collections_get)


@cli.group()
def models():
    """Look up and search models."""
    pass


models.add_command(commands.models_get)
models.add_command(commands.models_search)


@cli.group()
def webhooks():
    """Webhook utilities."""
    pass


webhooks.add_command(commands.webhooks_secret)


cli.add_command(commands.run)
cli.add_command(commands.account)


if __name__ == '__main__':
    cli()
