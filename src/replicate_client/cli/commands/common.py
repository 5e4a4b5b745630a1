"""Shared helpers for Replicate CLI commands."""

import dataclasses
import functools
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import click

from replicate_client.client import ReplicateClient
from replicate_client.config import ReplicateConfig
from replicate_client.utils.exceptions import (
    PredictionError,
    ReplicateClientError,
    RequestError,
    ValidationError,
)


@dataclass
class CLISettings:
    """Global options collected by the top-level command group."""

    api_token: Optional[str] = None
    base_url: Optional[str] = None
    env_file: Optional[str] = None
    profile: Optional[str] = None
    config_file: Optional[str] = None
    verbose: bool = False
    _config: Optional[ReplicateConfig] = field(default=None, repr=False, compare=False)

    @property
    def config(self) -> ReplicateConfig:
        if self._config is None:
            self._config = ReplicateConfig(
                self.env_file, profile=self.profile, config_file=self.config_file
            )
        return self._config


def create_client(settings: CLISettings) -> ReplicateClient:
    """Create a client with precedence CLI > Profile > .env."""
    return settings.config.create_client(settings.api_token, settings.base_url)


def get_client(ctx: click.Context) -> ReplicateClient:
    settings = ctx.find_object(CLISettings) or CLISettings()
    client = create_client(settings)
    if settings.verbose:
        click.echo(f"API URL: {client.base_url}", err=True)
    return client


def to_jsonable(result: Any) -> Any:
    """Convert client results to JSON-serializable data.

    Typed results are rendered from the API response they were built from.
    """
    if isinstance(result, list):
        return [to_jsonable(item) for item in result]
    raw = getattr(result, "raw", None)
    if raw:
        return raw
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return dataclasses.asdict(result)
    return result


def echo_result(result: Any, output: Optional[str] = None) -> None:
    """Print result as indented JSON, or save it when output is given."""
    text = json.dumps(to_jsonable(result), indent=2, default=str)
    if output:
        with open(output, "w") as f:
            f.write(text)
        click.echo(click.style(f"✓ Output saved to: {output}", fg="green"), err=True)
    else:
        click.echo(text)


def parse_json_option(value: Optional[str], option_name: str) -> Dict[str, Any]:
    """Parse a JSON object passed as a CLI option."""
    if not value:
        return {}
    try:
        data = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.UsageError(f"Invalid JSON in {option_name}: {e}")
    if not isinstance(data, dict):
        raise click.UsageError(f"{option_name} must be a JSON object")
    return data


def parse_inputs(pairs: Iterable[str], input_json: Optional[str] = None) -> Dict[str, Any]:
    """Build a model input mapping from ``key=value`` pairs.

    Values are decoded as JSON when possible (numbers, booleans, lists) and
    kept as strings otherwise. Pairs override keys from ``input_json``.

    Examples:
        ["prompt=a cat", "steps=20"] -> {"prompt": "a cat", "steps": 20}
    """
    inputs = parse_json_option(input_json, "--input-json")
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.UsageError(f"Invalid input '{pair}'. Use KEY=VALUE")
        try:
            inputs[key] = json.loads(value)
        except json.JSONDecodeError:
            inputs[key] = value
    return inputs


def handle_errors(func):
    """Report client errors in red and abort.

    Usage errors raised by click pass through unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        settings = ctx.find_object(CLISettings)
        verbose = settings.verbose if settings else False
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except ValidationError as e:
            click.echo(click.style(f"✗ Validation error: {e}", fg="red"), err=True)
            raise click.Abort()
        except PredictionError as e:
            click.echo(click.style(f"✗ Prediction error: {e}", fg="red"), err=True)
            raise click.Abort()
        except RequestError as e:
            click.echo(click.style(f"✗ Request error: {e}", fg="red"), err=True)
            raise click.Abort()
        except (ReplicateClientError, FileNotFoundError, KeyError) as e:
            click.echo(click.style(f"✗ Error: {e}", fg="red"), err=True)
            if verbose:
                raise
            raise click.Abort()

    return wrapper
