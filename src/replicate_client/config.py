"""Configuration for the Replicate client.

Values resolve in this order: CLI option, YAML profile, environment (including
a ``.env`` file), built-in default. The API token is never read from a
profile so profile files can be committed.

Example ``replicate-client.yaml``::

    profiles:
      staging:
        base_url: https://staging.example.com/v1/
        timeout: 10
        poll_interval: 0.5
"""

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml
from dotenv import load_dotenv

from replicate_client.client import DEFAULT_BASE_URL, ReplicateClient
from replicate_client.types import DEFAULT_POLL_INTERVAL
from replicate_client.utils.exceptions import ValidationError

CONFIG_FILENAMES = (
    "replicate-client.yaml",
    "replicate.yaml",
    "replicate-client.yml",
    "replicate.yml",
)

# setting name -> (environment variable, default)
SETTINGS = {
    "api_token": ("REPLICATE_API_TOKEN", None),
    "base_url": ("REPLICATE_BASE_URL", DEFAULT_BASE_URL),
    "timeout": ("REPLICATE_TIMEOUT", "30"),
    "poll_interval": ("REPLICATE_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL)),
}

PROFILE_SETTINGS = frozenset({"base_url", "timeout", "poll_interval"})


def search_upwards(filenames: Iterable[str], start: Optional[Path] = None) -> Optional[Path]:
    """Return the first of ``filenames`` found in ``start`` or its parents."""
    filenames = tuple(filenames)
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for filename in filenames:
            candidate = candidate_dir / filename
            if candidate.is_file():
                return candidate
    return None


def read_profile(name: str, config_file: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read one profile from a YAML config file.

    Args:
        name: Profile name under the ``profiles`` section
        config_file: Explicit file, otherwise searched from the current directory

    Returns:
        Profile settings (empty for an empty profile)

    Raises:
        FileNotFoundError: If no config file exists
        KeyError: If the file has no ``profiles`` section or no such profile
    """
    path = Path(config_file) if config_file else search_upwards(CONFIG_FILENAMES)
    if path is None or not path.is_file():
        raise FileNotFoundError(
            "Config file not found. Create replicate-client.yaml or replicate.yaml, "
            "or specify --config-file"
        )

    with open(path, "r", encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    profiles = document.get("profiles")
    if not isinstance(profiles, dict):
        raise KeyError(f"{path.name} must contain a 'profiles' section")
    if name not in profiles:
        raise KeyError(
            f"Profile '{name}' not found in {path.name}. "
            f"Available profiles: {', '.join(profiles)}"
        )
    return profiles[name] or {}


class ReplicateConfig:
    """Resolved client settings from CLI options, a profile and the environment."""

    def __init__(
        self,
        env_file: Optional[str] = None,
        profile: Optional[str] = None,
        config_file: Optional[str] = None,
    ):
        """Load the environment and, when given, a profile.

        Args:
            env_file: Path to .env file (default: nearest .env in current dir or parents)
            profile: Profile name to load from the YAML config
            config_file: Path to YAML config file (default: searched like .env)
        """
        dotenv_path = Path(env_file) if env_file else search_upwards([".env"])
        if dotenv_path:
            load_dotenv(dotenv_path=dotenv_path)

        self.profile = profile
        self.profile_config: Dict[str, Any] = read_profile(profile, config_file) if profile else {}

    def get(self, setting: str, cli_value: Any = None) -> Optional[str]:
        """Resolve one setting.

        Args:
            setting: One of ``api_token``, ``base_url``, ``timeout``, ``poll_interval``
            cli_value: Value given on the command line, if any

        Returns:
            The setting as a string, or None when unset and without default
        """
        env_var, default = SETTINGS[setting]

        if cli_value is not None:
            return str(cli_value)
        if setting in PROFILE_SETTINGS and setting in self.profile_config:
            return str(self.profile_config[setting])
        return os.getenv(env_var, default)

    def get_api_token(self, cli_value: Optional[str] = None) -> Optional[str]:
        """Get the API token.

        Args:
            cli_value: Value from CLI --api-token option

        Returns:
            API token or None
        """
        return self.get("api_token", cli_value)

    def get_base_url(self, cli_value: Optional[str] = None) -> str:
        """Get the API base URL.

        Args:
            cli_value: Value from CLI --base-url option

        Returns:
            Base URL (default: https://api.replicate.com/v1/)
        """
        return self.get("base_url", cli_value)

    def get_timeout(self, cli_value: Optional[float] = None) -> float:
        """Get the per-request timeout.

        Args:
            cli_value: Timeout in seconds from the CLI

        Returns:
            Timeout in seconds (default: 30)

        Raises:
            ValidationError: If the configured value is not a number
        """
        return self._number("timeout", cli_value)

    def get_poll_interval(self, cli_value: Optional[float] = None) -> float:
        """Get the seconds between prediction status polls.

        Args:
            cli_value: Value from CLI --interval option

        Returns:
            Poll interval in seconds (default: 1)

        Raises:
            ValidationError: If the configured value is not a number
        """
        return self._number("poll_interval", cli_value)

    def _number(self, setting: str, cli_value: Optional[float]) -> float:
        value = self.get(setting, cli_value)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid {setting} value: {value!r}")

    def create_client(
        self,
        api_token: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> ReplicateClient:
        """Build a client from the resolved configuration.

        Args:
            api_token: API token from CLI (overrides .env)
            base_url: Base URL from CLI (overrides profile and .env)

        Returns:
            ReplicateClient

        Raises:
            ValidationError: If no API token is configured
        """
        token = self.get_api_token(api_token)
        if not token:
            raise ValidationError(
                "API token is required. Provide --api-token or set REPLICATE_API_TOKEN in .env file."
            )

        return ReplicateClient(
            token,
            base_url=self.get_base_url(base_url),
            timeout=self.get_timeout(),
        )
