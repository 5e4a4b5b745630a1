"""Authentication handlers for the Replicate API."""

from typing import Dict


class AuthHandler:
    """Base class for authentication handlers."""

    def get_headers(self) -> Dict[str, str]:
        """Get authentication headers.

        Returns:
            Dictionary of headers to add to requests
        """
        raise NotImplementedError


class BearerTokenAuth(AuthHandler):
    """Static API token sent as a Bearer token."""

    def __init__(self, api_token: str):
        """Initialize with API token.

        Args:
            api_token: The Replicate API token
        """
        self.api_token = api_token

    def get_headers(self) -> Dict[str, str]:
        """Get headers with Bearer token.

        Returns:
            Headers with Authorization: Bearer <api_token>
        """
        return {"Authorization": f"Bearer {self.api_token}"}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_token='***')"
