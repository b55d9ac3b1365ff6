"""Base class for async HTTP clients."""

import logging
import os

import httpx

from ..application.exceptions import ConfigurationError


class BaseClient:
    """A base client that handles an async client and API key lookup."""

    def __init__(self, client: httpx.AsyncClient, api_key_env: str):
        """
        Initializes the base client.

        Args:
            client: An instance of httpx.AsyncClient.
            api_key_env: Name of the environment variable holding the API key.

        Raises:
            ConfigurationError: If no environment variable name is configured.
        """

        if not api_key_env:
            raise ConfigurationError(
                f"No API key environment variable configured for "
                f"{self.__class__.__name__}. Please check your config files."
            )

        self.client = client
        self.api_key_env = api_key_env
        self.logger = logging.getLogger(self.__class__.__name__)

    def api_key(self) -> str:
        """
        Reads the API key at call time.

        A missing variable yields an empty key; the explorer then rejects the
        request, which surfaces as a RemoteError further up.
        """
        key = os.environ.get(self.api_key_env, "")
        if not key:
            self.logger.warning(
                f"{self.api_key_env} is not set; the explorer will likely "
                f"reject the request."
            )
        return key
