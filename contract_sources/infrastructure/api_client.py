"""HTTP implementation of the Fetcher port."""

from typing import Dict, Optional

import httpx

from ..application.domain import Fetcher

from .base_client import BaseClient
from .decorators import translate_transport_errors


class HttpSourceFetcher(BaseClient, Fetcher):
    """A fetcher that calls the explorer's `getsourcecode` endpoint over HTTP."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key_env: str,
        base_url: str,
        timeout: float,
        chain_id: Optional[int] = None,
    ):
        """Initializes the fetcher adapter."""
        super().__init__(client, api_key_env)
        self.endpoint = base_url
        self.timeout = timeout
        self.chain_id = chain_id

    def _build_params(self, address: str) -> Dict[str, str]:
        """Builds the query string for one `getsourcecode` call."""
        params = {
            "module": "contract",
            "action": "getsourcecode",
            "address": address,
            "apikey": self.api_key(),
        }
        if self.chain_id:
            params["chainid"] = str(self.chain_id)
        return params

    @translate_transport_errors
    async def _execute_fetch(self, params: Dict[str, str]) -> bytes:
        """Executes the raw HTTP GET request."""
        response = await self.client.get(
            self.endpoint,
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.content

    async def fetch(self, address: str) -> bytes:
        """
        Fetches the raw `getsourcecode` response body for one address.

        This method serves as the public contract fulfillment for the
        Fetcher port. The body is returned undecoded.

        Args:
            address: The contract address.

        Returns:
            The raw response body.

        Raises:
            TransportError: If the request fails or returns an HTTP error.
        """

        self.logger.info(f"Fetching verified source for {address}...")

        raw = await self._execute_fetch(self._build_params(address))

        self.logger.info(f"Received {len(raw)} bytes for {address}")

        return raw
