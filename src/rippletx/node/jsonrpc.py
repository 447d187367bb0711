"""
rippled JSON-RPC adapter.

Submits transactions with the ``submit`` method over HTTP.
"""

from typing import Any, Optional

import httpx
import structlog

from rippletx.config import TxConfig
from rippletx.errors import TransportError
from rippletx.node.interface import SubmissionInterface, SubmitResult, parse_submit_result

logger = structlog.get_logger(__name__)


class RippledJsonRpcAdapter(SubmissionInterface):
    """
    JSON-RPC submission adapter.

    Implements the SubmissionInterface using rippled's HTTP JSON-RPC API.
    """

    def __init__(
        self,
        config: TxConfig,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the JSON-RPC adapter.

        Args:
            config: Invocation configuration
            url: Endpoint override; defaults to config.jsonrpc_url
            transport: Custom httpx transport
        """
        self.config = config
        self.url = url or config.jsonrpc_url
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> dict:
        return {"Content-Type": "application/json"}

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return

        self._client = httpx.AsyncClient(
            headers=self.headers,
            timeout=self.config.submit_timeout_seconds,
            transport=self._transport,
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, params: dict) -> Any:
        """Make one JSON-RPC call."""
        if not self._client:
            await self.connect()

        try:
            response = await self._client.post(
                self.url,
                json={"method": method, "params": [params]},
            )
        except httpx.TimeoutException:
            raise TransportError(f"Timed out waiting for {method} reply from {self.url}")
        except httpx.RequestError as e:
            raise TransportError(f"Failed to reach {self.url}: {e}")

        if response.status_code != 200:
            logger.error(
                "jsonrpc_request_failed",
                method=method,
                status=response.status_code,
            )
            raise TransportError(
                f"{method} request failed with HTTP {response.status_code}: {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Malformed {method} reply: {e}")

    async def submit(self, tx_blob: bytes) -> SubmitResult:
        """Submit a signed transaction."""
        data = await self._request("submit", {"tx_blob": tx_blob.hex().upper()})
        if not isinstance(data, dict):
            raise TransportError(
                f"Malformed submit reply: expected an object, got {type(data).__name__}"
            )
        result = parse_submit_result(data.get("result", {}))
        logger.info("tx_submitted_jsonrpc", engine_result=result.engine_result)
        return result
