"""
rippled WebSocket adapter.

Submits transactions with the ``submit`` command over a WebSocket
connection.
"""

import asyncio
import json
import uuid
from typing import Any, Dict, Optional

import structlog
import websockets

from rippletx.config import TxConfig
from rippletx.errors import TransportError
from rippletx.node.interface import SubmissionInterface, SubmitResult, parse_submit_result

logger = structlog.get_logger(__name__)


class RippledWebSocketAdapter(SubmissionInterface):
    """
    WebSocket submission adapter.

    Implements the SubmissionInterface using rippled's WebSocket API.
    """

    def __init__(self, config: TxConfig, url: Optional[str] = None):
        """
        Initialize the WebSocket adapter.

        Args:
            config: Invocation configuration
            url: Endpoint override; defaults to config.websocket_url
        """
        self.config = config
        self.url = url or config.websocket_url
        self.timeout = config.submit_timeout_seconds
        self._ws = None

    async def connect(self) -> None:
        """Establish WebSocket connection to rippled."""
        if self._ws is not None:
            return

        try:
            self._ws = await websockets.connect(self.url, open_timeout=self.timeout)
            logger.info("websocket_connected", url=self.url)
        except Exception as e:
            raise TransportError(f"Failed to connect to {self.url}: {e}")

    async def disconnect(self) -> None:
        """Close WebSocket connection."""
        if self._ws is not None:
            await self._ws.close()
            self._ws = None
            logger.info("websocket_disconnected", url=self.url)

    async def _await_response(self, request_id: str) -> Dict[str, Any]:
        async for message in self._ws:
            data = json.loads(message)
            if not isinstance(data, dict):
                logger.debug("websocket_message_ignored", message_type=type(data).__name__)
                continue
            if data.get("id") == request_id:
                return data
            logger.debug("websocket_message_ignored", message_type=data.get("type"))
        raise TransportError("Connection closed before a reply was received")

    async def _request(self, command: str, params: Optional[dict] = None) -> Dict[str, Any]:
        """Send one command and wait for its reply."""
        if self._ws is None:
            await self.connect()

        request_id = str(uuid.uuid4())
        request = {"id": request_id, "command": command}
        if params:
            request.update(params)

        try:
            await self._ws.send(json.dumps(request))
            return await asyncio.wait_for(self._await_response(request_id), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"Timed out waiting for {command} reply from {self.url}")
        except TransportError:
            raise
        except Exception as e:
            raise TransportError(f"{command} request failed: {e}")

    async def submit(self, tx_blob: bytes) -> SubmitResult:
        """Submit a signed transaction."""
        response = await self._request("submit", {"tx_blob": tx_blob.hex().upper()})

        if response.get("status") == "error":
            error = response.get("error")
            message = response.get("error_message") or response.get("error_exception") or error
            raise TransportError(f"Submission rejected: {message}", error_code=error)

        result = parse_submit_result(response.get("result", {}))
        logger.info("tx_submitted_websocket", engine_result=result.engine_result)
        return result
