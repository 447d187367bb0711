"""
Output Router - delivers encoded transactions.

Writes the encoded form to the selected outputs and optionally hands it
to the network through a submission adapter.
"""

import json
import sys
from typing import BinaryIO, Optional, TextIO

import structlog

from rippletx.config import SubmitTransport, TxConfig
from rippletx.errors import TransportError
from rippletx.node.interface import SubmissionInterface, SubmitResult
from rippletx.node.jsonrpc import RippledJsonRpcAdapter
from rippletx.node.websocket import RippledWebSocketAdapter
from rippletx.tx.encoder import EncodedTransaction

logger = structlog.get_logger(__name__)


def create_submitter(config: TxConfig) -> SubmissionInterface:
    """Submission adapter for the configured transport."""
    if config.submit_transport == SubmitTransport.JSONRPC:
        return RippledJsonRpcAdapter(config)
    return RippledWebSocketAdapter(config)


class OutputRouter:
    """
    Routes an encoded transaction to stdout and the network.

    Output modes:
        default: ``Hash: <HEX>`` and ``Raw: <HEX>`` lines, then JSON
        binary: raw canonical bytes only
        json: JSON only (takes precedence over binary)
    """

    def __init__(
        self,
        config: TxConfig,
        submitter: Optional[SubmissionInterface] = None,
        text_stream: Optional[TextIO] = None,
        binary_stream: Optional[BinaryIO] = None,
    ):
        """
        Initialize the output router.

        Args:
            config: Invocation configuration (output mode and transport)
            submitter: Submission adapter; built from config when needed
            text_stream: Destination for text output (stdout by default)
            binary_stream: Destination for binary output (stdout by default)
        """
        self.config = config
        self._submitter = submitter
        self._text_stream = text_stream
        self._binary_stream = binary_stream

    @property
    def text_stream(self) -> TextIO:
        return self._text_stream or sys.stdout

    @property
    def binary_stream(self) -> BinaryIO:
        return self._binary_stream or sys.stdout.buffer

    @property
    def submitter(self) -> SubmissionInterface:
        if self._submitter is None:
            self._submitter = create_submitter(self.config)
        return self._submitter

    def emit(self, encoded: EncodedTransaction) -> None:
        """Write the encoded transaction in the configured output mode."""
        binary = self.config.output_binary
        as_json = self.config.output_json

        if not as_json:
            if binary:
                self.binary_stream.write(encoded.blob)
                self.binary_stream.flush()
            else:
                self.text_stream.write(f"Hash: {encoded.hash_hex}\nRaw: {encoded.blob_hex}\n")

        if as_json or not binary:
            self.text_stream.write(json.dumps(encoded.to_json(), separators=(",", ":")) + "\n")

        self.text_stream.flush()

    async def submit(self, encoded: EncodedTransaction) -> SubmitResult:
        """
        Submit once and report the engine result verbatim.

        Provisional failure codes are reported, not raised; only a transport
        failure fails the submission.

        Raises:
            TransportError: If the network could not be reached or refused
                the request; the error is also attached to ``encoded``
        """
        try:
            async with self.submitter as submitter:
                result = await submitter.submit(encoded.blob)
        except TransportError as e:
            encoded.mark_failed(str(e))
            logger.error(
                "transaction_submit_failed",
                hash=encoded.hash_hex,
                error=str(e),
                error_code=e.error_code,
            )
            raise

        encoded.mark_submitted(result)
        logger.info(
            "transaction_submitted",
            hash=encoded.hash_hex,
            engine_result=result.engine_result,
        )
        self.text_stream.write(f"{result.engine_result}: {result.engine_result_message}\n")
        self.text_stream.flush()
        return result

    async def route(self, encoded: EncodedTransaction) -> Optional[SubmitResult]:
        """Emit, then submit when configured to."""
        self.emit(encoded)
        if self.config.submit:
            return await self.submit(encoded)
        return None
