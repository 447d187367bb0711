"""
Abstract interface for transaction submission.

Defines the contract every submission transport implements. Submission
is a single attempt: one request, one reply or a timeout.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from rippletx.errors import TransportError


@dataclass(frozen=True)
class SubmitResult:
    """
    The network's provisional verdict on a submitted transaction.

    Attributes:
        engine_result: Result code, e.g. tesSUCCESS or tecPATH_DRY
        engine_result_message: Human readable explanation
        raw: Full result object as returned by the server
    """
    engine_result: str
    engine_result_message: str
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_success(self) -> bool:
        return self.engine_result == "tesSUCCESS"

    def __str__(self) -> str:
        return f"{self.engine_result}: {self.engine_result_message}"


def parse_submit_result(result: Mapping[str, Any]) -> SubmitResult:
    """
    Interpret a rippled ``submit`` result object.

    Engine results are returned verbatim whatever their class; only
    request-level errors become TransportError.

    Raises:
        TransportError: If the server rejected the request itself or the
            reply is not an object
    """
    if not isinstance(result, Mapping):
        raise TransportError(
            f"Malformed submit result: expected an object, got {type(result).__name__}"
        )
    if result.get("status") == "error" or "error" in result:
        error = result.get("error")
        message = result.get("error_message") or result.get("error_exception") or error
        raise TransportError(f"Submission rejected: {message}", error_code=error)

    engine_result = result.get("engine_result")
    if not engine_result:
        raise TransportError("Submission reply carried no engine result")

    return SubmitResult(
        engine_result=engine_result,
        engine_result_message=result.get("engine_result_message", ""),
        raw=dict(result),
    )


class SubmissionInterface(ABC):
    """
    Abstract interface for handing signed transactions to the network.

    Implementations open one connection, send one request and wait for
    one reply; there are no retries.
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the server.

        Raises:
            TransportError: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""
        pass

    @abstractmethod
    async def submit(self, tx_blob: bytes) -> SubmitResult:
        """
        Submit a signed transaction.

        Args:
            tx_blob: Canonical signed transaction bytes

        Returns:
            The engine result reported by the server

        Raises:
            TransportError: If the server is unreachable, times out, or
                rejects the request
        """
        pass

    async def __aenter__(self) -> "SubmissionInterface":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()
