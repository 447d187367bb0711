"""
Network submission layer.

Hands signed transactions to a rippled server. Supports the WebSocket
and JSON-RPC APIs.
"""

from rippletx.node.interface import SubmissionInterface, SubmitResult
from rippletx.node.jsonrpc import RippledJsonRpcAdapter
from rippletx.node.websocket import RippledWebSocketAdapter

__all__ = [
    "RippledJsonRpcAdapter",
    "RippledWebSocketAdapter",
    "SubmissionInterface",
    "SubmitResult",
]
