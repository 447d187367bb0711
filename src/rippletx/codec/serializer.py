"""
Canonical binary serialization.

Transactions travel between this package and the binary codec in their
network JSON form. Encoding orders fields canonically; the signing form
additionally drops fields the signature does not cover and carries the
single-signer prefix.
"""

from typing import Any, Dict, Mapping, Union

from xrpl.constants import XRPLException
from xrpl.core import binarycodec

from rippletx.crypto.addresses import sha512_half
from rippletx.errors import EncodingError

HASH_PREFIX_TRANSACTION_ID = bytes.fromhex("54584E00")  # TXN\0

# Errors the codec raises on values or bytes it cannot handle
CODEC_ERRORS = (XRPLException, ValueError, TypeError, KeyError, IndexError, OverflowError)


def serialize(tx_json: Mapping[str, Any]) -> bytes:
    """
    Serialize network JSON in canonical order.

    Raises:
        EncodingError: For unknown fields or values of the wrong shape
    """
    try:
        return bytes.fromhex(binarycodec.encode(dict(tx_json)))
    except CODEC_ERRORS as e:
        raise EncodingError(f"Cannot encode transaction: {e}")


def signing_data(tx_json: Mapping[str, Any]) -> bytes:
    """The exact byte sequence a single signer signs."""
    try:
        return bytes.fromhex(binarycodec.encode_for_signing(dict(tx_json)))
    except CODEC_ERRORS as e:
        raise EncodingError(f"Cannot encode transaction for signing: {e}")


def deserialize(blob: Union[bytes, str]) -> Dict[str, Any]:
    """
    Parse canonical bytes back into network JSON.

    Raises:
        EncodingError: On truncated or malformed input
    """
    blob_hex = blob if isinstance(blob, str) else bytes(blob).hex()
    try:
        return binarycodec.decode(blob_hex)
    except CODEC_ERRORS as e:
        raise EncodingError(f"Cannot decode transaction: {e}")


def transaction_hash(blob: bytes) -> bytes:
    """Content hash identifying a signed transaction."""
    return sha512_half(HASH_PREFIX_TRANSACTION_ID + blob)
