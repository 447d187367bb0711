"""
Transaction Encoder - produces the canonical signed form.

Encodes signed transactions to their network bytes, content hash and
JSON representation, and decodes previously signed blobs back into
sealed transaction records.
"""

import binascii
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import structlog

from rippletx.codec.serializer import deserialize, serialize, signing_data, transaction_hash
from rippletx.crypto.keys import verify_signature
from rippletx.errors import EncodingError
from rippletx.node.interface import SubmitResult
from rippletx.tx.models import Transaction, TxStatus

logger = structlog.get_logger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass
class EncodedTransaction:
    """
    A signed transaction in its network form.

    Attributes:
        transaction: The sealed record
        blob: Canonical signed bytes
        hash: SHA512-half of the transaction-ID prefix and the blob
        status: ENCODED, or SUBMITTED once the network replied
        submit_result: Engine result from submission
        error: Transport error message from a failed submission
    """
    transaction: Transaction
    blob: bytes
    hash: bytes
    status: TxStatus = TxStatus.ENCODED
    submit_result: Optional[SubmitResult] = None
    error: Optional[str] = field(default=None)

    @property
    def blob_hex(self) -> str:
        return self.blob.hex().upper()

    @property
    def hash_hex(self) -> str:
        return self.hash.hex().upper()

    def to_json(self) -> Dict[str, Any]:
        data = self.transaction.to_json()
        data["hash"] = self.hash_hex
        return data

    def mark_submitted(self, result: SubmitResult) -> None:
        self.status = TxStatus.SUBMITTED
        self.submit_result = result
        self.error = None

    def mark_failed(self, error: str) -> None:
        # The encoding stays valid, only the hand-off failed
        self.error = error


def _coerce_blob(data: Union[bytes, str]) -> bytes:
    """Accept raw bytes, hex bytes or hex text."""
    if isinstance(data, str):
        text = data.strip()
    else:
        stripped = bytes(data).strip()
        try:
            text = stripped.decode("ascii")
        except UnicodeDecodeError:
            return bytes(data)
        if not text or not set(text) <= _HEX_DIGITS:
            return bytes(data)

    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Input is not valid hex: {e}")


class TransactionEncoder:
    """
    Converts between signed transaction records and network bytes.
    """

    def encode(self, tx: Transaction) -> EncodedTransaction:
        """
        Encode a signed transaction.

        Args:
            tx: Transaction in the SIGNED state

        Returns:
            EncodedTransaction with blob, hash and JSON

        Raises:
            EncodingError: If the transaction is unsigned or cannot be serialized
        """
        if not tx.is_signed:
            raise EncodingError("Only signed transactions can be encoded")

        blob = serialize(tx.to_json())
        encoded = EncodedTransaction(transaction=tx, blob=blob, hash=transaction_hash(blob))

        logger.info(
            "transaction_encoded",
            transaction_type=tx.TRANSACTION_TYPE.value,
            hash=encoded.hash_hex,
            size=len(blob),
        )
        return encoded

    def decode(self, data: Union[bytes, str]) -> Transaction:
        """
        Decode a previously signed transaction.

        Args:
            data: Canonical signed bytes, or their hex text

        Returns:
            The sealed transaction record

        Raises:
            EncodingError: If the input is empty, malformed, unsigned, does
                not re-encode to the same bytes, or its signature does not verify
        """
        blob = _coerce_blob(data)
        if not blob:
            raise EncodingError("No transaction data supplied")

        tx_json = deserialize(blob)
        if not tx_json.get("TxnSignature") or not tx_json.get("SigningPubKey"):
            raise EncodingError("Transaction is not signed")

        tx = Transaction.from_json(tx_json)
        if serialize(tx.to_json()) != blob:
            raise EncodingError("Transaction is not in canonical form")
        if not verify_signature(tx.signing_pub_key, signing_data(tx.to_json()), tx.txn_signature):
            raise EncodingError("Transaction signature does not verify")
        tx.seal()

        logger.info(
            "transaction_decoded",
            transaction_type=tx.TRANSACTION_TYPE.value,
            size=len(blob),
        )
        return tx
