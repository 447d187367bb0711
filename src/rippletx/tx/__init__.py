"""
Transaction module.

Handles transaction construction, signing, encoding, and delivery.
"""

from rippletx.tx.builder import PaymentParams, TransactionBuilder, TrustSetParams
from rippletx.tx.encoder import EncodedTransaction, TransactionEncoder
from rippletx.tx.router import OutputRouter
from rippletx.tx.signer import TransactionSigner

__all__ = [
    "EncodedTransaction",
    "OutputRouter",
    "PaymentParams",
    "TransactionBuilder",
    "TransactionEncoder",
    "TransactionSigner",
    "TrustSetParams",
]
