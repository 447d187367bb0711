"""
ripple-tx

Creates, signs and submits Payment and TrustSet transactions for the
Ripple network. Transactions are built from caller input, signed with a
key derived from a seed, encoded to their canonical binary form, and
optionally handed to a rippled server.
"""

__version__ = "0.1.0"

from rippletx.tx.models import Payment, Transaction, TransactionType, TrustSet, TxStatus
from rippletx.tx.builder import PaymentParams, TransactionBuilder, TrustSetParams
from rippletx.tx.signer import TransactionSigner
from rippletx.tx.encoder import EncodedTransaction, TransactionEncoder

__all__ = [
    "EncodedTransaction",
    "Payment",
    "PaymentParams",
    "Transaction",
    "TransactionBuilder",
    "TransactionEncoder",
    "TransactionSigner",
    "TransactionType",
    "TrustSet",
    "TrustSetParams",
    "TxStatus",
]
