"""
Transaction Signer - handles transaction signing.

Derives the signing key from the configured seed, fills in the sender
fields of a built transaction, and applies a single signature over its
canonical signing payload.
"""

from typing import Optional, Union

import structlog

from rippletx.codec.serializer import signing_data
from rippletx.config import TxConfig
from rippletx.crypto.keys import KeyAlgorithm, KeyPair, Seed, derive_keypair
from rippletx.errors import EncodingError, MissingSeed, SigningError
from rippletx.tx.models import Transaction

logger = structlog.get_logger(__name__)


class TransactionSigner:
    """
    Signs transactions with a key derived from a seed.

    The key is resolved once, from the configuration or explicitly, and
    is read-only afterwards.
    """

    def __init__(self, config: TxConfig, keypair: Optional[KeyPair] = None):
        """
        Initialize the transaction signer.

        Args:
            config: Invocation configuration (fee, sequence, expiry defaults)
            keypair: Pre-derived key; load_from_config() derives one otherwise
        """
        self.config = config
        self._keypair = keypair

    def load_key_from_seed(
        self,
        seed: Union[Seed, str, bytes],
        account_index: int = 0,
        algorithm: Union[str, KeyAlgorithm, None] = None,
    ) -> KeyPair:
        """
        Derive and hold the signing key for a seed.

        Raises:
            InvalidSeed: If the seed cannot be decoded
            UnsupportedAlgorithm: If the algorithm is not recognised
        """
        self._keypair = derive_keypair(seed, account_index, algorithm)
        logger.info(
            "signing_key_loaded",
            algorithm=self._keypair.algorithm.value,
            address=self._keypair.address,
        )
        return self._keypair

    def load_from_config(self) -> KeyPair:
        """
        Load the signing key from configuration.

        Raises:
            MissingSeed: If no seed is configured
        """
        return self.load_key_from_seed(
            self.config.require_seed(),
            self.config.account_index,
            self.config.algorithm,
        )

    @property
    def keypair(self) -> Optional[KeyPair]:
        return self._keypair

    @property
    def address(self) -> Optional[str]:
        return self._keypair.address if self._keypair else None

    @property
    def is_loaded(self) -> bool:
        return self._keypair is not None

    def sign_transaction(
        self,
        tx: Transaction,
        sequence: Optional[int] = None,
        fee: Optional[int] = None,
        last_ledger_sequence: Optional[int] = None,
        keypair: Optional[KeyPair] = None,
    ) -> Transaction:
        """
        Sign a built transaction in place and seal it.

        Sender fields are set in order: Account, Sequence, Fee,
        LastLedgerSequence, SigningPubKey, then an empty TxnSignature
        placeholder. The signing payload is the single-signer prefix
        followed by the canonical serialization of every signing field.

        Args:
            tx: Transaction in the BUILT state
            sequence: Sequence number (config value if omitted)
            fee: Fee in drops (config value if omitted)
            last_ledger_sequence: Expiry ledger (config value if omitted; 0 means none)
            keypair: Key to sign with instead of the loaded one

        Returns:
            The same transaction, signed and sealed

        Raises:
            MissingSeed: If no key is loaded
            SigningError: If the record is already signed, the key does not
                match its algorithm, or serialization fails
        """
        keypair = keypair or self._keypair
        if keypair is None:
            raise MissingSeed()
        if tx.is_sealed:
            raise SigningError("Transaction is already signed")

        missing = tx.missing_fields()
        if missing:
            raise SigningError(f"Transaction is missing required fields: {', '.join(missing)}")

        expiry = last_ledger_sequence if last_ledger_sequence is not None else self.config.expiry

        tx.account = keypair.account_id
        tx.sequence = sequence if sequence is not None else self.config.sequence
        tx.fee = fee if fee is not None else self.config.fee
        if expiry:
            tx.last_ledger_sequence = expiry
        tx.signing_pub_key = keypair.public_key
        tx.txn_signature = b""

        try:
            payload = signing_data(tx.to_json())
        except EncodingError as e:
            raise SigningError(f"Failed to serialize transaction for signing: {e}")

        tx.txn_signature = keypair.sign(payload)
        tx.seal()

        logger.info(
            "transaction_signed",
            transaction_type=tx.TRANSACTION_TYPE.value,
            account=keypair.address,
            sequence=tx.sequence,
            fee=tx.fee,
        )
        return tx
