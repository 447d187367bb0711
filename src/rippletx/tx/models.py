"""
Transaction records.

Transactions form a closed set of variants sharing a common base record.
Each variant declares the network fields it carries, the option names
that map to its flag bits, and which of its fields are required. Every
mapped field has a known JSON shape, checked when a variant class is
defined.
"""

from dataclasses import FrozenInstanceError, dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type

from rippletx.codec.amount import Amount, IssuedAmount, NativeAmount, amount_from_json
from rippletx.codec.paths import PathSet
from rippletx.crypto.addresses import decode_account_id, encode_account_id
from rippletx.errors import EncodingError, RippleTxError


class TransactionType(str, Enum):
    """Supported transaction types."""
    PAYMENT = "Payment"
    TRUST_SET = "TrustSet"


class TxStatus(str, Enum):
    """Lifecycle of a transaction record."""
    BUILT = "built"           # Fields assembled and validated
    SIGNED = "signed"         # Signature applied, record sealed
    ENCODED = "encoded"       # Canonical bytes and hash produced
    SUBMITTED = "submitted"   # Network returned an engine result


# Payment flags
TF_NO_DIRECT_RIPPLE = 0x00010000
TF_PARTIAL_PAYMENT = 0x00020000
TF_LIMIT_QUALITY = 0x00040000

# TrustSet flags
TF_SETF_AUTH = 0x00010000
TF_SET_NO_RIPPLE = 0x00020000
TF_CLEAR_NO_RIPPLE = 0x00040000
TF_SET_FREEZE = 0x00100000
TF_CLEAR_FREEZE = 0x00200000

QUALITY_SCALE = 1_000_000_000
UINT32_MAX = 0xFFFFFFFF


class FieldKind(str, Enum):
    """JSON shape of a network field."""
    UINT32 = "uint32"
    HASH256 = "hash256"
    BLOB = "blob"
    ACCOUNT = "account"
    AMOUNT = "amount"
    DROPS = "drops"
    PATH_SET = "path_set"


FIELD_KINDS: Dict[str, FieldKind] = {
    "NetworkID": FieldKind.UINT32,
    "Flags": FieldKind.UINT32,
    "SourceTag": FieldKind.UINT32,
    "Sequence": FieldKind.UINT32,
    "DestinationTag": FieldKind.UINT32,
    "QualityIn": FieldKind.UINT32,
    "QualityOut": FieldKind.UINT32,
    "LastLedgerSequence": FieldKind.UINT32,
    "TicketSequence": FieldKind.UINT32,
    "AccountTxnID": FieldKind.HASH256,
    "InvoiceID": FieldKind.HASH256,
    "Amount": FieldKind.AMOUNT,
    "LimitAmount": FieldKind.AMOUNT,
    "SendMax": FieldKind.AMOUNT,
    "DeliverMin": FieldKind.AMOUNT,
    "Fee": FieldKind.DROPS,
    "SigningPubKey": FieldKind.BLOB,
    "TxnSignature": FieldKind.BLOB,
    "Account": FieldKind.ACCOUNT,
    "Destination": FieldKind.ACCOUNT,
    "Paths": FieldKind.PATH_SET,
}


def _uint32(value: Any) -> int:
    if not isinstance(value, int) or not 0 <= value <= UINT32_MAX:
        raise EncodingError(f"Expected a 32-bit unsigned integer, got {value!r}")
    return value


def _hash256(value: Any) -> bytes:
    raw = bytes.fromhex(value)
    if len(raw) != 32:
        raise EncodingError(f"Expected a 256-bit hash, got {len(raw)} bytes")
    return raw


def _drops(value: Any) -> int:
    amount = amount_from_json(value)
    if not isinstance(amount, NativeAmount):
        raise EncodingError("Fee must be a native amount")
    return amount.drops


_TO_JSON: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.UINT32: lambda v: v,
    FieldKind.HASH256: lambda v: v.hex().upper(),
    FieldKind.BLOB: lambda v: v.hex().upper(),
    FieldKind.ACCOUNT: encode_account_id,
    FieldKind.AMOUNT: lambda v: v.to_json(),
    FieldKind.DROPS: lambda v: str(v),
    FieldKind.PATH_SET: lambda v: v.to_json(),
}

_FROM_JSON: Dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.UINT32: _uint32,
    FieldKind.HASH256: _hash256,
    FieldKind.BLOB: bytes.fromhex,
    FieldKind.ACCOUNT: decode_account_id,
    FieldKind.AMOUNT: amount_from_json,
    FieldKind.DROPS: _drops,
    FieldKind.PATH_SET: PathSet.from_json,
}

BASE_FIELD_MAP: Dict[str, str] = {
    "account": "Account",
    "sequence": "Sequence",
    "fee": "Fee",
    "flags": "Flags",
    "last_ledger_sequence": "LastLedgerSequence",
    "source_tag": "SourceTag",
    "network_id": "NetworkID",
    "ticket_sequence": "TicketSequence",
    "account_txn_id": "AccountTxnID",
    "signing_pub_key": "SigningPubKey",
    "txn_signature": "TxnSignature",
}


@dataclass
class Transaction:
    """
    Fields common to every transaction type.

    The record is mutable while it is being built and signed; the signer
    seals it, after which attribute assignment raises. Fields left as
    None are absent from the encoding.

    Attributes:
        account: 20-byte AccountID of the sender
        sequence: Replay counter supplied by the caller
        fee: Fee in drops
        flags: Flags bitmask
        last_ledger_sequence: Highest ledger the transaction may appear in
        source_tag: Sender-defined tag
        network_id: Chain the transaction is bound to
        ticket_sequence: Ticket consumed in place of a sequence number
        account_txn_id: 32-byte hash the sender's previous transaction must match
        signing_pub_key: Public key of the signer
        txn_signature: Signature; empty placeholder while signing
    """

    TRANSACTION_TYPE: ClassVar[TransactionType]
    FLAGS: ClassVar[Dict[str, int]] = {}
    FIELD_MAP: ClassVar[Dict[str, str]] = {}
    REQUIRED: ClassVar[Tuple[str, ...]] = ()
    _variants: ClassVar[Dict[TransactionType, Type["Transaction"]]] = {}

    account: Optional[bytes] = None
    sequence: Optional[int] = None
    fee: Optional[int] = None
    flags: Optional[int] = None
    last_ledger_sequence: Optional[int] = None
    source_tag: Optional[int] = None
    network_id: Optional[int] = None
    ticket_sequence: Optional[int] = None
    account_txn_id: Optional[bytes] = None
    signing_pub_key: Optional[bytes] = None
    txn_signature: Optional[bytes] = None

    _sealed: bool = field(default=False, init=False, repr=False, compare=False)

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        for attribute, name in cls.field_map().items():
            if name not in FIELD_KINDS:
                raise TypeError(f"{cls.__name__}.{attribute} maps to unknown field {name}")
        for attribute in cls.REQUIRED:
            if attribute not in cls.FIELD_MAP:
                raise TypeError(f"{cls.__name__} requires undeclared field {attribute}")
        Transaction._variants[cls.TRANSACTION_TYPE] = cls

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_sealed", False):
            raise FrozenInstanceError(f"cannot assign to field {name!r} of a signed transaction")
        super().__setattr__(name, value)

    @classmethod
    def field_map(cls) -> Dict[str, str]:
        return {**BASE_FIELD_MAP, **cls.FIELD_MAP}

    @property
    def transaction_type(self) -> TransactionType:
        return self.TRANSACTION_TYPE

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def is_signed(self) -> bool:
        return self._sealed and bool(self.txn_signature)

    @property
    def status(self) -> TxStatus:
        return TxStatus.SIGNED if self.is_signed else TxStatus.BUILT

    def seal(self) -> None:
        object.__setattr__(self, "_sealed", True)

    def missing_fields(self) -> List[str]:
        """Network names of required fields that are not set."""
        return [self.FIELD_MAP[a] for a in self.REQUIRED if getattr(self, a) is None]

    def flag_names(self) -> List[str]:
        return [name for name, bit in self.FLAGS.items() if (self.flags or 0) & bit]

    def to_json(self) -> Dict[str, Any]:
        """All currently-set fields in network JSON form, keyed by field name."""
        data: Dict[str, Any] = {"TransactionType": self.TRANSACTION_TYPE.value}
        for attribute, name in self.field_map().items():
            value = getattr(self, attribute)
            if value is None:
                continue
            data[name] = _TO_JSON[FIELD_KINDS[name]](value)
        return {name: data[name] for name in sorted(data)}

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Transaction":
        """
        Rebuild a transaction record from network JSON.

        Raises:
            EncodingError: For unsupported types, fields foreign to the type,
                or values of the wrong shape
        """
        data = dict(data)
        name = data.pop("TransactionType", None)
        try:
            variant = cls._variants[TransactionType(name)]
        except (ValueError, KeyError):
            raise EncodingError(f"Unsupported transaction type: {name!r}")

        attributes = {field_name: a for a, field_name in variant.field_map().items()}
        values: Dict[str, Any] = {}
        for field_name, value in data.items():
            if field_name not in attributes:
                raise EncodingError(
                    f"Field {field_name} is not valid for {variant.TRANSACTION_TYPE.value}"
                )
            try:
                values[attributes[field_name]] = _FROM_JSON[FIELD_KINDS[field_name]](value)
            except (RippleTxError, ValueError, TypeError, AttributeError) as e:
                raise EncodingError(f"Invalid {field_name}: {e}")

        return variant(**values)


@dataclass
class Payment(Transaction):
    """
    Payment of native or issued currency.

    Attributes:
        destination: 20-byte AccountID of the recipient
        amount: Amount to deliver
        send_max: Maximum the sender is willing to spend
        deliver_min: Minimum a partial payment must deliver
        paths: Routing hints for cross-currency payments
        destination_tag: Recipient-defined tag
        invoice_id: 32-byte invoice hash
    """

    TRANSACTION_TYPE = TransactionType.PAYMENT
    FLAGS = {
        "nodirect": TF_NO_DIRECT_RIPPLE,
        "partial": TF_PARTIAL_PAYMENT,
        "limit": TF_LIMIT_QUALITY,
    }
    FIELD_MAP = {
        "destination": "Destination",
        "amount": "Amount",
        "send_max": "SendMax",
        "deliver_min": "DeliverMin",
        "paths": "Paths",
        "destination_tag": "DestinationTag",
        "invoice_id": "InvoiceID",
    }
    REQUIRED = ("destination", "amount")

    destination: Optional[bytes] = None
    amount: Optional[Amount] = None
    send_max: Optional[Amount] = None
    deliver_min: Optional[Amount] = None
    paths: Optional[PathSet] = None
    destination_tag: Optional[int] = None
    invoice_id: Optional[bytes] = None


@dataclass
class TrustSet(Transaction):
    """
    Create or modify a trust line.

    Attributes:
        limit_amount: Trust limit, issuer being the counterparty
        quality_in: Incoming quality, ratio scaled by 1e9
        quality_out: Outgoing quality, ratio scaled by 1e9
    """

    TRANSACTION_TYPE = TransactionType.TRUST_SET
    FLAGS = {
        "auth": TF_SETF_AUTH,
        "noripple": TF_SET_NO_RIPPLE,
        "clear-noripple": TF_CLEAR_NO_RIPPLE,
        "freeze": TF_SET_FREEZE,
        "clear-freeze": TF_CLEAR_FREEZE,
    }
    FIELD_MAP = {
        "limit_amount": "LimitAmount",
        "quality_in": "QualityIn",
        "quality_out": "QualityOut",
    }
    REQUIRED = ("limit_amount",)

    limit_amount: Optional[IssuedAmount] = None
    quality_in: Optional[int] = None
    quality_out: Optional[int] = None
