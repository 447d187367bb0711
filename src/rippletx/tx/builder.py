"""
Transaction Builder - assembles unsigned transactions.

Turns caller input into validated transaction records. All validation
happens here, before any key material is touched.
"""

import operator
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from functools import reduce
from typing import Dict, Iterable, Optional, Sequence, Union

import structlog

from rippletx.codec.amount import Amount, IssuedAmount, to_amount
from rippletx.codec.paths import parse_paths
from rippletx.crypto.addresses import decode_account_id, sha512_half
from rippletx.errors import (
    ConfigurationError,
    InvalidAmount,
    MissingRequiredField,
    ValueOutOfRange,
)
from rippletx.tx.models import QUALITY_SCALE, Payment, Transaction, TrustSet

logger = structlog.get_logger(__name__)

UINT32_MAX = 0xFFFFFFFF

QualityInput = Union[float, int, str, Decimal]


@dataclass
class PaymentParams:
    """Caller input for a payment."""
    destination: Optional[str] = None
    amount: Optional[Union[str, Amount]] = None
    paths: Optional[str] = None
    send_max: Optional[Union[str, Amount]] = None
    destination_tag: Optional[int] = None
    invoice_id: Optional[str] = None
    options: Sequence[str] = ()


@dataclass
class TrustSetParams:
    """Caller input for a trust line change."""
    limit_amount: Optional[Union[str, Amount]] = None
    quality_in: QualityInput = 1.0
    quality_out: QualityInput = 1.0
    options: Sequence[str] = ()


def fold_flags(table: Dict[str, int], options: Iterable[str], transaction_type: str) -> int:
    """
    OR together the flag bits for the selected option names.

    Raises:
        ConfigurationError: If an option is not in the table
    """
    bits = []
    for option in options:
        if option not in table:
            raise ConfigurationError(
                f"Unknown {transaction_type} option {option!r}; "
                f"expected one of {', '.join(sorted(table))}"
            )
        bits.append(table[option])
    return reduce(operator.or_, bits, 0)


def scale_quality(value: QualityInput) -> int:
    """
    Convert a quality ratio to its wire integer (ratio x 1e9, truncated).

    Raises:
        ConfigurationError: If the value is not a number
        ValueOutOfRange: If the scaled value does not fit in 32 bits
    """
    try:
        ratio = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"Invalid quality: {value!r}")
    if not ratio.is_finite():
        raise ConfigurationError(f"Invalid quality: {value!r}")

    scaled = int((ratio * QUALITY_SCALE).to_integral_value(rounding=ROUND_DOWN))
    if not 0 <= scaled <= UINT32_MAX:
        raise ValueOutOfRange(f"Quality {value} out of range")
    return scaled


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransactionBuilder:
    """
    Builds unsigned transactions from caller input.

    Each build method validates eagerly and returns a record in the
    BUILT state, ready for the signer.
    """

    def build(self, params: Union[PaymentParams, TrustSetParams]) -> Transaction:
        if isinstance(params, PaymentParams):
            return self.build_payment(params)
        if isinstance(params, TrustSetParams):
            return self.build_trust_set(params)
        raise ConfigurationError(f"Unsupported transaction parameters: {type(params).__name__}")

    def build_payment(self, params: PaymentParams) -> Payment:
        """
        Build a payment.

        Args:
            params: Payment input

        Returns:
            Unsigned Payment

        Raises:
            MissingRequiredField: If destination or amount is absent
            ConfigurationError: For malformed accounts, amounts, paths or options
            ValueOutOfRange: For out-of-range values
        """
        if _is_blank(params.destination):
            raise MissingRequiredField("Destination", Payment.TRANSACTION_TYPE.value)
        if _is_blank(params.amount):
            raise MissingRequiredField("Amount", Payment.TRANSACTION_TYPE.value)

        payment = Payment(
            destination=decode_account_id(params.destination.strip()),
            amount=to_amount(params.amount),
            flags=fold_flags(Payment.FLAGS, params.options, Payment.TRANSACTION_TYPE.value),
        )

        if not _is_blank(params.send_max):
            payment.send_max = to_amount(params.send_max)

        if not _is_blank(params.paths):
            payment.paths = parse_paths(params.paths)

        if params.destination_tag is not None:
            if not 0 <= params.destination_tag <= UINT32_MAX:
                raise ValueOutOfRange(f"Destination tag out of range: {params.destination_tag}")
            payment.destination_tag = params.destination_tag

        if not _is_blank(params.invoice_id):
            payment.invoice_id = sha512_half(params.invoice_id.encode("utf-8"))

        logger.info(
            "transaction_built",
            transaction_type=payment.TRANSACTION_TYPE.value,
            amount=payment.amount.to_text(),
            flags=f"{payment.flags:#010x}",
            paths=len(payment.paths) if payment.paths else 0,
        )
        return payment

    def build_trust_set(self, params: TrustSetParams) -> TrustSet:
        """
        Build a trust line change.

        Args:
            params: TrustSet input

        Returns:
            Unsigned TrustSet

        Raises:
            MissingRequiredField: If the limit amount is absent
            InvalidAmount: If the limit is not an issued currency amount
            ValueOutOfRange: For out-of-range limits or qualities
        """
        if _is_blank(params.limit_amount):
            raise MissingRequiredField("LimitAmount", TrustSet.TRANSACTION_TYPE.value)

        limit = to_amount(params.limit_amount)
        if not isinstance(limit, IssuedAmount):
            raise InvalidAmount("TrustSet limit must be an issued currency amount")

        trust_set = TrustSet(
            limit_amount=limit,
            quality_in=scale_quality(params.quality_in),
            quality_out=scale_quality(params.quality_out),
            flags=fold_flags(TrustSet.FLAGS, params.options, TrustSet.TRANSACTION_TYPE.value),
        )

        logger.info(
            "transaction_built",
            transaction_type=trust_set.TRANSACTION_TYPE.value,
            limit=limit.to_text(),
            flags=f"{trust_set.flags:#010x}",
        )
        return trust_set
