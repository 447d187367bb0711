"""
Native and issued-currency amounts.

Native amounts are whole drops. Issued amounts carry a decimal value,
a currency code and an issuing account. Values must fit the network's
normalized form: 16 significant digits and an exponent between -96
and 80.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple, Union

from rippletx.crypto.addresses import decode_account_id, encode_account_id
from rippletx.errors import InvalidAccount, InvalidAmount, ValueOutOfRange

MAX_NATIVE_DROPS = 10 ** 17
DROPS_PER_XRP = 10 ** 6

MIN_MANTISSA = 10 ** 15
MAX_MANTISSA = 10 ** 16 - 1
MIN_EXPONENT = -96
MAX_EXPONENT = 80

ISO_CURRENCY_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789?!@#$%^&*<>(){}[]|"
)
HEX_CURRENCY_LENGTH = 40
HEX_CURRENCY_CHARS = frozenset("0123456789ABCDEF")
NATIVE_CURRENCY = "XRP"


def is_valid_currency(code: str) -> bool:
    """
    Check a currency code.

    Accepts ``XRP``, three-character ISO-style codes and 40 uppercase hex characters.
    """
    if code == NATIVE_CURRENCY:
        return True
    if len(code) == 3:
        return all(c in ISO_CURRENCY_CHARS for c in code)
    if len(code) == HEX_CURRENCY_LENGTH:
        return all(c in HEX_CURRENCY_CHARS for c in code)
    return False


def check_currency(code: str) -> str:
    """
    Raises:
        InvalidAmount: If the code is malformed
    """
    if not is_valid_currency(code):
        raise InvalidAmount(f"Invalid currency code: {code!r}")
    return code


def _parse_decimal(text: str) -> Decimal:
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise InvalidAmount(f"Invalid amount value: {text!r}")
    if not value.is_finite():
        raise InvalidAmount(f"Invalid amount value: {text!r}")
    if value < 0:
        raise ValueOutOfRange(f"Amount must not be negative: {text}")
    return value


def normalize_issued_value(value: Decimal) -> Tuple[int, int]:
    """
    Convert a positive decimal to its normalized (mantissa, exponent) pair.

    Raises:
        ValueOutOfRange: On precision loss or exponent overflow/underflow
    """
    _, digits, exponent = value.as_tuple()
    mantissa = int("".join(str(d) for d in digits))

    while mantissa and mantissa % 10 == 0:
        mantissa //= 10
        exponent += 1
    if mantissa > MAX_MANTISSA:
        raise ValueOutOfRange(f"Issued amount {value} exceeds 16 significant digits")
    while mantissa < MIN_MANTISSA:
        mantissa *= 10
        exponent -= 1

    if exponent > MAX_EXPONENT:
        raise ValueOutOfRange(f"Issued amount {value} is too large")
    if exponent < MIN_EXPONENT:
        raise ValueOutOfRange(f"Issued amount {value} is too small")
    return mantissa, exponent


def format_issued_value(value: Decimal) -> str:
    """Render an issued value the way rippled prints it."""
    if value.is_zero():
        return "0"
    mantissa, exponent = normalize_issued_value(value)
    if exponent != 0 and (exponent < -25 or exponent > -5):
        return f"{mantissa}e{exponent}"
    return format(Decimal(mantissa).scaleb(exponent).normalize(), "f")


class Amount(ABC):
    """An amount of either the native currency or an issued currency."""

    @property
    @abstractmethod
    def is_native(self) -> bool:
        pass

    @abstractmethod
    def to_json(self) -> Any:
        pass

    @abstractmethod
    def to_text(self) -> str:
        pass


@dataclass(frozen=True)
class NativeAmount(Amount):
    """Native currency amount in drops."""
    drops: int

    def __post_init__(self):
        if not 0 <= self.drops <= MAX_NATIVE_DROPS:
            raise ValueOutOfRange(f"Native amount out of range: {self.drops} drops")

    @property
    def is_native(self) -> bool:
        return True

    def to_json(self) -> str:
        return str(self.drops)

    def to_text(self) -> str:
        return str(self.drops)


@dataclass(frozen=True)
class IssuedAmount(Amount):
    """
    Issued currency amount.

    Attributes:
        value: Non-negative decimal value
        currency: Three-character code or 40 hex characters
        issuer: 20-byte AccountID of the issuer
    """
    value: Decimal
    currency: str
    issuer: bytes

    def __post_init__(self):
        if self.value < 0:
            raise ValueOutOfRange(f"Amount must not be negative: {self.value}")
        if self.currency == NATIVE_CURRENCY:
            raise InvalidAmount("XRP cannot be used as an issued currency")
        if len(self.issuer) != 20:
            raise InvalidAccount("Issuer must be a 20-byte AccountID")
        check_currency(self.currency)
        if not self.value.is_zero():
            normalize_issued_value(self.value)

    @property
    def is_native(self) -> bool:
        return False

    @property
    def issuer_address(self) -> str:
        return encode_account_id(self.issuer)

    def to_json(self) -> dict:
        return {
            "currency": self.currency,
            "issuer": self.issuer_address,
            "value": format_issued_value(self.value),
        }

    def to_text(self) -> str:
        return f"{format_issued_value(self.value)}/{self.currency}/{self.issuer_address}"


def parse_amount(text: str) -> Amount:
    """
    Parse amount text.

    Accepted forms:
        ``100``                 100 drops
        ``1.5/XRP``             1.5 XRP (1500000 drops)
        ``10/USD/r...``         10 USD issued by r...

    Raises:
        InvalidAmount: If the text is malformed
        InvalidAccount: If the issuer address is malformed
        ValueOutOfRange: If the value is negative or out of range
    """
    if text is None or not text.strip():
        raise InvalidAmount("Empty amount")

    parts = [p.strip() for p in text.strip().split("/")]

    if len(parts) == 1:
        value = _parse_decimal(parts[0])
        if value != value.to_integral_value():
            raise ValueOutOfRange(
                f"Native amounts are whole drops, got {parts[0]}; use <value>/XRP for XRP units"
            )
        return NativeAmount(int(value))

    if len(parts) == 2:
        if parts[1] != NATIVE_CURRENCY:
            raise InvalidAmount(f"Issued amount {text!r} requires an issuer")
        drops = _parse_decimal(parts[0]) * DROPS_PER_XRP
        if drops != drops.to_integral_value():
            raise ValueOutOfRange(f"XRP amount {parts[0]} has more than 6 decimal places")
        return NativeAmount(int(drops))

    if len(parts) == 3:
        value = _parse_decimal(parts[0])
        if parts[1] == NATIVE_CURRENCY:
            raise InvalidAmount(f"XRP amounts take no issuer: {text!r}")
        return IssuedAmount(value, parts[1], decode_account_id(parts[2]))

    raise InvalidAmount(f"Invalid amount: {text!r}")


def to_amount(value: Union[str, Amount, None]) -> Union[Amount, None]:
    """Parse text amounts and pass Amount instances through."""
    if value is None or isinstance(value, Amount):
        return value
    return parse_amount(value)


def amount_from_json(value: Any) -> Amount:
    """
    Rebuild an amount from its network JSON form.

    Native amounts are drop strings; issued amounts are objects with
    ``currency``, ``issuer`` and ``value``.

    Raises:
        InvalidAmount: If the value has neither shape
        InvalidAccount: If the issuer is malformed
        ValueOutOfRange: If the value is negative or out of range
    """
    if isinstance(value, str):
        return NativeAmount(int(_parse_decimal(value)))
    if isinstance(value, dict) and {"currency", "issuer", "value"} <= set(value):
        return IssuedAmount(
            _parse_decimal(value["value"]),
            value["currency"],
            decode_account_id(value["issuer"]),
        )
    raise InvalidAmount(f"Unsupported amount: {value!r}")
