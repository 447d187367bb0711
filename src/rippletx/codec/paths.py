"""
Payment path sets.

A path set is an ordered list of paths; each path is an ordered list of
hops. A hop names an intermediary account, a currency, an issuer, or a
currency/issuer pair.

Text form: paths are separated by ``,`` and hops by ``=>``. A hop is
``XRP``, an ``r...`` account, a currency code, or ``CUR/r...issuer``::

    rAccountA => USD/rIssuer => XRP, EUR/rIssuer2
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from rippletx.codec.amount import NATIVE_CURRENCY, check_currency, is_valid_currency
from rippletx.crypto.addresses import decode_account_id, encode_account_id, is_valid_address
from rippletx.errors import InvalidAccount, InvalidAmount, PathParseError

HOP_SEPARATOR = "=>"


@dataclass(frozen=True)
class PathStep:
    """One hop of a payment path."""
    account: Optional[bytes] = None
    currency: Optional[str] = None
    issuer: Optional[bytes] = None

    def __post_init__(self):
        if self.account is None and self.currency is None and self.issuer is None:
            raise InvalidAmount("Path step must name an account, currency or issuer")

    def to_json(self) -> dict:
        result = {}
        if self.account is not None:
            result["account"] = encode_account_id(self.account)
        if self.currency is not None:
            result["currency"] = self.currency
        if self.issuer is not None:
            result["issuer"] = encode_account_id(self.issuer)
        return result

    @classmethod
    def from_json(cls, data: Any) -> "PathStep":
        """
        Raises:
            InvalidAmount: If the hop is not an object or names a bad currency
            InvalidAccount: If an account or issuer is malformed
        """
        if not isinstance(data, dict):
            raise InvalidAmount(f"Path step must be an object, got {data!r}")
        account = data.get("account")
        currency = data.get("currency")
        issuer = data.get("issuer")
        return cls(
            account=decode_account_id(account) if account is not None else None,
            currency=check_currency(currency) if currency is not None else None,
            issuer=decode_account_id(issuer) if issuer is not None else None,
        )


Path = Tuple[PathStep, ...]


@dataclass(frozen=True)
class PathSet:
    """Ordered routing hints for a cross-currency payment."""
    paths: Tuple[Path, ...]

    def __len__(self) -> int:
        return len(self.paths)

    def to_json(self) -> List[List[dict]]:
        return [[step.to_json() for step in path] for path in self.paths]

    @classmethod
    def from_json(cls, data: Any) -> "PathSet":
        if not isinstance(data, list):
            raise InvalidAmount(f"Path set must be a list, got {data!r}")
        return cls(tuple(tuple(PathStep.from_json(step) for step in path) for path in data))


def parse_path_step(token: str) -> PathStep:
    """
    Parse one hop.

    Raises:
        PathParseError: Naming the offending token
    """
    token = token.strip()
    if not token:
        raise PathParseError(token, "empty path element")

    if "/" in token:
        currency, _, issuer = token.partition("/")
        try:
            check_currency(currency)
            issuer_id = decode_account_id(issuer)
        except (InvalidAmount, InvalidAccount) as e:
            raise PathParseError(token, str(e))
        return PathStep(currency=currency, issuer=issuer_id)

    if token == NATIVE_CURRENCY:
        return PathStep(currency=NATIVE_CURRENCY)

    if token.startswith("r") and is_valid_address(token):
        return PathStep(account=decode_account_id(token))

    if not is_valid_currency(token):
        raise PathParseError(token)
    return PathStep(currency=token)


def parse_path(text: str) -> Path:
    return tuple(parse_path_step(token) for token in text.split(HOP_SEPARATOR))


def parse_paths(text: str) -> PathSet:
    """
    Parse a comma separated list of paths.

    Raises:
        PathParseError: If any hop is malformed
    """
    if not text or not text.strip():
        raise PathParseError(text or "", "empty path set")
    return PathSet(tuple(parse_path(path_text) for path_text in text.split(",")))
