"""
Binary codec module.

Amounts, path sets and the canonical transaction encoding.
"""

from rippletx.codec.amount import Amount, IssuedAmount, NativeAmount, parse_amount
from rippletx.codec.paths import PathSet, PathStep, parse_paths
from rippletx.codec.serializer import deserialize, serialize, signing_data, transaction_hash

__all__ = [
    "Amount",
    "IssuedAmount",
    "NativeAmount",
    "PathSet",
    "PathStep",
    "deserialize",
    "parse_amount",
    "parse_paths",
    "serialize",
    "signing_data",
    "transaction_hash",
]
