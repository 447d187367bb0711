"""
Account addresses and the hashes behind them.

Addresses are the base58check form of a 20-byte AccountID; the codec
itself comes from xrpl-py.
"""

import hashlib

from xrpl.core.addresscodec import (
    XRPLAddressCodecException,
    decode_classic_address,
    encode_classic_address,
)
from xrpl.core.keypairs import derive_classic_address

from rippletx.errors import InvalidAccount

ACCOUNT_ID_LENGTH = 20


def sha512_half(data: bytes) -> bytes:
    """First 32 bytes of SHA-512."""
    return hashlib.sha512(data).digest()[:32]


def account_id_from_public_key(public_key: bytes) -> bytes:
    """RIPEMD160(SHA256(public_key))."""
    return decode_classic_address(derive_classic_address(public_key.hex()))


def encode_account_id(account_id: bytes) -> str:
    """Encode a 20-byte AccountID as an ``r...`` address."""
    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise InvalidAccount(
            f"AccountID must be {ACCOUNT_ID_LENGTH} bytes, got {len(account_id)}"
        )
    return encode_classic_address(bytes(account_id))


def decode_account_id(address: str) -> bytes:
    """
    Decode an ``r...`` address into its 20-byte AccountID.

    Raises:
        InvalidAccount: If the address is malformed
    """
    if not address or not address.strip():
        raise InvalidAccount("Empty account address")
    try:
        account_id = decode_classic_address(address.strip())
    except (XRPLAddressCodecException, ValueError) as e:
        raise InvalidAccount(f"Invalid account address {address!r}: {e}")

    if len(account_id) != ACCOUNT_ID_LENGTH:
        raise InvalidAccount(f"Invalid account address {address!r}: wrong length")
    return account_id


def is_valid_address(address: str) -> bool:
    try:
        decode_account_id(address)
    except InvalidAccount:
        return False
    return True
