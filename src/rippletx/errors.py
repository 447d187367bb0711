"""
Error hierarchy for transaction construction, signing and submission.

Every error is terminal for an invocation; the CLI reports the message
and exits non-zero.
"""

from typing import Optional


class RippleTxError(Exception):
    """Base class for all ripple-tx errors."""
    pass


class ConfigurationError(RippleTxError):
    """Raised for missing or malformed caller input."""
    pass


class MissingSeed(ConfigurationError):
    """Raised when signing is requested without a seed."""

    def __init__(self, message: str = "A seed is required to sign transactions"):
        super().__init__(message)


class MissingRequiredField(ConfigurationError):
    """Raised when a transaction type's required field is absent."""

    def __init__(self, field_name: str, transaction_type: Optional[str] = None):
        self.field_name = field_name
        self.transaction_type = transaction_type
        where = f" for {transaction_type}" if transaction_type else ""
        super().__init__(f"Missing required field {field_name}{where}")


class InvalidSeed(ConfigurationError):
    """Raised when seed text fails checksum or version decoding."""
    pass


class InvalidAccount(ConfigurationError):
    """Raised when an account address cannot be decoded."""
    pass


class InvalidAmount(ConfigurationError):
    """Raised when amount text is malformed."""
    pass


class PathParseError(ConfigurationError):
    """Raised when routing path text contains a malformed hop."""

    def __init__(self, token: str, reason: str = "unrecognised path element"):
        self.token = token
        super().__init__(f"Invalid path element {token!r}: {reason}")


class ValidationError(RippleTxError):
    """Raised when a well-formed value violates a range or precision rule."""
    pass


class ValueOutOfRange(ValidationError):
    """Raised for negative amounts, precision loss or exponent overflow."""
    pass


class UnsupportedAlgorithm(ValidationError):
    """Raised for an unknown key algorithm selector."""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(f"Unsupported key algorithm: {algorithm!r}")


class SigningError(RippleTxError):
    """Raised when a transaction cannot be signed."""
    pass


class EncodingError(RippleTxError):
    """Raised when a transaction cannot be serialized or decoded."""
    pass


class TransportError(RippleTxError):
    """Raised when submission to the network fails."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code
