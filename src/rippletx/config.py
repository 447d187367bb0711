"""
Configuration management for ripple-tx.

Supports configuration via environment variables and .env files. One
TxConfig is constructed per invocation and passed explicitly to the
components that need it.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field, SecretStr
from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rippletx.errors import ConfigurationError, MissingSeed

DEFAULT_FEE_DROPS = 10


class SubmitTransport(str, Enum):
    """Supported submission transports."""
    WEBSOCKET = "websocket"
    JSONRPC = "jsonrpc"


class TxConfig(BaseSettings):
    """
    Configuration settings for building, signing and submitting.

    All settings can be configured via environment variables with the
    RIPPLETX_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="RIPPLETX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Signing key settings
    seed: Optional[SecretStr] = Field(
        default=None,
        description="Seed of the submitting account"
    )
    algorithm: Optional[str] = Field(
        default=None,
        description="Key algorithm (secp256k1 or ed25519); defaults to the seed's encoding"
    )
    account_index: int = Field(
        default=0,
        ge=0,
        le=0xFFFFFFFF,
        description="Account index within the seed's key family (secp256k1 only)"
    )

    # Transaction base fields
    fee: int = Field(
        default=DEFAULT_FEE_DROPS,
        ge=0,
        description="Fee in drops"
    )
    sequence: int = Field(
        default=0,
        ge=0,
        le=0xFFFFFFFF,
        description="Sequence number of the transaction"
    )
    last_ledger_sequence: Optional[int] = Field(
        default=None,
        ge=0,
        le=0xFFFFFFFF,
        description="Highest ledger the transaction can appear in (0 or unset for none)"
    )

    # Output settings
    output_binary: bool = Field(
        default=False,
        description="Write raw canonical bytes instead of the hash/hex summary"
    )
    output_json: bool = Field(
        default=False,
        description="Write only the JSON representation"
    )
    submit: bool = Field(
        default=False,
        description="Submit the signed transaction to the network"
    )

    # Submission settings
    submit_transport: SubmitTransport = Field(
        default=SubmitTransport.WEBSOCKET,
        description="Transport used for submission"
    )
    websocket_url: str = Field(
        default="wss://s-east.ripple.com:443",
        description="rippled WebSocket endpoint"
    )
    jsonrpc_url: str = Field(
        default="https://s1.ripple.com:51234",
        description="rippled JSON-RPC endpoint"
    )
    submit_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Time to wait for the submission reply"
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )

    @property
    def submit_url(self) -> str:
        """Endpoint for the configured transport."""
        if self.submit_transport == SubmitTransport.JSONRPC:
            return self.jsonrpc_url
        return self.websocket_url

    @property
    def expiry(self) -> Optional[int]:
        """LastLedgerSequence to apply, if any."""
        if self.last_ledger_sequence:
            return self.last_ledger_sequence
        return None

    def require_seed(self) -> str:
        """
        Seed text, or MissingSeed when none was configured.

        Raises:
            MissingSeed: If no seed is configured
        """
        if self.seed is None or not self.seed.get_secret_value().strip():
            raise MissingSeed()
        return self.seed.get_secret_value().strip()


def load_config(**overrides: Any) -> TxConfig:
    """
    Build a TxConfig from the environment plus explicit overrides.

    Overrides whose value is None are ignored so environment settings
    still apply.

    Raises:
        ConfigurationError: If a setting fails validation
    """
    values: Dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    try:
        return TxConfig(**values)
    except SettingsValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
