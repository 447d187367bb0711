"""
Command-line interface for ripple-tx.

Builds, signs, encodes and optionally submits Payment and TrustSet
transactions, or re-submits a previously signed blob read from stdin.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import structlog

from rippletx import __version__
from rippletx.config import SubmitTransport, TxConfig, load_config
from rippletx.errors import RippleTxError
from rippletx.tx.builder import PaymentParams, TransactionBuilder, TrustSetParams
from rippletx.tx.encoder import TransactionEncoder
from rippletx.tx.models import Transaction
from rippletx.tx.router import OutputRouter
from rippletx.tx.signer import TransactionSigner

logger = structlog.get_logger(__name__)


def setup_logging(level: str = "WARNING", json_format: bool = False) -> None:
    """Configure structured logging on stderr; stdout carries transaction output."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ripple-tx",
        description="Create, sign and submit Ripple transactions",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Global options; unset values fall back to RIPPLETX_* settings
    parser.add_argument("-s", "--seed", help="Seed for the submitting account")
    parser.add_argument(
        "--algorithm",
        choices=["secp256k1", "ed25519"],
        help="Key algorithm (default: implied by the seed)",
    )
    parser.add_argument(
        "--account-index",
        type=int,
        help="Account index within the seed's key family (default: 0)",
    )
    parser.add_argument("-f", "--fee", type=int, help="Fee in drops (default: 10)")
    parser.add_argument("-q", "--sequence", type=int, help="Sequence for the transaction")
    parser.add_argument(
        "-l", "--lastledger",
        type=int,
        help="Highest ledger number the transaction can appear in",
    )
    parser.add_argument(
        "-t", "--submit",
        action="store_true",
        default=None,
        help="Submit the transaction to the network",
    )
    parser.add_argument(
        "-b", "--binary",
        action="store_true",
        default=None,
        help="Raw output in binary",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        default=None,
        help="Output only the resulting JSON",
    )
    parser.add_argument(
        "--transport",
        choices=[t.value for t in SubmitTransport],
        help="Submission transport (default: websocket)",
    )
    parser.add_argument("--url", help="Endpoint for the submission transport")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Output logs in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Payment command
    payment_parser = subparsers.add_parser(
        "payment",
        aliases=["p"],
        help="Create a payment",
    )
    payment_parser.add_argument("-d", "--dest", help="Destination account")
    payment_parser.add_argument("-a", "--amount", help="Amount to send")
    payment_parser.add_argument("-t", "--tag", type=int, help="Destination tag")
    payment_parser.add_argument(
        "-i", "--invoice",
        help="Invoice id (passed through SHA512-half)",
    )
    payment_parser.add_argument("--paths", help="Paths, e.g. 'XRP=>USD/rIssuer,rHop'")
    payment_parser.add_argument("-m", "--sendmax", help="Maximum to send")
    payment_parser.add_argument(
        "-r", "--nodirect",
        action="store_true",
        help="Do not look for a direct path",
    )
    payment_parser.add_argument(
        "-p", "--partial",
        action="store_true",
        help="Permit partial payment",
    )
    payment_parser.add_argument(
        "-l", "--limit",
        action="store_true",
        help="Limit quality",
    )
    payment_parser.set_defaults(handler=run_payment)

    # Trust command
    trust_parser = subparsers.add_parser(
        "trust",
        aliases=["t"],
        help="Create a trust line",
    )
    trust_parser.add_argument("-a", "--amount", help="Trust limit")
    trust_parser.add_argument(
        "-q", "--quality-out",
        default="1.0",
        help="> 1.0 to charge a fee (default: 1.0)",
    )
    trust_parser.add_argument(
        "-Q", "--quality-in",
        default="1.0",
        help="< 1.0 to charge a fee (default: 1.0)",
    )
    trust_parser.add_argument("-A", "--auth", action="store_true", help="SetAuth")
    trust_parser.add_argument(
        "-n", "--noripple",
        action="store_true",
        help="No rippling on this trust line",
    )
    trust_parser.add_argument(
        "-N", "--clear-noripple",
        action="store_true",
        help="Re-enable rippling on this trust line",
    )
    trust_parser.add_argument(
        "-f", "--freeze",
        action="store_true",
        help="Freeze this trust line",
    )
    trust_parser.add_argument(
        "-F", "--clear-freeze",
        action="store_true",
        help="Unfreeze this trust line",
    )
    trust_parser.set_defaults(handler=run_trust)

    # Submit command
    submit_parser = subparsers.add_parser(
        "submit",
        aliases=["s"],
        help="Submit a transaction",
        description="Pass a signed transaction (binary or hex) on stdin",
    )
    submit_parser.set_defaults(handler=run_submit)

    return parser


def build_config(args: argparse.Namespace) -> TxConfig:
    """Merge command-line options over environment settings."""
    config = load_config(
        seed=args.seed,
        algorithm=args.algorithm,
        account_index=args.account_index,
        fee=args.fee,
        sequence=args.sequence,
        last_ledger_sequence=args.lastledger,
        submit=args.submit,
        output_binary=args.binary,
        output_json=args.json,
        submit_transport=args.transport,
        log_level=args.log_level,
        log_json=args.log_json,
    )
    if args.url:
        key = "jsonrpc_url" if config.submit_transport == SubmitTransport.JSONRPC else "websocket_url"
        config = config.model_copy(update={key: args.url})
    return config


def sign_and_route(config: TxConfig, tx: Transaction) -> None:
    """Sign a built transaction, then encode and route it."""
    signer = TransactionSigner(config)
    signer.load_from_config()
    signer.sign_transaction(tx)
    route(config, tx)


def route(config: TxConfig, tx: Transaction) -> None:
    """Encode a signed transaction and deliver it."""
    encoded = TransactionEncoder().encode(tx)
    router = OutputRouter(config)
    router.emit(encoded)
    if config.submit:
        asyncio.run(router.submit(encoded))


def run_payment(args: argparse.Namespace, config: TxConfig) -> None:
    """Create, sign and route a payment."""
    config.require_seed()

    options = [name for name in ("nodirect", "partial", "limit") if getattr(args, name)]
    tx = TransactionBuilder().build_payment(
        PaymentParams(
            destination=args.dest,
            amount=args.amount,
            paths=args.paths,
            send_max=args.sendmax,
            destination_tag=args.tag,
            invoice_id=args.invoice,
            options=options,
        )
    )
    sign_and_route(config, tx)


def run_trust(args: argparse.Namespace, config: TxConfig) -> None:
    """Create, sign and route a trust line change."""
    config.require_seed()

    options = [
        name for name, attribute in (
            ("auth", "auth"),
            ("noripple", "noripple"),
            ("clear-noripple", "clear_noripple"),
            ("freeze", "freeze"),
            ("clear-freeze", "clear_freeze"),
        )
        if getattr(args, attribute)
    ]
    tx = TransactionBuilder().build_trust_set(
        TrustSetParams(
            limit_amount=args.amount,
            quality_in=args.quality_in,
            quality_out=args.quality_out,
            options=options,
        )
    )
    sign_and_route(config, tx)


def run_submit(args: argparse.Namespace, config: TxConfig) -> None:
    """Route a previously signed transaction read from stdin."""
    tx = TransactionEncoder().decode(sys.stdin.buffer.read())
    route(config, tx)


def run(argv: Optional[List[str]] = None) -> int:
    """Run one invocation and return its exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = build_config(args)
    except RippleTxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, config.log_json)

    try:
        args.handler(args, config)
    except RippleTxError as e:
        logger.error("invocation_failed", command=args.command, error=str(e), kind=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
