#!/usr/bin/env python3
"""
Generate a seed for signing Ripple transactions.

This script generates:
- A family seed (secp256k1) or ed25519 seed
- The public key and address for the chosen account index
"""

import argparse
import json
from pathlib import Path

from rippletx.crypto import KeyAlgorithm, Seed, derive_keypair, generate_seed


def generate_keys(algorithm: str = "secp256k1", account_index: int = 0, seed_text: str = None) -> dict:
    """
    Generate (or re-derive) a seed and its account.

    Args:
        algorithm: Key algorithm for a new seed
        account_index: Account index within the key family
        seed_text: Existing seed to derive from instead of generating one

    Returns:
        Dictionary with seed and account info
    """
    if seed_text:
        seed = Seed.from_text(seed_text)
    else:
        seed = generate_seed(KeyAlgorithm(algorithm))

    keypair = derive_keypair(seed, account_index)

    return {
        "seed": seed.to_text(),
        "algorithm": keypair.algorithm.value,
        "account_index": account_index,
        "public_key": keypair.public_key.hex().upper(),
        "account_id": keypair.account_id.hex().upper(),
        "address": keypair.address,
    }


def main():
    parser = argparse.ArgumentParser(description="Generate a Ripple seed and address")
    parser.add_argument(
        "--algorithm", "-a",
        choices=[a.value for a in KeyAlgorithm],
        default="secp256k1",
        help="Key algorithm (default: secp256k1)"
    )
    parser.add_argument(
        "--account-index", "-i",
        type=int,
        default=0,
        help="Account index within the seed's key family (default: 0)"
    )
    parser.add_argument(
        "--seed", "-s",
        help="Derive from an existing seed instead of generating one"
    )
    parser.add_argument(
        "--output", "-o",
        help="Write the key info as JSON to this file"
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite an existing output file"
    )

    args = parser.parse_args()

    if args.output and Path(args.output).exists() and not args.force:
        print(f"⚠️  Key info already exists at {args.output}")
        print("   Use --force to overwrite")
        return

    print("🔑 Generating Ripple keys..." if not args.seed else "🔑 Deriving from seed...")
    info = generate_keys(args.algorithm, args.account_index, args.seed)

    print(f"\n📬 Address:     {info['address']}")
    print(f"   Public key:  {info['public_key']}")
    print(f"   Algorithm:   {info['algorithm']} (index {info['account_index']})")
    print(f"\n🔐 Seed:        {info['seed']}")

    if args.output:
        with open(args.output, "w") as f:
            json.dump(info, f, indent=2)
        print(f"\n📁 Key info saved to: {args.output}")

    print("\n⚠️  IMPORTANT: Keep your seed secret!")


if __name__ == "__main__":
    main()
