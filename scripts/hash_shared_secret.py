"""Utility script to hash the password shared by both participants."""

from __future__ import annotations

import argparse
from getpass import getpass

from always_connected.infrastructure.security import get_secret_hash


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for secret hashing."""

    parser = argparse.ArgumentParser(
        description="Print the SHARED_SECRET_HASH value for the Always Connected backend.",
    )
    parser.add_argument(
        "--secret",
        default=None,
        help="Shared secret to hash. Prompted for interactively when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    """Hash the provided secret and print an environment line for it."""

    args = parse_args()

    secret = args.secret or getpass("Shared secret: ")
    if not secret:
        raise SystemExit("No shared secret was provided.")

    if args.secret is None and getpass("Repeat shared secret: ") != secret:
        raise SystemExit("The secrets do not match.")

    print(f"SHARED_SECRET_HASH={get_secret_hash(secret)}")


if __name__ == "__main__":
    main()
