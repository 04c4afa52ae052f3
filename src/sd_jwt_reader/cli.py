"""Command-line interface for sd-jwt-reader."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any, Optional

from . import SDJWT, SDJWTError, __version__, parse_sd_jwt
from .digests import HASH_ALGORITHMS, SD_ALG_CLAIM

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sd-jwt-reader",
        description="Inspect SD-JWTs and print their disclosed claims",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print debug logging to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Decode subcommand
    decode_parser = subparsers.add_parser("decode", help="Show the parts of an SD-JWT")
    decode_parser.add_argument(
        "token", nargs="?", default="-", help="SD-JWT string, or - to read stdin"
    )

    # Disclose subcommand
    disclose_parser = subparsers.add_parser("disclose", help="Print the disclosed claims")
    disclose_parser.add_argument(
        "token", nargs="?", default="-", help="SD-JWT string, or - to read stdin"
    )

    return parser


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr, WARNING and above unless verbose."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s  %(name)s  %(message)s"))
    root_logger = logging.getLogger("sd_jwt_reader")
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def describe(sd_jwt: SDJWT) -> dict[str, Any]:
    """Summarize the decoded parts of a token.

    Disclosure digests use the token's _sd_alg and are null when it names
    no supported algorithm.
    """
    sd_alg = sd_jwt.body.get(SD_ALG_CLAIM)
    if not isinstance(sd_alg, str) or sd_alg not in HASH_ALGORITHMS:
        sd_alg = None

    return {
        "serialization": sd_jwt.serialization,
        "header": sd_jwt.header,
        "body": sd_jwt.body,
        "signature": sd_jwt.signature,
        "disclosures": [
            {
                "salt": d.salt,
                "claim_name": d.claim_name,
                "claim_value": d.claim_value,
                "digest": d.digest(sd_alg) if sd_alg else None,
            }
            for d in sd_jwt.disclosures
        ],
        "kb_jwt": sd_jwt.key_binding_jwt,
    }


def _read_token(value: str) -> str:
    if value == "-":
        return sys.stdin.read().strip()
    return value.strip()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)

    try:
        sd_jwt = parse_sd_jwt(_read_token(args.token))
        if args.command == "decode":
            output = describe(sd_jwt)
        else:
            output = sd_jwt.get_disclosed_claims()
    except SDJWTError as e:
        logger.debug("Rejected token", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
