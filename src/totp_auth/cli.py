"""Command-line interface for totp-auth."""

import argparse
import logging
import sys
from typing import List, Optional

from totp_auth import qr
from totp_auth.account import AccountConfig, Algorithm
from totp_auth.exceptions import TotpError
from totp_auth.totp import DEFAULT_SKEW_WINDOW, Verifier
from totp_auth.uri import build_uri


logger = logging.getLogger(__name__)

DEFAULT_LABEL = "test-app@example.com"
DEFAULT_ISSUER = "TEST APP"

EXIT_COMMAND = "x"
SUCCESS_MARKER = "CORRECT"
FAILURE_MARKER = "!!! NOT CORRECT !!!"


def build_config(args: argparse.Namespace) -> AccountConfig:
    """Create the account configuration described by the command line."""
    options = dict(
        issuer=args.issuer,
        algorithm=args.algorithm,
        digits=args.digits,
        period=args.period,
    )
    if args.secret is None:
        return AccountConfig.create(args.label, **options)
    return AccountConfig.from_base32(args.label, args.secret, **options)


def show_enrollment(cfg: AccountConfig, qr_format: str) -> None:
    """Print a new secret, its enrollment URI and optionally a QR code."""
    uri = build_uri(cfg)
    print(f"New secret: {cfg.secret}")
    print(uri)

    if qr_format == "html":
        print("QR Code:")
        print(qr.qr_img_tag(uri))
        print()
    elif qr_format == "ascii":
        print("QR Code:")
        qr.print_qr_ascii(uri)


def verify_loop(verifier: Verifier) -> int:
    """Read codes until ``x`` or end of input, reporting each result."""
    while True:
        try:
            code = input("Code: ")
        except EOFError:
            print()
            return 0

        if code == EXIT_COMMAND:
            return 0

        if verifier.verify(code):
            print(SUCCESS_MARKER)
        else:
            print(FAILURE_MARKER)


def run_command(args: argparse.Namespace) -> int:
    """Handle a full enrollment and verification session."""
    try:
        cfg = build_config(args)
        verifier = Verifier(cfg, skew_window=args.window)
    except TotpError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    if args.secret is None:
        show_enrollment(cfg, args.qr)
    else:
        logger.debug("Loaded secret for %s", cfg.label)

    return verify_loop(verifier)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="totp-auth",
        description="TOTP enrollment and code verification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "secret",
        nargs="?",
        default=None,
        help="Base32 secret to load (default: generate a new one)",
    )
    parser.add_argument(
        "--label",
        "-l",
        default=DEFAULT_LABEL,
        help=f'Account label (default: "{DEFAULT_LABEL}")',
    )
    parser.add_argument(
        "--issuer",
        "-i",
        default=DEFAULT_ISSUER,
        help=f'Issuer name (default: "{DEFAULT_ISSUER}")',
    )
    parser.add_argument(
        "--algorithm",
        "-a",
        default=Algorithm.SHA1.value,
        choices=[alg.value for alg in Algorithm],
        type=str.upper,
        help="HMAC hash algorithm (default: SHA1)",
    )
    parser.add_argument(
        "--digits",
        "-d",
        type=int,
        default=6,
        choices=[6, 7, 8],
        help="Number of digits in the code (default: 6)",
    )
    parser.add_argument(
        "--period",
        "-p",
        type=int,
        default=30,
        help="Seconds each code stays valid (default: 30)",
    )
    parser.add_argument(
        "--window",
        "-w",
        type=int,
        default=DEFAULT_SKEW_WINDOW,
        help=f"Past time steps accepted for clock skew (default: {DEFAULT_SKEW_WINDOW})",
    )
    parser.add_argument(
        "--qr",
        choices=["html", "ascii", "none"],
        default="html",
        help="How to render the enrollment QR code (default: html)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
