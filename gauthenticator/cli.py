"""Command-line interface for gauthenticator.

``demo`` walks through the whole enrollment flow; the remaining sub-commands
expose each step on its own.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .crypto import crypto_utils
from .otp import otp_utils
from .qr import qr_utils


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gauthenticator", description="Google Authenticator compatible TOTP tools.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser = subparsers.add_parser("demo", help="Generate a secret, a code, verify it and print the QR code.")
    demo_parser.add_argument("--label", default="MyAppName", help="Account label embedded in the provisioning URI.")
    demo_parser.add_argument("--length", type=int, default=crypto_utils.DEFAULT_SECRET_LENGTH, help="Secret length.")

    secret_parser = subparsers.add_parser("create-secret", help="Print a new random base32 secret.")
    secret_parser.add_argument(
        "--length",
        type=int,
        default=crypto_utils.DEFAULT_SECRET_LENGTH,
        help=f"Secret length ({crypto_utils.SECRET_LENGTH_MIN}-{crypto_utils.SECRET_LENGTH_MAX} characters).",
    )

    code_parser = subparsers.add_parser("code", help="Print the code for a secret.")
    code_parser.add_argument("--secret", required=True, help="Base32 secret.")
    code_parser.add_argument("--time-step", type=int, default=0, help="Time step to use (0 means now).")

    verify_parser = subparsers.add_parser("verify", help="Check a code against a secret.")
    verify_parser.add_argument("--secret", required=True, help="Base32 secret.")
    verify_parser.add_argument("--code", required=True, help="Code to verify.")
    verify_parser.add_argument(
        "--discrepancy",
        type=int,
        default=otp_utils.DEFAULT_DISCREPANCY,
        help="Number of time steps tolerated on either side of the current one.",
    )
    verify_parser.add_argument("--time-step", type=int, default=0, help="Time step to verify at (0 means now).")

    uri_parser = subparsers.add_parser("uri", help="Print the otpauth:// provisioning URI.")
    uri_parser.add_argument("--label", required=True, help="Account label shown in the authenticator app.")
    uri_parser.add_argument("--secret", required=True, help="Base32 secret.")

    qr_parser = subparsers.add_parser("qr", help="Render the provisioning URI as a PNG QR code.")
    qr_parser.add_argument("--label", required=True, help="Account label shown in the authenticator app.")
    qr_parser.add_argument("--secret", required=True, help="Base32 secret.")
    qr_parser.add_argument("--output", help="Write the PNG here instead of printing base64.")

    return parser


def handle_demo(label: str, length: int) -> None:
    authenticator = otp_utils.GoogleAuthenticator()
    secret = authenticator.create_secret(length)
    print(f"Generated Secret: {secret}")

    code = authenticator.get_code(secret)
    print(f"Generated Code: {code}")

    is_valid = authenticator.verify_code(secret, code, 1)
    print(f"Is the code valid? {is_valid}")

    print(f"Base64 QR Code: {authenticator.generate_qr_code(label, secret)}")


def handle_verify(secret: str, code: str, discrepancy: int, time_step: int) -> bool:
    is_valid = otp_utils.verify_code(secret, code, discrepancy, time_step)
    print("valid" if is_valid else "invalid")
    return is_valid


def handle_qr(label: str, secret: str, output_path: Optional[str]) -> None:
    uri = otp_utils.build_uri(label, secret)
    if output_path is None:
        print(qr_utils.qr_code_base64(uri))
        return
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(qr_utils.render_qr_png(uri))
    print(f"QR code written to {output_path}.")


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            handle_demo(args.label, args.length)
            return 0
        if args.command == "create-secret":
            print(crypto_utils.create_secret(args.length))
            return 0
        if args.command == "code":
            print(otp_utils.get_code(args.secret, args.time_step))
            return 0
        if args.command == "verify":
            return 0 if handle_verify(args.secret, args.code, args.discrepancy, args.time_step) else 1
        if args.command == "uri":
            print(otp_utils.build_uri(args.label, args.secret))
            return 0
        if args.command == "qr":
            handle_qr(args.label, args.secret, args.output)
            return 0
    except (ValueError, RuntimeError) as exc:
        print(f"Error: {exc}")
        return 1

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
