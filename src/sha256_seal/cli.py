"""Command-line utilities for sha256_seal."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .builder import Seal
from .logging_pipeline import (
    configure_structured_logging,
    remove_queue_handlers,
    shutdown_listeners,
)
from .schemes import SCHEMES
from .settings import LOG_LEVELS, SealSettings, get_settings

logger = logging.getLogger(__name__)


def _read_stdin() -> str:
    """Read the value from stdin, dropping one trailing newline."""
    payload = sys.stdin.read()
    if payload.endswith("\r\n"):
        return payload[:-2]
    if payload.endswith("\n"):
        return payload[:-1]
    return payload


def _resolve_value(raw: str | None) -> str:
    """Return the value argument, reading stdin for ``-`` or when omitted."""
    if raw is None or raw == "-":
        return _read_stdin()
    return raw


def _resolve_secret(raw: str | None, settings: SealSettings) -> str:
    """Return the secret from the command line or the environment."""
    secret = raw or settings.secret
    if not secret:
        raise ValueError("Missing --secret and SHA256_SEAL_SECRET is not set.")
    return secret


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sha256-seal",
        description="Sign a placeholder inside a value, or verify a signed value.",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Emit structured JSON logs on stderr at this level.",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--value",
        "-v",
        help="Value to process. Use '-' or omit to read it from stdin.",
    )
    common.add_argument(
        "--secret",
        "-s",
        help="Shared secret. Defaults to the SHA256_SEAL_SECRET environment variable.",
    )
    common.add_argument(
        "--scheme",
        choices=sorted(SCHEMES),
        help="Signature scheme. Defaults to SHA256_SEAL_SCHEME or hmac-sha256.",
    )
    common.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON object instead of plain text.",
    )
    common.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode: suppress output, just return exit code.",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    sign_parser = commands.add_parser(
        "sign", parents=[common], help="Replace the placeholder with its signature."
    )
    sign_parser.add_argument(
        "--field", "-f", required=True, help="Placeholder occurring once in the value."
    )

    verify_parser = commands.add_parser(
        "verify", parents=[common], help="Check the token embedded in a signed value."
    )
    verify_parser.add_argument(
        "--token", "-t", required=True, help="Token occurring once in the value."
    )
    return parser


def _run(args: argparse.Namespace, settings: SealSettings) -> int:
    value = _resolve_value(args.value)
    secret = _resolve_secret(args.secret, settings)

    if args.command == "sign":
        seal = Seal(value, secret, args.field, scheme=args.scheme)
        signed = seal.signed_value()
        logger.info("Signed value", extra={"scheme": seal.scheme.name})
        if not args.quiet:
            if args.json:
                print(
                    json.dumps(
                        {"signed_value": signed, "signature": seal.signature},
                        separators=(",", ":"),
                    )
                )
            else:
                print(signed)
        return 0

    seal = Seal(value, secret, args.token, scheme=args.scheme)
    is_valid = seal.is_signed()
    logger.info(
        "Verified value", extra={"scheme": seal.scheme.name, "valid": is_valid}
    )
    if not args.quiet:
        if args.json:
            print(json.dumps({"valid": is_valid}, separators=(",", ":")))
        else:
            print("valid" if is_valid else "invalid")
    return 0 if is_valid else 1


def main(argv: list[str] | None = None) -> int:
    """Sign or verify a sealed value."""
    parser = _build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    settings = get_settings()
    package_logger = logging.getLogger("sha256_seal")
    previous_level = package_logger.level
    level = args.log_level or settings.log_level
    listener = (
        configure_structured_logging(package_logger, level=level) if level else None
    )

    try:
        return _run(args, settings)
    except (ValueError, OSError) as exc:
        if not args.quiet:
            print(str(exc), file=sys.stderr)
        return 1
    finally:
        if listener is not None:
            shutdown_listeners([listener])
            remove_queue_handlers(package_logger)
            package_logger.setLevel(previous_level)


if __name__ == "__main__":
    raise SystemExit(main())
