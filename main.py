"""Command-line interface for the callsign registration service."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from dataclasses import replace
from getpass import getpass
from typing import Sequence


try:
    import httpx
except ImportError as exc:  # pragma: no cover - exercised in environments missing deps
    raise SystemExit(
        "The 'httpx' package is required. Execute `pip install -e .` to install dependencies."
    ) from exc

from registrar.config import load_settings
from registrar.errors import ConfigurationError, RegistrationError
from registrar.extensions import generate_extension
from registrar.identifiers import generate_id
from registrar.models import RegistrationRequest
from registrar.registration import Registrar

logger = logging.getLogger("registrar.main")

_DEFAULT_SERVICE_URL = "http://localhost:8080"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Callsign registration utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP registration service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for the HTTP API (default: 8080)",
    )

    register_parser = subparsers.add_parser(
        "register", help="Validate a registration locally and assign an identifier"
    )
    _add_identity_arguments(register_parser)

    submit_parser = subparsers.add_parser(
        "submit", help="Send a registration to a running service"
    )
    _add_identity_arguments(submit_parser)
    submit_parser.add_argument(
        "--service-url",
        default=None,
        help="Base URL of the registration service (default: http://localhost:8080)",
    )

    extension_parser = subparsers.add_parser(
        "extension", help="Print the telephony extension derived from a callsign"
    )
    extension_parser.add_argument("callsign", help="Callsign to derive the extension from")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "register", "submit", "extension"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _add_identity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("callsign", help="Callsign to register")
    parser.add_argument("email", help="Registration email address")
    parser.add_argument("--first", default="", help="First name")
    parser.add_argument("--last", default="", help="Last name")
    parser.add_argument(
        "--sip",
        action="store_true",
        help="Request a telephony extension for the callsign",
    )


def _prompt_for_password(min_length: int) -> str | None:
    for _ in range(3):
        password = getpass(f"Password (min {min_length} characters): ")
        if len(password.encode("utf-8")) < min_length:
            print("Password is too short. Please try again.")
            continue
        confirmation = getpass("Confirm password: ")
        if password != confirmation:
            print("Passwords do not match. Please try again.")
            continue
        return password
    return None


def _build_request(args: argparse.Namespace, password: str) -> RegistrationRequest:
    return RegistrationRequest(
        callsign=args.callsign.strip(),
        first=args.first.strip(),
        last=args.last.strip(),
        email=args.email.strip(),
        password=password,
        telephony_requested=args.sip,
    )


def _serve(*, host: str, port: int) -> None:
    from registrar.service import create_app
    import uvicorn

    logger.info("Starting registration API on http://%s:%s", host, port)
    app = create_app(settings=load_settings())
    uvicorn.run(app, host=host, port=port, log_level="info")


def _register_offline(args: argparse.Namespace) -> int:
    """Register a user without the HTTP service, always assigning an identifier."""

    settings = load_settings()
    registrar = Registrar(settings)
    if settings.hash_credentials:
        password = _prompt_for_password(settings.password_min_length)
        if password is None:
            print("Aborted registration.")
            return 1
    else:
        password = ""

    try:
        user = registrar.register(_build_request(args, password))
    except RegistrationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if not user.id:
        user = replace(user, id=generate_id())

    print(f"RESULT: OK, Callsign: {user.callsign}")
    print(f"  id:           {user.id}")
    print(f"  name:         {user.first} {user.last}".rstrip())
    print(f"  email:        {user.registration_email}")
    print(f"  extension:    {user.extension_number}")
    print(f"  blocked:      {user.blocked}")
    print(f"  registered:   {user.registration_date}")
    return 0


def _submit(args: argparse.Namespace) -> int:
    base_url = args.service_url or os.getenv("REGISTRAR_SERVICE_URL") or _DEFAULT_SERVICE_URL
    password = os.getenv("REGISTRAR_PASSWORD") or getpass("Password: ")

    endpoint = base_url.rstrip("/") + "/user"
    form = {
        "callsign": args.callsign.strip(),
        "first": args.first.strip(),
        "last": args.last.strip(),
        "email": args.email.strip(),
        "password": password,
        "sip": "true" if args.sip else "false",
    }

    try:
        response = httpx.post(endpoint, data=form, timeout=30.0)
    except httpx.HTTPError as exc:
        print(f"Failed to contact registration service: {exc}", file=sys.stderr)
        return 1

    body = response.text.strip()
    print(body)
    if response.status_code != 200 or not body.startswith("RESULT: OK"):
        return 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    try:
        if args.command == "serve":
            _serve(host=args.host, port=args.port)
        elif args.command == "register":
            return _register_offline(args)
        elif args.command == "submit":
            return _submit(args)
        elif args.command == "extension":
            print(generate_extension(args.callsign))
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
