"""
Command-line interface for Atmos Python SDK
Prints strings to sign and request signatures, and manages stored credentials
"""

import argparse
import sys
import logging
from typing import Optional

from . import initialize_sdk, __version__
from .credentials import Credentials, KeyringCredentialStore, load_credentials_from_env
from .exceptions import AtmosSDKError
from .signing import (
    AtmosRequest,
    AtmosHeaders,
    HeaderMultimap,
    Payload,
    SigningError,
    SignRequest,
    SignatureWire,
    WireDirection,
    build_string_to_sign,
    create_from_credentials,
    generate_timestamp,
)


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='atmos-sign',
        description='Atmos SDK command-line interface for request signing'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'Atmos Python SDK {__version__}'
    )

    parser.add_argument(
        '--check-compatibility',
        action='store_true',
        help='Check platform compatibility and exit'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log canonical strings and signed requests to stderr'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_string_to_sign_parser(subparsers)
    setup_sign_parser(subparsers)
    setup_credentials_parser(subparsers)

    return parser


def _add_request_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    parser.add_argument('--path', required=True, help='Request path or URL, e.g. /rest/objects')
    parser.add_argument(
        '--header',
        action='append',
        default=[],
        metavar='NAME:VALUE',
        help='Request header; repeat for several headers or values'
    )
    parser.add_argument('--content-type', help='Payload content type')
    parser.add_argument('--date', help='Date header value (default: now)')


def setup_string_to_sign_parser(subparsers):
    """Setup string-to-sign subcommand."""
    string_parser = subparsers.add_parser(
        'string-to-sign',
        help='Print the canonical string for a request'
    )
    _add_request_arguments(string_parser)
    string_parser.add_argument('--uid', help='Include an x-emc-uid header with this value')


def setup_sign_parser(subparsers):
    """Setup sign subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Print the signed headers for a request')
    _add_request_arguments(sign_parser)
    sign_parser.add_argument('--uid', help='Account uid (default: $ATMOS_UID)')
    sign_parser.add_argument('--secret', help='Base64 shared secret (default: $ATMOS_SECRET)')
    sign_parser.add_argument(
        '--keyring',
        action='store_true',
        help='Read the shared secret for --uid from the OS keyring'
    )
    sign_parser.add_argument(
        '--show-string-to-sign',
        action='store_true',
        help='Also print the canonical string'
    )


def setup_credentials_parser(subparsers):
    """Setup credentials subcommands."""
    credentials_parser = subparsers.add_parser('credentials', help='Manage secrets in the OS keyring')
    credentials_subparsers = credentials_parser.add_subparsers(dest='credentials_command')

    store_parser = credentials_subparsers.add_parser('store', help='Store a shared secret')
    store_parser.add_argument('--uid', required=True, help='Account uid')
    store_parser.add_argument('--secret', required=True, help='Base64 shared secret')

    delete_parser = credentials_subparsers.add_parser('delete', help='Delete a stored shared secret')
    delete_parser.add_argument('--uid', required=True, help='Account uid')


def parse_header_arguments(values) -> HeaderMultimap:
    """
    Parse NAME:VALUE arguments into a header multimap.

    Raises:
        ValueError: If an argument has no colon or an empty name
    """
    headers = HeaderMultimap()
    for item in values:
        name, sep, value = item.partition(':')
        if not sep or not name.strip():
            raise ValueError(f"Header must look like NAME:VALUE, got {item!r}")
        headers.add(name.strip(), value.lstrip())
    return headers


def build_request(args) -> AtmosRequest:
    """Build the request described by the command-line arguments."""
    headers = parse_header_arguments(args.header)
    payload = Payload(content_type=args.content_type) if args.content_type else None
    return AtmosRequest(
        method=args.method,
        endpoint=args.path,
        headers=headers,
        payload=payload
    )


def resolve_credentials(args) -> Credentials:
    """Pick credentials from flags, the keyring or the environment."""
    if args.keyring:
        if not args.uid:
            raise ValueError("--keyring requires --uid")
        return KeyringCredentialStore().load(args.uid)
    if args.uid and args.secret:
        return Credentials(uid=args.uid, secret=args.secret)
    return load_credentials_from_env()


def handle_string_to_sign_command(args) -> int:
    """Handle string-to-sign command."""
    try:
        request = build_request(args)
        headers = request.headers.copy()
        if args.uid:
            headers.replace_values(AtmosHeaders.UID, [args.uid])
        headers.replace_values(AtmosHeaders.DATE, [args.date or generate_timestamp()])
        request = AtmosRequest(request.method, request.endpoint, headers, request.payload)

        print(build_string_to_sign(request))
        return 0

    except (ValueError, SigningError) as e:
        print(f"Error building string to sign: {e}", file=sys.stderr)
        return 1


def handle_sign_command(args) -> int:
    """Handle sign command."""
    try:
        request = build_request(args)
        credentials = resolve_credentials(args)
        wire = SignatureWire(enabled=args.show_string_to_sign)
        fixed_date = args.date
        config = create_from_credentials(
            credentials,
            timestamp_provider=(lambda: fixed_date) if fixed_date else None,
            signature_wire=wire
        )

        signed = SignRequest(config).filter(request)

        if args.show_string_to_sign:
            for entry in wire.drain():
                if entry.direction == WireDirection.OUTPUT:
                    print("String to sign:")
                    print(entry.text)
                    print()

        for name in (AtmosHeaders.UID, AtmosHeaders.DATE, AtmosHeaders.SIGNATURE):
            print(f"{name}: {signed.headers.get_first(name)}")
        return 0

    except (ValueError, SigningError, AtmosSDKError) as e:
        print(f"Error signing request: {e}", file=sys.stderr)
        return 1


def handle_credentials_command(args) -> int:
    """Handle credentials commands."""
    store = KeyringCredentialStore()
    try:
        if args.credentials_command == 'store':
            store.store(Credentials(uid=args.uid, secret=args.secret))
            print(f"Stored shared secret for {args.uid}")
            return 0
        elif args.credentials_command == 'delete':
            if store.delete(args.uid):
                print(f"Deleted shared secret for {args.uid}")
                return 0
            print(f"No shared secret stored for {args.uid}", file=sys.stderr)
            return 1
        else:
            print("Error: specify 'store' or 'delete'", file=sys.stderr)
            return 1

    except AtmosSDKError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        if args.check_compatibility:
            result = initialize_sdk()
            if result['compatible']:
                print("✓ Platform is compatible with Atmos SDK")
                return 0
            print("✗ Platform is not compatible with Atmos SDK")
            for warning in result['warnings']:
                print(f"  Error: {warning}")
            return 1

        if args.command == 'string-to-sign':
            return handle_string_to_sign_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'credentials':
            return handle_credentials_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
