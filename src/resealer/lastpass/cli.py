# src/resealer/lastpass/cli.py

import sys

from resealer.common.console import build_parser, console, resolve_file_type, run_import, setup_logging
from .parser import FILE_TYPES, parse_lastpass_data


def main():
    """LastPass exports carry no encryption, so no password is asked for."""
    parser = build_parser("lastpass", FILE_TYPES)
    args = parser.parse_args(sys.argv[2:])
    setup_logging(args.verbose)

    if not args.input_file.exists():
        console.print(f"[bold red]Error:[/] File {args.input_file} not found.")
        sys.exit(1)

    run_import("lastpass", args, resolve_file_type(args, FILE_TYPES), parse_lastpass_data)


if __name__ == "__main__":
    main()
