# src/resealer/__main__.py

import sys
import argparse

from resealer.keepass import cli as keepass_cli
from resealer.lastpass import cli as lastpass_cli
from resealer.nordpass import cli as nordpass_cli

COMMANDS = {
    "keepass": keepass_cli,
    "lastpass": lastpass_cli,
    "nordpass": nordpass_cli,
}


def main():
    # 1. Initialize the primary ArgumentParser
    parser = argparse.ArgumentParser(
        prog="resealer",
        description="Normalize password manager exports into a single vault entry schema.",
        epilog="Use 'resealer <command> --help' for more information on a specific command."
    )

    # 2. Define subparsers for the supported password managers
    subparsers = parser.add_subparsers(
        title="Available Modules",
        dest="command",
        required=True,
        metavar="<command>"
    )

    subparsers.add_parser(
        "keepass",
        help="Import KeePass / KeePassXC exports (.kdbx, .csv, .xml).",
        description="Parse KeePass databases and exports, keeping the group hierarchy as folders."
    )
    subparsers.add_parser(
        "lastpass",
        help="Import LastPass CSV exports, including secure notes.",
        description="Parse LastPass CSV exports; card, address and Wi-Fi notes become typed entries."
    )
    subparsers.add_parser(
        "nordpass",
        help="Import NordPass CSV exports.",
        description="Parse NordPass CSV exports of passwords, cards, identities and notes."
    )

    # Only parse the first argument to determine which module to invoke.
    # The remaining arguments will be handled by the respective module's CLI.
    args = parser.parse_args(sys.argv[1:2])
    COMMANDS[args.command].main()


if __name__ == "__main__":
    main()
