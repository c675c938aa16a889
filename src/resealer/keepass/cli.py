# src/resealer/keepass/cli.py

import sys

from rich.prompt import Prompt

from resealer.common.console import build_parser, console, resolve_file_type, run_import, setup_logging
from .parser import FILE_TYPES, parse_keepass_data


def main():
    parser = build_parser("keepass", FILE_TYPES)
    # 注意：这里适配了 __main__.py 的二级分发
    args = parser.parse_args(sys.argv[2:])
    setup_logging(args.verbose)

    if not args.input_file.exists():
        console.print(f"[bold red]Error:[/] File {args.input_file} not found.")
        sys.exit(1)

    file_type = resolve_file_type(args, FILE_TYPES)
    password = None
    if file_type == "kdbx":
        password = Prompt.ask("[yellow]Enter KeePass Master Password[/]", password=True)

    run_import("keepass", args, file_type, parse_keepass_data, password)


if __name__ == "__main__":
    main()
