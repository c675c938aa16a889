# src/resealer/common/console.py

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pyfiglet
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .errors import ResealerError
from .exporter import FORMATS, DataExporter
from .models import Entry

# --- Initialize the rich console (stderr keeps stdout clean for pipes) ---
console = Console(stderr=True)

PREVIEW_ROWS = 20


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def display_banner() -> str:
    plain_banner = pyfiglet.figlet_format("Resealer", font="slant")
    console.print(
        Panel(
            plain_banner,
            title="[bold white] Resealer [/bold white]",
            subtitle="[cyan] password manager import [/cyan]",
            border_style="cyan",
            expand=False,
        )
    )
    return plain_banner


def build_parser(source: str, file_types: Sequence[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"resealer {source}",
        description=f"Normalize a {source} export into vault entries.",
    )
    parser.add_argument("input_file", type=Path, help="Exported file to import")
    parser.add_argument(
        "-t", "--type", choices=list(file_types), dest="file_type",
        help="File type (defaults to the file suffix)",
    )
    parser.add_argument("-f", "--format", choices=list(FORMATS), default="json", help="Report format")
    parser.add_argument("-o", "--output", type=Path, help="Report path")
    parser.add_argument("--preview", action="store_true", help="Only print a summary")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_file_type(args: argparse.Namespace, file_types: Sequence[str]) -> str:
    if args.file_type:
        return args.file_type
    suffix = args.input_file.suffix.lower().lstrip(".")
    return suffix if suffix in file_types else file_types[0]


def summarize(entries: List[Entry]) -> Table:
    counts = Counter(e.type for e in entries)
    table = Table(
        title=f"Parsed [bold green]{len(entries)}[/bold green] Entries "
              f"({', '.join(f'{k}: {v}' for k, v in counts.items()) or 'none'})",
        border_style="cyan",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Type", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Folder", style="green")

    for entry in entries[:PREVIEW_ROWS]:
        table.add_row(entry.type, entry.title or "-", entry.folder or "-")
    if len(entries) > PREVIEW_ROWS:
        table.add_row("...", f"{len(entries) - PREVIEW_ROWS} more", "")
    return table


def run_import(
    source: str,
    args: argparse.Namespace,
    file_type: str,
    parse: Callable[..., List[Entry]],
    password: Optional[str] = None,
) -> None:
    """Reads the input, parses it and writes the report; exits 1 on failure."""
    banner = display_banner()
    if not args.output and not args.preview:
        args.output = args.input_file.with_suffix(f".{args.format}")

    try:
        content = args.input_file.read_bytes()
        with console.status(f"[bold green]Parsing {source} {file_type.upper()} export..."):
            entries = parse(content, file_type, password)

        console.print(summarize(entries))
        if args.preview:
            return

        exporter = DataExporter(banner=banner, source=source)
        exporter.export(entries, args.output, args.format)
        console.print(f"\n[bold green]✓ Export Success:[/] [magenta]{args.output}[/]")

    except (ResealerError, OSError) as e:
        console.print(f"[bold red]Error:[/] {str(e)}")
        sys.exit(1)
