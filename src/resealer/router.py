# src/resealer/router.py

import asyncio
from typing import Callable, Dict, List, Optional, Union

from resealer.common.errors import UnsupportedFormatError
from resealer.common.models import Entry
from resealer.keepass.parser import parse_keepass_data
from resealer.lastpass.parser import parse_lastpass_data
from resealer.nordpass.parser import parse_nordpass_data

Parser = Callable[[Union[str, bytes], str, Optional[str]], List[Entry]]

SOURCES: Dict[str, Parser] = {
    "keepass": parse_keepass_data,
    "lastpass": parse_lastpass_data,
    "nordpass": parse_nordpass_data,
}


def parse_export(
    source: str,
    data: Union[str, bytes],
    file_type: str,
    password: Optional[str] = None,
) -> List[Entry]:
    """
    Public entry point: normalizes one exported file into entries.

    :param source: password manager the file came from ('keepass', 'lastpass', 'nordpass').
    :param data: file content; text formats accept str or UTF-8 bytes.
    :param file_type: 'csv', 'xml' or 'kdbx', depending on the source.
    :param password: master password, only used for encrypted databases.
    """
    parser = SOURCES.get((source or "").lower())
    if parser is None:
        allowed = ", ".join(SOURCES)
        raise UnsupportedFormatError(
            f"Unsupported source '{source}', please use one of: {allowed}", allowed=SOURCES
        )
    return parser(data, file_type, password)


async def parse_export_async(
    source: str,
    data: Union[str, bytes],
    file_type: str,
    password: Optional[str] = None,
) -> List[Entry]:
    """Runs parse_export on a worker thread so KDBX key derivation doesn't block the loop."""
    return await asyncio.to_thread(parse_export, source, data, file_type, password)
