# src/resealer/keepass/parser.py

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from lxml import etree

from resealer.common.errors import CorruptInputError, InputError, UnsupportedFormatError
from resealer.common.models import CustomField, Entry, LoginData
from resealer.common.normalize import add_https
from resealer.common.tabular import as_text, row_to_item, split_header
from resealer.common.tree import TreeAdapter, walk_group

from .kdbx import parse_keepass_kdbx

logger = logging.getLogger(__name__)

DIALECTS_PATH = Path(__file__).parent / "dialects.json"
# --- Load column layouts; order of the file is the detection order ---
with open(DIALECTS_PATH, "r", encoding="utf-8") as f:
    DIALECTS: Dict[str, Dict[str, Any]] = json.load(f)

FALLBACK_DIALECT = "keepassxc"

FILE_TYPES = ("kdbx", "csv", "xml")


# --- CSV ---

def detect_dialect(headers: Sequence[str]) -> str:
    """Picks the first dialect whose fingerprint headers are all present."""
    present = {h.strip().lower() for h in headers}
    for name, dialect in DIALECTS.items():
        if all(fp in present for fp in dialect["fingerprint"]):
            return name
    logger.debug("Unrecognized KeePass CSV header %s, using %s layout", headers, FALLBACK_DIALECT)
    return FALLBACK_DIALECT


def _map_row(columns: Dict[str, str], item: Dict[str, str]) -> Entry:
    def get(field: str) -> str:
        header = columns.get(field)
        return item.get(header, "") if header else ""

    url = get("url")
    totp = get("totp")
    return Entry(
        data=LoginData(
            title=get("title"),
            username=get("username"),
            password=get("password"),
            note=get("note"),
            websites=[add_https(url)] if url else [],
            custom_fields=[CustomField.labeled("TOTP", totp)] if totp else [],
        ),
        folder=get("folder") or None,
    )


def parse_keepass_csv(text: str) -> List[Entry]:
    """Parses KeePass 1.x and KeePassXC CSV exports, auto-detecting the layout."""
    headers, data_rows = split_header(as_text(text))
    if not headers or not data_rows:
        return []

    columns = DIALECTS[detect_dialect(headers)]["columns"]
    return [_map_row(columns, row_to_item(headers, row)) for row in data_rows]


# --- XML ---

class XmlTreeAdapter(TreeAdapter):
    """Reads <Group>/<Entry>/<String> elements of a KeePass XML export."""

    def group_name(self, group: etree._Element) -> str:
        return group.findtext("Name") or ""

    def group_entries(self, group: etree._Element) -> List[etree._Element]:
        return group.findall("Entry")

    def subgroups(self, group: etree._Element) -> List[etree._Element]:
        return group.findall("Group")

    def entry_fields(self, entry: etree._Element) -> Iterable[Tuple[str, Optional[str]]]:
        for string in entry.findall("String"):
            key = string.findtext("Key")
            if key:
                yield key, string.findtext("Value")


def _parse_xml_document(data: Union[str, bytes]) -> etree._Element:
    if isinstance(data, str):
        # Text is re-encoded, so its own encoding declaration no longer applies
        parser = etree.XMLParser(
            resolve_entities=False, no_network=True, huge_tree=True, encoding="utf-8"
        )
        raw = data.encode("utf-8")
    else:
        parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)
        raw = data
    try:
        return etree.fromstring(raw, parser)
    except etree.XMLSyntaxError as e:
        logger.debug("KeePass XML did not parse: %s", e)
        raise CorruptInputError("Invalid KeePass XML file") from e


def parse_keepass_xml(data: Union[str, bytes]) -> List[Entry]:
    """Parses a KeePass 2.x XML export, keeping the group hierarchy as folders."""
    # Bytes go to lxml untouched so the document's declared encoding is honoured
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data)
    else:
        data = as_text(data)
    if not data.strip():
        return []

    document = _parse_xml_document(data)
    root = document.find("Root") if document.tag == "KeePassFile" else None
    if root is None:
        raise CorruptInputError("Invalid KeePass XML file")

    root_group = root.find("Group")
    if root_group is None:
        return []
    return walk_group(XmlTreeAdapter(), root_group)


# --- Routing ---

def parse_keepass_data(
    data: Union[str, bytes],
    file_type: str,
    password: Optional[str] = None,
) -> List[Entry]:
    """
    Parses a KeePass export.

    :param data: text for csv/xml, the raw database bytes for kdbx.
    :param file_type: one of 'kdbx', 'csv', 'xml'.
    :param password: master password, required for kdbx.
    """
    file_type = (file_type or "").lower()

    if file_type == "kdbx":
        if not password:
            raise InputError("Password is required for KDBX files")
        return parse_keepass_kdbx(data, password)

    if file_type == "csv":
        return parse_keepass_csv(data)

    if file_type == "xml":
        return parse_keepass_xml(data)

    raise UnsupportedFormatError(
        "Unsupported file type, please use KDBX, CSV, or XML", allowed=FILE_TYPES
    )
