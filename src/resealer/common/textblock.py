# src/resealer/common/textblock.py
"""
Micro-parser for free-text note blobs that pack optional fields as
'Label:value' lines, e.g. LastPass secure notes:

    NoteType:Credit Card
    Name on Card:Jane Doe
    Number:4111111111111111
    Notes:Travel card

Named sub-fields are pulled out with an ordered table of FieldRule objects;
every line that was not consumed that way becomes a CustomField.
"""

import re
from dataclasses import dataclass
from typing import Callable, Collection, Dict, Iterable, List, Optional, Set, Tuple

from .models import CustomField
from .normalize import normalize_phone

NOTE_TYPE_PREFIX = "NoteType:"

# Checked in order; the first marker found decides the entry kind
NOTE_TYPE_MARKERS: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("creditCard", re.compile(r"NoteType:Credit Card", re.IGNORECASE)),
    ("identity", re.compile(r"NoteType:(?:Address|Identity)", re.IGNORECASE)),
    ("wifiPassword", re.compile(r"NoteType:Wi-Fi Password", re.IGNORECASE)),
)

PHONE_LINE_RE = re.compile(r"^(Phone|Fax|Evening Phone):")


@dataclass(frozen=True)
class FieldRule:
    key: str
    label: str
    normalizer: Optional[Callable[[str], str]] = None


def get_field(text: str, label: str) -> str:
    """Returns the trimmed text after 'label:' on its line, or ''."""
    if not text:
        return ""
    match = re.search(
        rf"^[ \t]*{re.escape(label)}:([^\r\n]*)", text, re.MULTILINE
    )
    return match.group(1).strip() if match else ""


def extract_fields(
    text: str, rules: Iterable[FieldRule]
) -> Tuple[Dict[str, str], Set[str]]:
    """
    Applies each rule to the blob.

    :return: the (normalized) values by rule key, and the raw values that were
             found, to be excluded from the custom fields later on.
    """
    values: Dict[str, str] = {}
    used: Set[str] = set()
    for rule in rules:
        raw = get_field(text, rule.label)
        if raw:
            used.add(raw)
        values[rule.key] = rule.normalizer(raw) if rule.normalizer else raw
    return values, used


def _line_value(line: str) -> str:
    _, colon, rest = line.partition(":")
    return rest.strip() if colon else line


def _format_line(line: str) -> str:
    if PHONE_LINE_RE.match(line):
        label, _, value = line.partition(":")
        return f"{label}:{normalize_phone(value)}"
    return line


def to_custom_fields(text: str, used: Collection[str] = ()) -> List[CustomField]:
    """Turns every leftover line of the blob into a CustomField, in source order."""
    if not text or not text.strip():
        return []

    custom_fields = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(NOTE_TYPE_PREFIX):
            continue
        value = _line_value(line)
        if not value or value in used:
            continue
        custom_fields.append(CustomField(note=_format_line(line)))
    return custom_fields


def detect_note_type(text: str) -> Optional[str]:
    """Returns the entry kind named by the blob's NoteType marker, if any."""
    if not text:
        return None
    for kind, marker in NOTE_TYPE_MARKERS:
        if marker.search(text):
            return kind
    return None
