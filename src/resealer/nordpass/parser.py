# src/resealer/nordpass/parser.py

import json
import logging
from typing import Any, Dict, List, Optional, Union

from resealer.common.errors import UnsupportedFormatError
from resealer.common.models import (
    CreditCardData,
    CustomData,
    CustomField,
    Entry,
    EntryData,
    IdentityData,
    LoginData,
    NoteData,
)
from resealer.common.normalize import add_https, normalize_expiry, normalize_phone_digits
from resealer.common.tabular import as_text, row_to_item, split_header

logger = logging.getLogger(__name__)

FILE_TYPES = ("csv",)


# --- Helper Parsing Functions ---

def _load_json_list(value: str, column: str) -> List[Any]:
    """Parses a JSON array literal stored in a cell; malformed content reads as []."""
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except ValueError:
        logger.warning("Ignoring malformed JSON in NordPass column '%s'", column)
        return []
    if not isinstance(parsed, list):
        logger.warning("Expected a JSON array in NordPass column '%s'", column)
        return []
    return parsed


def parse_custom_fields(value: str) -> List[CustomField]:
    """Turns '[{"label": "PIN", "value": "1234"}]' into 'PIN: 1234' custom fields."""
    custom_fields = []
    for field in _load_json_list(value, "custom_fields"):
        if not isinstance(field, dict):
            continue
        custom_fields.append(CustomField.labeled(field.get("label") or "", field.get("value") or ""))
    return custom_fields


def _websites(item: Dict[str, str]) -> List[str]:
    urls = [item.get("url", "")] + _load_json_list(item.get("additional_urls", ""), "additional_urls")
    return [add_https(u) for u in urls if isinstance(u, str) and u.strip()]


def _build(kind: str, item: Dict[str, str]) -> EntryData:
    custom_fields = parse_custom_fields(item.get("custom_fields", ""))
    title = item.get("name", "")
    note = item.get("note", "")

    if kind == "password":
        return LoginData(
            title=title,
            username=item.get("username", ""),
            password=item.get("password", ""),
            note=note,
            websites=_websites(item),
            custom_fields=custom_fields,
        )

    if kind == "credit_card":
        if item.get("zipcode"):
            custom_fields.append(CustomField.labeled("Zipcode", item["zipcode"]))
        return CreditCardData(
            title=title,
            name=item.get("cardholdername", ""),
            number=item.get("cardnumber", ""),
            expire_date=normalize_expiry(item.get("expirydate", "")),
            security_code=item.get("cvc", ""),
            pin_code=item.get("pin", ""),
            note=note,
            custom_fields=custom_fields,
        )

    if kind == "note":
        return NoteData(title=title, note=note, custom_fields=custom_fields)

    if kind == "identity":
        return IdentityData(
            title=title,
            full_name=item.get("full_name", ""),
            username=item.get("username", ""),
            email=item.get("email", ""),
            phone_number=normalize_phone_digits(item.get("phone_number", "")),
            address=", ".join(a for a in (item.get("address1"), item.get("address2")) if a),
            zip=item.get("zipcode", ""),
            city=item.get("city", ""),
            region=item.get("state", ""),
            country=item.get("country", ""),
            note=note,
            custom_fields=custom_fields,
        )

    return CustomData(title=title, custom_fields=custom_fields)


def parse_nordpass_csv(text: Union[str, bytes]) -> List[Entry]:
    """Parses a NordPass CSV export; each row's 'type' column picks the entry kind."""
    headers, data_rows = split_header(as_text(text))
    entries = []

    for row in data_rows:
        item = row_to_item(headers, row)
        kind = item.get("type", "")
        # Folder rows only declare folders; their members carry the name themselves
        if kind == "folder":
            continue
        entries.append(Entry(data=_build(kind, item), folder=item.get("folder") or None))

    return entries


def parse_nordpass_data(
    data: Union[str, bytes], file_type: str, password: Optional[str] = None
) -> List[Entry]:
    if (file_type or "").lower() == "csv":
        return parse_nordpass_csv(data)

    raise UnsupportedFormatError("Unsupported file type, please use CSV", allowed=FILE_TYPES)
