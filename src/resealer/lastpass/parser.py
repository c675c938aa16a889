# src/resealer/lastpass/parser.py

from typing import Callable, Dict, List, Optional, Set, Union

from resealer.common.errors import UnsupportedFormatError
from resealer.common.models import (
    CreditCardData,
    CustomField,
    Entry,
    EntryData,
    IdentityData,
    LoginData,
    NoteData,
    WifiPasswordData,
)
from resealer.common.normalize import normalize_expiry, normalize_phone, to_websites
from resealer.common.tabular import as_text, row_to_item, split_header
from resealer.common.textblock import (
    FieldRule,
    detect_note_type,
    extract_fields,
    to_custom_fields,
)

FILE_TYPES = ("csv",)

# --- Secure note layouts (label inside the 'extra' blob -> field) ---

CREDIT_CARD_FIELDS = (
    FieldRule("name", "Name on Card"),
    FieldRule("number", "Number"),
    FieldRule("expire_date", "Expiration Date", normalize_expiry),
    FieldRule("security_code", "Security Code"),
    FieldRule("note", "Notes"),
)

IDENTITY_FIELDS = (
    FieldRule("first_name", "First Name"),
    FieldRule("middle_name", "Middle Name"),
    FieldRule("last_name", "Last Name"),
    FieldRule("username", "Username"),
    FieldRule("email", "Email Address"),
    FieldRule("phone_number", "Mobile Phone", normalize_phone),
    FieldRule("address1", "Address 1"),
    FieldRule("address2", "Address 2"),
    FieldRule("address3", "Address 3"),
    FieldRule("zip", "Zip / Postal Code"),
    FieldRule("city", "City / Town"),
    FieldRule("region", "State"),
    FieldRule("country", "Country"),
    FieldRule("note", "Notes"),
)

WIFI_FIELDS = (
    FieldRule("title", "SSID"),
    FieldRule("password", "Password"),
    FieldRule("note", "Notes"),
)


def _join(separator: str, *parts: str) -> str:
    return separator.join(p for p in parts if p)


def _credit_card(item: Dict[str, str], extra: str) -> EntryData:
    values, used = extract_fields(extra, CREDIT_CARD_FIELDS)
    return CreditCardData(
        title=item.get("name") or values["name"],
        name=values["name"],
        number=values["number"],
        expire_date=values["expire_date"],
        security_code=values["security_code"],
        note=values["note"],
        custom_fields=to_custom_fields(extra, used),
    )


def _identity(item: Dict[str, str], extra: str) -> EntryData:
    values, used = extract_fields(extra, IDENTITY_FIELDS)
    return IdentityData(
        title=item.get("name", ""),
        full_name=_join(" ", values["first_name"], values["middle_name"], values["last_name"]),
        username=values["username"],
        email=values["email"],
        phone_number=values["phone_number"],
        address=_join(", ", values["address1"], values["address2"], values["address3"]),
        zip=values["zip"],
        city=values["city"],
        region=values["region"],
        country=values["country"],
        note=values["note"],
        custom_fields=to_custom_fields(extra, used),
    )


def _wifi_password(item: Dict[str, str], extra: str) -> EntryData:
    values, used = extract_fields(extra, WIFI_FIELDS)
    return WifiPasswordData(
        title=values["title"],
        password=values["password"],
        note=values["note"],
        custom_fields=to_custom_fields(extra, used),
    )


NOTE_TYPE_BUILDERS: Dict[str, Callable[[Dict[str, str], str], EntryData]] = {
    "creditCard": _credit_card,
    "identity": _identity,
    "wifiPassword": _wifi_password,
}


def _plain_record(item: Dict[str, str], extra: str) -> EntryData:
    used: Set[str] = {extra} if extra else set()
    custom_fields = to_custom_fields(extra, used)
    password = item.get("password", "")

    if not password and extra:
        return NoteData(title=item.get("name", ""), note=extra, custom_fields=custom_fields)

    totp = item.get("totp", "")
    if totp:
        custom_fields.append(CustomField.labeled("TOTP", totp))
    return LoginData(
        title=item.get("name", ""),
        username=item.get("username", ""),
        password=password,
        note=extra,
        websites=to_websites(item.get("url", "")),
        custom_fields=custom_fields,
    )


def parse_lastpass_csv(text: Union[str, bytes]) -> List[Entry]:
    """Parses a LastPass CSV export (url,username,password,totp,extra,name,grouping,fav)."""
    headers, data_rows = split_header(as_text(text))
    result = []

    for row in data_rows:
        item = row_to_item(headers, row)
        extra = item.get("extra", "")

        builder = NOTE_TYPE_BUILDERS.get(detect_note_type(extra) or "", _plain_record)
        result.append(
            Entry(
                data=builder(item, extra),
                folder=item.get("grouping") or None,
                is_favorite=item.get("fav") == "1",
            )
        )

    return result


def parse_lastpass_data(
    data: Union[str, bytes], file_type: str, password: Optional[str] = None
) -> List[Entry]:
    if (file_type or "").lower() == "csv":
        return parse_lastpass_csv(data)

    raise UnsupportedFormatError("Unsupported file type, please use CSV", allowed=FILE_TYPES)
