# tests/test_nordpass_parser.py

import csv
import io
import json

import pytest

from resealer.common.errors import UnsupportedFormatError
from resealer.common.models import CreditCardData, CustomField, IdentityData
from resealer.nordpass.parser import parse_custom_fields, parse_nordpass_csv, parse_nordpass_data

HEADER = [
    "name", "url", "additional_urls", "username", "password", "note", "cardholdername",
    "cardnumber", "cvc", "pin", "expirydate", "zipcode", "folder", "full_name",
    "phone_number", "email", "address1", "address2", "city", "country", "state",
    "type", "custom_fields",
]


def _export(*rows):
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=HEADER, restval="")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def test_password_row():
    text = _export({
        "type": "password", "name": "GitHub", "url": "github.com",
        "additional_urls": json.dumps(["gist.github.com", "https://api.github.com"]),
        "username": "octo", "password": "hunter2", "note": "work", "folder": "Dev",
        "custom_fields": json.dumps([{"label": "PIN", "value": "1234", "type": "text"}]),
    })

    [entry] = parse_nordpass_csv(text)

    assert entry.to_dict() == {
        "type": "login",
        "folder": "Dev",
        "isFavorite": False,
        "data": {
            "title": "GitHub",
            "username": "octo",
            "password": "hunter2",
            "note": "work",
            "websites": ["https://github.com", "https://gist.github.com", "https://api.github.com"],
            "customFields": [{"type": "note", "note": "PIN: 1234"}],
        },
    }


def test_credit_card_row():
    text = _export({
        "type": "credit_card", "name": "Visa", "cardholdername": "Jane Doe",
        "cardnumber": "4111111111111111", "cvc": "123", "pin": "9999",
        "expirydate": "05/2027", "zipcode": "12345",
    })

    [entry] = parse_nordpass_csv(text)

    assert entry.data == CreditCardData(
        title="Visa",
        name="Jane Doe",
        number="4111111111111111",
        expire_date="05/27",
        security_code="123",
        pin_code="9999",
        note="",
        custom_fields=[CustomField(note="Zipcode: 12345")],
    )


def test_identity_row():
    text = _export({
        "type": "identity", "name": "Me", "full_name": "Jane Doe", "email": "jane@example.com",
        "phone_number": "+1 (555) 123-4567", "address1": "1 Main St", "address2": "Apt 2",
        "zipcode": "62701", "city": "Springfield", "state": "IL", "country": "US",
    })

    [entry] = parse_nordpass_csv(text)

    assert entry.data == IdentityData(
        title="Me",
        full_name="Jane Doe",
        email="jane@example.com",
        phone_number="+15551234567",
        address="1 Main St, Apt 2",
        zip="62701",
        city="Springfield",
        region="IL",
        country="US",
    )


def test_note_folder_and_unknown_rows():
    text = _export(
        {"type": "folder", "name": "Dev"},
        {"type": "note", "name": "Wifi", "note": "password on the router", "folder": "Dev"},
        {"type": "passkey", "name": "Something new"},
    )

    note, custom = parse_nordpass_csv(text)

    assert (note.type, note.folder, note.data.note) == ("note", "Dev", "password on the router")
    assert (custom.type, custom.folder, custom.data.title) == ("custom", None, "Something new")


def test_malformed_json_columns_degrade(caplog):
    text = _export({
        "type": "password", "name": "Broken", "url": "site.com",
        "additional_urls": "[broken", "custom_fields": "not json",
    })

    [entry] = parse_nordpass_csv(text)

    assert entry.data.websites == ["https://site.com"]
    assert entry.data.custom_fields == []
    assert "malformed JSON" in caplog.text


def test_parse_custom_fields_ignores_non_objects():
    assert parse_custom_fields('[{"label": "A", "value": "1"}, "junk"]') == [CustomField(note="A: 1")]
    assert parse_custom_fields('{"label": "A"}') == []
    assert parse_custom_fields("") == []


def test_empty_export():
    assert parse_nordpass_csv("") == []
    assert parse_nordpass_csv(_export()) == []


def test_only_csv_is_supported():
    with pytest.raises(UnsupportedFormatError):
        parse_nordpass_data("data", "kdbx")
