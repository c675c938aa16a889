# tests/test_normalize.py

import pytest

from resealer.common.normalize import (
    add_https,
    normalize_expiry,
    normalize_phone,
    normalize_phone_digits,
    to_websites,
)


def test_add_https_only_when_scheme_missing():
    assert add_https("bank.com") == "https://bank.com"
    assert add_https("http://bank.com") == "http://bank.com"
    assert add_https("ftp://files.example.com") == "ftp://files.example.com"
    assert add_https("") == ""


def test_to_websites():
    """Comma-separated URL lists become scheme-qualified lists, never None."""
    assert to_websites("bank.com") == ["https://bank.com"]
    assert to_websites("") == []
    assert to_websites("a.com, https://b.com ,") == ["https://a.com", "https://b.com"]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('{"num":"5551234","ext":"9","cc3l":"USA"}', "+55512349"),
        ('{"num":"5551234","ext":"","cc3l":"USA"}', "+5551234"),
        ('{"num":"5551234"}', "+5551234"),
        ("555-1234", "555-1234"),
        ("5551234", "5551234"),
        ('{"ext":"1"}', '{"ext":"1"}'),
        ("", ""),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


def test_normalize_phone_survives_deeply_nested_json():
    nested = "[" * 100000
    assert normalize_phone(nested) == nested


def test_normalize_phone_digits():
    assert normalize_phone_digits("+1 (555) 123-4567") == "+15551234567"
    assert normalize_phone_digits("n/a") == "n/a"
    assert normalize_phone_digits("") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("January, 2026", "01/26"),
        ("december,2030", "12/30"),
        ("Smarch, 2026", "Smarch, 2026"),
        ("13/2026", "13/2026"),
        ("5/2027", "05/27"),
        ("05/27", "05/27"),
        ("next year", "next year"),
        ("", ""),
    ],
)
def test_normalize_expiry(raw, expected):
    assert normalize_expiry(raw) == expected
