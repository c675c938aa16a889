# tests/test_router.py

import asyncio

import pytest

from resealer.common.errors import (
    AuthenticationError,
    CorruptInputError,
    InputError,
    ResealerError,
    UnsupportedFormatError,
)
from resealer.router import parse_export, parse_export_async

KEEPASS_CSV = '"Account","Login Name","Password","Web Site","Comments"\n"Site","user","pass","site.com","note"'


def test_dispatches_by_source():
    [entry] = parse_export("keepass", KEEPASS_CSV, "csv")
    assert entry.data.title == "Site"

    lastpass = "url,username,password,totp,extra,name,grouping,fav\nbank.com,me,pw,,,Bank,,0"
    assert parse_export("LastPass", lastpass, "csv")[0].data.websites == ["https://bank.com"]


def test_unknown_source():
    with pytest.raises(UnsupportedFormatError, match="keepass, lastpass, nordpass") as excinfo:
        parse_export("1password", "", "csv")
    assert "keepass" in excinfo.value.allowed


def test_encrypted_format_without_password(mocker):
    mock_open = mocker.patch("resealer.keepass.kdbx.PyKeePass")
    with pytest.raises(InputError):
        parse_export("keepass", b"db", "kdbx")
    mock_open.assert_not_called()


def test_wrong_password_is_not_reported_as_corruption(mocker):
    mocker.patch("resealer.keepass.kdbx.PyKeePass", side_effect=Exception("Invalid credentials"))
    with pytest.raises(AuthenticationError):
        parse_export("keepass", b"db", "kdbx", "wrong")


def test_errors_are_value_errors():
    for error in (InputError, UnsupportedFormatError, AuthenticationError, CorruptInputError):
        assert issubclass(error, ResealerError)
        assert issubclass(error, ValueError)


def test_async_wrapper_matches_sync_result():
    result = asyncio.run(parse_export_async("keepass", KEEPASS_CSV, "csv"))
    assert result == parse_export("keepass", KEEPASS_CSV, "csv")
