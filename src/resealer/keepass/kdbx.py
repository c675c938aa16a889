# src/resealer/keepass/kdbx.py

import functools
import importlib
import io
import logging
from typing import Any, List, Tuple, Union

from pykeepass import PyKeePass

from resealer.common.errors import AuthenticationError, CorruptInputError
from resealer.common.models import Entry
from resealer.common.tree import TreeAdapter, walk_group

logger = logging.getLogger(__name__)

# pykeepass has renamed its wrong-password exception between releases and older
# versions only say so in the message; every known spelling is listed here.
KEY_MISMATCH_ERRORS = frozenset({"CredentialsError", "CredentialsIntegrityError"})
KEY_MISMATCH_MESSAGES = ("invalid credentials", "credentials are wrong", "invalid key")


@functools.lru_cache(maxsize=None)
def ensure_kdf_backend() -> None:
    """
    Checks once per process that the Argon2 implementation pykeepass derives
    KDBX4 keys with is installed. Later calls are no-ops.
    """
    try:
        importlib.import_module("argon2.low_level")
    except ImportError as e:
        raise RuntimeError(
            "Argon2 support is missing. Please install it by running: pip install argon2-cffi"
        ) from e


class KdbxTreeAdapter(TreeAdapter):
    """Reads the group/entry objects of a database opened by pykeepass."""

    def group_name(self, group: Any) -> str:
        return group.name or ""

    def group_entries(self, group: Any) -> List[Any]:
        return list(group.entries or [])

    def subgroups(self, group: Any) -> List[Any]:
        return list(group.subgroups or [])

    def entry_fields(self, entry: Any) -> List[Tuple[str, Any]]:
        pairs = [
            ("Title", entry.title),
            ("UserName", entry.username),
            ("Password", entry.password),
            ("URL", entry.url),
            ("Notes", entry.notes),
        ]
        custom = dict(entry.custom_properties or {})
        # pykeepass reserves 'otp' and hides it from custom_properties
        if "otp" not in custom and getattr(entry, "otp", None):
            pairs.append(("otp", entry.otp))
        pairs.extend(custom.items())
        return pairs


def is_key_mismatch(error: BaseException) -> bool:
    if type(error).__name__ in KEY_MISMATCH_ERRORS:
        return True
    message = str(error).lower()
    return any(fragment in message for fragment in KEY_MISMATCH_MESSAGES)


def open_database(data: Union[bytes, bytearray, memoryview], password: str) -> PyKeePass:
    """Decrypts the database; key derivation happens in here and may take a while."""
    ensure_kdf_backend()
    try:
        return PyKeePass(io.BytesIO(bytes(data)), password=password)
    except Exception as e:
        if is_key_mismatch(e):
            raise AuthenticationError("Incorrect password") from e
        logger.debug("pykeepass failed to open database", exc_info=True)
        raise CorruptInputError(f"Failed to open database: {e}") from e


def parse_keepass_kdbx(data: Union[bytes, bytearray, memoryview], password: str) -> List[Entry]:
    """Parses an encrypted KeePass database (KDBX 3.1 / 4)."""
    db = open_database(data, password)
    root_group = db.root_group
    if root_group is None:
        return []
    return walk_group(KdbxTreeAdapter(), root_group)
