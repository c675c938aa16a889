# src/resealer/common/tree.py
"""
Depth-first walker shared by every group/entry hierarchy (KeePass XML
elements, pykeepass objects). Each source supplies a TreeAdapter that knows
how to read its own node shape; the walker itself never inspects nodes.
"""

from typing import Any, Iterable, List, Tuple

from .models import CustomField, Entry, LoginData
from .normalize import add_https

STANDARD_FIELDS = frozenset({"Title", "UserName", "Password", "URL", "Notes"})

TOTP_FIELDS = frozenset({"otp", "TOTP Settings", "TOTP Seed", "TimeOtp-Secret-Base32"})


class TreeAdapter:
    """Minimal capability set the walker needs from a hierarchy."""

    def group_name(self, group: Any) -> str:
        raise NotImplementedError

    def group_entries(self, group: Any) -> Iterable[Any]:
        raise NotImplementedError

    def subgroups(self, group: Any) -> Iterable[Any]:
        raise NotImplementedError

    def entry_fields(self, entry: Any) -> Iterable[Tuple[str, Any]]:
        """Ordered (key, value) pairs of the entry's string fields."""
        raise NotImplementedError

    def resolve_text(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bytes):
            return value.decode("utf-8", "replace")
        return str(value)


def join_path(parent_path: str, name: str) -> str:
    return f"{parent_path}/{name}" if parent_path else name


def entry_from_fields(fields: Iterable[Tuple[str, str]], folder: str) -> Entry:
    """Builds a login Entry from already resolved (key, text) pairs."""
    pairs = list(fields)
    values = {key: text for key, text in pairs if key in STANDARD_FIELDS}
    # Custom values that repeat a structured field are already surfaced there
    used = {text for text in values.values() if text}

    custom_fields = []
    for key, text in pairs:
        if key in STANDARD_FIELDS or not text or text in used:
            continue
        label = "TOTP" if key in TOTP_FIELDS else key
        custom_fields.append(CustomField.labeled(label, text))

    url = values.get("URL", "")
    return Entry(
        data=LoginData(
            title=values.get("Title", ""),
            username=values.get("UserName", ""),
            password=values.get("Password", ""),
            note=values.get("Notes", ""),
            websites=[add_https(url)] if url else [],
            custom_fields=custom_fields,
        ),
        folder=folder or None,
    )


def walk_group(adapter: TreeAdapter, group: Any, parent_path: str = "") -> List[Entry]:
    """
    Flattens a group into entries, depth first.

    Entries directly inside a group come before the entries of its subgroups;
    subgroups keep their stored order.
    """
    current_path = join_path(parent_path, adapter.group_name(group) or "")
    results = []

    for entry in adapter.group_entries(group):
        fields = [
            (key, adapter.resolve_text(value))
            for key, value in adapter.entry_fields(entry)
        ]
        results.append(entry_from_fields(fields, current_path))

    for subgroup in adapter.subgroups(group):
        results.extend(walk_group(adapter, subgroup, current_path))

    return results
