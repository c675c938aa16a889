# src/resealer/common/models.py
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass(frozen=True)
class CustomField:
    # Flattened "Label: value" fact that has no slot in the structured schema
    note: str
    type: str = "note"

    @classmethod
    def labeled(cls, label: str, value: str) -> "CustomField":
        return cls(note=f"{label}: {value}")

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "note": self.note}


@dataclass(frozen=True)
class EntryData:
    kind: ClassVar[str] = "custom"

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "custom_fields":
                value = [c.to_dict() for c in value]
            elif isinstance(value, list):
                value = list(value)
            result[_camel(f.name)] = value
        return result


@dataclass(frozen=True)
class LoginData(EntryData):
    kind: ClassVar[str] = "login"

    title: str = ""
    username: str = ""
    password: str = ""
    note: str = ""
    websites: List[str] = field(default_factory=list)
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class CreditCardData(EntryData):
    kind: ClassVar[str] = "creditCard"

    title: str = ""
    name: str = ""              # Cardholder
    number: str = ""
    expire_date: str = ""       # MM/YY when normalizable
    security_code: str = ""
    pin_code: str = ""
    note: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class IdentityData(EntryData):
    kind: ClassVar[str] = "identity"

    title: str = ""
    full_name: str = ""
    username: str = ""
    email: str = ""
    phone_number: str = ""
    address: str = ""
    zip: str = ""
    city: str = ""
    region: str = ""
    country: str = ""
    note: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class NoteData(EntryData):
    kind: ClassVar[str] = "note"

    title: str = ""
    note: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class WifiPasswordData(EntryData):
    kind: ClassVar[str] = "wifiPassword"

    title: str = ""             # Network name
    password: str = ""
    note: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class CustomData(EntryData):
    kind: ClassVar[str] = "custom"

    title: str = ""
    custom_fields: List[CustomField] = field(default_factory=list)


@dataclass(frozen=True)
class Entry:
    """One normalized record, ready to be handed to a destination vault."""

    data: EntryData
    folder: Optional[str] = None    # Slash-joined ancestor groups, None at the root
    is_favorite: bool = False

    @property
    def type(self) -> str:
        return self.data.kind

    @property
    def title(self) -> str:
        return getattr(self.data, "title", "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "folder": self.folder,
            "isFavorite": self.is_favorite,
            "data": self.data.to_dict(),
        }
