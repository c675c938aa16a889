# src/resealer/common/errors.py
from typing import Iterable


class ResealerError(ValueError):
    """Base class for every failure a parser reports to its caller."""


class InputError(ResealerError):
    """A required caller input (e.g. the KDBX password) is missing."""


class UnsupportedFormatError(ResealerError):
    def __init__(self, message: str, allowed: Iterable[str] = ()):
        super().__init__(message)
        self.allowed = tuple(allowed)


class AuthenticationError(ResealerError):
    """The database could not be opened with the supplied password."""


class CorruptInputError(ResealerError):
    """The input is malformed or could not be decrypted for a reason other than the password."""
