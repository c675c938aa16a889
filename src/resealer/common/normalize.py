# src/resealer/common/normalize.py

import json
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_NUMERIC_EXPIRY_RE = re.compile(r"(\d{1,2})/(\d{4}|\d{2})")


# --- Websites ---

def add_https(url: str) -> str:
    """Prefixes https:// onto URLs that carry no scheme of their own."""
    url = (url or "").strip()
    if not url or _SCHEME_RE.match(url):
        return url
    return f"https://{url}"


def to_websites(value: str) -> List[str]:
    """Splits a comma-separated URL list into scheme-qualified websites."""
    if not value:
        return []
    return [add_https(site) for site in value.split(",") if site.strip()]


# --- Phone numbers ---

def normalize_phone(value: str) -> str:
    """
    Composes '+<num><ext>' from structured phone blobs such as
    '{"num":"5551234","ext":"1","cc3l":"USA"}'.

    Anything that is not such a blob is returned untouched.
    """
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError, RecursionError):
        return value
    if not isinstance(parsed, dict) or not parsed.get("num"):
        logger.debug("Phone value is not a structured number, keeping as-is")
        return value
    return f"+{parsed['num']}{parsed.get('ext') or ''}"


def normalize_phone_digits(value: str) -> str:
    """Reduces a free-text phone number to '+<digits>'."""
    if not value:
        return ""
    digits = re.sub(r"\D", "", value)
    return f"+{digits}" if digits else value


# --- Card expiry dates ---

def normalize_expiry(value: str) -> str:
    """
    Normalizes 'January, 2026' and '1/2026' / '01/26' style dates to 'MM/YY'.

    Unknown month names, months outside 1-12 and any other shape pass through.
    """
    if not value:
        return ""

    parts = value.split(",")
    if len(parts) == 2:
        month_name, year = parts[0].strip().lower(), parts[1].strip()
        if month_name in MONTH_NAMES and year:
            return f"{MONTH_NAMES.index(month_name) + 1:02d}/{year[-2:]}"
        return value

    match = _NUMERIC_EXPIRY_RE.fullmatch(value.strip())
    if match:
        month, year = int(match.group(1)), match.group(2)
        if 1 <= month <= 12:
            return f"{month:02d}/{year[-2:]}"
    return value
