import json
import re
from datetime import datetime, timezone
from typing import Any, Optional

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def strip_nulls(value: Any) -> Any:
    """
    Recursively remove keys with value None from dictionaries.

    Lists are preserved, but their elements are also cleaned.
    """
    if isinstance(value, dict):
        return {k: strip_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [strip_nulls(v) for v in value]
    return value


def render_json(payload: Any) -> bytes:
    """
    Serialize a payload exactly as the registry emits it, both over HTTP and
    in the static export.
    """
    return json.dumps(payload, ensure_ascii=False, indent=2).encode("utf-8")


def match_text(value: Optional[str], keyword: str) -> bool:
    """
    Case-insensitive substring match; missing values never match.
    """
    if value is None:
        return False
    return keyword.lower() in value.lower()


def dash_encode(name: str) -> str:
    """
    URL-safe fallback form of a server name: `/` and `.` both become `-`.

    e.g. io.github.acme/foo-tool -> io-github-acme-foo-tool
    """
    return name.replace("/", "-").replace(".", "-")


def parse_int_prefix(value: str) -> Optional[int]:
    """
    Parse the leading integer of a string, ignoring anything after it.
    Returns None when the string does not start with an integer.
    """
    match = _INT_PREFIX.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp (or bare date) into an aware UTC datetime.

    Naive values are taken as UTC. Returns None for missing or unparseable
    input.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
