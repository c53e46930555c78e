"""Plain-text helpers shared by the panes."""

import json
from datetime import datetime
from typing import Optional

PLACEHOLDER = "-"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines) into single spaces."""
    return " ".join(text.split())


def truncate(text: str, max_len: int) -> str:
    """Flatten newlines and cut to max_len, marking the cut with '...'."""
    text = text.replace("\r", "").replace("\n", " ")
    if len(text) <= max_len:
        return text
    if max_len <= 3:
        return text[:max_len]
    return text[: max_len - 3] + "..."


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return PLACEHOLDER
    return value.strftime(TIMESTAMP_FORMAT)


def parse_json(text: str) -> tuple[bool, object]:
    """Return (True, document) if text is a JSON document."""
    if not text.strip():
        return False, None
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return False, None


def pretty_body(body: str) -> tuple[str, bool]:
    """Pretty-print a JSON body, otherwise return it verbatim.

    Returns:
        (text, is_json)
    """
    ok, document = parse_json(body)
    if not ok:
        return body, False
    return json.dumps(document, indent=2, ensure_ascii=False), True
