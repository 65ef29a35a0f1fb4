# app/deeplink.py
"""
Deep links into URL-mode analysis.

A link such as /?url=example.com asks the app to analyze that site's
terms on load. Once a result is shown (or the view is reset) the query
string is dropped so a reload does not re-run the analysis.
"""
from __future__ import annotations

from typing import Mapping, Optional, Union
from urllib.parse import parse_qs, urlsplit, urlunsplit

DEEP_LINK_PARAM = "url"


def parse_deep_link(query: Union[str, Mapping[str, str]]) -> Optional[str]:
    """
    Extract the deep-link target.

    Args:
        query: Raw query string ("url=...&x=1") or a mapping of parameters

    Returns:
        The trimmed target, or None if absent or blank
    """
    if isinstance(query, str):
        values = parse_qs(query.lstrip("?")).get(DEEP_LINK_PARAM, [])
        value = values[0] if values else None
    else:
        value = query.get(DEEP_LINK_PARAM)

    if value is None:
        return None
    value = value.strip()
    return value or None


def clear_deep_link(location: str) -> str:
    """Return location without its query string or fragment."""
    parts = urlsplit(location)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))
