"""URL format checks for configured endpoints."""

import re

import httpx

# Schemes whose URLs must name a host
HOST_REQUIRED_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_valid_url(value: str) -> bool:
    """
    Return True if `value` parses as an absolute URL.

    A scheme is required; http(s)-style schemes also need a host.
    Whitespace inside the URL makes it invalid.
    """
    if not isinstance(value, str) or not SCHEME_PATTERN.match(value):
        return False
    if any(ch.isspace() for ch in value.strip()):
        return False

    try:
        url = httpx.URL(value.strip())
    except (httpx.InvalidURL, ValueError, TypeError):
        return False

    if not url.scheme:
        return False
    if url.scheme in HOST_REQUIRED_SCHEMES:
        return bool(url.host)
    return bool(url.host or url.path)
