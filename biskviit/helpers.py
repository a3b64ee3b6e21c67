"""Various helper functions"""

import datetime
from typing import Optional

from yarl import URL

from .typedefs import StrOrURL

__all__ = ("get_path", "is_ip_address", "normalize_path", "parse_url", "utcnow")

MAX_DATETIME = datetime.datetime.max.replace(tzinfo=datetime.timezone.utc)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def parse_url(url: StrOrURL) -> Optional[URL]:
    """Return an absolute URL with a host, or None if url is not one."""
    if isinstance(url, URL):
        parsed = url
    else:
        try:
            parsed = URL(url)
        except (TypeError, ValueError):
            return None
    if not parsed.is_absolute() or not parsed.raw_host:
        return None
    return parsed


def normalize_path(path: str) -> str:
    if not path.startswith("/"):
        path = "/" + path
    if not path.endswith("/"):
        path += "/"
    return path


def get_path(pathname: str) -> str:
    """Return the directory part of a URL path.

    The last segment is always treated as a file name, so
    "/path/to/file" becomes "/path/to/" and "/path/to" becomes "/path/".
    The result starts and ends with a slash.
    """
    segments = (pathname or "/").split("/")
    segments.pop()
    return normalize_path("/".join(segments).strip())


def is_ip_address(host: Optional[str]) -> bool:
    """Check if host looks like an IP Address.

    This check is only meant as a heuristic to ensure that
    a host is not a domain name.
    """
    if not host:
        return False
    # For a host to be an ipv4 address, it must be all numeric.
    # The host must contain a colon to be an IPv6 address.
    return ":" in host or host.replace(".", "").isdigit()
