"""
Internal cookie handling helpers.

This module contains internal utilities for Set-Cookie parsing.
These are not part of the public API and may change without notice.
"""

import datetime
import math
import re
from typing import Iterator, Optional, Tuple

from .helpers import MAX_DATETIME
from .log import internal_logger

__all__ = (
    "normalize_domain",
    "parse_date",
    "parse_max_age",
    "split_cookie_parts",
)

_COOKIE_KNOWN_ATTRS = frozenset(
    (
        "path",
        "domain",
        "max-age",
        "expires",
        "secure",
        "httponly",
    )
)
_COOKIE_BOOL_ATTRS = frozenset(("secure", "httponly"))

_MIN_DATETIME = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)

# plain decimal numbers only, "1_000" or "0x10" are not numbers here
_MAX_AGE_RE = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*")

# RFC 6265 section 5.1.1 date tokenizer
_DATE_TOKENS_RE = re.compile(
    r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*"
    r"(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)"
)
_DATE_HMS_TIME_RE = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})(?!\d)")
_DATE_DAY_OF_MONTH_RE = re.compile(r"(\d{1,2})(?!\d)")
_DATE_MONTH_RE = re.compile(
    "(jan)|(feb)|(mar)|(apr)|(may)|(jun)|(jul)|(aug)|(sep)|(oct)|(nov)|(dec)",
    re.I,
)
_DATE_YEAR_RE = re.compile(r"(\d{2,4})(?!\d)")

# "1999-01-01 01:01:01 GMT", "2031-01-13T22:23:01Z" and friends
_ISO_DATE_RE = re.compile(
    r"\s*(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[T\s]+(\d{1,2}):(\d{2})(?::(\d{2}))?)?"
    r"\s*(?:GMT|UTC|Z)?\s*",
    re.I,
)


def split_cookie_parts(header: str) -> Iterator[Tuple[str, str]]:
    """Yield (key, value) pairs of a Set-Cookie header.

    Only the first "=" of a part separates the key from the value.
    Keys are lower-cased, both sides are stripped and parts with
    an empty key are skipped.
    """
    for part in header.split(";"):
        key, _, value = part.partition("=")
        key = key.strip().lower()
        if not key:
            continue
        yield key, value.strip()


def normalize_domain(domain: str) -> str:
    domain = domain.lower()
    if domain and not domain.startswith("."):
        domain = "." + domain
    return domain


def parse_max_age(value: str, now: datetime.datetime) -> datetime.datetime:
    """Convert a Max-Age attribute into an absolute expiration time.

    Anything that is not a finite number counts as zero seconds.
    """
    if _MAX_AGE_RE.fullmatch(value):
        delta_seconds = float(value)
    else:
        delta_seconds = 0.0
    if not math.isfinite(delta_seconds):
        delta_seconds = 0.0
    try:
        return now + datetime.timedelta(seconds=delta_seconds)
    except OverflowError:
        return MAX_DATETIME if delta_seconds > 0 else _MIN_DATETIME


def _parse_rfc6265_date(date_str: str) -> Optional[datetime.datetime]:
    found_time = False
    found_day_of_month = False
    found_month = False
    found_year = False

    hour = minute = second = 0
    day_of_month = 0
    month = 0
    year = 0

    for token_match in _DATE_TOKENS_RE.finditer(date_str):
        token = token_match.group("token")

        if not found_time:
            time_match = _DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = (int(s) for s in time_match.groups())
                continue

        if not found_day_of_month:
            day_of_month_match = _DATE_DAY_OF_MONTH_RE.match(token)
            if day_of_month_match:
                found_day_of_month = True
                day_of_month = int(day_of_month_match.group())
                continue

        if not found_month:
            month_match = _DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                assert month_match.lastindex is not None
                month = month_match.lastindex
                continue

        if not found_year:
            year_match = _DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group())

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if False in (found_day_of_month, found_month, found_year, found_time):
        return None

    if not 1 <= day_of_month <= 31:
        return None

    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    try:
        return datetime.datetime(
            year, month, day_of_month, hour, minute, second,
            tzinfo=datetime.timezone.utc,
        )
    except ValueError:
        # 31 Feb and the like
        return None


def _parse_iso_date(date_str: str) -> Optional[datetime.datetime]:
    match = _ISO_DATE_RE.fullmatch(date_str)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(g or 0) for g in match.groups())
    try:
        return datetime.datetime(
            year, month, day, hour, minute, second, tzinfo=datetime.timezone.utc
        )
    except ValueError:
        return None


def parse_date(date_str: str) -> Optional[datetime.datetime]:
    """Parse an Expires attribute value.

    Implements the date algorithm of RFC 6265 and falls back to an
    ISO-like "YYYY-MM-DD HH:MM:SS" form. Times are always UTC.
    Returns None when the value is not a date.
    """
    if not date_str:
        return None

    expires = _parse_rfc6265_date(date_str)
    if expires is None:
        expires = _parse_iso_date(date_str)
    if expires is None:
        internal_logger.debug("Ignoring unparseable cookie date %r", date_str)
    return expires
