import datetime
import math
from typing import Any, Dict, Final, Iterator, List, Optional

import attr
from multidict import CIMultiDict
from yarl import URL

from . import hdrs
from ._cookie_helpers import (
    _COOKIE_BOOL_ATTRS,
    _COOKIE_KNOWN_ATTRS,
    normalize_domain,
    parse_date,
    parse_max_age,
    split_cookie_parts,
)
from .abc import AbstractCookieJar
from .helpers import (
    MAX_DATETIME,
    get_path,
    is_ip_address,
    normalize_path,
    parse_url,
    utcnow,
)
from .log import jar_logger
from .typedefs import ClearCookiePredicate, LooseHeaders, StrOrURL

__all__ = ("Cookie", "CookieJar")


SESSION_TIMEOUT: Final[int] = 1800  # 30 min


def _as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


@attr.s(frozen=True, slots=True)
class Cookie:
    """A single cookie record.

    Only name and value are sent back to the server; the other
    fields decide where the cookie is sent and for how long.
    Naive expiration times are taken as UTC.
    """

    name = attr.ib(type=str, default="")
    value = attr.ib(type=Optional[str], default=None)
    expires = attr.ib(
        type=Optional[datetime.datetime], default=None, converter=_as_utc
    )
    path = attr.ib(type=Optional[str], default=None)
    domain = attr.ib(type=Optional[str], default=None)
    secure = attr.ib(type=bool, default=False)
    httponly = attr.ib(type=bool, default=False)


class CookieJar(AbstractCookieJar):
    """Keeps cookie values in memory for one client session.

    Cookies without an explicit lifetime expire after session_timeout
    seconds. Invalid input never raises: operations report failure
    through their return value instead.
    """

    def __init__(self, *, session_timeout: Optional[float] = None) -> None:
        self._session_timeout = self._check_session_timeout(session_timeout)
        self._cookies: List[Cookie] = []

    @staticmethod
    def _check_session_timeout(value: Any) -> float:
        if value is None:
            return SESSION_TIMEOUT
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            timeout = 0.0
        if not timeout or not math.isfinite(timeout):
            jar_logger.warning(
                "Invalid session timeout %r, falling back to %d seconds",
                value,
                SESSION_TIMEOUT,
            )
            return SESSION_TIMEOUT
        return timeout

    @property
    def session_timeout(self) -> float:
        return self._session_timeout

    def __len__(self) -> int:
        return len(self._cookies)

    def __iter__(self) -> Iterator[Cookie]:
        return iter(tuple(self._cookies))

    def __repr__(self) -> str:
        return f"<CookieJar {len(self._cookies)} cookies>"

    def clear(self, predicate: Optional[ClearCookiePredicate] = None) -> None:
        if predicate is None:
            self._cookies.clear()
            return

        self._cookies = [
            cookie
            for cookie in self._cookies
            if not self.is_expired(cookie) and not predicate(cookie)
        ]

    def clear_domain(self, domain: str) -> None:
        domain = domain.lower().lstrip(".")

        def within(cookie: Cookie) -> bool:
            cookie_domain = (cookie.domain or "").lstrip(".")
            return cookie_domain == domain or cookie_domain.endswith("." + domain)

        self.clear(within)

    def set(self, cookie_str: str, url: StrOrURL) -> bool:
        """Store a cookie from the value of a 'Set-Cookie:' header.

        url is the address the header was received from. Domain, path
        and expiration default to values derived from it, and a Domain
        attribute that does not cover the url host is replaced with
        the host itself.
        """
        url_parsed = parse_url(url)
        if url_parsed is None:
            return False
        hostname = (url_parsed.raw_host or "").lower()

        cookie = self.parse(cookie_str)

        domain = cookie.domain
        if domain:
            candidate = domain[1:] if domain.startswith(".") else domain
            if not self._is_domain_allowed(candidate, hostname):
                # do not allow cross origin cookies
                jar_logger.debug(
                    "Cookie %r from %s may not set domain %r",
                    cookie.name,
                    hostname,
                    domain,
                )
                domain = hostname
        else:
            domain = hostname

        if cookie.path:
            path = normalize_path(cookie.path)
        else:
            path = get_path(url_parsed.raw_path)

        expires = cookie.expires
        if expires is None:
            try:
                expires = utcnow() + datetime.timedelta(seconds=self._session_timeout)
            except OverflowError:
                expires = MAX_DATETIME

        return self.add(attr.evolve(cookie, domain=domain, path=path, expires=expires))

    def update_cookies(self, headers: LooseHeaders, response_url: StrOrURL) -> int:
        """Store every 'Set-Cookie:' header of a response.

        Returns how many of them were accepted by set().
        """
        stored = 0
        for cookie_str in CIMultiDict(headers).getall(hdrs.SET_COOKIE, ()):
            if self.set(cookie_str, response_url):
                stored += 1
        return stored

    def get(self, url: StrOrURL) -> str:
        """Return the value for the 'Cookie:' header of a request to url.

        An empty string means that no cookie applies.
        """
        return "; ".join(f"{cookie.name}={cookie.value}" for cookie in self.list(url))

    def cookie_headers(self, request_url: StrOrURL) -> "CIMultiDict[str]":
        headers: CIMultiDict[str] = CIMultiDict()
        value = self.get(request_url)
        if value:
            headers[hdrs.COOKIE] = value
        return headers

    def list(self, url: StrOrURL) -> List[Cookie]:
        """Return the cookies that apply to url, oldest first.

        Expired cookies met on the way are dropped from the jar.
        """
        url_parsed = parse_url(url)
        matched: List[Cookie] = []
        retained: List[Cookie] = []

        for cookie in reversed(self._cookies):
            if self.is_expired(cookie):
                jar_logger.debug(
                    "Dropping expired cookie %r for %s", cookie.name, cookie.domain
                )
                continue
            retained.append(cookie)
            if url_parsed is not None and self._match(cookie, url_parsed):
                matched.append(cookie)

        retained.reverse()
        self._cookies = retained
        matched.reverse()
        return matched

    def parse(self, cookie_str: str) -> Cookie:
        """Parse the value of a 'Set-Cookie:' header.

        The first pair that is not a known attribute becomes the cookie
        name and value. Only attributes present in cookie_str are set;
        when both Expires and Max-Age are given, the later one wins.
        """
        fields: Dict[str, Any] = {}

        for key, value in split_cookie_parts(cookie_str or ""):
            if key not in _COOKIE_KNOWN_ATTRS:
                if "name" not in fields:
                    fields["name"] = key
                    fields["value"] = value
            elif key in _COOKIE_BOOL_ATTRS:
                fields[key] = True
            elif key == "expires":
                expires = parse_date(value)
                if expires is not None:
                    fields["expires"] = expires
            elif key == "max-age":
                fields["expires"] = parse_max_age(value, utcnow())
            elif key == "path":
                fields["path"] = value
            elif key == "domain":
                fields["domain"] = normalize_domain(value)

        return Cookie(**fields)

    def match(self, cookie: Cookie, url: StrOrURL) -> bool:
        """Check if cookie should be sent with a request to url."""
        url_parsed = parse_url(url)
        if url_parsed is None:
            return False
        return self._match(cookie, url_parsed)

    def _match(self, cookie: Cookie, url: URL) -> bool:
        if not cookie.domain or not cookie.path:
            return False

        if not self._is_domain_match(cookie.domain, (url.raw_host or "").lower()):
            return False

        if not self.get_path(url.raw_path).startswith(cookie.path):
            return False

        if cookie.secure and url.scheme != "https":
            return False

        return True

    def add(self, cookie: Optional[Cookie]) -> bool:
        """Add, replace or remove a cookie.

        A cookie with an empty value or a past expiration removes the
        stored cookie with the same identity.
        """
        if cookie is None or not cookie.name:
            return False

        expired = self.is_expired(cookie)
        for i, stored in enumerate(self._cookies):
            if self.compare(stored, cookie):
                if expired:
                    del self._cookies[i]
                    return False
                self._cookies[i] = cookie
                return True

        if not expired:
            self._cookies.append(cookie)
        return True

    @staticmethod
    def compare(a: Cookie, b: Cookie) -> bool:
        """Check if two cookies occupy the same slot in the jar."""
        return (
            a.name == b.name
            and a.path == b.path
            and a.domain == b.domain
            and a.secure == b.secure
            and a.httponly == b.httponly
        )

    @staticmethod
    def is_expired(cookie: Cookie) -> bool:
        if not cookie.value:
            return True
        return cookie.expires is not None and cookie.expires < utcnow()

    @staticmethod
    def get_path(pathname: str) -> str:
        return get_path(pathname)

    @staticmethod
    def _is_domain_match(domain: str, hostname: str) -> bool:
        """Implements domain matching.

        .foo.com matches foo.com and its subdomains, foo.com only itself.
        """
        if hostname == domain:
            return True
        return domain.startswith(".") and ("." + hostname).endswith(domain)

    @staticmethod
    def _is_domain_allowed(domain: str, hostname: str) -> bool:
        """Check if a response from hostname may set a cookie for domain."""
        if not domain or is_ip_address(hostname):
            return False
        return len(hostname) >= len(domain) and ("." + hostname).endswith(
            "." + domain
        )
