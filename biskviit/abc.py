from abc import abstractmethod
from collections.abc import Sized
from typing import TYPE_CHECKING, Iterable, List, Optional

from .typedefs import ClearCookiePredicate, StrOrURL

if TYPE_CHECKING:
    from .cookiejar import Cookie

    IterableBase = Iterable[Cookie]
else:
    IterableBase = Iterable


class AbstractCookieJar(Sized, IterableBase):
    """Abstract Cookie Jar."""

    @abstractmethod
    def clear(self, predicate: Optional[ClearCookiePredicate] = None) -> None:
        """Clear all cookies if no predicate is passed."""

    @abstractmethod
    def clear_domain(self, domain: str) -> None:
        """Clear all cookies for domain and all subdomains."""

    @abstractmethod
    def set(self, cookie_str: str, url: StrOrURL) -> bool:
        """Store a Set-Cookie header value received from url."""

    @abstractmethod
    def list(self, url: StrOrURL) -> List["Cookie"]:
        """Return the stored cookies that apply to url."""

    @abstractmethod
    def get(self, url: StrOrURL) -> str:
        """Return the Cookie header value for url."""
