__version__ = "1.0.0"

from .abc import AbstractCookieJar
from .cookiejar import SESSION_TIMEOUT, Cookie, CookieJar

__all__ = (
    "AbstractCookieJar",
    "Cookie",
    "CookieJar",
    "SESSION_TIMEOUT",
)
