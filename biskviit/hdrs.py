"""HTTP Headers constants."""

from typing import Final

from multidict import istr

COOKIE: Final[istr] = istr("Cookie")
SET_COOKIE: Final[istr] = istr("Set-Cookie")
