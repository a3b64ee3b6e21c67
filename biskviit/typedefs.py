from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING

from multidict import CIMultiDict, CIMultiDictProxy, istr
from yarl import URL

if TYPE_CHECKING:
    from .cookiejar import Cookie

LooseHeaders = (
    Mapping[str, str]
    | Mapping[istr, str]
    | CIMultiDict[str]
    | CIMultiDictProxy[str]
    | Iterable[tuple[str | istr, str]]
)
StrOrURL = str | URL

ClearCookiePredicate = Callable[["Cookie"], bool]
