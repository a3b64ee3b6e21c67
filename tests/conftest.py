import datetime

import pytest

from biskviit import CookieJar

pytest_plugins = ("pytester",)

FAR_FUTURE = datetime.datetime(2999, 1, 13, 22, 23, 1, tzinfo=datetime.timezone.utc)


@pytest.fixture
def jar() -> CookieJar:
    return CookieJar()


@pytest.fixture
def far_future() -> datetime.datetime:
    return FAR_FUTURE
