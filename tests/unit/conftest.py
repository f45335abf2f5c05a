"""Pytest configuration and shared fixtures for unit tests."""

import pytest
import responses
from fixtures import ACCESS_ID, ACCESS_KEY, ACCOUNT, FIXED_EPOCH, FIXTURES_DIR
from lmaccess import Auth, Portal, Settings


@pytest.fixture
def mocked():
    """Activate ``responses`` for the test and expose the mock."""
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def sleeps():
    """Records rate-limit waits instead of sleeping."""
    return []


@pytest.fixture
def settings():
    return Settings(account=ACCOUNT)


@pytest.fixture
def auth():
    return Auth().login("explicit", access_id=ACCESS_ID, access_key=ACCESS_KEY)


@pytest.fixture
def portal(auth, settings, sleeps):
    """A portal with a frozen clock and a recording sleep."""
    return Portal(auth, settings, clock=lambda: FIXED_EPOCH, sleep=sleeps.append)


@pytest.fixture
def fixtures_dir():
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR
