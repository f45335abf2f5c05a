import logging
import os
import pathlib

import lmaccess
import pytest

REQUIRED_ENV = ("LM_ACCOUNT", "LM_ACCESS_ID", "LM_ACCESS_KEY")
HERE = pathlib.Path(__file__).parent

logger = logging.getLogger(__name__)


def pytest_collection_modifyitems(config, items):
    """Mark the tests in this directory as integration, skipped without portal credentials."""
    missing = [name for name in REQUIRED_ENV if not os.environ.get(name)]
    skip = pytest.mark.skip(reason=f"needs {', '.join(missing)} to reach a live portal")
    for item in items:
        if HERE not in item.path.parents:
            continue
        item.add_marker(pytest.mark.integration)
        if missing:
            item.add_marker(skip)


@pytest.fixture(scope="module")
def portal():
    """The default portal, logged in from the environment."""
    portal = lmaccess.login("environment")
    logger.info("Running integration tests against %s", portal.settings.rest_url)
    yield portal
    lmaccess.logout()
