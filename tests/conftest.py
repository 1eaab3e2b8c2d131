import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pin the environment and force the in-memory adapters, so no test reaches a
    hosted backend even when the shell has Firestore configured.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["STOREFRONT_CATALOG_SOURCE"] = "memory"
    os.environ["STOREFRONT_ORDER_SINK"] = "memory"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset process-wide adapters and settings after every test"""
    yield

    from catalogue.api.dependencies import set_catalog_mirror
    from catalogue.source import reset_catalog_source
    from ordering.api.dependencies import reset_order_placement
    from ordering.checkout import reset_order_sink
    from shared.settings import reset_settings

    set_catalog_mirror(None)
    reset_catalog_source()
    reset_order_sink()
    reset_order_placement()
    reset_settings()
