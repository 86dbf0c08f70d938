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

    Pins the Protean environment and keeps every external collaborator on its
    in-memory adapter, whatever the developer's shell exports.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["MARKETPLACE_GEO__PROVIDER"] = "fake"
    os.environ["MARKETPLACE_CARRIER__ADAPTER"] = "fake"
    os.environ["MARKETPLACE_PAYOUT__GATEWAY"] = "fake"
    os.environ["MARKETPLACE_MAIL__ADAPTER"] = "fake"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(autouse=True)
def reset_adapters():
    """Fresh settings and adapter singletons for every test."""
    yield

    from notifications.channel import reset_channels
    from ordering.carrier import reset_carrier
    from payments.gateway import reset_gateway
    from shared.config import reset_settings
    from shipping.geo import reset_geo

    reset_geo()
    reset_carrier()
    reset_gateway()
    reset_channels()
    reset_settings()
