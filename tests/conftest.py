"""Shared pytest fixtures for evg-client tests.

Fixture Organization:
    - Config fixtures: EvgConfig built from literal values, env isolated
    - Server fixtures: MockEvgServer routed through httpx.MockTransport
    - Logging fixtures: restore the evg_client logger after each test
"""

import logging
import sys
from pathlib import Path

import pytest

from evg_client.config import EvgConfig, reset_config
from evg_client.logging_config import LOGGER_NAME

# Add tests directory to sys.path so tests can import the mocks package
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from mocks.evg_api_mock import BASE_URL, MockEvgServer  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_evg_env(monkeypatch):
    """Keep developer EVG_* variables and the config singleton out of tests."""
    for key in [
        "EVG_USER",
        "EVG_API_KEY",
        "EVG_API_SERVER_HOST",
        "EVG_UI_SERVER_HOST",
        "EVG_TIMEOUT",
        "EVG_LOG_LEVEL",
        "EVG_LOG_FORMAT",
        "EVG_CONFIG_FILE",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def evg_config():
    """EvgConfig pointing at the mock server host."""
    return EvgConfig(
        user="jane.doe",
        api_key="0123456789abcdef",
        api_server_host=BASE_URL + "/",
    )


@pytest.fixture
def evg_server():
    """Empty MockEvgServer; tests register the routes they need."""
    return MockEvgServer()


@pytest.fixture
def restore_evg_logger():
    """Snapshot and restore the evg_client logger configuration."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
