import os
import tempfile

# Keep rotating log files out of the home directory during tests.
os.environ.setdefault("HEART_OSC_LOG_DIR", tempfile.mkdtemp(prefix="heart-osc-logs-"))

import pytest
from hypothesis import HealthCheck, settings

from helpers.ble import RecordingPublisher, RecordingSleep

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

ENV_VARS = (
    "HEART_OSC_HOST",
    "HEART_OSC_PORT",
    "HEART_OSC_BLE_ADAPTER",
    "HEART_OSC_MAX_HEART_RATE",
    "HEART_OSC_RETRY_DELAY",
    "HEART_OSC_SCAN_SETTLE",
    "HEART_OSC_LOG_TO_FILE",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from default configuration."""

    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture()
def sleeper() -> RecordingSleep:
    return RecordingSleep()
