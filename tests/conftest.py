"""
Shared pytest fixtures: fake-socket control connections, the in-process
FTP stub server and fast client settings.
"""

from typing import List

import pytest

from fakes import FakeConnector
from ftp_stub import FTPStubServer
from treeftp.config import ClientSettings, RetryPolicy
from treeftp.core.connection import ControlConnectionManager


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def make_connection(sleeps):
    """Builds a ControlConnectionManager wired to a FakeConnector with zero backoff."""
    def factory(*sockets, max_retries: int = 3) -> ControlConnectionManager:
        connector = FakeConnector(*sockets)
        return ControlConnectionManager(
            "ftp.example.com", 21,
            retry=RetryPolicy(max_retries=max_retries, retry_interval=0),
            connector=connector,
            sleep=sleeps.append,
        )
    return factory


@pytest.fixture
def sample_tree() -> dict:
    return {
        "pub": {
            "linux": {"kernel.tar.gz": 100},
            "readme.txt": 12,
        },
        "welcome.msg": 40,
    }


@pytest.fixture
def ftp_server(sample_tree):
    server = FTPStubServer(sample_tree, users={"anonymous": None, "alice": "secret"}).start()
    yield server
    server.stop()


@pytest.fixture
def fast_settings() -> ClientSettings:
    return ClientSettings(timeout=5.0, retry=RetryPolicy(max_retries=3, retry_interval=0))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TREEFTP_PORT", "TREEFTP_TIMEOUT", "TREEFTP_MAX_RETRIES",
                 "TREEFTP_RETRY_INTERVAL", "TREEFTP_OUTPUT", "TREEFTP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
