from __future__ import annotations

import socket
import sys
import threading
import time
from pathlib import Path

import httpx
import pytest
import uvicorn

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from hncheck import settings as settings_module  # noqa: E402
from hncheck.settings import CheckSettings, get_settings  # noqa: E402
from tests.stub_site import STUB_PASSWORD, STUB_USER, StubStory, build_stub_app, newest_first_stories  # noqa: E402


@pytest.fixture(autouse=True)
def reset_settings_cache() -> None:
    settings_module._settings = None


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HN_USERNAME", "HN_PASSWORD", "HNCHECK_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def check_settings() -> CheckSettings:
    return get_settings()


@pytest.fixture()
def live_page(page, check_settings: CheckSettings):
    """Playwright page with the configured default timeout."""
    page.set_default_timeout(check_settings.timeout_ms)
    return page


@pytest.fixture()
def credentials(check_settings: CheckSettings) -> tuple[str, str]:
    if not check_settings.has_credentials:
        pytest.skip("HN_USERNAME and HN_PASSWORD must be set for the login round trip")
    return check_settings.username, check_settings.password


class StubSiteServer:
    """Serves a stub site app with uvicorn on a background thread."""

    def __init__(self, app, host: str = "127.0.0.1"):
        self.host = host
        self.port = _free_port()
        self.server = uvicorn.Server(
            uvicorn.Config(app, host=host, port=self.port, log_level="error", access_log=False)
        )
        self.thread = threading.Thread(target=self.server.run, daemon=True)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self, timeout: float = 5.0) -> str:
        self.thread.start()
        deadline = time.monotonic() + timeout
        with httpx.Client(base_url=self.url, timeout=1.0) as client:
            while time.monotonic() < deadline:
                try:
                    if client.get("/health").status_code == 200:
                        return self.url
                except httpx.TransportError:
                    pass
                time.sleep(0.1)
        self.stop()
        raise RuntimeError(f"Stub site did not answer on {self.url}/health")

    def stop(self) -> None:
        self.server.should_exit = True
        if self.thread.is_alive():
            self.thread.join(timeout=5.0)


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture()
def start_stub_site():
    """Factory that serves a stub listing and returns its base URL."""
    servers: list[StubSiteServer] = []

    def _start(stories: list[StubStory] | None = None, users: dict[str, str] | None = None, **kwargs) -> str:
        if stories is None:
            stories = newest_first_stories(120)
        if users is None:
            users = {STUB_USER: STUB_PASSWORD}
        server = StubSiteServer(build_stub_app(stories, users, **kwargs))
        servers.append(server)
        return server.start()

    yield _start

    for server in servers:
        server.stop()


@pytest.fixture()
def stub_site(start_stub_site) -> str:
    """Stub site with 120 newest-first stories and one account."""
    return start_stub_site()
