"""HTTP tests for the library scan and health endpoints."""

import threading
import time
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from saboriman.api import create_app
from saboriman.config import Settings
from saboriman.domain.entities import TagFacts
from tests.fakes import FakeProber, touch


def wait_until_idle(client: TestClient, attempts: int = 100) -> dict:
    for _ in range(attempts):
        body = client.get("/api/library/scan").json()
        if not body["running"]:
            return body
        time.sleep(0.05)
    raise AssertionError("scan did not finish")


@pytest.fixture
def client(settings: Settings, music_dir: Path) -> Generator[TestClient, None, None]:
    touch(music_dir / "A" / "song1.flac")
    touch(music_dir / "A" / "song2.flac")
    touch(music_dir / "A" / "cover.jpg")
    demo = TagFacts(album="Demo", artist="X")
    app = create_app(
        settings,
        prober_factory=lambda: FakeProber({"song1.flac": demo, "song2.flac": demo}),
    )
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    """GET /health."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "app": "saboriman"}
        assert "X-Correlation-ID" in response.headers


class TestScanEndpoints:
    """POST/GET /api/library/scan."""

    def test_status_before_any_scan(self, client: TestClient) -> None:
        response = client.get("/api/library/scan")
        assert response.status_code == 200
        assert response.json() == {"running": False, "last_result": None}

    def test_trigger_and_poll(self, client: TestClient, music_dir: Path) -> None:
        response = client.post("/api/library/scan")
        assert response.status_code == 202
        body = response.json()
        assert body["message"] == "scan started"
        assert body["library_root"] == str(music_dir.resolve())

        status = wait_until_idle(client)
        result = status["last_result"]
        assert result["state"] == "done"
        assert result["scanned_files"] == 3
        assert result["added"] == 2
        assert result["removed"] == 0
        assert result["errors"] == []

    def test_conflict_while_running(self, settings: Settings, music_dir: Path) -> None:
        touch(music_dir / "song.flac")
        gate = threading.Event()
        app = create_app(settings, prober_factory=lambda: FakeProber(gate=gate))

        with TestClient(app) as client:
            try:
                assert client.post("/api/library/scan").status_code == 202
                conflict = client.post("/api/library/scan")
                assert conflict.status_code == 409
                assert conflict.json()["library_root"] == str(music_dir.resolve())
            finally:
                gate.set()
            wait_until_idle(client)

    def test_no_library_configured(self, tmp_path: Path) -> None:
        settings = Settings(
            app_env="test",
            database={"url": f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"},
            storage={"music_path": None},
        )
        with TestClient(create_app(settings)) as client:
            response = client.post("/api/library/scan")
        assert response.status_code == 503
        assert response.json() == {"detail": "No music library configured"}


class TestStartupScan:
    """scan_on_startup launches one scan from the lifespan."""

    def test_startup_scan(self, settings: Settings, music_dir: Path) -> None:
        touch(music_dir / "song.flac")
        settings.scanner.scan_on_startup = True

        with TestClient(create_app(settings, prober_factory=FakeProber)) as client:
            status = wait_until_idle(client)

        assert status["last_result"]["added"] == 1
