"""Tests for the REST API (gateway faked)."""

from __future__ import annotations

import asyncio
import base64
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from shorts_studio.core.config import Settings
from shorts_studio.core.container import Container
from shorts_studio.domain.exceptions import GenerationError
from shorts_studio.presentation.api import create_app


class FakeContainer(Container):
    def __init__(self, settings: Settings, gateway: AsyncMock) -> None:
        super().__init__(settings)
        self._gateway = gateway

    def gateway(self) -> AsyncMock:
        return self._gateway


@pytest.fixture
def client(settings: Settings, fake_gateway: AsyncMock) -> TestClient:
    return TestClient(create_app(FakeContainer(settings, fake_gateway)))


class TestEndpoints:
    """Tests for the read-only endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "shorts-studio"}

    def test_catalogs(self, client: TestClient) -> None:
        body = client.get("/catalogs").json()
        voices = {v["value"]: v["restricted"] for v in body["voices"]}
        assert voices["Kore"] is False
        assert voices["eleven_adam"] is True
        assert len(body["durations"]) == 6
        assert len(body["visual_styles"]) == 6

    def test_state_before_any_run(self, client: TestClient) -> None:
        body = client.get("/state").json()
        assert body["status"] == "idle"
        assert body["has_video"] is False


class TestGenerate:
    """Tests for POST /generate."""

    def test_successful_run(self, client: TestClient, settings: Settings) -> None:
        response = client.post("/generate", json={"topic": "cats", "voice": "Kore"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["status"] == "complete"
        assert body["title"] == "Why Cats Rule the Internet"
        assert set(body["files"]) == {"script", "audio", "video"}
        assert Path(body["files"]["video"]).read_bytes() == b"MP4"
        assert Path(body["files"]["video"]).is_relative_to(settings.output_dir)

        state = client.get("/state").json()
        assert state["status"] == "complete"
        assert state["has_script"] is True

    def test_restricted_option_on_free_tier(
        self, client: TestClient, fake_gateway: AsyncMock
    ) -> None:
        response = client.post("/generate", json={"topic": "cats", "voice": "eleven_adam"})

        assert response.status_code == 402
        assert response.json()["detail"]["options"] == ["eleven_adam"]
        fake_gateway.generate_script.assert_not_awaited()

    def test_restricted_option_on_pro_tier(self, client: TestClient) -> None:
        response = client.post(
            "/generate", json={"topic": "cats", "voice": "eleven_adam", "tier": "pro"}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_missing_topic(self, client: TestClient) -> None:
        response = client.post("/generate", json={"topic": ""})
        assert response.status_code == 400

    def test_uploaded_audio(self, client: TestClient, fake_gateway: AsyncMock) -> None:
        payload = {
            "topic": "cats",
            "audio_source": "file",
            "audio_base64": base64.b64encode(b"ID3-mp3").decode(),
            "audio_mime_type": "audio/mpeg",
        }
        response = client.post("/generate", json=payload)

        assert response.status_code == 200
        assert Path(response.json()["files"]["audio"]).read_bytes() == b"ID3-mp3"
        fake_gateway.synthesize_voice.assert_not_awaited()

    def test_invalid_audio_payload(self, client: TestClient) -> None:
        response = client.post(
            "/generate",
            json={"topic": "cats", "audio_source": "file", "audio_base64": "not base64!"},
        )
        assert response.status_code == 400

    def test_failed_run_reports_error(self, client: TestClient, fake_gateway: AsyncMock) -> None:
        fake_gateway.generate_video.side_effect = GenerationError("Video generation failed: quota")

        body = client.post("/generate", json={"topic": "cats"}).json()

        assert body["success"] is False
        assert body["status"] == "error"
        assert body["error"] == "Video generation failed: quota"
        assert "script" in body["files"]
        assert "video" not in body["files"]

    def test_assets_written_off_the_event_loop(
        self, settings: Settings, fake_gateway: AsyncMock
    ) -> None:
        loops_seen: list[bool] = []

        class RecordingContainer(FakeContainer):
            def exporter(self):
                real = super().exporter()

                class _Exporter:
                    def execute(self, snapshot, run_id):
                        try:
                            asyncio.get_running_loop()
                            loops_seen.append(True)
                        except RuntimeError:
                            loops_seen.append(False)
                        return real.execute(snapshot, run_id)

                return _Exporter()

        client = TestClient(create_app(RecordingContainer(settings, fake_gateway)))
        response = client.post("/generate", json={"topic": "cats"})

        assert response.status_code == 200
        assert loops_seen == [False]
