"""Tests for the upload endpoint using a pipeline wired to the fake platform."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from asset_upload_service import pipeline as pipeline_module
from asset_upload_service.app import create_app
from asset_upload_service.config import Settings
from asset_upload_service.pipeline import PipelineConfig, UploadPipeline, pipeline_provider
from tests.conftest import FakeUploadSession

JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * (2 * 1024 * 1024)


@pytest.fixture()
def make_client():
    def _make(pipeline) -> TestClient:
        app = create_app()
        app.dependency_overrides[pipeline_provider] = lambda: (lambda: pipeline)
        return TestClient(app)

    return _make


def test_jpeg_upload_returns_ready_url(make_client, pipeline, fake_platform, fake_session):
    client = make_client(pipeline)

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 200, resp.text
    assert resp.json() == {"url": "https://cdn/x.jpg"}
    assert fake_platform.calls[0][1]["input"][0]["fileSize"] == str(len(JPEG))
    assert fake_platform.count("node(id") == 2
    assert fake_session.posts[0]["files"][-1][1][1] == JPEG


def test_staging_user_error_returns_422(make_client, pipeline, fake_platform, fake_session):
    fake_platform.staging = {
        "stagedTargets": [],
        "userErrors": [{"field": ["input", "0", "fileSize"], "message": "File size exceeds limit"}],
    }
    client = make_client(pipeline)

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Failed to stage upload"
    assert body["details"][0]["message"] == "File size exceeds limit"
    assert fake_session.posts == []


def test_registration_user_error_returns_422(make_client, pipeline, fake_platform):
    fake_platform.file_create = {"files": [], "userErrors": [{"field": None, "message": "Invalid source"}]}
    client = make_client(pipeline)

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 422
    assert resp.json()["error"] == "Failed to create file"


def test_transmission_failure_returns_500_with_body(make_client, pipeline_config, fake_platform, sleeps):
    session = FakeUploadSession(status_code=403, text="<Error>AccessDenied</Error>")
    pipeline = UploadPipeline(pipeline_config, client=fake_platform, session_factory=lambda: session, sleep=sleeps.append)
    client = make_client(pipeline)

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Upload to staging target failed", "details": "<Error>AccessDenied</Error>"}


def test_poll_exhaustion_returns_500_with_status(make_client, pipeline_config, fake_platform, fake_session, sleeps):
    fake_platform.nodes = [{"__typename": "MediaImage", "fileStatus": "PROCESSING", "image": None}]
    config = PipelineConfig(platform=pipeline_config.platform, poll_attempts=3, poll_interval=1.0)
    pipeline = UploadPipeline(config, client=fake_platform, session_factory=lambda: fake_session, sleep=sleeps.append)
    client = make_client(pipeline)

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 500
    assert resp.json() == {"error": "File did not become READY", "status": "PROCESSING"}
    assert fake_platform.count("node(id") == 3


def test_missing_file_returns_400(make_client, pipeline, fake_platform):
    client = make_client(pipeline)

    resp = client.post("/api/upload", data={"note": "no file here"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file uploaded"}
    assert fake_platform.calls == []


def test_file_part_without_filename_returns_400(make_client, pipeline, fake_platform):
    client = make_client(pipeline)
    body = (
        b"--testboundary\r\n"
        b'Content-Disposition: form-data; name="file"; filename=""\r\n'
        b"Content-Type: application/octet-stream\r\n"
        b"\r\n"
        b"\r\n"
        b"--testboundary--\r\n"
    )

    resp = client.post(
        "/api/upload",
        content=body,
        headers={"Content-Type": "multipart/form-data; boundary=testboundary"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file uploaded"}
    assert fake_platform.calls == []


@pytest.fixture()
def unconfigured(monkeypatch):
    monkeypatch.setattr(pipeline_module, "get_settings", lambda: Settings(store_domain="", admin_token=""))
    pipeline_module.get_pipeline.cache_clear()
    yield
    pipeline_module.get_pipeline.cache_clear()


def test_unconfigured_service_still_reports_missing_file(unconfigured):
    client = TestClient(create_app())

    resp = client.post("/api/upload", data={"note": "no file here"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file uploaded"}


def test_unconfigured_service_rejects_upload_with_500(unconfigured):
    client = TestClient(create_app())

    resp = client.post("/api/upload", files={"file": ("photo.jpg", JPEG, "image/jpeg")})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Missing platform settings: store_domain, admin_token"}


def test_malformed_multipart_returns_500(make_client, pipeline, fake_platform):
    client = make_client(pipeline)

    resp = client.post(
        "/api/upload",
        content=b"--garbage\r\nnot a multipart body",
        headers={"Content-Type": "multipart/form-data"},
    )

    assert resp.status_code == 500
    assert resp.json() == {"error": "Error parsing form data"}
    assert fake_platform.calls == []


def test_wrong_method_returns_405(make_client, pipeline):
    client = make_client(pipeline)

    resp = client.get("/api/upload")

    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}


def test_health_and_metrics(make_client, pipeline):
    client = make_client(pipeline)

    assert client.get("/healthz").json() == {"status": "ok"}
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "asset_uploads_total" in metrics.text
