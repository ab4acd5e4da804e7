"""Shared pytest fixtures: a scripted fake platform and staged-upload session."""

from __future__ import annotations

from typing import Any

import pytest

from asset_upload_service.models import UploadRequest
from asset_upload_service.pipeline import PipelineConfig, UploadPipeline
from asset_upload_service.platform_client import PlatformConfig

STAGED_TARGET = {
    "url": "https://storage.example.com/shop-uploads",
    "resourceUrl": "https://storage.example.com/shop-uploads/tmp/123/photo.jpg",
    "parameters": [
        {"name": "Content-Type", "value": "image/jpeg"},
        {"name": "success_action_status", "value": "201"},
        {"name": "key", "value": "tmp/123/photo.jpg"},
        {"name": "policy", "value": "c2lnbmVkLXBvbGljeQ=="},
        {"name": "x-goog-signature", "value": "deadbeef"},
    ],
}

IMAGE_ID = "gid://shop/MediaImage/1"


class FakePlatform:
    """Answers the three pipeline documents from scripted payloads."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.staging: dict[str, Any] = {"stagedTargets": [STAGED_TARGET], "userErrors": []}
        self.file_create: dict[str, Any] = {
            "files": [{"__typename": "MediaImage", "id": IMAGE_ID, "image": None}],
            "userErrors": [],
        }
        self.nodes: list[Any] = [
            {"__typename": "MediaImage", "fileStatus": "UPLOADED", "image": None},
            {"__typename": "MediaImage", "fileStatus": "READY", "image": {"url": "https://cdn/x.jpg"}},
        ]

    def execute(self, query: str, variables: Any = None) -> dict[str, Any]:
        self.calls.append((query, dict(variables or {})))
        if "stagedUploadsCreate" in query:
            return {"stagedUploadsCreate": self.staging}
        if "fileCreate" in query:
            return {"fileCreate": self.file_create}
        if "node(id" in query:
            node = self.nodes.pop(0) if len(self.nodes) > 1 else self.nodes[0]
            return {"node": node}
        raise AssertionError(f"unexpected query: {query}")

    def count(self, marker: str) -> int:
        return sum(1 for query, _ in self.calls if marker in query)


class FakeResponse:
    def __init__(self, status_code: int = 201, text: str = "", payload: Any = None) -> None:
        self.status_code = status_code
        self.text = text
        self._payload = payload

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeUploadSession:
    def __init__(self, status_code: int = 201, text: str = "<PostResponse/>") -> None:
        self.status_code = status_code
        self.text = text
        self.posts: list[dict[str, Any]] = []
        self.closed = False

    def __enter__(self) -> "FakeUploadSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.closed = True

    def post(self, url, files=None, timeout=None, verify=None, **kwargs):
        self.posts.append({"url": url, "files": files, "timeout": timeout, "verify": verify})
        return FakeResponse(status_code=self.status_code, text=self.text)


@pytest.fixture()
def fake_platform() -> FakePlatform:
    return FakePlatform()


@pytest.fixture()
def fake_session() -> FakeUploadSession:
    return FakeUploadSession()


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        platform=PlatformConfig(store_domain="shop.example.com", access_token="shpat_test"),
        poll_attempts=30,
        poll_interval=1.0,
        transfer_timeout=60,
    )


@pytest.fixture()
def pipeline(pipeline_config, fake_platform, fake_session, sleeps) -> UploadPipeline:
    return UploadPipeline(pipeline_config, client=fake_platform, session_factory=lambda: fake_session, sleep=sleeps.append)


@pytest.fixture()
def jpeg_upload() -> UploadRequest:
    return UploadRequest.from_bytes(b"\xff\xd8\xff" + b"\x00" * (2 * 1024 * 1024), "photo.jpg", "image/jpeg")
