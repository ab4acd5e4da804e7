"""Prometheus metrics for upload outcomes."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

UPLOADS_TOTAL = Counter(
    "asset_uploads_total",
    "Total number of upload pipeline runs",
    labelnames=("kind", "outcome"),
)
STAGE_FAILURES = Counter(
    "asset_upload_stage_failures_total",
    "Upload pipeline failures by stage",
    labelnames=("stage",),
)
POLL_ATTEMPTS = Histogram(
    "asset_upload_poll_attempts",
    "Readiness polls needed before an asset became READY",
    buckets=(1, 2, 3, 5, 10, 20, 30, 60),
)


def record_upload(kind: str, outcome: str) -> None:
    UPLOADS_TOTAL.labels(kind=kind, outcome=outcome).inc()


def record_stage_failure(stage: str) -> None:
    STAGE_FAILURES.labels(stage=stage).inc()


def record_poll_attempts(attempts: int) -> None:
    POLL_ATTEMPTS.observe(attempts)


def render_latest() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
