"""Upload orchestration: stage -> transmit -> register -> poll."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from requests import Session

from .config import Settings, get_settings
from .errors import UploadError
from .models import UploadRequest, UploadResult
from .monitoring import record_poll_attempts, record_stage_failure, record_upload
from .platform_client import PlatformClient, PlatformConfig
from .poller import ReadinessPoller
from .registrar import register_asset
from .staging import GraphQLExecutor, request_staged_target
from .transmitter import transmit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    platform: PlatformConfig
    poll_attempts: int = 30
    poll_interval: float = 1.0
    transfer_timeout: float = 120

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            platform=PlatformConfig.from_settings(settings),
            poll_attempts=settings.poll_attempts,
            poll_interval=settings.poll_interval_sec,
            transfer_timeout=settings.transfer_timeout_sec,
        )


class UploadPipeline:
    def __init__(
        self,
        config: PipelineConfig,
        client: Optional[GraphQLExecutor] = None,
        session_factory: Callable[[], Session] = Session,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._client = client or PlatformClient(config.platform, session_factory=session_factory)
        self._session_factory = session_factory
        self._poller = ReadinessPoller(
            self._client,
            max_attempts=config.poll_attempts,
            interval=config.poll_interval,
            sleep=sleep,
        )

    def run(self, upload: UploadRequest) -> UploadResult:
        kind = upload.kind
        started = time.perf_counter()
        logger.info(
            "upload.started filename=%s mime=%s size=%s kind=%s",
            upload.filename,
            upload.mime_type,
            upload.size,
            kind.value,
        )

        stage = "staging"
        try:
            target = request_staged_target(self._client, upload, kind)
            logger.info("upload.staged kind=%s params=%s", kind.value, len(target.parameters))

            stage = "transmission"
            response = transmit(
                target,
                upload,
                session_factory=self._session_factory,
                timeout=self._config.transfer_timeout,
                verify=self._config.platform.verify,
            )
            logger.info("upload.transmitted status=%s resource_url=%s", response.status_code, target.resource_url)

            stage = "registration"
            asset = register_asset(self._client, target, kind, upload.filename)
            logger.info("upload.registered asset_id=%s typename=%s", asset.id, asset.typename)

            stage = "polling"
            outcome = self._poller.wait_until_ready(asset)
        except UploadError as exc:
            record_stage_failure(stage)
            record_upload(kind.value, "failure")
            logger.error("upload.failed stage=%s code=%s error=%s", stage, exc.code, exc.message)
            raise

        record_poll_attempts(outcome.attempts)
        record_upload(kind.value, "success")
        logger.info(
            "upload.completed asset_id=%s attempts=%s elapsed_ms=%.1f",
            asset.id,
            outcome.attempts,
            (time.perf_counter() - started) * 1000.0,
        )
        return UploadResult(url=outcome.url, asset_id=asset.id, kind=kind, attempts=outcome.attempts)


def build_pipeline(settings: Settings) -> UploadPipeline:
    return UploadPipeline(PipelineConfig.from_settings(settings))


@lru_cache
def get_pipeline() -> UploadPipeline:
    return build_pipeline(get_settings())


def pipeline_provider() -> Callable[[], UploadPipeline]:
    """Hands the route a way to build the pipeline once the form has been read."""
    return get_pipeline
