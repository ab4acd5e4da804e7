"""FastAPI entry exposing the asset upload pipeline."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .errors import FormParseError, MissingFileError, UploadError, error_response_body
from .logging_config import setup_logging
from .models import UploadRequest
from .monitoring import render_latest
from .pipeline import UploadPipeline, pipeline_provider

logger = logging.getLogger(__name__)

FILE_FIELD = "file"


async def _read_upload(request: Request) -> UploadRequest:
    try:
        form = await request.form()
    except Exception as exc:  # noqa: BLE001
        logger.error("upload.form_parse_failed error=%s", exc)
        raise FormParseError() from exc

    try:
        candidates = form.getlist(FILE_FIELD)
        upload = next((item for item in candidates if isinstance(item, UploadFile)), None)
        if upload is None or not (upload.filename or "").strip():
            raise MissingFileError()
        content = await upload.read()
        return UploadRequest.from_bytes(content, upload.filename, upload.content_type)
    finally:
        await form.close()


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings=settings)
    app = FastAPI(title=settings.api_title, version=settings.api_version_label)

    @app.exception_handler(UploadError)
    async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
        return JSONResponse(status_code=exc.http_status, content=error_response_body(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("upload.unhandled_error path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Unknown error"})

    @app.post(settings.upload_path)
    async def upload_asset(
        request: Request, build_pipeline: Callable[[], UploadPipeline] = Depends(pipeline_provider)
    ):
        upload = await _read_upload(request)
        pipeline = build_pipeline()
        result = await run_in_threadpool(pipeline.run, upload)
        return {"url": result.url}

    @app.get(settings.metrics_path)
    async def metrics() -> Response:
        content, media_type = render_latest()
        return Response(content=content, media_type=media_type)

    @app.get("/healthz")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
