"""Binary transfer of the raw file to a staged upload target."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Tuple

from requests import Response, Session
from requests.exceptions import RequestException

from .errors import TransmissionError
from .models import StagedTarget, UploadRequest

logger = logging.getLogger(__name__)

FILE_FIELD = "file"

MultipartField = Tuple[str, Tuple[Optional[str], Any, Optional[str]]]


def build_multipart_fields(target: StagedTarget, upload: UploadRequest) -> List[MultipartField]:
    """Signed parameters in platform order, then the file part.

    The signature covers the field order, so the file must stay last.
    """

    fields: List[MultipartField] = [(p.name, (None, p.value, None)) for p in target.parameters]
    fields.append((FILE_FIELD, (upload.filename, upload.content, upload.mime_type)))
    return fields


def transmit(
    target: StagedTarget,
    upload: UploadRequest,
    session_factory: Callable[[], Session] = Session,
    timeout: float = 120,
    verify: bool = True,
) -> Response:
    try:
        with session_factory() as http:
            response = http.post(
                target.url,
                files=build_multipart_fields(target, upload),
                timeout=timeout,
                verify=verify,
            )
    except RequestException as exc:
        logger.error("transmit.request_failed url=%s error=%s", target.url, exc)
        raise TransmissionError(f"Upload to staging target failed: {exc}", body=str(exc)) from exc

    if not 200 <= response.status_code < 300:
        logger.error("transmit.rejected status=%s body=%s", response.status_code, response.text)
        raise TransmissionError(status_code=response.status_code, body=response.text)

    return response
