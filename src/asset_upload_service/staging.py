"""Staged upload negotiation (``stagedUploadsCreate``)."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .errors import StagingError
from .models import AssetKind, StagedTarget, UploadRequest

logger = logging.getLogger(__name__)

STAGED_UPLOADS_CREATE = """
mutation($input: [StagedUploadInput!]!) {
  stagedUploadsCreate(input: $input) {
    stagedTargets { url resourceUrl parameters { name value } }
    userErrors { field message }
  }
}
"""


class GraphQLExecutor(Protocol):
    def execute(self, query: str, variables: Any = None) -> dict[str, Any]: ...


def build_staging_variables(upload: UploadRequest, kind: AssetKind) -> dict[str, Any]:
    return {
        "input": [
            {
                "filename": upload.filename,
                "mimeType": upload.mime_type,
                "httpMethod": "POST",
                "resource": kind.value,
                "fileSize": str(int(upload.size)),
            }
        ]
    }


def request_staged_target(client: GraphQLExecutor, upload: UploadRequest, kind: AssetKind) -> StagedTarget:
    data = client.execute(STAGED_UPLOADS_CREATE, build_staging_variables(upload, kind))
    result = data.get("stagedUploadsCreate") or {}

    user_errors = result.get("userErrors") or []
    if user_errors:
        logger.warning("staging.user_errors filename=%s errors=%s", upload.filename, user_errors)
        raise StagingError(details=user_errors)

    targets = result.get("stagedTargets") or []
    if not targets:
        raise StagingError("Platform returned no staged upload target")
    return StagedTarget.from_payload(targets[0])
