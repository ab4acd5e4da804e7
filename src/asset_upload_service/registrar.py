"""Asset registration (``fileCreate``) from an uploaded staged object."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

from .errors import RegistrationError
from .models import AssetKind, AssetRecord, StagedTarget
from .staging import GraphQLExecutor

logger = logging.getLogger(__name__)

FILE_CREATE = """
mutation($files: [FileCreateInput!]!) {
  fileCreate(files: $files) {
    files {
      __typename
      ... on GenericFile { id url }
      ... on MediaImage  { id image { url } }
      ... on Video       { id sources { url format } }
    }
    userErrors { field message }
  }
}
"""

FALLBACK_STEM = "file"


def uploaded_extension(resource_url: str) -> str:
    path = urlsplit(resource_url or "").path
    segment = path.rsplit("/", 1)[-1]
    if "." not in segment:
        return ""
    return segment.rsplit(".", 1)[-1]


def safe_filename(original: str | None, extension: str) -> str:
    """Keep ``original`` when it already carries the uploaded extension."""

    original = original or ""
    if not extension:
        return original or FALLBACK_STEM
    if original and original.endswith(extension):
        return original
    return f"{FALLBACK_STEM}.{extension}"


def build_file_create_variables(resource_url: str, kind: AssetKind, filename: str) -> dict[str, Any]:
    return {
        "files": [
            {
                "originalSource": resource_url,
                "filename": filename,
                "contentType": kind.value,
            }
        ]
    }


def register_asset(
    client: GraphQLExecutor, target: StagedTarget, kind: AssetKind, original_filename: str | None
) -> AssetRecord:
    filename = safe_filename(original_filename, uploaded_extension(target.resource_url))
    if filename != original_filename:
        logger.info("register.filename_rewritten original=%s filename=%s", original_filename, filename)

    data = client.execute(FILE_CREATE, build_file_create_variables(target.resource_url, kind, filename))
    result = data.get("fileCreate") or {}

    user_errors = result.get("userErrors") or []
    if user_errors:
        logger.warning("register.user_errors filename=%s errors=%s", filename, user_errors)
        raise RegistrationError(details=user_errors)

    files = result.get("files") or []
    if not files or not (files[0] or {}).get("id"):
        raise RegistrationError("Platform returned no created file")
    return AssetRecord.from_payload(files[0], kind)
