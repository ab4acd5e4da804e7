"""Smoke test client for the asset upload service.

Usage:
    python scripts/upload_file.py path/to/photo.jpg --api http://127.0.0.1:8000
    python scripts/upload_file.py path/to/clip.mp4 --direct

``--direct`` runs the pipeline in-process using UPLOAD_* / SHOPIFY_* env settings.
"""

from __future__ import annotations

import argparse
import json
import mimetypes
import sys
from pathlib import Path

import requests


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Asset upload smoke test")
    parser.add_argument("path", help="Local file to upload")
    parser.add_argument("--api", default="http://127.0.0.1:8000", help="Upload service base url")
    parser.add_argument("--route", default="/api/upload", help="Upload route on the service")
    parser.add_argument("--mime", default=None, help="Override the guessed MIME type")
    parser.add_argument("--direct", action="store_true", help="Run the pipeline in-process instead of over HTTP")
    parser.add_argument("--timeout", type=float, default=180.0, help="HTTP timeout seconds")
    return parser.parse_args()


def upload_via_api(api: str, route: str, path: Path, mime: str, timeout: float) -> dict:
    with path.open("rb") as fh:
        resp = requests.post(
            f"{api.rstrip('/')}{route}",
            files={"file": (path.name, fh, mime)},
            timeout=timeout,
        )
    try:
        data = resp.json()
    except ValueError:
        data = {"error": resp.text}
    data["http_status"] = resp.status_code
    return data


def upload_direct(path: Path, mime: str) -> dict:
    src = Path(__file__).resolve().parent.parent / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from asset_upload_service.errors import UploadError, error_response_body
    from asset_upload_service.logging_config import setup_logging
    from asset_upload_service.models import UploadRequest
    from asset_upload_service.pipeline import get_pipeline

    setup_logging()
    upload = UploadRequest.from_bytes(path.read_bytes(), path.name, mime)
    try:
        return get_pipeline().run(upload).to_dict()
    except UploadError as exc:
        body = error_response_body(exc)
        body["http_status"] = exc.http_status
        return body


def main() -> int:
    args = parse_args()
    path = Path(args.path)
    if not path.is_file():
        print(f"file not found: {path}", file=sys.stderr)
        return 2

    mime = args.mime or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    if args.direct:
        result = upload_direct(path, mime)
    else:
        result = upload_via_api(args.api, args.route, path, mime, args.timeout)

    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0 if result.get("url") else 1


if __name__ == "__main__":
    sys.exit(main())
