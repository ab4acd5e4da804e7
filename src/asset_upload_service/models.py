"""Data model shared by every stage of the upload pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_FILENAME = "upload.bin"


class AssetKind(str, Enum):
    VIDEO = "VIDEO"
    IMAGE = "IMAGE"
    FILE = "FILE"

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> "AssetKind":
        mime = (mime_type or "").strip().lower()
        if mime.startswith("video/"):
            return cls.VIDEO
        if mime.startswith("image/"):
            return cls.IMAGE
        return cls.FILE

    @property
    def typename(self) -> str:
        return _TYPENAMES[self]

    @classmethod
    def from_typename(cls, typename: str | None) -> Optional["AssetKind"]:
        for kind, name in _TYPENAMES.items():
            if name == typename:
                return kind
        return None


_TYPENAMES = {
    AssetKind.VIDEO: "Video",
    AssetKind.IMAGE: "MediaImage",
    AssetKind.FILE: "GenericFile",
}


class ReadinessState(str, Enum):
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    READY = "READY"
    FAILED = "FAILED"

    @classmethod
    def is_ready(cls, value: Any) -> bool:
        return str(value or "").upper() == cls.READY.value


@dataclass(frozen=True)
class UploadRequest:
    content: bytes
    filename: str
    mime_type: str
    size: int

    @classmethod
    def from_bytes(cls, content: bytes, filename: str | None, mime_type: str | None) -> "UploadRequest":
        return cls(
            content=content,
            filename=(filename or "").strip() or DEFAULT_FILENAME,
            mime_type=(mime_type or "").strip() or DEFAULT_MIME_TYPE,
            size=len(content),
        )

    @property
    def kind(self) -> AssetKind:
        return AssetKind.from_mime_type(self.mime_type)


@dataclass(frozen=True)
class StagedParameter:
    name: str
    value: str


@dataclass(frozen=True)
class StagedTarget:
    url: str
    resource_url: str
    parameters: Tuple[StagedParameter, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StagedTarget":
        return cls(
            url=str(payload.get("url") or ""),
            resource_url=str(payload.get("resourceUrl") or ""),
            parameters=tuple(
                StagedParameter(name=str(p.get("name")), value=str(p.get("value") or ""))
                for p in payload.get("parameters") or []
            ),
        )


def extract_variant_url(typename: str | None, payload: Mapping[str, Any], fallback: "AssetKind | None" = None) -> Optional[str]:
    """Read the public URL out of a GenericFile/MediaImage/Video payload."""

    kind = AssetKind.from_typename(typename) or fallback
    if kind is AssetKind.FILE:
        url = payload.get("url")
    elif kind is AssetKind.IMAGE:
        url = (payload.get("image") or {}).get("url")
    elif kind is AssetKind.VIDEO:
        sources = payload.get("sources") or []
        url = (sources[0] or {}).get("url") if sources else None
    else:
        url = None
    return url or None


@dataclass(frozen=True)
class AssetRecord:
    id: str
    kind: AssetKind
    typename: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], kind: AssetKind) -> "AssetRecord":
        return cls(
            id=str(payload.get("id") or ""),
            kind=kind,
            typename=payload.get("__typename"),
            raw=payload,
        )

    def ready_url(self) -> Optional[str]:
        return extract_variant_url(self.typename, self.raw, fallback=self.kind)


@dataclass(frozen=True)
class UploadResult:
    url: str
    asset_id: str
    kind: AssetKind
    attempts: int

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "asset_id": self.asset_id, "kind": self.kind.value, "attempts": self.attempts}
