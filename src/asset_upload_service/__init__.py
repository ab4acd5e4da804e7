"""Upload service hosting user files on the commerce platform's file storage."""

from .errors import (
    FormParseError,
    MissingFileError,
    PollTimeoutError,
    ProtocolError,
    RegistrationError,
    StagingError,
    TransmissionError,
    UploadError,
)
from .models import AssetKind, AssetRecord, StagedTarget, UploadRequest, UploadResult
from .pipeline import PipelineConfig, UploadPipeline, build_pipeline, get_pipeline
from .platform_client import PlatformClient, PlatformConfig

__all__ = [
	"AssetKind",
	"AssetRecord",
	"StagedTarget",
	"UploadRequest",
	"UploadResult",
	"PlatformClient",
	"PlatformConfig",
	"PipelineConfig",
	"UploadPipeline",
	"build_pipeline",
	"get_pipeline",
	"UploadError",
	"FormParseError",
	"MissingFileError",
	"ProtocolError",
	"StagingError",
	"TransmissionError",
	"RegistrationError",
	"PollTimeoutError",
]
