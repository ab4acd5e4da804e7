"""Configuration for the asset upload service."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_", env_nested_delimiter="__", extra="allow", populate_by_name=True
    )

    store_domain: str = Field(
        "",
        validation_alias=AliasChoices("UPLOAD_STORE_DOMAIN", "SHOPIFY_STORE_DOMAIN", "store_domain"),
        description="Shop hostname, e.g. my-shop.myshopify.com",
    )
    admin_token: str = Field(
        "",
        validation_alias=AliasChoices("UPLOAD_ADMIN_TOKEN", "SHOPIFY_ADMIN_TOKEN", "admin_token"),
        description="Static Admin API access token",
    )
    api_version: str = Field("2025-04", description="Admin GraphQL API version segment")

    poll_attempts: int = Field(
        30,
        ge=1,
        validation_alias=AliasChoices("UPLOAD_POLL_ATTEMPTS", "POLL_ATTEMPTS", "poll_attempts"),
        description="Maximum readiness polls before giving up; video transcodes are the slowest",
    )
    poll_interval_sec: float = Field(1.0, ge=0, description="Fixed delay between readiness polls")

    request_timeout_sec: float = Field(30, gt=0, description="Deadline for each GraphQL call")
    transfer_timeout_sec: float = Field(120, gt=0, description="Deadline for the staged binary upload")
    verify_tls: bool = Field(True, description="Verify TLS certificates for outbound calls")

    upload_path: str = Field("/api/upload", description="Route accepting the multipart upload")
    metrics_path: str = Field("/metrics", description="Route exposing Prometheus metrics")

    log_dir: str = Field("./logs", description="Directory for service log files")
    log_level: str = Field("INFO", description="Root log level")
    log_file: str = Field("upload.log", description="Log file name inside log_dir")
    log_rotate_when: str = Field("midnight", description="TimedRotatingFileHandler rotation unit")
    log_backup_count: int = Field(7, ge=0, description="Number of rotated log files to keep")

    api_title: str = "Asset Upload Service"
    api_version_label: str = "v1"

    @staticmethod
    def load_yaml_config_file(file_path: str | Path | None) -> Dict[str, Any]:
        if not file_path:
            return {}
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        import yaml  # lazy import for optional dependency

        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration YAML must produce a mapping")
        return data

    @classmethod
    def from_source(cls, *, config_file: str | None = None, **overrides: Any) -> "Settings":
        base_data = cls.load_yaml_config_file(config_file)
        base_data.update(overrides)
        return cls(**base_data)


@lru_cache
def get_settings() -> Settings:
    cfg_file = os.getenv("UPLOAD_CONFIG_FILE")
    if cfg_file:
        return Settings.from_source(config_file=cfg_file)
    return Settings()


def reload_settings() -> None:
    get_settings.cache_clear()
