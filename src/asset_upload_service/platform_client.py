"""Admin GraphQL client for the commerce platform's file APIs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from requests import Session
from requests.exceptions import RequestException

from .config import Settings
from .errors import ConfigurationError, ProtocolError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"


@dataclass(frozen=True)
class PlatformConfig:
    store_domain: str
    access_token: str
    api_version: str = "2025-04"
    timeout: float = 30
    verify: bool = True

    @property
    def endpoint(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}/graphql.json"

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlatformConfig":
        missing = [
            name
            for name, value in (("store_domain", settings.store_domain), ("admin_token", settings.admin_token))
            if not (value or "").strip()
        ]
        if missing:
            raise ConfigurationError(f"Missing platform settings: {', '.join(missing)}")
        domain = settings.store_domain.strip()
        for scheme in ("https://", "http://"):
            if domain.startswith(scheme):
                domain = domain[len(scheme) :]
        return cls(
            store_domain=domain.rstrip("/"),
            access_token=settings.admin_token.strip(),
            api_version=settings.api_version,
            timeout=settings.request_timeout_sec,
            verify=settings.verify_tls,
        )


class PlatformClient:
    """Sends one authenticated query or mutation per call and returns its ``data``.

    Every call opens its own ``Session``; nothing (cookies, connections) carries
    over between calls or between uploads.
    """

    def __init__(self, config: PlatformConfig, session_factory: Callable[[], Session] = Session):
        self._config = config
        self._session_factory = session_factory
        self._headers = {
            ACCESS_TOKEN_HEADER: config.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def execute(self, query: str, variables: Mapping[str, Any] | None = None) -> dict[str, Any]:
        try:
            with self._session_factory() as http:
                http.headers.update(self._headers)
                response = http.post(
                    self._config.endpoint,
                    json={"query": query, "variables": dict(variables or {})},
                    timeout=self._config.timeout,
                    verify=self._config.verify,
                )
        except RequestException as exc:
            logger.error("platform.request_failed error=%s", exc)
            raise ProtocolError(f"Platform request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            snippet = (response.text or "")[:200].replace("\n", " ")
            raise ProtocolError(
                f"Platform response is not valid JSON (status={response.status_code}, body~{snippet})"
            ) from exc

        if not isinstance(payload, dict):
            raise ProtocolError(f"Unexpected platform response (status={response.status_code})")

        errors = payload.get("errors")
        if errors:
            # A bare string is returned for some auth failures.
            if not isinstance(errors, list):
                errors = [{"message": str(errors)}]
            logger.error("platform.graphql_errors status=%s errors=%s", response.status_code, errors)
            raise ProtocolError("Platform returned GraphQL errors", errors=errors)

        if response.status_code >= 400:
            raise ProtocolError(f"Platform request failed ({response.status_code}): {response.text}")

        data = payload.get("data")
        if not isinstance(data, dict):
            raise ProtocolError("Platform response is missing data")
        return data
