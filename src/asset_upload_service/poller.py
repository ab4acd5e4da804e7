"""Readiness polling for newly registered assets.

The platform generates derivatives (thumbnails, transcodes) asynchronously,
so a fresh asset is not immediately servable. ``ReadinessPoller`` asks for
the node's ``fileStatus`` once per attempt with a fixed pause in between,
and stops on the first READY status that also exposes a public URL.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import PollTimeoutError
from .models import AssetRecord, ReadinessState, extract_variant_url
from .staging import GraphQLExecutor

logger = logging.getLogger(__name__)

NODE_STATUS_QUERY = """
query($id: ID!) {
  node(id: $id) {
    __typename
    ... on GenericFile {
      fileStatus
      url
    }
    ... on MediaImage {
      fileStatus
      image { url }
    }
    ... on Video {
      fileStatus
      sources { url format }
    }
  }
}
"""

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_INTERVAL_SEC = 1.0


@dataclass(frozen=True)
class PollOutcome:
    url: str
    attempts: int
    last_state: Optional[str]


class ReadinessPoller:
    def __init__(
        self,
        client: GraphQLExecutor,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL_SEC,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._client = client
        self._max_attempts = max_attempts
        self._interval = interval
        self._sleep = sleep

    def wait_until_ready(self, asset: AssetRecord) -> PollOutcome:
        last_state: Optional[str] = None

        for attempt in range(1, self._max_attempts + 1):
            data = self._client.execute(NODE_STATUS_QUERY, {"id": asset.id})
            node = data.get("node")
            if not node:
                logger.error("poll.node_missing asset_id=%s attempt=%s", asset.id, attempt)
                raise PollTimeoutError(
                    f"Asset {asset.id} is no longer available",
                    last_state=last_state,
                    attempts=attempt,
                    reason="missing_node",
                )

            last_state = node.get("fileStatus")
            if ReadinessState.is_ready(last_state):
                url = extract_variant_url(node.get("__typename"), node, fallback=asset.kind)
                if url:
                    logger.info("poll.ready asset_id=%s attempt=%s", asset.id, attempt)
                    return PollOutcome(url=url, attempts=attempt, last_state=last_state)
                logger.debug("poll.ready_without_url asset_id=%s attempt=%s", asset.id, attempt)
            else:
                logger.debug("poll.pending asset_id=%s attempt=%s state=%s", asset.id, attempt, last_state)

            if attempt < self._max_attempts:
                self._sleep(self._interval)

        logger.error(
            "poll.exhausted asset_id=%s attempts=%s last_state=%s", asset.id, self._max_attempts, last_state
        )
        raise PollTimeoutError(last_state=last_state, attempts=self._max_attempts)
