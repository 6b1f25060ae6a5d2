from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

import aiohttp
import msgspec

from .config import MONITOR_CONNECT_TIMEOUT_S, MONITOR_REQUEST_TIMEOUT_S
from .errors import TransportFailure
from .logged_http import logged_post

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationRequest:
    unique_id: str
    qualified_repo: str
    run_id: str
    image_name: str

    def query(self) -> Dict[str, str]:
        return {
            "unique_id": self.unique_id,
            "qualified_repo": self.qualified_repo,
            "run_id": self.run_id,
        }


class MonitorClient:
    """
    Client for the runner reservation endpoint of a servo/ci monitor.

    Endpoint:
      - POST <base>/profile/<image>/take?unique_id=<id>&qualified_repo=<repo>&run_id=<run_id>

    Response:
      - JSON `null` when the server has no idle runner for the profile
      - any other JSON value when a runner was reserved for `unique_id`
    """

    def __init__(
        self,
        token: Optional[str],
        *,
        connect_timeout_s: float = MONITOR_CONNECT_TIMEOUT_S,
        timeout_s: float = MONITOR_REQUEST_TIMEOUT_S,
    ) -> None:
        self.token = (token or "").strip() or None
        self.connect_timeout_s = connect_timeout_s
        self.timeout_s = timeout_s

    def _headers(self) -> Dict[str, str]:
        h: Dict[str, str] = {}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def take_url(self, base_url: str, request: ReservationRequest) -> str:
        image = quote(request.image_name, safe="")
        return f"{base_url.rstrip('/')}/profile/{image}/take?{urlencode(request.query())}"

    async def take(self, base_url: str, request: ReservationRequest) -> Any:
        """
        Ask one server to reserve a runner. Returns the decoded JSON body
        (None when no runner is available).

        Every failure mode (connection, timeout, non-2xx, bad JSON) is
        raised as TransportFailure so callers can move on to the next server.
        """
        url = self.take_url(base_url, request)
        # Fresh session per server: no connection reuse across servers.
        timeout = aiohttp.ClientTimeout(total=self.timeout_s, connect=self.connect_timeout_s)
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=self._headers()) as session:
                async with logged_post(session, url) as resp:
                    body = await resp.read()
                    if not 200 <= resp.status < 300:
                        raise TransportFailure(f"HTTP {resp.status} from {url}", url=url, status=resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(f"{type(e).__name__}: {e}", url=url) from e

        try:
            response = msgspec.json.decode(body)
        except msgspec.DecodeError as e:
            raise TransportFailure(f"malformed response body from {url}: {e}", url=url) from e
        logger.debug(f"response from {base_url}: {response!r}")
        return response
