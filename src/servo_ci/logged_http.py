from __future__ import annotations

import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)


def logged_get(session: aiohttp.ClientSession, url: str, **kwargs: Any) -> Any:
    logger.info(f"GET {url}")
    return session.get(url, **kwargs)


def logged_post(session: aiohttp.ClientSession, url: str, **kwargs: Any) -> Any:
    logger.info(f"POST {url}")
    return session.post(url, **kwargs)
