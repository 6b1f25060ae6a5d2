from __future__ import annotations

import logging
import os
from typing import List, Mapping, Optional


DEFAULT_MONITOR_URLS = (
    "https://ci0.servo.org",
    "https://ci1.servo.org",
    "https://ci2.servo.org",
)
DEFAULT_GITHUB_API_URL = "https://api.github.com"

# <https://docs.github.com/en/rest/about-the-rest-api/api-versions?apiVersion=2022-11-28>
GITHUB_API_VERSION = "2022-11-28"
GITHUB_USER_AGENT = "ServoCI/0 (<https://github.com/servo/ci>)"

MONITOR_CONNECT_TIMEOUT_S = 5
MONITOR_REQUEST_TIMEOUT_S = 30


def self_hosted_runners_disabled(env: Optional[Mapping[str, str]] = None) -> bool:
    """Operator kill switch. Presence is enough, the value is ignored."""
    env = os.environ if env is None else env
    return "NO_SELF_HOSTED_RUNNERS" in env


def monitor_server_urls() -> List[str]:
    raw = os.getenv("SERVO_CI_MONITOR_URLS", "")
    urls = [u.strip().rstrip("/") for u in raw.split(",") if u.strip()]
    return urls or list(DEFAULT_MONITOR_URLS)


def github_output_path() -> Optional[str]:
    return (os.getenv("GITHUB_OUTPUT") or "").strip() or None


def github_api_url() -> str:
    raw = (os.getenv("SERVO_CI_GITHUB_API_URL") or "").strip()
    return (raw or DEFAULT_GITHUB_API_URL).rstrip("/")


def log_level() -> int:
    raw = (os.getenv("SERVO_CI_LOG_LEVEL") or "").strip().upper() or "INFO"
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO
