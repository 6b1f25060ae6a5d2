from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import aiohttp
import msgspec

from .config import GITHUB_API_VERSION, GITHUB_USER_AGENT, github_api_url
from .errors import CancellationFailure, TransportFailure
from .logged_http import logged_get, logged_post


class Job(msgspec.Struct):
    name: str
    status: Optional[str] = None


class JobList(msgspec.Struct):
    jobs: List[Job]


_job_list_decoder = msgspec.json.Decoder(JobList)


class GithubApi:
    """
    Minimal GitHub REST client for workflow runs.

    Endpoints:
      - GET  /repos/<owner>/<repo>/actions/runs/<run_id>/jobs
      - POST /repos/<owner>/<repo>/actions/runs/<run_id>/cancel
    """

    def __init__(self, token: str, *, base_url: Optional[str] = None, timeout_s: int = 30) -> None:
        self.token = (token or "").strip()
        self.base_url = (base_url or github_api_url()).rstrip("/")
        self.timeout_s = timeout_s

    def _headers(self) -> Dict[str, str]:
        # <https://docs.github.com/en/rest/using-the-rest-api/getting-started-with-the-rest-api?apiVersion=2022-11-28#user-agent>
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": GITHUB_USER_AGENT,
        }

    def url(self, path: str) -> str:
        if not path.startswith("/"):
            raise ValueError(f"Path does not start with slash: {path}")
        return f"{self.base_url}{path}"

    def _session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)
        return aiohttp.ClientSession(timeout=timeout, headers=self._headers())

    async def list_jobs(self, repo: str, run_id: str) -> List[Job]:
        url = self.url(f"/repos/{repo}/actions/runs/{run_id}/jobs")
        try:
            async with self._session() as session:
                async with logged_get(session, url, params={"per_page": "100"}) as resp:
                    body = await resp.read()
                    if not 200 <= resp.status < 300:
                        raise TransportFailure(f"HTTP {resp.status} from {url}", url=url, status=resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailure(f"{type(e).__name__}: {e}", url=url) from e
        try:
            return _job_list_decoder.decode(body).jobs
        except msgspec.DecodeError as e:
            raise TransportFailure(f"unexpected job list from {url}: {e}", url=url) from e

    async def cancel_run(self, repo: str, run_id: str) -> None:
        url = self.url(f"/repos/{repo}/actions/runs/{run_id}/cancel")
        try:
            async with self._session() as session:
                async with logged_post(session, url) as resp:
                    if not 200 <= resp.status < 300:
                        text = await resp.text()
                        raise CancellationFailure(
                            f"cancel of run {run_id} failed: HTTP {resp.status}: {text[:200]}",
                            status=resp.status,
                        )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CancellationFailure(f"cancel of run {run_id} failed: {type(e).__name__}: {e}") from e
