from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from .actions import annotate_error
from .errors import JobNotFound
from .github import GithubApi, Job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeoutInput:
    wait_seconds: float
    unique_id: str
    github_repository: str
    github_run_id: str
    github_token: str


def find_job(jobs: Sequence[Job], unique_id: str) -> Optional[Job]:
    """The job whose display name carries `[<unique_id>]`, if any."""
    needle = f"[{unique_id}]"
    for job in jobs:
        if needle in job.name:
            return job
    return None


def _stuck_message(request: TimeoutInput, job: Job) -> str:
    return (
        f"Job {job.name!r} is still queued after {request.wait_seconds:g}s: "
        f"the self-hosted runner reserved for {request.unique_id} never picked it up. "
        f"Check that the runner group allows {request.github_repository}. "
        f"Cancelling workflow run {request.github_run_id}."
    )


async def watch(
    request: TimeoutInput,
    *,
    api: Optional[GithubApi] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Cancel the whole run if the job for `unique_id` is still queued after the wait.

    One check only, after a single uninterrupted wait. Listing or cancel
    failures are not retried.
    """
    if api is None:
        api = GithubApi(request.github_token)

    logger.info(f"Waiting {request.wait_seconds:g}s before checking job [{request.unique_id}]")
    await sleep(request.wait_seconds)

    jobs = await api.list_jobs(request.github_repository, request.github_run_id)
    job = find_job(jobs, request.unique_id)
    if job is None:
        raise JobNotFound(request.unique_id, request.github_run_id)

    if job.status != "queued":
        logger.info(f"Job {job.name!r} is {job.status}; nothing to do")
        return

    message = _stuck_message(request, job)
    logger.error(message)
    annotate_error(message)
    await api.cancel_run(request.github_repository, request.github_run_id)
    logger.info(f"Cancelled workflow run {request.github_run_id}")
