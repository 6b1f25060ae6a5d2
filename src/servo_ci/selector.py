"""
Runner selection.

Generates a unique id for the workload, then asks the monitor servers to
reserve a self-hosted runner for it. Falls back to a GitHub-hosted runner
when self-hosted runners are disabled, not wanted, or none could be reserved.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .actions import ResultSink, default_sink, emit_result
from .config import monitor_server_urls, self_hosted_runners_disabled
from .ids import generate_identifier
from .monitor import MonitorClient, ReservationRequest

logger = logging.getLogger(__name__)

RESERVED_LABEL_PREFIX = "reserved-for:"


@dataclass(frozen=True)
class SelectionInput:
    github_repository: str
    github_run_id: str
    monitor_api_token: str
    github_hosted_runner_label: str  # e.g. ubuntu-22.04
    self_hosted_image_name: str  # e.g. servo-ubuntu2204
    force_github_hosted_runner: bool = False


@dataclass(frozen=True)
class RunnerDecision:
    selected_runner_label: str
    is_self_hosted: bool


def reserved_label(unique_id: str) -> str:
    return f"{RESERVED_LABEL_PREFIX}{unique_id}"


def plan_server_order(server_urls: Sequence[str]) -> List[str]:
    """Fresh uniform permutation of the servers, so no instance is always asked first."""
    order = list(server_urls)
    random.shuffle(order)
    return order


async def _reserve(
    client: MonitorClient, server_urls: Sequence[str], request: ReservationRequest
) -> Optional[str]:
    """Returns the base URL of the server that granted a runner, or None."""
    for base_url in plan_server_order(server_urls):
        try:
            response = await client.take(base_url, request)
        except Exception as e:
            # Any per-server failure, even one raised while building the request, moves on to the next server.
            logger.warning(f"Reservation request to {base_url} failed: {type(e).__name__}: {e}")
            continue
        if response is None:
            logger.warning(f"No self-hosted runner available from {base_url}")
            continue
        # Reservations are exclusive, so stop at the first grant.
        return base_url
    return None


def _finish(decision: RunnerDecision, sink: ResultSink) -> RunnerDecision:
    emit_result("selected_runner_label", decision.selected_runner_label, sink=sink)
    emit_result("is_self_hosted", decision.is_self_hosted, sink=sink)
    return decision


async def select(
    request: SelectionInput,
    *,
    sink: Optional[ResultSink] = None,
    server_urls: Optional[Sequence[str]] = None,
    monitor: Optional[MonitorClient] = None,
) -> RunnerDecision:
    if sink is None:
        sink = default_sink()

    unique_id = generate_identifier()
    emit_result("unique_id", unique_id, sink=sink)

    fallback = RunnerDecision(
        selected_runner_label=request.github_hosted_runner_label,
        is_self_hosted=False,
    )

    if self_hosted_runners_disabled():
        logger.info("NO_SELF_HOSTED_RUNNERS is set!")
        logger.info("Falling back to GitHub-hosted runner")
        return _finish(fallback, sink)

    if request.force_github_hosted_runner:
        logger.info("--force-github-hosted-runner is set!")
        logger.info("Falling back to GitHub-hosted runner")
        return _finish(fallback, sink)

    client = monitor or MonitorClient(request.monitor_api_token)
    reservation = ReservationRequest(
        unique_id=unique_id,
        qualified_repo=request.github_repository,
        run_id=request.github_run_id,
        image_name=request.self_hosted_image_name,
    )
    urls = list(server_urls) if server_urls is not None else monitor_server_urls()
    granted_by = await _reserve(client, urls, reservation)
    if granted_by is None:
        logger.info("Falling back to GitHub-hosted runner")
        return _finish(fallback, sink)

    logger.info(f"Reserved self-hosted runner from {granted_by} for {unique_id}")
    return _finish(
        RunnerDecision(selected_runner_label=reserved_label(unique_id), is_self_hosted=True),
        sink,
    )
