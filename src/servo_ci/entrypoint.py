from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import log_level
from .selector import SelectionInput, select
from .watchdog import TimeoutInput, watch

logger = logging.getLogger("ServoCiEntrypoint")


def _configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="servo-ci", description="Servo CI runner management")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("hello", help="smoke test: log a greeting and exit")

    runner = sub.add_parser("runner", help="self-hosted runner management")
    runner_sub = runner.add_subparsers(dest="runner_command", required=True)

    sel = runner_sub.add_parser(
        "select",
        help="reserve a self-hosted runner if available, or else pick a GitHub-hosted runner",
    )
    sel.add_argument("--github-repository", required=True, help="${{ github.repository }}")
    sel.add_argument("--github-run-id", required=True, help="${{ github.run_id }}")
    sel.add_argument("--monitor-api-token", required=True, help="${{ secrets.SERVO_CI_MONITOR_API_TOKEN }}")
    sel.add_argument("--github-hosted-runner-label", required=True, help="e.g. ubuntu-22.04")
    sel.add_argument("--self-hosted-image-name", required=True, help="e.g. servo-ubuntu2204")
    sel.add_argument("--force-github-hosted-runner", action="store_true")

    to = runner_sub.add_parser(
        "timeout",
        help="after a wait, cancel the run if the reserved runner never picked up the job",
    )
    to.add_argument("unique_id", help="unique_id output of `runner select`")
    to.add_argument("--wait-time", type=float, required=True, help="seconds to wait before checking")
    to.add_argument("--github-repository", required=True, help="${{ github.repository }}")
    to.add_argument("--github-run-id", required=True, help="${{ github.run_id }}")
    to.add_argument("--github-token", required=True, help="${{ github.token }}")

    return ap


def _run(args: argparse.Namespace) -> None:
    if args.command == "hello":
        logger.info("hello world")
        return

    if args.runner_command == "select":
        decision = asyncio.run(
            select(
                SelectionInput(
                    github_repository=args.github_repository,
                    github_run_id=args.github_run_id,
                    monitor_api_token=args.monitor_api_token,
                    github_hosted_runner_label=args.github_hosted_runner_label,
                    self_hosted_image_name=args.self_hosted_image_name,
                    force_github_hosted_runner=args.force_github_hosted_runner,
                )
            )
        )
        logger.info(f"Selected runner: {decision.selected_runner_label} (self-hosted: {decision.is_self_hosted})")
        return

    if args.runner_command == "timeout":
        asyncio.run(
            watch(
                TimeoutInput(
                    wait_seconds=args.wait_time,
                    unique_id=args.unique_id,
                    github_repository=args.github_repository,
                    github_run_id=args.github_run_id,
                    github_token=args.github_token,
                )
            )
        )
        return

    raise ValueError(f"unknown command: {args.runner_command}")


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging()
    try:
        _run(args)
    except Exception as e:
        logger.exception(f"servo-ci {args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
