"""
Background worker entry point for notecore jobs.

    notecore-worker autosave         # long-running auto-save scheduler
    notecore-worker recover_drafts   # one-shot: save drafts left by a crash
    notecore-worker --list

The job may also come from WORKER_JOB; a CLI argument wins. Without either
the auto-save scheduler runs.
"""

import asyncio
import os
import sys
from collections.abc import Awaitable, Callable

from notecore.config import settings
from notecore.infrastructure.observability.logging import get_logger, setup_logging
from notecore.jobs.autosave_job import run_recover_drafts, start_autosave_scheduler

logger = get_logger(__name__)

JobCoroutine = Callable[[], Awaitable[None]]

DEFAULT_JOB = "autosave"

JOB_REGISTRY: dict[str, JobCoroutine] = {
    "autosave": start_autosave_scheduler,
    "recover_drafts": run_recover_drafts,
}

JOB_DESCRIPTIONS: dict[str, str] = {
    "autosave": "Drain the save queue on its interval and after idle periods",
    "recover_drafts": "Queue surviving drafts at high priority and save them once",
}

LIST_FLAGS = ("--list", "-l")


def _normalize(name: str) -> str:
    return name.strip().lower().replace("-", "_")


def _resolve_job_name(argv: list[str] | None = None) -> str:
    args = sys.argv[1:] if argv is None else argv
    if args:
        return _normalize(args[0])
    return _normalize(os.getenv("WORKER_JOB", DEFAULT_JOB))


def describe_jobs() -> list[str]:
    return [
        f"{name:<16} {JOB_DESCRIPTIONS.get(name, '')}".rstrip()
        for name in sorted(JOB_REGISTRY)
    ]


async def run_worker(job_name: str | None = None) -> None:
    name = _normalize(job_name or _resolve_job_name())
    if name not in JOB_REGISTRY:
        raise ValueError(
            f"Unknown worker job '{name}'. "
            f"Available jobs: {', '.join(sorted(JOB_REGISTRY))}"
        )

    logger.info("Starting notecore worker", job=name, description=JOB_DESCRIPTIONS.get(name))
    await JOB_REGISTRY[name]()
    logger.info("Notecore worker finished", job=name)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in LIST_FLAGS:
        print("\n".join(describe_jobs()))
        return 0

    setup_logging(log_level=settings.LOG_LEVEL)
    try:
        asyncio.run(run_worker(_resolve_job_name(args)))
    except ValueError as e:
        logger.error("Worker job not found", error=str(e))
        return 2
    except KeyboardInterrupt:
        logger.info("Worker interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
