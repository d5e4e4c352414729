"""
Auto-save background job.
Runs the coordinator's interval and idle drains outside the API process, and
a one-shot draft recovery pass.
"""

import asyncio
from datetime import UTC, datetime, timedelta

from notecore.container import ServiceContainer, build_services
from notecore.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

JOB_TICK_SECONDS = 1.0
JOB_ERROR_BACKOFF_SECONDS = 5.0


class AutoSaveJobError(Exception):
    """Custom exception for auto-save job operations."""

    def __init__(self, message: str, operation: str | None = None, recoverable: bool = True):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable


class AutoSaveJob:
    """One timer tick plus one idle check per run, with status reporting."""

    def __init__(self, services: ServiceContainer):
        self.services = services
        self.is_running = False
        self.last_run_time: datetime | None = None
        self.last_run_metrics: dict | None = None

    async def run_once(self) -> dict:
        if self.is_running:
            logger.warning("Auto-save job already running, skipping this iteration")
            return {"skipped": True, "reason": "already_running"}

        try:
            self.is_running = True
            coordinator = self.services.autosave
            timer_processed = await coordinator.on_timer_tick() if self._timer_due() else 0
            idle_processed = await coordinator.on_idle_check()

            self.last_run_time = datetime.now(UTC)
            self.last_run_metrics = {
                "job_run": "autosave",
                "timer_processed": timer_processed,
                "idle_processed": idle_processed,
                "queue_size": len(self.services.save_queue),
                **coordinator.get_save_statistics().to_dict(),
            }
            return self.last_run_metrics

        except Exception as e:
            logger.error("Auto-save job failed", error=str(e), error_type=type(e).__name__)
            raise AutoSaveJobError(f"Auto-save job failed: {e}", operation="run_once") from e

        finally:
            self.is_running = False

    def _timer_due(self) -> bool:
        last_timer_run = self.services.autosave.last_timer_run
        if last_timer_run is None:
            return True
        elapsed = (datetime.now(UTC) - last_timer_run).total_seconds()
        return elapsed >= self.services.autosave.configuration.interval

    def get_job_status(self) -> dict:
        return {
            "job_name": "autosave",
            "is_running": self.is_running,
            "last_run_time": self.last_run_time.isoformat() if self.last_run_time else None,
            "interval_seconds": self.services.autosave.configuration.interval,
            "last_run_metrics": self.last_run_metrics,
        }

    def health_check(self) -> dict:
        """Overdue when no run happened within two intervals."""
        now = datetime.now(UTC)
        overdue_threshold = timedelta(seconds=self.services.autosave.configuration.interval * 2)
        is_overdue = self.last_run_time is not None and (now - self.last_run_time) > overdue_threshold

        health_status = {
            "healthy": not is_overdue,
            "service": "autosave_job",
            "is_running": self.is_running,
            "last_run_time": self.last_run_time.isoformat() if self.last_run_time else None,
            "is_overdue": is_overdue,
        }
        if is_overdue:
            health_status["warning"] = (
                f"Job overdue by {(now - self.last_run_time).total_seconds():.1f} seconds"
            )
        return health_status


async def start_autosave_scheduler() -> None:
    """Run the auto-save loop until cancelled, then drain and shut down."""
    services = build_services()
    await services.startup()
    job = AutoSaveJob(services)
    logger.info(
        "Starting auto-save job scheduler",
        interval_seconds=services.autosave.configuration.interval,
    )

    try:
        while True:
            try:
                metrics = await job.run_once()
                if metrics.get("timer_processed") or metrics.get("idle_processed"):
                    logger.info("Auto-save job cycle completed", **metrics)

                await asyncio.sleep(JOB_TICK_SECONDS)

            except AutoSaveJobError as e:
                logger.error("Error in auto-save job scheduler", error=str(e), operation=e.operation)
                await asyncio.sleep(JOB_ERROR_BACKOFF_SECONDS)
    except asyncio.CancelledError:
        logger.info("Auto-save job scheduler stopped")
        raise
    finally:
        await services.shutdown()


async def run_recover_drafts() -> None:
    """Re-queue surviving drafts and save them once."""
    services = build_services()
    # startup() re-queues surviving drafts
    await services.startup()
    try:
        attempts = await services.autosave.force_save_all()
        logger.info(
            "Draft recovery completed",
            attempts=attempts,
            remaining=len(services.save_queue),
            **services.autosave.get_save_statistics().to_dict(),
        )
    finally:
        await services.shutdown()
