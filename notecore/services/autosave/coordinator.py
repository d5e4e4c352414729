"""
Auto-save coordinator.

Turns timer ticks and editor idleness into save-queue drains, and owns the
pause switch, configuration updates, metrics and draft recovery.
"""

import asyncio
import time
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from notecore.infrastructure.events import EventBus
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.autosave_domain import (
    AutoSaveConfiguration,
    NoteRef,
    SavePriority,
    SaveQueueItem,
    SaveStatistics,
)
from notecore.services.autosave.draft_store import DraftStore
from notecore.services.autosave.save_queue import SaveQueue

logger = get_logger(__name__)

SCHEDULER_TICK_SECONDS = 1.0
SCHEDULER_ERROR_BACKOFF_SECONDS = 5.0


class AutoSaveCoordinator:
    def __init__(
        self,
        queue: SaveQueue,
        drafts: DraftStore | None = None,
        events: EventBus | None = None,
    ):
        self.queue = queue
        self.drafts = drafts
        self.events = events
        self.is_paused = False
        self.last_activity = time.monotonic()
        self.last_timer_run: datetime | None = None
        self._idle_drained = True
        self._scheduler_task: asyncio.Task | None = None

    @property
    def configuration(self) -> AutoSaveConfiguration:
        return self.queue.configuration

    @property
    def is_active(self) -> bool:
        return self.configuration.enabled and not self.is_paused

    # Editing stimuli

    async def enqueue(
        self, note: NoteRef, priority: SavePriority = SavePriority.NORMAL
    ) -> SaveQueueItem:
        """Queue a note; critical notes are saved right away when auto-save is active."""
        item = await self.queue.enqueue(note, priority)
        self.record_activity()

        if item.priority == SavePriority.CRITICAL and self.is_active:
            await self.queue.process_queue()
        return item

    def record_activity(self) -> None:
        self.last_activity = time.monotonic()
        self._idle_drained = False

    def idle_seconds(self) -> float:
        return time.monotonic() - self.last_activity

    async def on_timer_tick(self) -> int:
        if not self.is_active:
            return 0
        self.last_timer_run = datetime.now(UTC)
        return await self.queue.process_queue()

    async def on_idle_check(self) -> int:
        """Drain once per idle period after idle_threshold seconds without activity."""
        if not self.is_active or self._idle_drained:
            return 0
        if self.idle_seconds() < self.configuration.idle_threshold:
            return 0

        self._idle_drained = True
        logger.debug("Editor idle, draining save queue", idle_seconds=round(self.idle_seconds(), 2))
        return await self.queue.process_queue()

    # Controls

    def pause_auto_save(self) -> None:
        if self.is_paused:
            return
        self.is_paused = True
        logger.info("Auto-save paused", pending=self.queue.pending_count)
        self._publish("autosave_paused")

    def resume_auto_save(self) -> None:
        if not self.is_paused:
            return
        self.is_paused = False
        logger.info("Auto-save resumed", pending=self.queue.pending_count)
        self._publish("autosave_resumed")

    async def process_queue(self) -> int:
        return await self.queue.process_queue()

    async def force_save_all(self) -> int:
        return await self.queue.force_save_all()

    async def cancel_save(self, item_id: UUID) -> bool:
        return await self.queue.cancel(item_id)

    async def clear_queue(self) -> int:
        return await self.queue.clear_queue()

    async def clear_all_drafts(self) -> dict[str, int]:
        cancelled = await self.queue.clear_queue()
        removed = await self.drafts.clear() if self.drafts is not None else 0
        self._publish("drafts_cleared", cancelled=cancelled, drafts_removed=removed)
        return {"cancelled": cancelled, "drafts_removed": removed}

    def update_configuration(self, configuration: AutoSaveConfiguration) -> None:
        previous = self.queue.configuration
        self.queue.configuration = configuration
        logger.info(
            "Auto-save configuration updated",
            enabled=configuration.enabled,
            interval=configuration.interval,
            previous_interval=previous.interval,
        )
        self._publish("configuration_updated", configuration=configuration.to_dict())

    # Metrics

    def get_save_statistics(self) -> SaveStatistics:
        return self.queue.statistics.snapshot()

    def reset_statistics(self) -> None:
        self.queue.reset_statistics()
        self._publish("statistics_reset")

    def get_save_metrics(self) -> dict[str, Any]:
        return {
            "is_paused": self.is_paused,
            "is_active": self.is_active,
            "queue_size": len(self.queue),
            "status_counts": self.queue.status_counts(),
            "in_flight": self.queue.in_flight_count,
            "scheduled_retries": self.queue.retry_count,
            "idle_seconds": round(self.idle_seconds(), 2),
            "last_timer_run": self.last_timer_run.isoformat() if self.last_timer_run else None,
            "statistics": self.queue.statistics.to_dict(),
            "configuration": self.configuration.to_dict(),
        }

    # Drafts

    async def recover_drafts(self) -> int:
        """Re-queue notes whose drafts survived without being saved."""
        if self.drafts is None:
            return 0

        notes = await self.drafts.load_all()
        for note in notes:
            await self.queue.enqueue(note, SavePriority.HIGH)

        if notes:
            logger.info("Recovered drafts", count=len(notes))
            self._publish("drafts_recovered", count=len(notes))
        return len(notes)

    # Scheduling

    async def run_scheduler(self, tick_seconds: float = SCHEDULER_TICK_SECONDS) -> None:
        """Drive interval and idle drains until cancelled."""
        logger.info(
            "Starting auto-save scheduler",
            interval=self.configuration.interval,
            idle_threshold=self.configuration.idle_threshold,
        )
        next_timer = time.monotonic() + self.configuration.interval

        while True:
            try:
                await asyncio.sleep(tick_seconds)

                if time.monotonic() >= next_timer:
                    next_timer = time.monotonic() + self.configuration.interval
                    await self.on_timer_tick()

                await self.on_idle_check()

            except asyncio.CancelledError:
                logger.info("Auto-save scheduler stopped")
                raise
            except Exception as e:
                logger.error(
                    "Error in auto-save scheduler", error=str(e), error_type=type(e).__name__
                )
                await asyncio.sleep(SCHEDULER_ERROR_BACKOFF_SECONDS)

    def start(self, tick_seconds: float = SCHEDULER_TICK_SECONDS) -> asyncio.Task:
        if self._scheduler_task is None or self._scheduler_task.done():
            self._scheduler_task = asyncio.create_task(self.run_scheduler(tick_seconds))
        return self._scheduler_task

    async def stop(self) -> None:
        task, self._scheduler_task = self._scheduler_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def shutdown(self) -> None:
        """Stop the scheduler and make a final attempt at everything queued."""
        await self.stop()
        if self.configuration.enabled:
            await self.queue.force_save_all()
        # Unsaved notes keep their drafts for recover_drafts()
        await self.queue.clear_queue()
        logger.info("Auto-save coordinator shut down", statistics=self.queue.statistics.to_dict())

    def _publish(self, name: str, **payload) -> None:
        if self.events is not None:
            self.events.publish(name, **payload)
