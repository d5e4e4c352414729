"""
Priority save queue.

Items move pending -> in_progress -> completed | failed. Failed items are
retried after a backoff delay until retry_attempts is exhausted, after which
they stay in the queue as terminal failures until cancelled or cleared.

All queue state is owned by the event loop; other threads hand notes in via
submit().
"""

import asyncio
import itertools
import threading
import time
from uuid import UUID

from notecore.infrastructure.events import EventBus
from notecore.infrastructure.observability.logging import get_logger, log_save_attempt
from notecore.models.domain.autosave_domain import (
    AutoSaveConfiguration,
    NoteRef,
    SavePriority,
    SaveQueueItem,
    SaveStatistics,
    SaveStatus,
)
from notecore.services.autosave.draft_store import DraftStore
from notecore.services.autosave.persistence import NotePersistence

logger = get_logger(__name__)

MAX_SAVE_TIMEOUT_SECONDS = 30.0


class SaveQueue:
    def __init__(
        self,
        persistence: NotePersistence,
        configuration: AutoSaveConfiguration | None = None,
        drafts: DraftStore | None = None,
        events: EventBus | None = None,
    ):
        self.persistence = persistence
        self.configuration = configuration or AutoSaveConfiguration.default()
        self.drafts = drafts
        self.events = events
        self.statistics = SaveStatistics()

        self._items: list[SaveQueueItem] = []
        self._sequence = itertools.count()
        self._in_flight: dict[str, asyncio.Task] = {}
        self._retry_tasks: dict[UUID, asyncio.Task] = {}
        self._inbox: list[tuple[NoteRef, SavePriority]] = []
        self._inbox_lock = threading.Lock()

    # Inspection

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> list[SaveQueueItem]:
        """Queue items in processing order."""
        return sorted(self._items, key=SaveQueueItem.sort_key)

    def get_item(self, note_id: str) -> SaveQueueItem | None:
        for item in self.items():
            if item.note_id == note_id:
                return item
        return None

    def status_counts(self) -> dict[str, int]:
        counts = {status.value: 0 for status in SaveStatus}
        for item in self._items:
            counts[item.status.value] += 1
        return counts

    @property
    def pending_count(self) -> int:
        return sum(1 for item in self._items if item.status == SaveStatus.PENDING)

    @property
    def in_flight_count(self) -> int:
        return len(self._in_flight)

    @property
    def retry_count(self) -> int:
        return len(self._retry_tasks)

    def save_timeout(self) -> float:
        return min(self.configuration.interval, MAX_SAVE_TIMEOUT_SECONDS)

    # Producers

    async def enqueue(
        self, note: NoteRef, priority: SavePriority = SavePriority.NORMAL
    ) -> SaveQueueItem:
        """
        Queue a note for saving.

        A pending item for the same note, or a failed one waiting for its
        retry, is updated in place: newest content, highest priority, fresh
        retry budget. Terminal failures are left alone; they and in-progress
        saves get a new item that waits behind them.
        """
        priority = SavePriority.parse(priority)
        item = self._find_coalescable(note.note_id)

        if item is not None:
            self._cancel_retry(item)
            item.note = note
            item.priority = max(item.priority, priority)
            item.retry_count = 0
            item.last_error = None
            item.status = SaveStatus.PENDING
            logger.debug(
                "Save item coalesced",
                note_id=note.note_id,
                priority=item.priority.name.lower(),
            )
        else:
            item = SaveQueueItem(note=note, priority=priority, sequence=next(self._sequence))
            self._items.append(item)
            logger.debug(
                "Save item queued",
                note_id=note.note_id,
                priority=priority.name.lower(),
                queue_size=len(self._items),
            )

        await self._write_draft(note)
        self._publish("save_queued", note_id=note.note_id, priority=item.priority.name.lower())
        return item

    def submit(self, note: NoteRef, priority: SavePriority = SavePriority.NORMAL) -> None:
        """Thread-safe hand-off; the note is queued on the next drain."""
        with self._inbox_lock:
            self._inbox.append((note, SavePriority.parse(priority)))

    async def drain_inbox(self) -> int:
        with self._inbox_lock:
            submitted, self._inbox = self._inbox, []
        for note, priority in submitted:
            await self.enqueue(note, priority)
        return len(submitted)

    def _find_coalescable(self, note_id: str) -> SaveQueueItem | None:
        for item in self._items:
            if item.note_id != note_id:
                continue
            # Terminal failures never change state again
            if item.status == SaveStatus.PENDING or (
                item.status == SaveStatus.FAILED and item.retry_scheduled
            ):
                return item
        return None

    def _has_unsaved(self, note_id: str) -> bool:
        return any(
            item.note_id == note_id and (item.status.is_active or item.retry_scheduled)
            for item in self._items
        )

    async def _write_draft(self, note: NoteRef) -> None:
        if self.drafts is None or not self.configuration.preserve_drafts:
            return
        try:
            await self.drafts.save(note)
        except OSError as e:
            logger.warning("Draft write failed", note_id=note.note_id, error=str(e))

    # Consumer

    def _select_batch(self, limit: int | None) -> list[SaveQueueItem]:
        selected: list[SaveQueueItem] = []
        notes: set[str] = set()
        for item in self.items():
            if limit is not None and len(selected) >= limit:
                break
            if item.status != SaveStatus.PENDING:
                continue
            # At most one save per note in flight
            if item.note_id in self._in_flight or item.note_id in notes:
                continue
            selected.append(item)
            notes.add(item.note_id)
        return selected

    async def process_queue(self, drain_all: bool = False) -> int:
        """
        Save the next batch of due items.

        Args:
            drain_all: Ignore max_items_per_batch and take every due item

        Returns:
            Number of items attempted
        """
        await self.drain_inbox()

        limit = None if drain_all else self.configuration.max_items_per_batch
        batch = self._select_batch(limit)
        if not batch:
            return 0

        logger.info(
            "Processing save batch",
            batch_size=len(batch),
            queue_size=len(self._items),
            max_concurrent=self.configuration.max_concurrent_saves,
        )

        semaphore = asyncio.Semaphore(self.configuration.max_concurrent_saves)
        tasks = []
        for item in batch:
            item.status = SaveStatus.IN_PROGRESS
            task = asyncio.create_task(self._save_with_semaphore(semaphore, item))
            self._in_flight[item.note_id] = task
            tasks.append(task)

        await asyncio.gather(*tasks, return_exceptions=True)
        return len(batch)

    async def _save_with_semaphore(self, semaphore: asyncio.Semaphore, item: SaveQueueItem):
        try:
            async with semaphore:
                await self._save_item(item)
        finally:
            if self._in_flight.get(item.note_id) is asyncio.current_task():
                del self._in_flight[item.note_id]

    async def _save_item(self, item: SaveQueueItem) -> None:
        attempt = item.retry_count + 1
        timeout = self.save_timeout()
        start_time = time.monotonic()

        try:
            await asyncio.wait_for(self.persistence.save(item.note), timeout=timeout)
        except TimeoutError:
            duration_ms = (time.monotonic() - start_time) * 1000
            await self._handle_failure(item, f"Save timed out after {timeout}s", attempt, duration_ms)
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            await self._handle_failure(item, f"{type(e).__name__}: {e}", attempt, duration_ms)
        else:
            duration = time.monotonic() - start_time
            await self._handle_success(item, attempt, duration)

    async def _handle_success(self, item: SaveQueueItem, attempt: int, duration: float) -> None:
        if item.status == SaveStatus.CANCELLED:
            return

        item.status = SaveStatus.COMPLETED
        self.statistics.record_success(duration, item.age)
        self._remove(item)
        log_save_attempt(item.note_id, True, round(duration * 1000, 2), attempt)

        # A newer item for the same note still needs its draft
        if self.drafts is not None and not self._has_unsaved(item.note_id):
            await self.drafts.delete(item.note_id)

        self._publish("save_completed", note_id=item.note_id, attempt=attempt)
        if self.configuration.notify_on_save:
            self._publish(
                "save_notification",
                note_id=item.note_id,
                title=item.note.title,
                message=f"'{item.note.title}' saved",
            )

    async def _handle_failure(
        self, item: SaveQueueItem, error: str, attempt: int, duration_ms: float
    ) -> None:
        if item.status == SaveStatus.CANCELLED:
            return

        item.retry_count += 1
        item.last_error = error
        item.status = SaveStatus.FAILED
        log_save_attempt(item.note_id, False, round(duration_ms, 2), attempt, error=error)

        if item.retry_count < self.configuration.retry_attempts:
            delay = self.configuration.retry_delay(item.retry_count)
            self._schedule_retry(item, delay)
            self._publish(
                "save_retry_scheduled",
                note_id=item.note_id,
                retry_count=item.retry_count,
                delay=delay,
            )
            return

        self.statistics.record_failure(item.age)
        logger.error(
            "Save failed permanently",
            note_id=item.note_id,
            attempts=item.retry_count,
            error=error,
        )
        self._publish("save_failed", note_id=item.note_id, error=error)

    # Retries

    def _schedule_retry(self, item: SaveQueueItem, delay: float) -> None:
        item.retry_scheduled = True
        self._retry_tasks[item.id] = asyncio.create_task(self._retry_after(item, delay))

    async def _retry_after(self, item: SaveQueueItem, delay: float) -> None:
        try:
            await asyncio.sleep(delay)
            if item.status == SaveStatus.FAILED:
                item.status = SaveStatus.PENDING
                logger.debug("Save retry due", note_id=item.note_id, retry_count=item.retry_count)
        finally:
            item.retry_scheduled = False
            if self._retry_tasks.get(item.id) is asyncio.current_task():
                del self._retry_tasks[item.id]

    def _cancel_retry(self, item: SaveQueueItem) -> None:
        task = self._retry_tasks.pop(item.id, None)
        if task is not None:
            task.cancel()
        item.retry_scheduled = False

    # Bulk operations

    async def force_save_all(self) -> int:
        """
        Save everything now, ignoring the batch size and waiting out
        scheduled retries, until no pending, in-flight or retrying work is
        left.

        Returns:
            Number of save attempts made
        """
        attempts = 0
        while True:
            processed = await self.process_queue(drain_all=True)
            if processed:
                attempts += processed
                continue
            if self._in_flight:
                await asyncio.wait(set(self._in_flight.values()))
                continue
            if self._retry_tasks:
                await asyncio.wait(set(self._retry_tasks.values()))
                continue
            break

        logger.info("Force save completed", attempts=attempts, remaining=len(self._items))
        return attempts

    async def clear_queue(self) -> int:
        """
        Cancel in-flight saves and retry timers and drop every item.

        Returns:
            Number of items cancelled (0 when the queue was already empty)
        """
        with self._inbox_lock:
            self._inbox.clear()

        tasks = list(self._in_flight.values()) + list(self._retry_tasks.values())
        for task in tasks:
            task.cancel()

        cancelled = len(self._items)
        for item in self._items:
            item.status = SaveStatus.CANCELLED
            item.retry_scheduled = False
        self._items.clear()

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._in_flight.clear()
        self._retry_tasks.clear()

        if cancelled:
            logger.info("Save queue cleared", cancelled=cancelled)
            self._publish("queue_cleared", cancelled=cancelled)
        return cancelled

    async def cancel(self, item_id: UUID) -> bool:
        """Cancel a single item; an in-progress save is interrupted."""
        for item in self._items:
            if item.id != item_id:
                continue

            self._cancel_retry(item)
            task = None
            if item.status == SaveStatus.IN_PROGRESS:
                task = self._in_flight.get(item.note_id)
            item.status = SaveStatus.CANCELLED
            self._remove(item)

            if task is not None:
                # A task cancelled before it starts never reaches its finally
                if self._in_flight.get(item.note_id) is task:
                    del self._in_flight[item.note_id]
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

            logger.info("Save item cancelled", note_id=item.note_id)
            self._publish("save_cancelled", note_id=item.note_id)
            return True
        return False

    def reset_statistics(self) -> None:
        self.statistics = SaveStatistics()

    def _remove(self, item: SaveQueueItem) -> None:
        if item in self._items:
            self._items.remove(item)

    def _publish(self, name: str, **payload) -> None:
        if self.events is not None:
            self.events.publish(name, **payload)
