"""
Tests for the priority save queue: ordering, coalescing, retries, timeouts,
cancellation and draft bookkeeping.
"""

import asyncio
import threading

import pytest

from conftest import RecordingPersistence
from notecore.infrastructure.events import EventBus
from notecore.models.domain.autosave_domain import (
    AutoSaveConfiguration,
    SavePriority,
    SaveStatus,
)
from notecore.services.autosave.draft_store import DraftStore
from notecore.services.autosave.save_queue import SaveQueue


@pytest.mark.asyncio
async def test_saves_run_in_priority_then_enqueue_order(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config)
    await queue.enqueue(make_note("a"), SavePriority.LOW)
    await queue.enqueue(make_note("b"), SavePriority.NORMAL)
    await queue.enqueue(make_note("c"), SavePriority.CRITICAL)
    await queue.enqueue(make_note("d"), SavePriority.HIGH)
    await queue.enqueue(make_note("e"), SavePriority.NORMAL)

    assert [item.note_id for item in queue.items()] == ["c", "d", "b", "e", "a"]

    processed = await queue.process_queue()

    assert processed == 5
    assert persistence.calls == ["c", "d", "b", "e", "a"]
    assert len(queue) == 0
    assert queue.statistics.successful_saves == 5


@pytest.mark.asyncio
async def test_priority_accepts_names(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config)

    item = await queue.enqueue(make_note("a"), "high")

    assert item.priority == SavePriority.HIGH


@pytest.mark.asyncio
async def test_batch_size_limits_one_drain(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config.with_changes(max_items_per_batch=2))
    for note_id in "abcde":
        await queue.enqueue(make_note(note_id))

    assert await queue.process_queue() == 2
    assert len(queue) == 3
    assert await queue.process_queue(drain_all=True) == 3
    assert len(queue) == 0


@pytest.mark.asyncio
async def test_failing_save_is_attempted_retry_attempts_times(fast_config, make_note):
    persistence = RecordingPersistence(fail_always=True)
    queue = SaveQueue(persistence, fast_config)
    item = await queue.enqueue(make_note("a"))

    attempts = await queue.force_save_all()

    assert attempts == 3
    assert persistence.calls == ["a", "a", "a"]
    assert item.status == SaveStatus.FAILED
    assert item.retry_count == 3
    assert "storage unavailable" in item.last_error
    # Terminal failures stay queued until re-enqueued or cleared
    assert queue.items() == [item]
    assert queue.statistics.failed_saves == 1
    assert queue.statistics.total_saves == 1
    assert queue.retry_count == 0


@pytest.mark.asyncio
async def test_retry_recovers_from_transient_failures(fast_config, make_note):
    persistence = RecordingPersistence(failures=2)
    queue = SaveQueue(persistence, fast_config)
    await queue.enqueue(make_note("a", content="body"))

    await queue.force_save_all()

    assert persistence.calls == ["a", "a", "a"]
    assert [note.content for note in persistence.saved] == ["body"]
    assert len(queue) == 0
    assert queue.statistics.successful_saves == 1
    assert queue.statistics.failed_saves == 0


@pytest.mark.asyncio
async def test_terminal_failure_is_never_revived(tmp_path, fast_config, make_note):
    persistence = RecordingPersistence(failures=1)
    drafts = DraftStore(tmp_path)
    queue = SaveQueue(persistence, fast_config.with_changes(retry_attempts=1), drafts=drafts)
    first = await queue.enqueue(make_note("a"))
    await queue.process_queue()
    assert first.status == SaveStatus.FAILED

    second = await queue.enqueue(make_note("a", content="again"))

    assert second is not first
    assert second.status == SaveStatus.PENDING
    assert len(queue) == 2

    await queue.process_queue()

    assert first.status == SaveStatus.FAILED
    assert first.retry_count == 1
    assert queue.items() == [first]
    assert [note.content for note in persistence.saved] == ["again"]
    # The newer save covered the note, so its draft is gone
    assert not (tmp_path / "a.draft").exists()


@pytest.mark.asyncio
async def test_enqueue_during_retry_wait_coalesces(fast_config, make_note):
    persistence = RecordingPersistence(failures=1)
    queue = SaveQueue(persistence, fast_config.with_changes(backoff_base=10.0, max_backoff=10.0))
    first = await queue.enqueue(make_note("a", content="v1"))
    await queue.process_queue()
    assert first.retry_scheduled is True

    second = await queue.enqueue(make_note("a", content="v2"))

    assert second is first
    assert second.status == SaveStatus.PENDING
    assert second.retry_count == 0
    assert second.last_error is None
    assert queue.retry_count == 0

    await queue.process_queue()
    assert [note.content for note in persistence.saved] == ["v2"]


def test_retry_delay_grows_exponentially_up_to_the_cap():
    config = AutoSaveConfiguration(backoff_base=1.0, max_backoff=60.0)

    assert [config.retry_delay(n) for n in (1, 2, 3, 4)] == [1.0, 2.0, 4.0, 8.0]
    assert config.retry_delay(10) == 60.0
    assert config.with_changes(exponential_backoff=False).retry_delay(3) == config.interval


@pytest.mark.asyncio
async def test_slow_save_times_out(make_note):
    persistence = RecordingPersistence(delay=0.5)
    config = AutoSaveConfiguration(interval=0.05, retry_attempts=1)
    queue = SaveQueue(persistence, config)
    item = await queue.enqueue(make_note("slow"))

    await queue.process_queue()

    assert queue.save_timeout() == pytest.approx(0.05)
    assert item.status == SaveStatus.FAILED
    assert item.last_error == "Save timed out after 0.05s"
    assert persistence.saved == []


def test_save_timeout_is_capped():
    queue = SaveQueue(RecordingPersistence(), AutoSaveConfiguration(interval=120.0))

    assert queue.save_timeout() == 30.0


@pytest.mark.asyncio
async def test_clear_queue_is_idempotent(persistence, fast_config, make_note):
    events = EventBus()
    queue = SaveQueue(persistence, fast_config, events=events)
    for note_id in "abc":
        await queue.enqueue(make_note(note_id))

    assert await queue.clear_queue() == 3
    assert await queue.clear_queue() == 0
    assert len(queue) == 0
    assert [event.name for event in events.recent()].count("queue_cleared") == 1


@pytest.mark.asyncio
async def test_clear_queue_cancels_in_flight_saves(make_note):
    persistence = RecordingPersistence(delay=10.0)
    queue = SaveQueue(persistence, AutoSaveConfiguration(interval=60.0))
    await queue.enqueue(make_note("a"))

    processing = asyncio.create_task(queue.process_queue())
    await asyncio.sleep(0.01)
    assert queue.in_flight_count == 1

    assert await queue.clear_queue() == 1
    assert await processing == 1
    assert queue.in_flight_count == 0
    assert persistence.saved == []
    assert queue.statistics.total_saves == 0


@pytest.mark.asyncio
async def test_enqueue_coalesces_pending_item(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config)
    first = await queue.enqueue(make_note("a", content="v1"), SavePriority.LOW)
    second = await queue.enqueue(make_note("a", content="v2"), SavePriority.HIGH)

    assert second is first
    assert len(queue) == 1
    assert second.priority == SavePriority.HIGH
    # Lower priority never downgrades a queued item
    await queue.enqueue(make_note("a", content="v3"), SavePriority.LOW)
    assert first.priority == SavePriority.HIGH

    await queue.process_queue()

    assert [note.content for note in persistence.saved] == ["v3"]


@pytest.mark.asyncio
async def test_enqueue_during_save_waits_behind_it(tmp_path, fast_config, make_note):
    persistence = RecordingPersistence(delay=0.2)
    drafts = DraftStore(tmp_path)
    queue = SaveQueue(persistence, fast_config, drafts=drafts)
    await queue.enqueue(make_note("a", content="v1"))

    processing = asyncio.create_task(queue.process_queue())
    await asyncio.sleep(0.01)
    await queue.enqueue(make_note("a", content="v2"))

    assert len(queue) == 2
    # Never two saves of the same note at once
    assert await queue.process_queue() == 0

    await processing
    assert [item.status for item in queue.items()] == [SaveStatus.PENDING]
    assert (tmp_path / "a.draft").exists()

    await queue.process_queue()

    assert [note.content for note in persistence.saved] == ["v1", "v2"]
    assert not (tmp_path / "a.draft").exists()


@pytest.mark.asyncio
async def test_submit_from_another_thread(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config)

    worker = threading.Thread(target=queue.submit, args=(make_note("t"), "critical"))
    worker.start()
    worker.join()

    assert len(queue) == 0
    assert await queue.process_queue() == 1
    assert persistence.calls == ["t"]


@pytest.mark.asyncio
async def test_draft_survives_terminal_failure(tmp_path, fast_config, make_note):
    persistence = RecordingPersistence(fail_always=True)
    queue = SaveQueue(
        persistence, fast_config.with_changes(retry_attempts=1), drafts=DraftStore(tmp_path)
    )
    await queue.enqueue(make_note("a", content="unsaved"))

    await queue.process_queue()

    recovered = await DraftStore(tmp_path).load_all()
    assert [note.content for note in recovered] == ["unsaved"]


@pytest.mark.asyncio
async def test_drafts_not_written_when_disabled(tmp_path, persistence, fast_config, make_note):
    queue = SaveQueue(
        persistence, fast_config.with_changes(preserve_drafts=False), drafts=DraftStore(tmp_path)
    )

    await queue.enqueue(make_note("a"))

    assert not (tmp_path / "a.draft").exists()


@pytest.mark.asyncio
async def test_cancel_single_item(persistence, fast_config, make_note):
    events = EventBus()
    queue = SaveQueue(persistence, fast_config, events=events)
    item = await queue.enqueue(make_note("a"))
    await queue.enqueue(make_note("b"))

    assert await queue.cancel(item.id) is True
    assert await queue.cancel(item.id) is False
    assert [queued.note_id for queued in queue.items()] == ["b"]
    assert item.status == SaveStatus.CANCELLED
    assert events.recent(1)[0].name == "save_cancelled"


@pytest.mark.asyncio
async def test_cancel_before_dispatched_save_starts_frees_the_note(
    persistence, fast_config, make_note
):
    queue = SaveQueue(persistence, fast_config)
    item = await queue.enqueue(make_note("n1", content="v1"))

    processing = asyncio.create_task(queue.process_queue())
    await asyncio.sleep(0)
    assert item.status == SaveStatus.IN_PROGRESS

    assert await queue.cancel(item.id) is True
    assert queue.in_flight_count == 0
    await processing

    await queue.enqueue(make_note("n1", content="v2"))
    assert await asyncio.wait_for(queue.force_save_all(), timeout=2.0) == 1
    assert [note.content for note in persistence.saved] == ["v2"]


@pytest.mark.asyncio
async def test_notification_published_only_when_enabled(persistence, fast_config, make_note):
    events = EventBus()
    quiet = SaveQueue(persistence, fast_config, events=events)
    await quiet.enqueue(make_note("a", title="Einkauf"))
    await quiet.process_queue()
    assert "save_notification" not in [event.name for event in events.recent()]

    loud = SaveQueue(persistence, fast_config.with_changes(notify_on_save=True), events=events)
    await loud.enqueue(make_note("b", title="Reise"))
    await loud.process_queue()

    notification = events.recent(1)[0]
    assert notification.name == "save_notification"
    assert notification.payload == {"note_id": "b", "title": "Reise", "message": "'Reise' saved"}


@pytest.mark.asyncio
async def test_events_follow_the_save_lifecycle(persistence, fast_config, make_note):
    events = EventBus()
    queue = SaveQueue(persistence, fast_config, events=events)

    await queue.enqueue(make_note("a"))
    await queue.process_queue()

    assert [event.name for event in events.recent()] == ["save_queued", "save_completed"]
    assert events.recent(1)[0].payload == {"note_id": "a", "attempt": 1}


@pytest.mark.asyncio
async def test_status_counts_cover_every_status(persistence, fast_config, make_note):
    queue = SaveQueue(persistence, fast_config)
    await queue.enqueue(make_note("a"))

    counts = queue.status_counts()

    assert counts == {
        "pending": 1,
        "in_progress": 0,
        "completed": 0,
        "failed": 0,
        "cancelled": 0,
    }
