"""
Tests for the auto-save background job.
"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from conftest import FakeRedis, RecordingPersistence
from notecore.container import build_services
from notecore.jobs import autosave_job
from notecore.jobs.autosave_job import AutoSaveJob, AutoSaveJobError


@pytest.fixture
def services(test_settings):
    return build_services(test_settings, kv=FakeRedis(), persistence=RecordingPersistence())


@pytest.mark.asyncio
async def test_run_once_drains_when_timer_is_due(services, make_note):
    job = AutoSaveJob(services)
    await services.autosave.enqueue(make_note("a"))

    first = await job.run_once()
    second = await job.run_once()

    assert first["timer_processed"] == 1
    assert first["idle_processed"] == 0
    assert first["queue_size"] == 0
    assert first["successful_saves"] == 1
    # The interval has not elapsed again yet
    assert second["timer_processed"] == 0
    assert services.note_store.calls == ["a"]


@pytest.mark.asyncio
async def test_run_once_wraps_failures(services, monkeypatch):
    job = AutoSaveJob(services)

    async def broken_tick():
        raise RuntimeError("queue exploded")

    monkeypatch.setattr(services.autosave, "on_timer_tick", broken_tick)

    with pytest.raises(AutoSaveJobError) as exc_info:
        await job.run_once()

    assert exc_info.value.operation == "run_once"
    assert job.is_running is False


@pytest.mark.asyncio
async def test_run_once_skips_when_already_running(services):
    job = AutoSaveJob(services)
    job.is_running = True

    assert await job.run_once() == {"skipped": True, "reason": "already_running"}


@pytest.mark.asyncio
async def test_job_status_and_health(services):
    job = AutoSaveJob(services)

    assert job.health_check()["healthy"] is True
    await job.run_once()

    status = job.get_job_status()
    assert status["job_name"] == "autosave"
    assert status["last_run_time"] is not None
    assert status["interval_seconds"] == 600

    job.last_run_time = datetime.now(UTC) - timedelta(seconds=1201)
    health = job.health_check()
    assert health["healthy"] is False
    assert health["is_overdue"] is True
    assert "overdue" in health["warning"]


@pytest.mark.asyncio
async def test_recover_drafts_job_saves_surviving_drafts(services, monkeypatch, make_note):
    await services.drafts.save(make_note("lost", content="draft body"))
    monkeypatch.setattr(autosave_job, "build_services", lambda: services)

    await autosave_job.run_recover_drafts()

    assert [note.content for note in services.note_store.saved] == ["draft body"]
    assert await services.drafts.load_all() == []


@pytest.mark.asyncio
async def test_scheduler_runs_until_cancelled(services, monkeypatch, make_note):
    monkeypatch.setattr(autosave_job, "build_services", lambda: services)
    await services.save_queue.enqueue(make_note("a"))

    task = asyncio.create_task(autosave_job.start_autosave_scheduler())
    await asyncio.sleep(0.1)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert services.note_store.calls == ["a"]
    assert len(services.save_queue) == 0
