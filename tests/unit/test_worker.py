import pytest

from notecore.jobs import worker


@pytest.mark.asyncio
async def test_run_worker_runs_job(monkeypatch):
    called = {"ok": False}

    async def dummy_job():
        called["ok"] = True

    monkeypatch.setitem(worker.JOB_REGISTRY, "dummy", dummy_job)

    await worker.run_worker("  Dummy ")

    assert called["ok"] is True


@pytest.mark.asyncio
async def test_run_worker_unknown_job():
    with pytest.raises(ValueError, match="recover_drafts"):
        await worker.run_worker("missing")


def test_job_name_from_environment(monkeypatch):
    monkeypatch.setattr(worker.sys, "argv", ["notecore-worker"])
    monkeypatch.setenv("WORKER_JOB", "Recover_Drafts")

    assert worker._resolve_job_name() == "recover_drafts"


def test_job_name_from_cli_wins(monkeypatch):
    monkeypatch.setattr(worker.sys, "argv", ["notecore-worker", "autosave"])
    monkeypatch.setenv("WORKER_JOB", "recover_drafts")

    assert worker._resolve_job_name() == "autosave"


def test_job_name_accepts_hyphens():
    assert worker._resolve_job_name(["Recover-Drafts"]) == "recover_drafts"


def test_list_flag_prints_every_job(capsys):
    assert worker.main(["--list"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == ["autosave", "recover_drafts"]
    assert "high priority" in lines[1]


def test_main_returns_error_code_for_unknown_job():
    assert worker.main(["vacuum"]) == 2


def test_main_runs_selected_job(monkeypatch):
    ran = []

    async def dummy_job():
        ran.append("dummy")

    monkeypatch.setitem(worker.JOB_REGISTRY, "dummy", dummy_job)

    assert worker.main(["dummy"]) == 0
    assert ran == ["dummy"]
