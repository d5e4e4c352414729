import asyncio

import httpx
import pytest

from notecore.config import Settings
from notecore.models.domain.autosave_domain import AutoSaveConfiguration, NoteRef
from notecore.services.autosave.persistence import SaveError


class FakeRedis:
    def __init__(self, fail_writes: bool = False):
        self.store: dict[str, str] = {}
        self.fail_writes = fail_writes

    async def initialize(self):
        return None

    async def close(self):
        return None

    async def ping(self) -> bool:
        return True

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool:
        if self.fail_writes:
            return False
        self.store[key] = value
        return True

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def delete(self, key: str) -> bool:
        return self.store.pop(key, None) is not None


class RecordingPersistence:
    """Records every save call; can fail the first N calls, fail always, or stall."""

    def __init__(self, failures: int = 0, fail_always: bool = False, delay: float = 0.0):
        self.failures = failures
        self.fail_always = fail_always
        self.delay = delay
        self.calls: list[str] = []
        self.saved: list[NoteRef] = []

    async def save(self, note: NoteRef) -> None:
        self.calls.append(note.note_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_always or self.failures > 0:
            self.failures -= 1
            raise SaveError(f"storage unavailable for {note.note_id}", note_id=note.note_id)
        self.saved.append(note)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def persistence():
    return RecordingPersistence()


@pytest.fixture
def make_note():
    def _make(note_id: str, content: str = "", title: str = "") -> NoteRef:
        return NoteRef(note_id=note_id, title=title or f"Note {note_id}", content=content)

    return _make


@pytest.fixture
def fast_config():
    """Short backoff so retry paths finish quickly; one save at a time."""
    return AutoSaveConfiguration(
        interval=5.0,
        idle_threshold=60.0,
        retry_attempts=3,
        backoff_base=0.01,
        max_backoff=0.05,
        max_concurrent_saves=1,
    )


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        STORAGE_BACKEND="memory",
        DRAFTS_DIR=str(tmp_path / "drafts"),
        AUTOSAVE_INTERVAL_SECONDS=600,
        AUTOSAVE_IDLE_THRESHOLD_SECONDS=600,
        AUTOSAVE_BACKOFF_BASE_SECONDS=0.01,
        AUTOSAVE_MAX_BACKOFF_SECONDS=0.05,
        OLLAMA_BASE_URL="http://ollama.test:11434",
        OLLAMA_DEFAULT_MODEL="llama2",
    )


class OllamaStub:
    """MockTransport handler emulating the Ollama HTTP API."""

    def __init__(self, models: list[str] | None = None, generate_text: str = "  Hallo Welt  "):
        self.models = ["llama2"] if models is None else models
        self.generate_text = generate_text
        self.requests: list[httpx.Request] = []

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/tags":
            return httpx.Response(
                200,
                json={"models": [{"name": name, "size": 1, "digest": "abc"} for name in self.models]},
            )
        if request.url.path == "/api/generate":
            return httpx.Response(200, json={"response": self.generate_text, "done": True})
        return httpx.Response(404, text="not found")


@pytest.fixture
def ollama_stub():
    return OllamaStub()
