"""
Persistence collaborators for the save queue.

A persistence target only needs an async ``save(note)`` that raises on
failure; saving the same note twice must be harmless.
"""

import json
from typing import Protocol

from notecore.errors import ErrorKind, NoteCoreError
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.autosave_domain import NoteRef

logger = get_logger(__name__)


class SaveError(NoteCoreError):
    """A persistence attempt failed; the queue may retry it."""

    def __init__(self, message: str, note_id: str | None = None, recoverable: bool = True):
        super().__init__(message, kind=ErrorKind.TRANSIENT_IO, recoverable=recoverable)
        self.note_id = note_id


class NotePersistence(Protocol):
    async def save(self, note: NoteRef) -> None: ...


class KeyValueStore(Protocol):
    async def initialize(self): ...

    async def close(self): ...

    async def ping(self) -> bool: ...

    async def get(self, key: str) -> str | None: ...

    async def set_with_ttl(self, key: str, value: str, ttl_s: int | None = None) -> bool: ...

    async def delete(self, key: str) -> bool: ...


class KeyValueNoteStore:
    """Stores each note as a JSON document under ``<prefix>:<note_id>``."""

    def __init__(self, kv: KeyValueStore, key_prefix: str = "notes"):
        self.kv = kv
        self.key_prefix = key_prefix

    def _key(self, note_id: str) -> str:
        return f"{self.key_prefix}:{note_id}"

    async def save(self, note: NoteRef) -> None:
        payload = json.dumps(note.to_dict(), ensure_ascii=False)
        stored = await self.kv.set_with_ttl(self._key(note.note_id), payload)
        if not stored:
            raise SaveError(f"Failed to store note {note.note_id}", note_id=note.note_id)

        logger.debug("Note stored", note_id=note.note_id, size=len(payload))

    async def load(self, note_id: str) -> NoteRef | None:
        raw = await self.kv.get(self._key(note_id))
        if raw is None:
            return None
        return NoteRef.from_dict(json.loads(raw))

    async def delete(self, note_id: str) -> bool:
        return await self.kv.delete(self._key(note_id))
