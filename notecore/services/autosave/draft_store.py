"""
On-disk draft copies.

A draft is written when a note is enqueued and removed once it has been
saved, so drafts left on disk after a crash are notes that never made it to
persistence.
"""

import asyncio
import json
from pathlib import Path

from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.autosave_domain import NoteRef

logger = get_logger(__name__)

DRAFT_SUFFIX = ".draft"


class DraftStore:
    def __init__(self, drafts_dir: str | Path):
        self.drafts_dir = Path(drafts_dir)

    def _path(self, note_id: str) -> Path:
        # Keep ids from escaping the drafts directory
        safe_id = note_id.replace("/", "_").replace("\\", "_")
        return self.drafts_dir / f"{safe_id}{DRAFT_SUFFIX}"

    def _write(self, note: NoteRef) -> None:
        self.drafts_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(note.note_id)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(note.to_dict(), ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(path)

    async def save(self, note: NoteRef) -> None:
        await asyncio.to_thread(self._write, note)

    async def delete(self, note_id: str) -> bool:
        path = self._path(note_id)
        try:
            await asyncio.to_thread(path.unlink)
            return True
        except FileNotFoundError:
            return False

    def _load_all(self) -> list[NoteRef]:
        if not self.drafts_dir.exists():
            return []

        notes: list[NoteRef] = []
        for path in sorted(self.drafts_dir.glob(f"*{DRAFT_SUFFIX}")):
            try:
                notes.append(NoteRef.from_dict(json.loads(path.read_text(encoding="utf-8"))))
            except (ValueError, KeyError) as e:
                logger.warning("Skipping unreadable draft", path=str(path), error=str(e))
        return notes

    async def load_all(self) -> list[NoteRef]:
        return await asyncio.to_thread(self._load_all)

    def _clear(self) -> int:
        if not self.drafts_dir.exists():
            return 0
        removed = 0
        for path in self.drafts_dir.glob(f"*{DRAFT_SUFFIX}"):
            path.unlink(missing_ok=True)
            removed += 1
        return removed

    async def clear(self) -> int:
        removed = await asyncio.to_thread(self._clear)
        logger.info("Drafts cleared", removed=removed)
        return removed
