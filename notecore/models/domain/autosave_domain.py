# notecore/models/domain/autosave_domain.py
"""
Auto-save domain models.
Queue items are owned by the SaveQueue; configuration and statistics are
plain values handed out to callers.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum, IntEnum
from typing import Any
from uuid import UUID, uuid4


class SavePriority(IntEnum):
    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3

    @classmethod
    def parse(cls, value: "str | int | SavePriority") -> "SavePriority":
        if isinstance(value, SavePriority):
            return value
        if isinstance(value, int):
            return cls(value)
        return cls[value.strip().upper()]


class SaveStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (SaveStatus.PENDING, SaveStatus.IN_PROGRESS)


@dataclass(slots=True)
class NoteRef:
    """The unit handed to the persistence collaborator."""

    note_id: str
    title: str = ""
    content: str = ""
    last_modified: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "note_id": self.note_id,
            "title": self.title,
            "content": self.content,
            "last_modified": self.last_modified.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NoteRef":
        last_modified = data.get("last_modified")
        return cls(
            note_id=str(data["note_id"]),
            title=data.get("title", ""),
            content=data.get("content", ""),
            last_modified=(
                datetime.fromisoformat(last_modified) if last_modified else datetime.now(UTC)
            ),
        )


@dataclass(slots=True)
class SaveQueueItem:
    note: NoteRef
    priority: SavePriority
    sequence: int
    id: UUID = field(default_factory=uuid4)
    status: SaveStatus = SaveStatus.PENDING
    retry_count: int = 0
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_error: str | None = None
    retry_scheduled: bool = False

    @property
    def note_id(self) -> str:
        return self.note.note_id

    @property
    def age(self) -> float:
        """Seconds since the item was enqueued."""
        return (datetime.now(UTC) - self.enqueued_at).total_seconds()

    def sort_key(self) -> tuple[int, int]:
        # Highest priority first, then enqueue order
        return (-int(self.priority), self.sequence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "note_id": self.note_id,
            "title": self.note.title,
            "priority": self.priority.name.lower(),
            "status": self.status.value,
            "retry_count": self.retry_count,
            "enqueued_at": self.enqueued_at.isoformat(),
            "age_seconds": round(self.age, 3),
            "last_error": self.last_error,
            "retry_scheduled": self.retry_scheduled,
        }


@dataclass(slots=True, frozen=True)
class AutoSaveConfiguration:
    enabled: bool = True
    interval: float = 30.0
    idle_threshold: float = 5.0
    max_items_per_batch: int = 10
    retry_attempts: int = 3
    exponential_backoff: bool = True
    preserve_drafts: bool = True
    notify_on_save: bool = False
    backoff_base: float = 1.0
    max_backoff: float = 60.0
    max_concurrent_saves: int = 4

    def __post_init__(self):
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if self.idle_threshold < 0:
            raise ValueError("idle_threshold must not be negative")
        if self.max_items_per_batch < 1:
            raise ValueError("max_items_per_batch must be at least 1")
        if self.retry_attempts < 1:
            raise ValueError("retry_attempts must be at least 1")
        if self.max_concurrent_saves < 1:
            raise ValueError("max_concurrent_saves must be at least 1")

    @classmethod
    def default(cls) -> "AutoSaveConfiguration":
        return cls()

    @classmethod
    def aggressive(cls) -> "AutoSaveConfiguration":
        return cls(interval=10.0, idle_threshold=2.0)

    @classmethod
    def conservative(cls) -> "AutoSaveConfiguration":
        return cls(interval=120.0, idle_threshold=15.0)

    @classmethod
    def manual(cls) -> "AutoSaveConfiguration":
        return cls(enabled=False)

    def with_changes(self, **changes: Any) -> "AutoSaveConfiguration":
        return replace(self, **changes)

    def retry_delay(self, retry_count: int) -> float:
        """Delay before the given retry (1-based)."""
        if not self.exponential_backoff:
            return self.interval
        return min(self.backoff_base * (2 ** max(retry_count - 1, 0)), self.max_backoff)

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "interval": self.interval,
            "idle_threshold": self.idle_threshold,
            "max_items_per_batch": self.max_items_per_batch,
            "retry_attempts": self.retry_attempts,
            "exponential_backoff": self.exponential_backoff,
            "preserve_drafts": self.preserve_drafts,
            "notify_on_save": self.notify_on_save,
            "backoff_base": self.backoff_base,
            "max_backoff": self.max_backoff,
            "max_concurrent_saves": self.max_concurrent_saves,
        }


@dataclass(slots=True)
class SaveStatistics:
    """Accumulator updated after every completed or failed save."""

    total_saves: int = 0
    successful_saves: int = 0
    failed_saves: int = 0
    average_save_time: float = 0.0
    longest_pending_time: float = 0.0
    last_save_at: datetime | None = None

    def record_success(self, duration: float, pending_time: float) -> None:
        self.total_saves += 1
        self.successful_saves += 1
        # Rolling mean over successful saves
        self.average_save_time += (duration - self.average_save_time) / self.successful_saves
        self.longest_pending_time = max(self.longest_pending_time, pending_time)
        self.last_save_at = datetime.now(UTC)

    def record_failure(self, pending_time: float) -> None:
        self.total_saves += 1
        self.failed_saves += 1
        self.longest_pending_time = max(self.longest_pending_time, pending_time)

    def snapshot(self) -> "SaveStatistics":
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_saves": self.total_saves,
            "successful_saves": self.successful_saves,
            "failed_saves": self.failed_saves,
            "average_save_time": round(self.average_save_time, 4),
            "longest_pending_time": round(self.longest_pending_time, 4),
            "last_save_at": self.last_save_at.isoformat() if self.last_save_at else None,
            "success_rate_percent": round(
                (self.successful_saves / self.total_saves * 100) if self.total_saves > 0 else 0,
                2,
            ),
        }
