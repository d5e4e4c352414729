# notecore/models/api/autosave_response.py
"""
Auto-save API response models.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SaveQueueItemResponse(BaseModel):
    id: str
    note_id: str
    title: str
    priority: str
    status: str
    retry_count: int
    enqueued_at: datetime
    age_seconds: float
    last_error: str | None = None
    retry_scheduled: bool = False


class SaveQueueResponse(BaseModel):
    items: list[SaveQueueItemResponse]
    total_count: int
    status_counts: dict[str, int]


class ProcessQueueResponse(BaseModel):
    processed: int = Field(..., description="Save attempts made")
    remaining: int = Field(..., description="Items still in the queue")


class ClearQueueResponse(BaseModel):
    cancelled: int
    drafts_removed: int | None = None


class AutoSaveStatusResponse(BaseModel):
    is_paused: bool
    is_active: bool
    queue_size: int
    status_counts: dict[str, int]
    in_flight: int
    scheduled_retries: int
    idle_seconds: float
    last_timer_run: datetime | None = None
    statistics: dict[str, Any]
    configuration: dict[str, Any]
