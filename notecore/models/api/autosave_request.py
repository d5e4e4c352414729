# notecore/models/api/autosave_request.py
"""
Auto-save API request models.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

PriorityName = Literal["low", "normal", "high", "critical"]
PresetName = Literal["default", "aggressive", "conservative", "manual"]


class EnqueueNoteRequest(BaseModel):
    """Request for queueing a note save."""

    note_id: str = Field(..., min_length=1, max_length=200, description="Stable note identifier")
    title: str = Field(default="", max_length=500, description="Note title")
    content: str = Field(default="", description="Note body")
    last_modified: datetime | None = Field(default=None, description="Client edit timestamp")
    priority: PriorityName = Field(default="normal", description="Save priority")


class UpdateConfigurationRequest(BaseModel):
    """Partial auto-save configuration update, optionally starting from a preset."""

    preset: PresetName | None = Field(default=None, description="Start from a named preset")
    enabled: bool | None = None
    interval: float | None = Field(default=None, gt=0, description="Timer interval in seconds")
    idle_threshold: float | None = Field(default=None, ge=0, description="Idle seconds before saving")
    max_items_per_batch: int | None = Field(default=None, ge=1, le=1000)
    retry_attempts: int | None = Field(default=None, ge=1, le=20)
    exponential_backoff: bool | None = None
    preserve_drafts: bool | None = None
    notify_on_save: bool | None = None
    backoff_base: float | None = Field(default=None, gt=0)
    max_backoff: float | None = Field(default=None, gt=0)
    max_concurrent_saves: int | None = Field(default=None, ge=1, le=64)

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True, exclude={"preset"})
