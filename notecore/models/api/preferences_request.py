# notecore/models/api/preferences_request.py
"""
Preferences API request models.
"""

from typing import Any

from pydantic import BaseModel, Field


class UpdatePreferencesRequest(BaseModel):
    """Partial preferences update; unknown field names are rejected."""

    changes: dict[str, Any] = Field(..., description="Preference fields to change")
