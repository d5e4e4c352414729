# notecore/models/api/llm_request.py
"""
Local LLM API request models.
"""

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    prompt: str = Field(..., min_length=1, description="Prompt text")
    model: str | None = Field(default=None, description="Model name (configured default when omitted)")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.9, gt=0.0, le=1.0)
    num_predict: int = Field(default=1000, ge=1)
    num_ctx: int = Field(default=4000, ge=1)


class PullModelRequest(BaseModel):
    model: str = Field(..., min_length=1, description="Model to download")
