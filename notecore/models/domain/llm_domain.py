# notecore/models/domain/llm_domain.py
"""
Local LLM (Ollama) wire models.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(slots=True)
class OllamaModel:
    name: str
    modified_at: str | None = None
    size: int = 0
    digest: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "OllamaModel":
        return cls(
            name=data["name"],
            modified_at=data.get("modified_at"),
            size=int(data.get("size") or 0),
            digest=data.get("digest", ""),
            details=data.get("details") or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class GenerationOptions:
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.9
    num_predict: int = 1000
    num_ctx: int = 4000

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True, frozen=True)
class PullProgress:
    status: str
    completed: int | None = None
    total: int | None = None
