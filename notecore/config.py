from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from notecore.models.domain.autosave_domain import AutoSaveConfiguration

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage settings ("memory" keeps everything in-process, "redis" uses REDIS_URL)
    STORAGE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20
    DRAFTS_DIR: str = "data/drafts"
    NOTE_KEY_PREFIX: str = "notes"

    # =================================================================
    # AUTO-SAVE SETTINGS
    # =================================================================
    AUTOSAVE_ENABLED: bool = True
    AUTOSAVE_INTERVAL_SECONDS: float = 30.0
    AUTOSAVE_IDLE_THRESHOLD_SECONDS: float = 5.0
    AUTOSAVE_MAX_ITEMS_PER_BATCH: int = 10
    AUTOSAVE_RETRY_ATTEMPTS: int = 3
    AUTOSAVE_EXPONENTIAL_BACKOFF: bool = True
    AUTOSAVE_PRESERVE_DRAFTS: bool = True
    AUTOSAVE_BACKOFF_BASE_SECONDS: float = 1.0
    AUTOSAVE_MAX_BACKOFF_SECONDS: float = 60.0
    AUTOSAVE_MAX_CONCURRENT_SAVES: int = 4

    # Local LLM (Ollama) settings
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    OLLAMA_DEFAULT_MODEL: str = "llama2"
    OLLAMA_TIMEOUT_SECONDS: float = 60.0

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def autosave_configuration(self) -> AutoSaveConfiguration:
        """Build the auto-save configuration from the AUTOSAVE_* settings."""
        return AutoSaveConfiguration(
            enabled=self.AUTOSAVE_ENABLED,
            interval=self.AUTOSAVE_INTERVAL_SECONDS,
            idle_threshold=self.AUTOSAVE_IDLE_THRESHOLD_SECONDS,
            max_items_per_batch=self.AUTOSAVE_MAX_ITEMS_PER_BATCH,
            retry_attempts=self.AUTOSAVE_RETRY_ATTEMPTS,
            exponential_backoff=self.AUTOSAVE_EXPONENTIAL_BACKOFF,
            preserve_drafts=self.AUTOSAVE_PRESERVE_DRAFTS,
            backoff_base=self.AUTOSAVE_BACKOFF_BASE_SECONDS,
            max_backoff=self.AUTOSAVE_MAX_BACKOFF_SECONDS,
            max_concurrent_saves=self.AUTOSAVE_MAX_CONCURRENT_SAVES,
        )

    def uses_redis(self) -> bool:
        return self.STORAGE_BACKEND.strip().lower() == "redis"


settings = Settings()

# =================================================================
# QUICK CONFIGURATION REFERENCE
# =================================================================
"""
Auto-save presets map onto the AUTOSAVE_* variables:

DEFAULT:
    AUTOSAVE_INTERVAL_SECONDS=30
    AUTOSAVE_IDLE_THRESHOLD_SECONDS=5

AGGRESSIVE (frequent small saves):
    AUTOSAVE_INTERVAL_SECONDS=10
    AUTOSAVE_IDLE_THRESHOLD_SECONDS=2

CONSERVATIVE (battery friendly):
    AUTOSAVE_INTERVAL_SECONDS=120
    AUTOSAVE_IDLE_THRESHOLD_SECONDS=15

MANUAL (only explicit saves):
    AUTOSAVE_ENABLED=false
"""
