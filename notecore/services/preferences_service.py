"""
User prompt preferences, persisted as one JSON blob in the key-value store.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from notecore.errors import ErrorKind, NoteCoreError
from notecore.infrastructure.events import EventBus
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.preferences_domain import (
    DetailLevel,
    LanguagePreferences,
    PromptLanguage,
    PromptTone,
    UserPromptPreferences,
)
from notecore.services.autosave.persistence import KeyValueStore

logger = get_logger(__name__)

PREFERENCES_KEY = "preferences:user_prompt"


class PreferencesError(NoteCoreError):
    """Preferences could not be stored."""


class PreferencesImportError(NoteCoreError):
    """An imported preferences document could not be decoded."""

    def __init__(self, message: str):
        super().__init__(
            message,
            kind=ErrorKind.CONFIGURATION,
            user_message="The preferences file is not valid",
        )


class PreferencesService:
    def __init__(self, kv: KeyValueStore, events: EventBus | None = None):
        self.kv = kv
        self.events = events
        self._current: UserPromptPreferences | None = None

    async def load(self) -> UserPromptPreferences:
        """Load stored preferences; missing or corrupt data yields defaults."""
        raw = await self.kv.get(PREFERENCES_KEY)
        if raw is None:
            self._current = UserPromptPreferences()
            return self._current

        try:
            self._current = UserPromptPreferences.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Stored preferences unreadable, using defaults", error_count=e.error_count()
            )
            self._current = UserPromptPreferences()
        return self._current

    async def get_preferences(self) -> UserPromptPreferences:
        if self._current is None:
            return await self.load()
        return self._current

    async def update_preferences(self, preferences: UserPromptPreferences) -> UserPromptPreferences:
        updated = preferences.model_copy(update={"last_modified": datetime.now(UTC)})
        self._current = updated

        stored = await self.kv.set_with_ttl(PREFERENCES_KEY, updated.model_dump_json())
        if not stored:
            raise PreferencesError("Failed to store preferences")

        logger.info(
            "Preferences updated",
            preferred_language=updated.preferred_language.value,
            version=updated.version,
        )
        if self.events is not None:
            self.events.publish("preferences_updated", last_modified=updated.last_modified.isoformat())
        return updated

    async def update_fields(self, **changes: Any) -> UserPromptPreferences:
        """Apply a partial update, validating the merged result."""
        unknown = sorted(set(changes) - set(UserPromptPreferences.model_fields))
        if unknown:
            raise NoteCoreError(
                f"Unknown preference fields: {', '.join(unknown)}", kind=ErrorKind.INPUT
            )

        current = await self.get_preferences()
        try:
            merged = UserPromptPreferences.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            raise NoteCoreError(
                f"Invalid preference values: {e.error_count()} error(s)", kind=ErrorKind.INPUT
            ) from e
        return await self.update_preferences(merged)

    async def reset_to_defaults(self) -> UserPromptPreferences:
        logger.info("Resetting preferences to defaults")
        return await self.update_preferences(UserPromptPreferences())

    async def export_preferences(self) -> bytes:
        preferences = await self.get_preferences()
        return preferences.model_dump_json().encode("utf-8")

    async def import_preferences(self, data: bytes | str) -> UserPromptPreferences:
        try:
            imported = UserPromptPreferences.model_validate_json(data)
        except ValidationError as e:
            logger.warning("Preferences import rejected", error_count=e.error_count())
            raise PreferencesImportError(f"Invalid preferences document: {e}") from e
        return await self.update_preferences(imported)

    async def get_language_preferences(self) -> LanguagePreferences:
        preferences = await self.get_preferences()
        fallback = (
            PromptLanguage.ENGLISH if preferences.is_german_preferred else PromptLanguage.GERMAN
        )
        return LanguagePreferences(
            primary_language=preferences.preferred_language,
            auto_detect=preferences.auto_detect_language,
            fallback_language=fallback,
        )

    # Convenience updates

    async def update_language_preference(self, language: PromptLanguage) -> UserPromptPreferences:
        return await self.update_fields(preferred_language=language)

    async def toggle_auto_optimization(self) -> UserPromptPreferences:
        current = await self.get_preferences()
        return await self.update_fields(enable_auto_optimization=not current.enable_auto_optimization)

    async def update_detail_level(self, level: DetailLevel) -> UserPromptPreferences:
        return await self.update_fields(detail_level=level)

    async def update_tone(self, tone: PromptTone) -> UserPromptPreferences:
        return await self.update_fields(tone=tone)
