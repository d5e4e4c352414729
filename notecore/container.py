"""
Application root: builds every service once and wires their collaborators.
"""

from dataclasses import dataclass

from notecore.config import Settings, settings
from notecore.infrastructure.events import EventBus
from notecore.infrastructure.observability.logging import get_logger
from notecore.services.autosave.coordinator import AutoSaveCoordinator
from notecore.services.autosave.draft_store import DraftStore
from notecore.services.autosave.persistence import (
    KeyValueNoteStore,
    KeyValueStore,
    NotePersistence,
)
from notecore.services.autosave.save_queue import SaveQueue
from notecore.services.infrastructure.memory_store import InMemoryKeyValueStore
from notecore.services.infrastructure.redis_client import FastRedisClient
from notecore.services.language.classifier import LanguageClassifier
from notecore.services.llm.ollama_client import OllamaClient
from notecore.services.preferences_service import PreferencesService
from notecore.services.sentiment.engine import SentimentEngine
from notecore.services.text_intelligence_service import TextIntelligenceService

logger = get_logger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    config: Settings
    events: EventBus
    kv: KeyValueStore
    classifier: LanguageClassifier
    sentiment_engine: SentimentEngine
    text_intelligence: TextIntelligenceService
    note_store: NotePersistence
    drafts: DraftStore
    save_queue: SaveQueue
    autosave: AutoSaveCoordinator
    preferences: PreferencesService
    ollama: OllamaClient

    async def startup(self) -> None:
        await self.kv.initialize()
        await self.preferences.load()
        recovered = await self.autosave.recover_drafts()
        logger.info("Services started", storage=self.config.STORAGE_BACKEND, recovered_drafts=recovered)

    async def shutdown(self) -> None:
        shutdown_errors = []

        try:
            await self.autosave.shutdown()
        except Exception as e:
            logger.error("Error shutting down auto-save", error=str(e))
            shutdown_errors.append(f"autosave: {e}")

        try:
            await self.ollama.close()
        except Exception as e:
            logger.error("Error closing Ollama client", error=str(e))
            shutdown_errors.append(f"ollama: {e}")

        await self.kv.close()

        if shutdown_errors:
            logger.warning("Some services had shutdown errors", errors=shutdown_errors)
        else:
            logger.info("All services closed successfully")


def build_kv_store(config: Settings) -> KeyValueStore:
    if config.uses_redis():
        return FastRedisClient(config.REDIS_URL, config.REDIS_MAX_CONNECTIONS)
    return InMemoryKeyValueStore()


def build_services(
    config: Settings | None = None,
    kv: KeyValueStore | None = None,
    persistence: NotePersistence | None = None,
    ollama: OllamaClient | None = None,
) -> ServiceContainer:
    """Create the service graph; any collaborator can be swapped in for tests."""
    config = config or settings
    events = EventBus()
    kv = kv or build_kv_store(config)

    classifier = LanguageClassifier()
    sentiment_engine = SentimentEngine()
    note_store = persistence or KeyValueNoteStore(kv, config.NOTE_KEY_PREFIX)
    drafts = DraftStore(config.DRAFTS_DIR)
    save_queue = SaveQueue(note_store, config.autosave_configuration(), drafts=drafts, events=events)

    return ServiceContainer(
        config=config,
        events=events,
        kv=kv,
        classifier=classifier,
        sentiment_engine=sentiment_engine,
        text_intelligence=TextIntelligenceService(classifier, sentiment_engine),
        note_store=note_store,
        drafts=drafts,
        save_queue=save_queue,
        autosave=AutoSaveCoordinator(save_queue, drafts=drafts, events=events),
        preferences=PreferencesService(kv, events=events),
        ollama=ollama or OllamaClient(config.OLLAMA_BASE_URL, config.OLLAMA_TIMEOUT_SECONDS),
    )
