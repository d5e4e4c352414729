"""
Auto-save API routes.
HTTP endpoints for queueing note saves and controlling the auto-save engine.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from notecore.container import ServiceContainer
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.api.autosave_request import EnqueueNoteRequest, UpdateConfigurationRequest
from notecore.models.api.autosave_response import (
    AutoSaveStatusResponse,
    ClearQueueResponse,
    ProcessQueueResponse,
    SaveQueueItemResponse,
    SaveQueueResponse,
)
from notecore.models.domain.autosave_domain import AutoSaveConfiguration, NoteRef, SavePriority
from notecore.routes.dependencies import get_services

logger = get_logger(__name__)

router = APIRouter(prefix="/autosave", tags=["autosave"])

_PRESETS = {
    "default": AutoSaveConfiguration.default,
    "aggressive": AutoSaveConfiguration.aggressive,
    "conservative": AutoSaveConfiguration.conservative,
    "manual": AutoSaveConfiguration.manual,
}


def _status_response(services: ServiceContainer) -> AutoSaveStatusResponse:
    return AutoSaveStatusResponse.model_validate(services.autosave.get_save_metrics())


@router.post("/queue", response_model=SaveQueueItemResponse, status_code=status.HTTP_202_ACCEPTED)
async def enqueue_note(
    request: EnqueueNoteRequest, services: ServiceContainer = Depends(get_services)
):
    """Queue a note save; critical saves run immediately while auto-save is active."""
    note = NoteRef(note_id=request.note_id, title=request.title, content=request.content)
    if request.last_modified is not None:
        note.last_modified = request.last_modified

    item = await services.autosave.enqueue(note, SavePriority.parse(request.priority))
    return SaveQueueItemResponse.model_validate(item.to_dict())


@router.get("/queue", response_model=SaveQueueResponse)
async def list_queue(services: ServiceContainer = Depends(get_services)):
    queue = services.save_queue
    items = [SaveQueueItemResponse.model_validate(item.to_dict()) for item in queue.items()]
    return SaveQueueResponse(
        items=items, total_count=len(items), status_counts=queue.status_counts()
    )


@router.delete("/queue", response_model=ClearQueueResponse)
async def clear_queue(services: ServiceContainer = Depends(get_services)):
    cancelled = await services.autosave.clear_queue()
    return ClearQueueResponse(cancelled=cancelled)


@router.delete("/queue/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_item(item_id: UUID, services: ServiceContainer = Depends(get_services)):
    if not await services.autosave.cancel_save(item_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Queue item not found")


@router.post("/process", response_model=ProcessQueueResponse)
async def process_queue(services: ServiceContainer = Depends(get_services)):
    """Process one batch regardless of timers."""
    processed = await services.autosave.process_queue()
    return ProcessQueueResponse(processed=processed, remaining=len(services.save_queue))


@router.post("/force", response_model=ProcessQueueResponse)
async def force_save_all(services: ServiceContainer = Depends(get_services)):
    processed = await services.autosave.force_save_all()
    return ProcessQueueResponse(processed=processed, remaining=len(services.save_queue))


@router.post("/pause", response_model=AutoSaveStatusResponse)
async def pause(services: ServiceContainer = Depends(get_services)):
    services.autosave.pause_auto_save()
    return _status_response(services)


@router.post("/resume", response_model=AutoSaveStatusResponse)
async def resume(services: ServiceContainer = Depends(get_services)):
    services.autosave.resume_auto_save()
    return _status_response(services)


@router.get("/status", response_model=AutoSaveStatusResponse)
async def autosave_status(services: ServiceContainer = Depends(get_services)):
    return _status_response(services)


@router.post("/statistics/reset", response_model=AutoSaveStatusResponse)
async def reset_statistics(services: ServiceContainer = Depends(get_services)):
    services.autosave.reset_statistics()
    return _status_response(services)


@router.get("/configuration")
async def get_configuration(services: ServiceContainer = Depends(get_services)):
    return services.autosave.configuration.to_dict()


@router.put("/configuration")
async def update_configuration(
    request: UpdateConfigurationRequest, services: ServiceContainer = Depends(get_services)
):
    base = _PRESETS[request.preset]() if request.preset else services.autosave.configuration
    try:
        configuration = base.with_changes(**request.changes())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    services.autosave.update_configuration(configuration)
    return configuration.to_dict()


@router.post("/drafts/recover")
async def recover_drafts(services: ServiceContainer = Depends(get_services)):
    recovered = await services.autosave.recover_drafts()
    return {"recovered": recovered, "queue_size": len(services.save_queue)}


@router.delete("/drafts", response_model=ClearQueueResponse)
async def clear_all_drafts(services: ServiceContainer = Depends(get_services)):
    result = await services.autosave.clear_all_drafts()
    return ClearQueueResponse(**result)
