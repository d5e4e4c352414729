"""
Preferences API routes.
"""

from fastapi import APIRouter, Depends, Request, Response

from notecore.container import ServiceContainer
from notecore.errors import NoteCoreError
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.api.preferences_request import UpdatePreferencesRequest
from notecore.models.domain.preferences_domain import LanguagePreferences, UserPromptPreferences
from notecore.routes.dependencies import get_services, http_error

logger = get_logger(__name__)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("", response_model=UserPromptPreferences)
async def get_preferences(services: ServiceContainer = Depends(get_services)):
    return await services.preferences.get_preferences()


@router.patch("", response_model=UserPromptPreferences)
async def update_preferences(
    request: UpdatePreferencesRequest, services: ServiceContainer = Depends(get_services)
):
    try:
        return await services.preferences.update_fields(**request.changes)
    except NoteCoreError as e:
        logger.warning("Preferences update rejected", error=str(e))
        raise http_error(e) from e


@router.post("/reset", response_model=UserPromptPreferences)
async def reset_preferences(services: ServiceContainer = Depends(get_services)):
    try:
        return await services.preferences.reset_to_defaults()
    except NoteCoreError as e:
        raise http_error(e) from e


@router.get("/language", response_model=LanguagePreferences)
async def language_preferences(services: ServiceContainer = Depends(get_services)):
    return await services.preferences.get_language_preferences()


@router.get("/export")
async def export_preferences(services: ServiceContainer = Depends(get_services)):
    data = await services.preferences.export_preferences()
    return Response(
        content=data,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="preferences.json"'},
    )


@router.post("/import", response_model=UserPromptPreferences)
async def import_preferences(request: Request, services: ServiceContainer = Depends(get_services)):
    """Import a document previously produced by /preferences/export."""
    body = await request.body()
    try:
        return await services.preferences.import_preferences(body)
    except NoteCoreError as e:
        raise http_error(e) from e
