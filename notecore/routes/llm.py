"""
Local LLM API routes.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from notecore.container import ServiceContainer
from notecore.errors import NoteCoreError
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.api.llm_request import GenerateRequest, PullModelRequest
from notecore.models.domain.llm_domain import GenerationOptions
from notecore.routes.dependencies import get_services, http_error

logger = get_logger(__name__)

router = APIRouter(prefix="/llm", tags=["llm"])


def _options(request: GenerateRequest) -> GenerationOptions:
    return GenerationOptions(
        temperature=request.temperature,
        top_k=request.top_k,
        top_p=request.top_p,
        num_predict=request.num_predict,
        num_ctx=request.num_ctx,
    )


@router.get("/models")
async def list_models(services: ServiceContainer = Depends(get_services)):
    try:
        models = await services.ollama.list_models()
    except NoteCoreError as e:
        raise http_error(e) from e
    return {"models": [model.to_dict() for model in models], "total_count": len(models)}


@router.post("/generate")
async def generate(request: GenerateRequest, services: ServiceContainer = Depends(get_services)):
    model = request.model or services.config.OLLAMA_DEFAULT_MODEL
    try:
        text = await services.ollama.generate(request.prompt, model, _options(request))
    except NoteCoreError as e:
        logger.warning("Generation failed", model=model, error=str(e))
        raise http_error(e) from e
    return {"model": model, "response": text}


@router.post("/generate/stream")
async def generate_stream(
    request: GenerateRequest, services: ServiceContainer = Depends(get_services)
):
    """Stream plain-text fragments as the model produces them."""
    model = request.model or services.config.OLLAMA_DEFAULT_MODEL
    # Fail before the response starts when the model is missing
    try:
        await services.ollama.ensure_model(model)
    except NoteCoreError as e:
        raise http_error(e) from e

    fragments = services.ollama.generate_stream(request.prompt, model, _options(request))
    return StreamingResponse(fragments, media_type="text/plain; charset=utf-8")


@router.post("/pull")
async def pull_model(request: PullModelRequest, services: ServiceContainer = Depends(get_services)):
    try:
        progress = await services.ollama.pull_model(request.model)
    except NoteCoreError as e:
        raise http_error(e) from e
    return {
        "model": request.model,
        "status": progress[-1].status if progress else "unknown",
        "status_lines": len(progress),
    }
