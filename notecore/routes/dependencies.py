"""
Shared route dependencies and error translation.
"""

from fastapi import HTTPException, Request, status

from notecore.container import ServiceContainer
from notecore.errors import ErrorKind, NoteCoreError
from notecore.services.llm.ollama_client import OllamaModelNotFoundError

_STATUS_BY_KIND = {
    ErrorKind.INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFIGURATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DECODING: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.TRANSIENT_IO: status.HTTP_502_BAD_GATEWAY,
}


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def http_error(error: NoteCoreError) -> HTTPException:
    """Translate a core error into an HTTP error carrying its kind."""
    if isinstance(error, OllamaModelNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = _STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return HTTPException(status_code=status_code, detail=error.to_dict())
