"""
Ollama HTTP client for local model generation.
Handles model listing, generation (plain and streamed NDJSON) and model pulls
with retry on transient server errors.
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any

import httpx

from notecore.config import settings
from notecore.errors import ErrorKind, NoteCoreError
from notecore.infrastructure.observability.logging import get_logger
from notecore.models.domain.llm_domain import GenerationOptions, OllamaModel, PullProgress

logger = get_logger(__name__)

MAX_RETRIES = 3
BACKOFF_FACTOR = 0.5
RETRY_STATUS_CODES = {500, 502, 503, 504}


class OllamaError(NoteCoreError):
    """Base error for the Ollama client."""


class OllamaInvalidURLError(OllamaError):
    def __init__(self, base_url: str):
        super().__init__(f"Invalid Ollama base URL: {base_url!r}", kind=ErrorKind.CONFIGURATION)
        self.base_url = base_url


class OllamaModelNotFoundError(OllamaError):
    def __init__(self, model_name: str):
        super().__init__(
            f"Model '{model_name}' is not available",
            kind=ErrorKind.CONFIGURATION,
            user_message=f"Model '{model_name}' is not installed; pull it first",
        )
        self.model_name = model_name


class OllamaServerError(OllamaError):
    def __init__(self, status_code: int, message: str = ""):
        super().__init__(
            f"Ollama server error {status_code}: {message}".rstrip(": "),
            kind=ErrorKind.TRANSIENT_IO,
            recoverable=status_code >= 500,
        )
        self.status_code = status_code


class OllamaConnectionError(OllamaError):
    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.TRANSIENT_IO)


def _validate_base_url(base_url: str) -> str:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise OllamaInvalidURLError(base_url) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise OllamaInvalidURLError(base_url)
    return str(url).rstrip("/")


class OllamaClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int = MAX_RETRIES,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = _validate_base_url(base_url or settings.OLLAMA_BASE_URL)
        self.max_retries = max(1, max_retries)
        self.available_models: list[OllamaModel] = []
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or settings.OLLAMA_TIMEOUT_SECONDS),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request_with_retry(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with retry and backoff."""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = await self._client.request(method, path, **kwargs)
                if response.status_code in RETRY_STATUS_CODES and attempt < self.max_retries:
                    backoff = BACKOFF_FACTOR * (2 ** (attempt - 1))
                    logger.debug(
                        "Ollama retrying request",
                        path=path,
                        attempt=attempt,
                        status_code=response.status_code,
                        backoff_seconds=backoff,
                    )
                    await asyncio.sleep(backoff)
                    continue
                return response
            except httpx.RequestError as e:
                if attempt >= self.max_retries:
                    raise OllamaConnectionError(f"Ollama request failed: {e}") from e
                backoff = BACKOFF_FACTOR * (2 ** (attempt - 1))
                logger.debug(
                    "Ollama request error, retrying",
                    path=path,
                    attempt=attempt,
                    error=str(e),
                    backoff_seconds=backoff,
                )
                await asyncio.sleep(backoff)
        raise RuntimeError("Ollama retry loop exhausted")

    def _raise_for_status(self, response: httpx.Response) -> None:
        if not response.is_success:
            logger.warning(
                "Ollama request failed",
                path=response.request.url.path,
                status_code=response.status_code,
            )
            raise OllamaServerError(response.status_code, response.text[:200])

    # Models

    async def list_models(self) -> list[OllamaModel]:
        response = await self._request_with_retry("GET", "/api/tags")
        self._raise_for_status(response)
        try:
            payload = response.json()
            models = [OllamaModel.from_api(item) for item in payload.get("models", [])]
        except (ValueError, KeyError, TypeError) as e:
            raise OllamaError(f"Invalid model list response: {e}", kind=ErrorKind.DECODING) from e

        self.available_models = models
        logger.info("Ollama models listed", count=len(models))
        return models

    async def ensure_model(self, model_name: str) -> None:
        """Raise OllamaModelNotFoundError unless model_name is installed."""
        if not any(model.name == model_name for model in self.available_models):
            await self.list_models()
        if not any(model.name == model_name for model in self.available_models):
            raise OllamaModelNotFoundError(model_name)

    async def health_check(self) -> dict[str, Any]:
        try:
            models = await self.list_models()
            return {
                "healthy": bool(models),
                "service": "ollama",
                "base_url": self.base_url,
                "model_count": len(models),
            }
        except OllamaError as e:
            return {"healthy": False, "service": "ollama", "base_url": self.base_url, "error": str(e)}

    # Generation

    def _generate_body(
        self, prompt: str, model_name: str, stream: bool, options: GenerationOptions | None
    ) -> dict[str, Any]:
        return {
            "model": model_name,
            "prompt": prompt,
            "stream": stream,
            "options": (options or GenerationOptions()).to_dict(),
        }

    async def generate(
        self,
        prompt: str,
        model_name: str | None = None,
        options: GenerationOptions | None = None,
    ) -> str:
        model_name = model_name or settings.OLLAMA_DEFAULT_MODEL
        await self.ensure_model(model_name)

        response = await self._request_with_retry(
            "POST", "/api/generate", json=self._generate_body(prompt, model_name, False, options)
        )
        self._raise_for_status(response)
        try:
            text = response.json()["response"]
        except (ValueError, KeyError, TypeError) as e:
            raise OllamaError(f"Invalid generate response: {e}", kind=ErrorKind.DECODING) from e

        logger.debug("Ollama generation completed", model=model_name, length=len(text))
        return text.strip()

    async def generate_stream(
        self,
        prompt: str,
        model_name: str | None = None,
        options: GenerationOptions | None = None,
    ) -> AsyncIterator[str]:
        """Yield response fragments until the server reports done."""
        model_name = model_name or settings.OLLAMA_DEFAULT_MODEL
        await self.ensure_model(model_name)

        body = self._generate_body(prompt, model_name, True, options)
        try:
            async with self._client.stream("POST", "/api/generate", json=body) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_status(response)

                async for line in response.aiter_lines():
                    chunk = _decode_line(line)
                    if chunk is None:
                        continue
                    fragment = chunk.get("response")
                    if fragment:
                        yield fragment
                    if chunk.get("done") is True:
                        return
        except httpx.RequestError as e:
            raise OllamaConnectionError(f"Ollama stream failed: {e}") from e

    async def pull_model(self, model_name: str) -> list[PullProgress]:
        """Pull a model, returning the status lines the server reported."""
        progress: list[PullProgress] = []
        try:
            async with self._client.stream(
                "POST", "/api/pull", json={"name": model_name, "stream": True}
            ) as response:
                if not response.is_success:
                    await response.aread()
                    self._raise_for_status(response)

                async for line in response.aiter_lines():
                    chunk = _decode_line(line)
                    if chunk is None or "status" not in chunk:
                        continue
                    progress.append(
                        PullProgress(
                            status=str(chunk["status"]),
                            completed=chunk.get("completed"),
                            total=chunk.get("total"),
                        )
                    )
        except httpx.RequestError as e:
            raise OllamaConnectionError(f"Ollama pull failed: {e}") from e

        logger.info("Ollama model pulled", model=model_name, status_lines=len(progress))
        await self.list_models()
        return progress


def _decode_line(line: str) -> dict[str, Any] | None:
    if not line.strip():
        return None
    try:
        chunk = json.loads(line)
    except ValueError:
        logger.debug("Skipping undecodable stream line", preview=line[:50])
        return None
    return chunk if isinstance(chunk, dict) else None
