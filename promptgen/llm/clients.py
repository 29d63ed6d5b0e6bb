import httpx
from typing import Dict, Any, Optional, Protocol
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type
from loguru import logger

from promptgen.errors import UpstreamError
from promptgen.pipeline.envelopes import SchemaId, json_schema


class CompletionClient(Protocol):
    async def complete(
        self,
        system_instruction: str,
        user_instruction: str,
        schema: Optional[SchemaId] = None,
        temperature: Optional[float] = None,
    ) -> str:
        ...


class OpenAICompletionClient:
    """Chat Completions client for OpenAI-compatible endpoints.

    One instance owns one pooled ``httpx.AsyncClient`` and is safe to share
    between concurrent pipeline runs.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str = "gpt-4o",
        timeout: float = 120,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        response_format: str = "json_object",
        retry_attempts: int = 1,
        retry_wait_seconds: float = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key or not api_key.strip():
            raise ValueError("OpenAI API key is not configured. Set OPENAI_API_KEY.")
        self.base_url = str(base_url).rstrip("/")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.response_format = response_format
        self.retry_attempts = max(1, retry_attempts)
        self.retry_wait_seconds = retry_wait_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            transport=transport,
        )

    def _response_format(self, schema: SchemaId) -> Dict[str, Any]:
        if self.response_format == "json_schema":
            return {
                "type": "json_schema",
                "json_schema": {"name": schema.name, "schema": json_schema(schema), "strict": False},
            }
        return {"type": "json_object"}

    def build_payload(
        self,
        system_instruction: str,
        user_instruction: str,
        schema: Optional[SchemaId] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_instruction},
            ],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens,
        }
        if schema is not None:
            payload["response_format"] = self._response_format(schema)
        return payload

    async def complete(
        self,
        system_instruction: str,
        user_instruction: str,
        schema: Optional[SchemaId] = None,
        temperature: Optional[float] = None,
    ) -> str:
        payload = self.build_payload(system_instruction, user_instruction, schema, temperature)
        label = str(schema) if schema else "text"

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=self.retry_wait_seconds, min=self.retry_wait_seconds, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True
            ):
                with attempt:
                    logger.debug("completion call", model=self.model, schema=label, attempt=str(attempt.retry_state.attempt_number))
                    resp = await self._client.post("/chat/completions", json=payload)
        except httpx.HTTPError as e:
            logger.warning("completion transport failure", schema=label, error=repr(e))
            raise UpstreamError(f"OpenAI API Error: {e!r}") from e

        if resp.status_code >= 400:
            detail = _error_detail(resp)
            logger.warning("completion rejected", schema=label, status=resp.status_code, detail=detail)
            raise UpstreamError(f"OpenAI API returned {resp.status_code}: {detail}", status_code=resp.status_code, detail=detail)

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"OpenAI API returned a non-JSON body: {resp.text[:500]}") from e

        if isinstance(data, dict) and data.get("error"):
            detail = _error_detail(resp)
            raise UpstreamError(f"OpenAI API error: {detail}", status_code=resp.status_code, detail=detail)

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            raise UpstreamError("OpenAI API returned no choices")
        choice = choices[0] if isinstance(choices, list) else None
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise UpstreamError(f"OpenAI API returned a malformed choice: {str(choices)[:200]}")
        content = message.get("content")
        if not isinstance(content, str):
            refusal = message.get("refusal")
            raise UpstreamError(f"OpenAI API returned no text content{': ' + refusal if refusal else ''}", detail=refusal)
        return content

    async def aclose(self):
        await self._client.aclose()


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500]
    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str):
        return err
    return resp.text[:500]


def create_completion_client(settings) -> OpenAICompletionClient:
    return OpenAICompletionClient(
        base_url=settings.OPENAI_BASE_URL,
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        temperature=settings.LLM_TEMPERATURE,
        max_tokens=settings.LLM_MAX_TOKENS,
        response_format=settings.LLM_RESPONSE_FORMAT,
        retry_attempts=settings.LLM_RETRY_ATTEMPTS,
        retry_wait_seconds=settings.LLM_RETRY_WAIT_SECONDS,
    )
