# symptom_chat/services/ollama_client.py
import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from symptom_chat.settings import load_settings

logger = logging.getLogger(__name__)


class OllamaError(RuntimeError):
    pass


def extract_raw_payload(data: Any) -> str:
    """Pick the model text out of a chat or generate response.

    `{"message": {"content": ...}}` wins over `{"response": ...}`.
    """
    if isinstance(data, dict):
        message = data.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]
        if isinstance(data.get("response"), str):
            return data["response"]
    raise OllamaError(f"No content in model response: {str(data)[:200]!r}")


class OllamaClient:
    """Thin client for the Ollama chat API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_factor: float = 0.6,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = load_settings()
        self.base_url = base_url or settings.ollama_base_url
        self.model = model or settings.ollama_model
        self.timeout = timeout if timeout is not None else settings.ollama_timeout
        self.max_retries = max_retries if max_retries is not None else settings.ollama_max_retries
        self.backoff_factor = backoff_factor

        # Single AsyncClient can be shared if you manage lifecycle externally.
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        response_format: Optional[str] = "json",
        temperature: float = 0.2,
        top_p: float = 0.9,
    ) -> str:
        """
        Perform a non-streaming chat call and return the raw model text.
        Raises OllamaError on failure.
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {"temperature": temperature, "top_p": top_p},
        }
        if response_format:
            payload["format"] = response_format

        last_exc: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                res = await self._client.post("/api/chat", json=payload)
                if res.status_code in (429, 500, 502, 503, 504):
                    raise OllamaError(f"Transient HTTP {res.status_code}: {res.text[:200]}")
                res.raise_for_status()
                return extract_raw_payload(res.json())
            except (httpx.HTTPError, ValueError, OllamaError) as e:
                last_exc = e
                logger.warning("ollama chat attempt %d failed: %s", attempt + 1, e)
                if attempt >= self.max_retries:
                    break
                await asyncio.sleep(self.backoff_factor * (2 ** attempt))

        raise OllamaError(f"Ollama chat failed: {last_exc}") from last_exc
