"""OpenAI-compatible chat completion client.

Generation services depend only on the ``TextGenerator`` protocol: one
awaited call that turns a list of chat messages into text. The shipped
implementation talks to any ``/chat/completions`` endpoint over httpx.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional, Protocol

import httpx

from compliance_dashboard.config import Settings, get_settings
from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.tracing import SpanAttributes, create_span

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChatMessage:
    """A single chat message."""

    role: str  # system, user or assistant
    content: str


class TextGenerator(Protocol):
    """Anything that can turn chat messages into generated text."""

    async def generate(self, messages: list[ChatMessage]) -> str:
        ...


class LLMClientError(Exception):
    """The language model call failed or returned no usable content."""


class OpenAIChatClient:
    """Single-attempt client for an OpenAI-compatible chat completions API.

    No retries are made; transport errors, timeouts, HTTP error statuses and
    malformed payloads all surface as ``LLMClientError``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        *,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatClient":
        return cls(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout=settings.llm_timeout_seconds,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _payload(self, messages: list[ChatMessage]) -> dict[str, Any]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [asdict(message) for message in messages],
        }

    async def generate(self, messages: list[ChatMessage]) -> str:
        """Send one chat completion request and return the first choice's text."""
        if not self.api_key:
            raise LLMClientError("No language model API key configured (LLM_API_KEY)")

        prompt_chars = sum(len(m.content) for m in messages)
        with create_span(
            "llm.chat_completion",
            attributes={
                SpanAttributes.LLM_MODEL: self.model,
                SpanAttributes.LLM_PROMPT_CHARS: prompt_chars,
            },
        ) as span:
            try:
                async with httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=self.timeout,
                    transport=self._transport,
                ) as client:
                    response = await client.post(
                        "/chat/completions",
                        headers=self._headers(),
                        json=self._payload(messages),
                    )
                    response.raise_for_status()
                    data = response.json()
            except httpx.TimeoutException as e:
                logger.warning("Language model request timed out", timeout=self.timeout)
                raise LLMClientError(f"Language model request timed out after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                logger.warning(
                    "Language model returned an error status",
                    status_code=e.response.status_code,
                )
                raise LLMClientError(
                    f"Language model returned HTTP {e.response.status_code}"
                ) from e
            except httpx.HTTPError as e:
                logger.warning("Language model request failed", error=str(e))
                raise LLMClientError(f"Language model request failed: {e}") from e
            except ValueError as e:
                raise LLMClientError("Language model returned a non-JSON response") from e

            content = _first_choice_content(data)
            span.set_attribute(SpanAttributes.LLM_RESPONSE_CHARS, len(content))

        logger.debug("Language model responded", model=self.model, response_chars=len(content))
        return content


def _first_choice_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise LLMClientError("Language model response has no message content") from e
    if not isinstance(content, str):
        raise LLMClientError("Language model message content is not text")
    return content


def create_text_generator(settings: Optional[Settings] = None) -> TextGenerator:
    """Build the configured text generator."""
    return OpenAIChatClient.from_settings(settings or get_settings())
