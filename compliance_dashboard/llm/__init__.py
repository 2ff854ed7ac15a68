"""Language model access for code and test generation."""

from compliance_dashboard.llm.client import (
    ChatMessage,
    LLMClientError,
    OpenAIChatClient,
    TextGenerator,
    create_text_generator,
)

__all__ = [
    "ChatMessage",
    "LLMClientError",
    "OpenAIChatClient",
    "TextGenerator",
    "create_text_generator",
]
