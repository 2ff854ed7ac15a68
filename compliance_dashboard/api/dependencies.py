"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from compliance_dashboard.llm.client import TextGenerator, create_text_generator


def get_text_generator() -> TextGenerator:
    """The language model client used by generation endpoints."""
    return create_text_generator()


TextGeneratorDep = Annotated[TextGenerator, Depends(get_text_generator)]
