"""Copy synthesis on top of the Gemini client.

Builds prompts from generation parameters, calls the model and turns
client failures into ``SynthesisError`` with a user-facing message.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from copyforge.content.models import ContentChunk, GenerationParameters
from copyforge.content.prompts import build_improvement_prompt, build_prompt
from copyforge.llm import GeminiClient, LLMError

logger = logging.getLogger(__name__)


class SynthesisError(Exception):
    """Raised when a generation request fails."""


class EmptyResponseError(SynthesisError):
    """Raised when a regeneration call returns no text."""


class CopySynthesizer:
    """Generates, regenerates and improves marketing copy."""

    def __init__(self, client: GeminiClient) -> None:
        self._client = client

    def generate(
        self,
        params: GenerationParameters,
        on_fragment: Callable[[str], None] | None = None,
    ) -> str:
        """Stream a full generation for ``params``.

        Args:
            params: Validated generation parameters.
            on_fragment: Called once per streamed text fragment.

        Returns:
            The accumulated raw markdown.

        Raises:
            SynthesisError: If the API call fails.
        """
        prompt = build_prompt(params)
        try:
            return self._client.stream(
                prompt,
                image=params.product_image,
                on_fragment=on_fragment,
                label=f"generate {params.content_type}",
            )
        except LLMError as exc:
            logger.error("Error generating content: %s", exc)
            raise SynthesisError(f"Failed to generate content: {exc}") from exc

    def regenerate_chunk(self, params: GenerationParameters, chunk: ContentChunk) -> str:
        """Ask for replacement text for a single chunk.

        Returns:
            The new body text, stripped.

        Raises:
            EmptyResponseError: If the model returned no text.
            SynthesisError: If the API call fails.
        """
        prompt = build_prompt(params, chunk)
        try:
            text = self._client.generate(
                prompt,
                image=params.product_image,
                label=f"regenerate {chunk.id}",
            )
        except LLMError as exc:
            logger.error("Error regenerating content chunk: %s", exc)
            raise SynthesisError(f"Failed to regenerate content: {exc}") from exc

        if not text.strip():
            raise EmptyResponseError(
                "Failed to regenerate content: Received an empty response from the AI."
            )
        return text.strip()

    def improve(
        self,
        original_text: str,
        improvement_action: str,
        tone: str | None = None,
        on_fragment: Callable[[str], None] | None = None,
    ) -> str:
        """Stream an improved version of ``original_text``.

        Raises:
            SynthesisError: If the API call fails.
        """
        prompt = build_improvement_prompt(original_text, improvement_action, tone)
        try:
            return self._client.stream(
                prompt,
                on_fragment=on_fragment,
                label=f"improve {improvement_action}",
            )
        except LLMError as exc:
            logger.error("Error improving content: %s", exc)
            raise SynthesisError(f"Failed to improve content: {exc}") from exc
