"""Gemini calling utilities.

Wraps the google-genai SDK with two entry points: ``stream`` for
whole-document generation, delivering fragments as they arrive, and
``generate`` for one-shot calls such as single-section regeneration.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

from google import genai
from google.genai import types

from copyforge.content.models import ProductImage

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_AI_API_KEY")


class LLMError(Exception):
    """Base error for generation API calls."""


def resolve_api_key(explicit: str | None = None) -> str:
    """Return the first configured API key.

    Raises:
        LLMError: If no key is configured.
    """
    if explicit and explicit.strip():
        return explicit.strip()
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    raise LLMError(f"No API key configured (set one of {', '.join(API_KEY_ENV_VARS)})")


def build_contents(prompt: str, image: ProductImage | None = None) -> list[types.Part]:
    """Build the request parts: optional inline image first, then the prompt."""
    parts: list[types.Part] = []
    if image is not None:
        parts.append(types.Part.from_bytes(data=image.raw_bytes, mime_type=image.mime_type))
    parts.append(types.Part.from_text(text=prompt))
    return parts


class GeminiClient:
    """Thin client for the Gemini text generation API."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        timeout: int = 120,
    ) -> None:
        self.model = model
        self.timeout = timeout
        self._api_key = api_key
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        """Lazy-create and cache the genai Client."""
        if self._client is None:
            self._client = genai.Client(
                api_key=resolve_api_key(self._api_key),
                http_options=types.HttpOptions(timeout=self.timeout * 1000),
            )
        return self._client

    def stream(
        self,
        prompt: str,
        *,
        image: ProductImage | None = None,
        on_fragment: Callable[[str], None] | None = None,
        label: str = "generate",
    ) -> str:
        """Stream a generation, invoking ``on_fragment`` once per fragment.

        Args:
            prompt: Prompt text.
            image: Optional image sent ahead of the prompt.
            on_fragment: Called with each non-empty text fragment in
                arrival order.
            label: Label for logging.

        Returns:
            The concatenation of all fragments.

        Raises:
            LLMError: On any failure. Fragments already delivered are
                not retracted.
        """
        logger.debug("Streaming from Gemini model=%s (%s)", self.model, label)
        fragments: list[str] = []
        try:
            client = self._get_client()
            response_stream = client.models.generate_content_stream(
                model=self.model,
                contents=build_contents(prompt, image),
            )
            for chunk in response_stream:
                text = chunk.text
                if not text:
                    continue
                fragments.append(text)
                if on_fragment is not None:
                    on_fragment(text)
        except LLMError:
            raise
        except Exception as exc:
            raise LLMError(f"Gemini stream failed (label={label}): {exc}") from exc

        return "".join(fragments)

    def generate(
        self,
        prompt: str,
        *,
        image: ProductImage | None = None,
        label: str = "generate",
    ) -> str:
        """Run a one-shot generation and return the response text (may be empty)."""
        logger.debug("Calling Gemini model=%s (%s)", self.model, label)
        try:
            client = self._get_client()
            response = client.models.generate_content(
                model=self.model,
                contents=build_contents(prompt, image),
            )
        except LLMError:
            raise
        except Exception as exc:
            raise LLMError(f"Gemini call failed (label={label}): {exc}") from exc

        return response.text or ""
