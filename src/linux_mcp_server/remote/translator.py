"""Natural language to shell command translation via Ollama.

Translation is best effort: any failure falls back to the caller's text so
it can still be run as a literal command.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3"

GENERATE_PATH = "/api/generate"

PROMPT_TEMPLATE = (
    "You are a Linux command expert. Translate the following natural language request "
    "into a single executable Linux shell command. Do not explain. Do not use markdown "
    "backticks. Just return the command.\n\nRequest: {request}\nCommand:"
)


class OllamaTranslator:
    """Turns requests like "check disk space" into commands like ``df -h``."""

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the translator with a reusable HTTP client.

        Args:
            base_url: Ollama server URL.
            model: Model name passed to the generate endpoint.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self._model = model
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def model(self) -> str:
        return self._model

    def translate(self, text: str) -> str:
        """Translate a natural-language request into a shell command.

        Args:
            text: The user's request.

        Returns:
            The generated command, or ``text`` unchanged if translation fails.
        """
        payload: dict[str, Any] = {
            "model": self._model,
            "prompt": PROMPT_TEMPLATE.format(request=text),
            "stream": False,
        }

        try:
            response = self._client.post(GENERATE_PATH, json=payload)
            response.raise_for_status()
            answer = response.json().get("response")
        except httpx.HTTPStatusError as e:
            logger.error("Ollama API error: HTTP %d", e.response.status_code)
            return text
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error("Failed to call Ollama: %s", e)
            return text

        if not isinstance(answer, str) or not answer.strip():
            logger.error("Ollama returned no command for: %s", text)
            return text
        return answer.strip()

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> OllamaTranslator:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
