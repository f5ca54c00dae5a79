from __future__ import annotations

import json
import logging
from typing import Any, Dict

from openai import OpenAI, OpenAIError

from .config import get_settings
from .errors import AdminError, ConfigurationError

logger = logging.getLogger(__name__)


def get_client() -> OpenAI:
    settings = get_settings()
    if not settings.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY is not set in .env.local")
    return OpenAI(api_key=settings.openai_api_key)


def complete_json(
    system: str,
    user: str,
    temperature: float = 0.7,
    max_tokens: int = 2000,
    client: OpenAI | None = None,
) -> Dict[str, Any]:
    """
    Run a chat completion in JSON mode and return the parsed object.
    """
    settings = get_settings()
    client = client or get_client()

    try:
        completion = client.chat.completions.create(
            model=settings.openai_model_text,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logger.error("OpenAI request failed: %s", e)
        raise AdminError(f"Failed to generate prompts: {e}") from e

    raw = completion.choices[0].message.content
    if not raw:
        raise AdminError("No response from OpenAI")

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise AdminError(f"OpenAI returned invalid JSON: {e}") from e
