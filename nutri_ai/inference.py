"""Single-call vision completion for meal analysis."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from openai import APIConnectionError, APIStatusError

from nutri_ai import config
from nutri_ai.acquire import CapturedImage
from nutri_ai.errors import ExtractionError, TransportError
from nutri_ai.openai_client import get_openai_client
from nutri_ai.prompts import AI_PROMPT

logger = logging.getLogger(__name__)


def _client():
    return get_openai_client()


def _get_vision_model_name() -> str:
    model = (config.NUTRI_AI_MODEL or "gpt-4o").strip()
    return model or "gpt-4o"


@dataclass(frozen=True)
class AnalysisRequest:
    image: CapturedImage
    model: str
    max_tokens: int = config.MAX_TOKENS
    prompt: str = AI_PROMPT

    def messages(self) -> List[Dict[str, Any]]:
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": self.prompt},
                    {"type": "image_url", "image_url": {"url": self.image.data_uri}},
                ],
            }
        ]


def request_completion(image: CapturedImage) -> str:
    """
    Send the image with the fixed prompt and return the raw completion text.

    One attempt only. Raises ConfigurationError before any network call when
    the credential is missing, TransportError on HTTP/network failure.
    """
    client = _client()
    request = AnalysisRequest(image=image, model=_get_vision_model_name())

    logger.info(
        "Sending %.1fkb %s image to model=%s",
        image.size_kb,
        image.mime_type,
        request.model,
    )

    try:
        response = client.chat.completions.create(
            model=request.model,
            max_tokens=request.max_tokens,
            messages=request.messages(),
        )
    except APIStatusError as e:
        reason = e.response.reason_phrase if e.response is not None else ""
        raise TransportError(
            f"API Error: {e.status_code} {reason}".strip(),
            status_code=e.status_code,
        ) from e
    except APIConnectionError as e:
        raise TransportError(f"Network error: {e}") from e

    if not response.choices:
        logger.error("Completion contained no choices")
        raise ExtractionError()

    content = response.choices[0].message.content or ""
    logger.info("Completion received, length: %s", len(content))
    if not content:
        logger.error("Completion content was empty")
        raise ExtractionError()
    return content
