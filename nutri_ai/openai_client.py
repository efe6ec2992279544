import logging
from functools import lru_cache

from openai import OpenAI

from nutri_ai import config
from nutri_ai.errors import ConfigurationError

logger = logging.getLogger(__name__)


@lru_cache
def get_openai_client() -> OpenAI:
    if not config.is_configured(config.API_KEY):
        raise ConfigurationError(
            "API key is not configured. Please set it up in your deployment process."
        )
    logger.info("Initializing OpenAI client for %s", config.NUTRI_AI_BASE_URL)
    # Single attempt per analysis: the SDK must not retry on its own
    return OpenAI(
        api_key=config.API_KEY,
        base_url=config.NUTRI_AI_BASE_URL,
        max_retries=0,
    )
