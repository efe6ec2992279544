import os


def _parse_cors_origins(raw: str) -> list[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def is_configured(value: str) -> bool:
    """False for empty values and for build placeholders like __NAME__."""
    if not value:
        return False
    return not (value.startswith("__") and value.endswith("__"))


# -----------------------------------
# Deployment secrets
# -----------------------------------
# Replaced at build time by inject_secrets.py. Never read from the
# environment at runtime and never logged.

API_KEY = "__NUTRI_AI_API_KEY__"
CORRECT_PIN = "__NUTRI_AI_PIN__"

# -----------------------------------
# Inference endpoint
# -----------------------------------

# NUTRI_AI_BASE_URL: OpenAI-compatible endpoint, requests go to <base>/chat/completions
NUTRI_AI_BASE_URL = os.getenv("NUTRI_AI_BASE_URL", "https://models.inference.ai.azure.com")

# NUTRI_AI_MODEL: vision-capable chat model
NUTRI_AI_MODEL = os.getenv("NUTRI_AI_MODEL", "gpt-4o")

# Token budget for a single completion
MAX_TOKENS = 1024

# -----------------------------------
# Camera / UI
# -----------------------------------

# NUTRI_AI_CAMERA_INDEX: cv2.VideoCapture device index (point it at the rear camera)
NUTRI_AI_CAMERA_INDEX = int(os.getenv("NUTRI_AI_CAMERA_INDEX", "0"))

PIN_LENGTH = 4

# -----------------------------------
# Server
# -----------------------------------

NUTRI_AI_HOST = os.getenv("NUTRI_AI_HOST", "0.0.0.0")
NUTRI_AI_PORT = int(os.getenv("NUTRI_AI_PORT", "8000"))

CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))
ALLOW_ALL_ORIGINS = CORS_ORIGINS == ["*"]
