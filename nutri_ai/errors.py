"""Error taxonomy for the analysis pipeline."""

from typing import Optional

PARSE_FAILURE_MESSAGE = "Failed to parse JSON from AI response."


class NutriAIError(Exception):
    """Base exception for nutri_ai errors"""
    pass


class ConfigurationError(NutriAIError):
    """Credential placeholder was never replaced"""
    pass


class AcquisitionError(NutriAIError):
    """Camera unavailable, permission denied or frame grab failed"""
    pass


class TransportError(NutriAIError):
    """Non-success HTTP status or network failure talking to the model"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(NutriAIError):
    """No parseable JSON object in the completion text"""

    def __init__(self, message: str = PARSE_FAILURE_MESSAGE):
        super().__init__(message)


class InvalidTransition(NutriAIError):
    """Action is not allowed on the current screen"""
    pass
