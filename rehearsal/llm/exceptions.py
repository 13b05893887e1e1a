class LLMError(Exception):
    """Raised when a language model call fails or returns unusable output."""


class LLMResponseError(LLMError):
    """Raised when the model reply is not the JSON object we asked for."""


class LLMNetworkError(LLMError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
