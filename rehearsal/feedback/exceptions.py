class FeedbackError(Exception):
    """Base exception for answer feedback errors."""


class FeedbackUnavailable(FeedbackError):
    """Raised when feedback could not be generated. The answer itself is unaffected."""
