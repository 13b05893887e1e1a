class SessionError(Exception):
    """Base exception for all session orchestration errors."""


class InvalidTransition(SessionError):
    """Raised when an operation is not valid in the current session state."""


class AnswerInFlight(InvalidTransition):
    """Raised when an answer is submitted while another is still being analyzed."""


class EmptyAnswer(SessionError):
    """Raised when the submitted answer is blank."""


class VoiceModeUnavailable(SessionError):
    """Raised when voice capture was denied earlier in this session."""
