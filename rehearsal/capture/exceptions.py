class CaptureError(Exception):
    """Base exception for all capture-related errors."""

    def __init__(self, message: str, kind: str = "") -> None:
        super().__init__(message)
        self.kind = kind


class CaptureAborted(CaptureError):
    """Capture stopped because the caller asked it to. Never shown to the user."""


class CaptureDeviceDenied(CaptureError):
    """Microphone unavailable or permission refused. Fatal for voice mode only."""


class CaptureEngineError(CaptureError):
    """The speech engine reported a failure (network, no-speech, ...)."""


class CaptureOrderError(CaptureError):
    """A segment arrived with a result index lower than one already applied."""


class InvalidCaptureTransition(CaptureError):
    """A control call was made from a state that does not allow it."""
