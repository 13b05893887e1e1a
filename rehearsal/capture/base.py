from abc import ABC, abstractmethod


class BaseCaptureEngine(ABC):
    """Contract for streaming speech-to-text backends.

    Control calls go out through these methods; results come back by the
    caller feeding ``CaptureSession.on_segment`` / ``on_error`` in the order
    the engine emitted them.
    """

    @abstractmethod
    def start(self) -> None:
        """Begin listening.

        Raises:
            CaptureDeviceDenied: microphone missing or permission refused.
        """

    @abstractmethod
    def stop(self) -> None:
        """Stop listening and flush pending results."""

    @abstractmethod
    def abort(self) -> None:
        """Stop listening and drop pending results."""
