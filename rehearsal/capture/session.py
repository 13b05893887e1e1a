"""Recording lifecycle for one answer attempt.

States: IDLE -> RECORDING -> FINALIZING -> IDLE. Text input skips
RECORDING: a submit is an immediate finalize.

Final segments are appended in arrival order; interim text is replaced by
whatever segment comes next and never reaches the finalized answer.
"""

from collections.abc import Callable

from rehearsal.capture.base import BaseCaptureEngine
from rehearsal.capture.exceptions import (
    CaptureAborted,
    CaptureDeviceDenied,
    CaptureEngineError,
    CaptureError,
    CaptureOrderError,
    InvalidCaptureTransition,
)
from rehearsal.capture.models import CaptureState, Segment
from rehearsal.logging.logger import Log

_ABORTED = "aborted"
_DEVICE_DENIED_KINDS = frozenset({"not-allowed", "service-not-allowed", "audio-capture"})


class CaptureSession:
    """Owns accumulated and interim text for the answer being captured."""

    def __init__(
        self,
        engine: BaseCaptureEngine | None = None,
        on_finalized: Callable[[str], None] | None = None,
        on_error: Callable[[CaptureError], None] | None = None,
    ) -> None:
        self._engine = engine
        self._on_finalized = on_finalized
        self._on_error = on_error
        self._state = CaptureState.IDLE
        self._accumulated_final_text = ""
        self._pending_interim_text = ""
        self._last_result_index: int | None = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def accumulated_final_text(self) -> str:
        return self._accumulated_final_text

    @property
    def pending_interim_text(self) -> str:
        return self._pending_interim_text

    @property
    def display_text(self) -> str:
        """Live transcript shown while recording: finals plus current interim."""
        return self._accumulated_final_text + self._pending_interim_text

    @property
    def is_recording(self) -> bool:
        return self._state is CaptureState.RECORDING

    # ------------------------------------------------------------------
    # Control calls
    # ------------------------------------------------------------------

    def start(self) -> None:
        self._require(CaptureState.IDLE, "start")
        if self._engine is None:
            raise CaptureDeviceDenied("Speech capture is not available", kind="not-supported")

        self._reset_text()
        try:
            self._engine.start()
        except CaptureError:
            raise
        except Exception as exc:
            raise CaptureEngineError(f"Capture engine failed to start: {exc}") from exc
        self._state = CaptureState.RECORDING
        Log.debug("Capture started")

    def stop(self) -> str:
        """Finalize the recording and hand the answer over.

        An engine failure while stopping does not lose the answer: the text
        gathered so far is still finalized and the failure goes to the error
        listener as a ``CaptureEngineError``.

        Returns:
            Accumulated final text, stripped. Pending interim text is dropped.
        """
        self._require(CaptureState.RECORDING, "stop")
        self._state = CaptureState.FINALIZING
        stop_error: CaptureError | None = None
        try:
            if self._engine is not None:
                try:
                    self._engine.stop()
                except CaptureError as exc:
                    stop_error = exc
                except Exception as exc:
                    stop_error = CaptureEngineError(
                        f"Capture engine failed to stop: {exc}", kind="stop-failed"
                    )
            answer = self._finalize(self._accumulated_final_text)
        finally:
            self._state = CaptureState.IDLE

        if stop_error is not None:
            Log.warning(f"Capture engine failed to stop cleanly: {stop_error}")
            if self._on_error is not None:
                self._on_error(stop_error)
        return answer

    def submit_text(self, text: str) -> str:
        """Text-mode answer: finalize immediately without recording."""
        self._require(CaptureState.IDLE, "submit_text")
        self._state = CaptureState.FINALIZING
        try:
            return self._finalize(text)
        finally:
            self._state = CaptureState.IDLE

    def cancel(self) -> None:
        """Drop an in-flight recording without surfacing an error."""
        if self._state is not CaptureState.RECORDING:
            return
        if self._engine is not None:
            self._engine.abort()
        self._reset_text()
        self._state = CaptureState.IDLE
        Log.debug("Capture cancelled")

    # ------------------------------------------------------------------
    # Engine events
    # ------------------------------------------------------------------

    def on_segment(self, text: str, is_final: bool, result_index: int | None = None) -> None:
        if self._state is not CaptureState.RECORDING:
            Log.debug(f"Ignoring segment received while {self._state.value}")
            return

        if result_index is not None:
            if self._last_result_index is not None and result_index < self._last_result_index:
                raise CaptureOrderError(
                    f"Segment index {result_index} arrived after {self._last_result_index}"
                )
            self._last_result_index = result_index

        if is_final:
            self._accumulated_final_text += text
            self._pending_interim_text = ""
        else:
            self._pending_interim_text = text

    def feed(self, segment: Segment) -> None:
        self.on_segment(segment.text, segment.is_final, segment.result_index)

    def on_error(self, kind: str) -> CaptureError | None:
        """Apply an engine error.

        Returns:
            The error that was reported upward, or None when it was swallowed
            (``aborted``, or any error arriving while not recording).
        """
        error = self._error_for(kind)
        if isinstance(error, CaptureAborted):
            if self._state is CaptureState.RECORDING:
                self._reset_text()
                self._state = CaptureState.IDLE
            Log.debug("Capture aborted")
            return None

        if self._state is not CaptureState.RECORDING:
            Log.debug(f"Ignoring capture error '{kind}' received while {self._state.value}")
            return None

        self._reset_text()
        self._state = CaptureState.IDLE
        Log.warning(f"Capture failed: {kind}")
        if self._on_error is not None:
            self._on_error(error)
        return error

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _finalize(self, text: str) -> str:
        answer = text.strip()
        self._reset_text()
        Log.info(f"Answer finalized ({len(answer)} chars)")
        if self._on_finalized is not None:
            self._on_finalized(answer)
        return answer

    def _reset_text(self) -> None:
        self._accumulated_final_text = ""
        self._pending_interim_text = ""
        self._last_result_index = None

    def _require(self, expected: CaptureState, action: str) -> None:
        if self._state is not expected:
            raise InvalidCaptureTransition(
                f"Cannot {action} while {self._state.value}", kind=self._state.value
            )

    @staticmethod
    def _error_for(kind: str) -> CaptureError:
        if kind == _ABORTED:
            return CaptureAborted("Capture stopped by caller", kind=kind)
        if kind in _DEVICE_DENIED_KINDS:
            return CaptureDeviceDenied(f"Microphone unavailable: {kind}", kind=kind)
        return CaptureEngineError(f"Speech recognition error: {kind}", kind=kind)
