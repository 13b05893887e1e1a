from unittest.mock import MagicMock

import pytest

from rehearsal.capture.base import BaseCaptureEngine
from rehearsal.capture.exceptions import (
    CaptureDeviceDenied,
    CaptureEngineError,
    CaptureOrderError,
    InvalidCaptureTransition,
)
from rehearsal.capture.models import CaptureState, Segment
from rehearsal.capture.session import CaptureSession


def _session(**kwargs: object) -> tuple[CaptureSession, MagicMock]:
    engine = MagicMock(spec=BaseCaptureEngine)
    return CaptureSession(engine, **kwargs), engine  # type: ignore[arg-type]


def _recording(**kwargs: object) -> tuple[CaptureSession, MagicMock]:
    session, engine = _session(**kwargs)
    session.start()
    return session, engine


class TestStart:
    def test_start_moves_to_recording(self) -> None:
        session, engine = _recording()
        assert session.state is CaptureState.RECORDING
        engine.start.assert_called_once_with()

    def test_start_twice_is_rejected(self) -> None:
        session, _ = _recording()
        with pytest.raises(InvalidCaptureTransition):
            session.start()

    def test_start_without_engine_is_device_denied(self) -> None:
        session = CaptureSession()
        with pytest.raises(CaptureDeviceDenied):
            session.start()
        assert session.state is CaptureState.IDLE

    def test_engine_refusal_keeps_idle(self) -> None:
        session, engine = _session()
        engine.start.side_effect = CaptureDeviceDenied("no mic", kind="not-allowed")
        with pytest.raises(CaptureDeviceDenied):
            session.start()
        assert session.state is CaptureState.IDLE

    def test_unexpected_engine_failure_is_wrapped(self) -> None:
        session, engine = _session()
        engine.start.side_effect = OSError("driver crashed")
        with pytest.raises(CaptureEngineError, match="driver crashed"):
            session.start()
        assert session.state is CaptureState.IDLE

    def test_start_clears_previous_interim_text(self) -> None:
        session, _ = _recording()
        session.on_segment("half a thought", is_final=False)
        session.cancel()
        session.start()
        assert session.pending_interim_text == ""
        assert session.accumulated_final_text == ""


class TestSegments:
    def test_interim_then_final_then_stop(self) -> None:
        session, _ = _recording()
        session.on_segment("hello ", is_final=False)
        session.on_segment("world", is_final=True)
        assert session.stop() == "world"

    def test_finals_append_in_arrival_order(self) -> None:
        session, _ = _recording()
        session.on_segment("I led ", is_final=True, result_index=0)
        session.on_segment("I led ", is_final=True, result_index=1)
        session.on_segment("the team.", is_final=True, result_index=2)
        assert session.accumulated_final_text == "I led I led the team."

    def test_interim_replaces_interim(self) -> None:
        session, _ = _recording()
        session.on_segment("hel", is_final=False)
        session.on_segment("hello there", is_final=False)
        assert session.pending_interim_text == "hello there"

    def test_final_clears_interim(self) -> None:
        session, _ = _recording()
        session.on_segment("hel", is_final=False)
        session.on_segment("hello ", is_final=True)
        assert session.pending_interim_text == ""
        assert session.display_text == "hello "

    def test_display_text_includes_interim(self) -> None:
        session, _ = _recording()
        session.on_segment("Good ", is_final=True)
        session.on_segment("morn", is_final=False)
        assert session.display_text == "Good morn"

    def test_lower_result_index_raises(self) -> None:
        session, _ = _recording()
        session.on_segment("a ", is_final=True, result_index=3)
        with pytest.raises(CaptureOrderError):
            session.on_segment("b ", is_final=True, result_index=2)

    def test_equal_result_index_is_allowed(self) -> None:
        session, _ = _recording()
        session.on_segment("a", is_final=False, result_index=1)
        session.on_segment("a b", is_final=True, result_index=1)
        assert session.accumulated_final_text == "a b"

    def test_segment_while_idle_is_ignored(self) -> None:
        session, _ = _session()
        session.on_segment("late", is_final=True)
        assert session.accumulated_final_text == ""

    def test_feed_segment(self) -> None:
        session, _ = _recording()
        session.feed(Segment(text="fed", is_final=True, result_index=0))
        assert session.accumulated_final_text == "fed"


class TestStop:
    def test_stop_strips_and_drops_interim(self) -> None:
        finalized = MagicMock()
        session, engine = _recording(on_finalized=finalized)
        session.on_segment("  my answer ", is_final=True)
        session.on_segment("never finalized", is_final=False)
        assert session.stop() == "my answer"
        engine.stop.assert_called_once_with()
        finalized.assert_called_once_with("my answer")
        assert session.state is CaptureState.IDLE

    def test_handoff_happens_while_finalizing(self) -> None:
        states: list[CaptureState] = []
        engine = MagicMock(spec=BaseCaptureEngine)
        session = CaptureSession(engine, on_finalized=lambda _answer: states.append(session.state))
        session.start()
        session.stop()
        assert states == [CaptureState.FINALIZING]

    def test_stop_when_idle_is_rejected(self) -> None:
        session, _ = _session()
        with pytest.raises(InvalidCaptureTransition):
            session.stop()

    def test_stop_with_nothing_said(self) -> None:
        session, _ = _recording()
        assert session.stop() == ""

    def test_engine_failure_on_stop_keeps_answer(self) -> None:
        finalized = MagicMock()
        on_error = MagicMock()
        session, engine = _recording(on_finalized=finalized, on_error=on_error)
        engine.stop.side_effect = RuntimeError("engine hiccup")
        session.on_segment("My answer is ready.", is_final=True, result_index=0)

        assert session.stop() == "My answer is ready."

        finalized.assert_called_once_with("My answer is ready.")
        assert session.state is CaptureState.IDLE
        error = on_error.call_args.args[0]
        assert isinstance(error, CaptureEngineError)
        assert "engine hiccup" in str(error)

    def test_capture_error_on_stop_is_reported_as_is(self) -> None:
        on_error = MagicMock()
        session, engine = _recording(on_error=on_error)
        denied = CaptureDeviceDenied("mic unplugged", kind="audio-capture")
        engine.stop.side_effect = denied
        session.on_segment("partial", is_final=True)

        assert session.stop() == "partial"
        on_error.assert_called_once_with(denied)


class TestErrors:
    def test_aborted_is_swallowed(self) -> None:
        listener = MagicMock()
        session, _ = _recording(on_error=listener)
        assert session.on_error("aborted") is None
        listener.assert_not_called()
        assert session.state is CaptureState.IDLE

    def test_aborted_after_stop_is_swallowed(self) -> None:
        listener = MagicMock()
        session, _ = _recording(on_error=listener)
        session.stop()
        assert session.on_error("aborted") is None
        listener.assert_not_called()

    def test_other_error_is_reported(self) -> None:
        listener = MagicMock()
        session, _ = _recording(on_error=listener)
        session.on_segment("partial", is_final=True)
        error = session.on_error("network")
        assert isinstance(error, CaptureEngineError)
        listener.assert_called_once_with(error)
        assert session.state is CaptureState.IDLE
        assert session.accumulated_final_text == ""

    @pytest.mark.parametrize("kind", ["not-allowed", "service-not-allowed", "audio-capture"])
    def test_permission_errors_are_device_denied(self, kind: str) -> None:
        session, _ = _recording()
        error = session.on_error(kind)
        assert isinstance(error, CaptureDeviceDenied)
        assert error.kind == kind

    def test_error_while_idle_is_ignored(self) -> None:
        listener = MagicMock()
        session, _ = _session(on_error=listener)
        assert session.on_error("network") is None
        listener.assert_not_called()


class TestTextModeAndCancel:
    def test_submit_text_finalizes_immediately(self) -> None:
        finalized = MagicMock()
        session, engine = _session(on_finalized=finalized)
        assert session.submit_text("  typed answer\n") == "typed answer"
        finalized.assert_called_once_with("typed answer")
        engine.start.assert_not_called()
        assert session.state is CaptureState.IDLE

    def test_submit_text_while_recording_is_rejected(self) -> None:
        session, _ = _recording()
        with pytest.raises(InvalidCaptureTransition):
            session.submit_text("typed")

    def test_cancel_aborts_engine_and_discards_text(self) -> None:
        session, engine = _recording()
        session.on_segment("discard me", is_final=True)
        session.cancel()
        engine.abort.assert_called_once_with()
        assert session.state is CaptureState.IDLE
        assert session.accumulated_final_text == ""

    def test_cancel_when_idle_is_noop(self) -> None:
        session, engine = _session()
        session.cancel()
        engine.abort.assert_not_called()
