import io
import logging
from collections.abc import Generator

import pytest

from rehearsal.logging.logger import Log


@pytest.fixture
def captured_log() -> Generator[io.StringIO, None, None]:
    stream = io.StringIO()
    logger = logging.getLogger("rehearsal")
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    logger.handlers = []
    Log.configure("DEBUG", stream=stream)
    yield stream
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


class TestLogConfigure:
    def test_writes_level_and_message(self, captured_log: io.StringIO) -> None:
        Log.info("Question served")
        line = captured_log.getvalue()
        assert "[INFO]" in line
        assert "Question served" in line

    def test_configure_twice_keeps_one_handler(self, captured_log: io.StringIO) -> None:
        Log.configure("INFO", stream=captured_log)
        assert len(logging.getLogger("rehearsal").handlers) == 1

    def test_level_filters_debug(self, captured_log: io.StringIO) -> None:
        Log.configure("WARNING")
        Log.debug("hidden")
        Log.warning("shown")
        output = captured_log.getvalue()
        assert "hidden" not in output
        assert "shown" in output


class TestLogSessionScope:
    def test_default_session_marker(self, captured_log: io.StringIO) -> None:
        Log.info("outside")
        assert "[session=-]" in captured_log.getvalue()

    def test_scope_tags_lines(self, captured_log: io.StringIO) -> None:
        with Log.session_scope("abc123"):
            Log.info("inside")
            assert Log.current_session() == "abc123"
        assert "[session=abc123] inside" in captured_log.getvalue()

    def test_scope_is_restored(self) -> None:
        with Log.session_scope("outer"):
            with Log.session_scope("inner"):
                assert Log.current_session() == "inner"
            assert Log.current_session() == "outer"
        assert Log.current_session() == "-"
