import io
import logging

from nightcore.utils.logging import DiagnosticFormatter, configure_logging


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("nightcore.graph", level, __file__, 1, message, None, None)


def test_diagnostics_are_prefixed_with_program_name() -> None:
    formatter = DiagnosticFormatter()

    assert formatter.format(_record(logging.ERROR, "Error: Resource not found.")) == (
        "nightcore: Error: Resource not found."
    )


def test_debug_records_keep_module_name() -> None:
    text = DiagnosticFormatter().format(_record(logging.DEBUG, "Created pitch element"))

    assert "DEBUG" in text
    assert "nightcore.graph: Created pitch element" in text


def test_configure_installs_handler_once(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    previous_level = root.level
    stream = io.StringIO()

    try:
        assert configure_logging(stream=stream) is True
        assert configure_logging(stream=io.StringIO()) is False

        logging.getLogger("nightcore.runtime").warning("Interrupted by signal 2; shutting down.")
        assert stream.getvalue() == "nightcore: Interrupted by signal 2; shutting down.\n"
        assert len(root.handlers) == 1
    finally:
        root.setLevel(previous_level)
