# tests/core_test/test_result_printer.py
"""
Cancellable answer printing — completion, interruption, error propagation.
"""
import itertools

import pytest

from graph_console_api.errors import ClientError

from graph_console.result_printer import (
    CANCELLATION_NOTICE,
    CancellableResultPrinter,
    Cancelled,
    Completed,
)


@pytest.fixture
def result_printer(executor, terminal, printer) -> CancellableResultPrinter:
    return CancellableResultPrinter(executor, terminal, printer, poll_interval=0.01)


def _interrupt_after(terminal, count, rendered):
    """Render function that records rows and fires Ctrl-C after ``count`` of them."""
    def render(row):
        rendered.append(row)
        if len(rendered) == count:
            terminal.fire_interrupt()
    return render


# ═════════════════════════════════════════════════════════════════
#  COMPLETION
# ═════════════════════════════════════════════════════════════════

class TestCompleted:

    def test_renders_every_row(self, result_printer, out):
        rendered = []
        outcome = result_printer.print(["a", "b", "c"], rendered.append)
        assert isinstance(outcome, Completed)
        assert outcome.answers == 3
        assert rendered == ["a", "b", "c"]
        assert "answers: 3, duration: " in out.getvalue()
        assert CANCELLATION_NOTICE not in out.getvalue()

    def test_empty_stream(self, result_printer, out):
        outcome = result_printer.print([], lambda row: None)
        assert outcome == Completed(0, outcome.duration_ms)
        assert "answers: 0, duration: " in out.getvalue()

    def test_duration_is_non_negative(self, result_printer):
        assert result_printer.print(range(5), lambda row: None).duration_ms >= 0

    def test_lazy_stream_is_pulled_on_demand(self, result_printer):
        pulled = []

        def stream():
            for i in range(3):
                pulled.append(i)
                yield i

        result_printer.print(stream(), lambda row: None)
        assert pulled == [0, 1, 2]

    def test_handler_restored(self, result_printer, terminal):
        previous = object()
        terminal.handler = previous
        result_printer.print([1], lambda row: None)
        assert terminal.handler is previous


# ═════════════════════════════════════════════════════════════════
#  CANCELLATION
# ═════════════════════════════════════════════════════════════════

class TestCancelled:

    def test_stops_after_interrupt(self, result_printer, terminal, out):
        rendered = []
        outcome = result_printer.print(itertools.count(), _interrupt_after(terminal, 2, rendered))
        assert isinstance(outcome, Cancelled)
        assert outcome.answers == 2
        assert rendered == [0, 1]
        assert "answers: 2, duration: " in out.getvalue()
        assert CANCELLATION_NOTICE in out.getvalue()

    def test_notice_follows_summary(self, result_printer, terminal, out):
        result_printer.print(itertools.count(), _interrupt_after(terminal, 1, []))
        lines = out.getvalue().splitlines()
        assert lines[-2].startswith("answers: 1, duration: ")
        assert lines[-1] == CANCELLATION_NOTICE

    def test_no_rows_rendered_after_outcome(self, result_printer, terminal):
        rendered = []
        result_printer.print(itertools.count(), _interrupt_after(terminal, 3, rendered))
        snapshot = list(rendered)
        assert snapshot == [0, 1, 2]
        # The worker has returned; nothing renders late.
        assert rendered == snapshot

    def test_handler_restored_after_cancel(self, result_printer, terminal):
        result_printer.print(itertools.count(), _interrupt_after(terminal, 1, []))
        assert terminal.handler is None

    def test_interrupt_outside_print_is_not_ours(self, result_printer, terminal):
        result_printer.print([1], lambda row: None)
        # No handler left installed, so a later Ctrl-C reaches nobody.
        terminal.fire_interrupt()
        assert terminal.handler is None

    def test_interrupt_on_first_row_reaches_printer(self, result_printer, terminal, out):
        run_level = []
        terminal.handler = lambda signum, frame: run_level.append(signum)
        rendered = []
        outcome = result_printer.print(iter(range(1000)), _interrupt_after(terminal, 1, rendered))
        assert isinstance(outcome, Cancelled)
        assert outcome.answers == 1
        assert rendered == [0]
        assert run_level == []
        assert CANCELLATION_NOTICE in out.getvalue()

    def test_handler_installed_before_first_row(self, result_printer, terminal):
        owners = []
        run_level = object()
        terminal.handler = run_level
        result_printer.print(["a"], lambda row: owners.append(terminal.handler))
        assert owners[0] is not run_level
        assert callable(owners[0])
        assert terminal.handler is run_level

    def test_cancel_does_not_leak_into_next_call(self, result_printer, terminal):
        result_printer.print(itertools.count(), _interrupt_after(terminal, 1, []))
        outcome = result_printer.print(["x", "y"], lambda row: None)
        assert isinstance(outcome, Completed)
        assert outcome.answers == 2


# ═════════════════════════════════════════════════════════════════
#  ERRORS
# ═════════════════════════════════════════════════════════════════

class TestErrors:

    def test_stream_error_propagates(self, result_printer, terminal):
        def stream():
            yield 1
            raise ClientError("server went away")

        rendered = []
        with pytest.raises(ClientError, match="server went away"):
            result_printer.print(stream(), rendered.append)
        assert rendered == [1]
        assert terminal.handler is None

    def test_render_error_propagates(self, result_printer):
        def render(row):
            raise ValueError("cannot render")

        with pytest.raises(ValueError, match="cannot render"):
            result_printer.print([1, 2], render)

    def test_printer_usable_after_error(self, result_printer):
        with pytest.raises(ClientError):
            result_printer.print(_failing(), lambda row: None)
        assert isinstance(result_printer.print([1], lambda row: None), Completed)


def _failing():
    raise ClientError("boom")
    yield
