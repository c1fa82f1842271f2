"""
    CancellableResultPrinter — prints a lazy answer stream on a worker
    while the foreground stays responsive to Ctrl-C.

    Lifecycle of one ``print()`` call:

        foreground                          worker
        ──────────                          ──────
        own SIGINT (previous handler kept)
        submit job ───────────────────────▶ pull row, render, count
                                            check cancel flag between rows
        wait on job ◀────────────────────── stream exhausted | flag seen | error
        restore previous SIGINT handler
        report "answers: N, duration: D ms"

    The cancel flag is a ``threading.Event`` created per call, so one
    cancelled stream never leaks into the next.  The worker only pulls
    rows and calls the render function; it never touches transaction state.
"""
import logging
import threading
import time
from concurrent.futures import CancelledError, Executor, Future, wait
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, TypeVar

from .printer import Printer
from .terminal import Terminal

logger = logging.getLogger(__name__)

T = TypeVar('T')

CANCELLATION_NOTICE = (
    "The query has been cancelled. It may take some time for the "
    "cancellation to finish on the server side."
)


@dataclass(frozen=True)
class PrintOutcome:
    """
    Attributes:
        answers:     Rows rendered before the stream ended.
        duration_ms: Wall-clock time from submission to the end of the stream.
    """
    answers: int
    duration_ms: int


@dataclass(frozen=True)
class Completed(PrintOutcome):
    """The stream was exhausted."""
    pass


@dataclass(frozen=True)
class Cancelled(PrintOutcome):
    """The user interrupted the stream before it was exhausted."""
    pass


class CancellableResultPrinter:

    def __init__(self, executor: Executor, terminal: Terminal, printer: Printer,
                 poll_interval: float = 0.1):
        self._executor = executor
        self._terminal = terminal
        self._printer = printer
        self._poll_interval = poll_interval

    def print(self, results: Iterable[T], print_fn: Callable[[T], None]) -> PrintOutcome:
        """
        Render every row of ``results`` with ``print_fn`` until the stream
        ends or the user interrupts it.

        Raises:
            Exception: Whatever pulling or rendering a row raised (typically
                ``ClientError``); the stream is abandoned at that row.
        """
        cancel = threading.Event()
        rendered = [0]
        jobs: List[Future] = []

        def on_interrupt(signum, frame):
            cancel.set()
            for job in jobs:
                job.cancel()

        # SIGINT is ours before the first row can be pulled.
        with self._terminal.interrupt_handler(on_interrupt):
            start = time.monotonic()
            jobs.append(self._executor.submit(self._drain, iter(results), print_fn, cancel, rendered))
            logger.debug("Answer printing job submitted")
            exhausted = self._await(jobs[0])

        duration_ms = int((time.monotonic() - start) * 1000)
        self._printer.info(f"answers: {rendered[0]}, duration: {duration_ms} ms")
        if exhausted:
            return Completed(rendered[0], duration_ms)
        self._printer.info(CANCELLATION_NOTICE)
        return Cancelled(rendered[0], duration_ms)

    def _await(self, job: 'Future[bool]') -> bool:
        """Wait for the job in short slices so SIGINT handlers get to run."""
        while not job.done():
            wait([job], timeout=self._poll_interval)
        try:
            return job.result()
        except CancelledError:
            logger.debug("Answer printing job cancelled before it started")
            return False

    @staticmethod
    def _drain(iterator: Iterator[T], print_fn: Callable[[T], None],
               cancel: threading.Event, rendered: list) -> bool:
        """Worker body; returns True when the stream was exhausted."""
        while not cancel.is_set():
            try:
                row = next(iterator)
            except StopIteration:
                return True
            print_fn(row)
            rendered[0] += 1
        logger.debug("Answer printing job observed cancellation after %d rows", rendered[0])
        return False
