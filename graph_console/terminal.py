"""
    Terminal — line editing, history, screen control and interrupt ownership.

    Line editing and per-REPL history files come from prompt_toolkit.
    Interrupts are plain ``SIGINT`` handlers; ``interrupt_handler()`` is
    the only way the console takes them over, and it always hands the
    previous handler back when the block exits.
"""
import logging
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Union

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.shortcuts import clear

logger = logging.getLogger(__name__)

InterruptHandler = Union[Callable[[int, Any], None], int, None]


class LineReader:
    """Reads lines from the user with editing and a persistent history."""

    def __init__(self, session: PromptSession):
        self._session = session

    def read_line(self, prompt: str) -> str:
        """
        Raises:
            KeyboardInterrupt: Ctrl-C was pressed at the prompt.
            EOFError:          End of input (Ctrl-D).
        """
        return self._session.prompt(prompt)

    def read_non_empty_line(self, prompt: str) -> str:
        """
        Prompt until the user enters something other than whitespace.
        Ctrl-C discards the current line and prompts again.

        Raises:
            EOFError: End of input (Ctrl-D).
        """
        while True:
            try:
                line = self.read_line(prompt)
            except KeyboardInterrupt:
                continue
            if line.strip():
                return line


class Terminal:

    def line_reader(self, history_file: Path) -> LineReader:
        """Create a reader whose history is appended to ``history_file``."""
        history_file = Path(history_file)
        history_file.parent.mkdir(parents=True, exist_ok=True)
        return LineReader(PromptSession(history=FileHistory(str(history_file))))

    def clear_screen(self) -> None:
        clear()

    def handle_interrupt(self, handler: InterruptHandler) -> InterruptHandler:
        """
        Install ``handler`` for SIGINT and return the handler it replaced.

        ``None`` (a handler not installed from Python) is restored as the
        default action.
        """
        if handler is None:
            handler = signal.SIG_DFL
        return signal.signal(signal.SIGINT, handler)

    @contextmanager
    def interrupt_handler(self, handler: InterruptHandler) -> Iterator[None]:
        """Own SIGINT for the duration of the block, then restore the previous owner."""
        previous = self.handle_interrupt(handler)
        try:
            yield
        finally:
            self.handle_interrupt(previous)
            logger.debug("Interrupt handler restored to %r", previous)
