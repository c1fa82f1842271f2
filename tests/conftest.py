# tests/conftest.py
"""
Shared test fixtures.
Scripted terminal: input lines are queued up front, prompts are recorded,
and SIGINT is simulated by calling whichever handler currently owns it.
Stub server: in-memory driver with a "social" database holding three
people, each inserted with a name attribute.
"""
import io
import signal
from collections import deque
from concurrent.futures import ThreadPoolExecutor

import pytest

from graph_console_api.client import SessionType, TransactionType
from graph_console_api.query import DefineQuery, InsertQuery
from graph_console.config import DEFAULT_ADDRESS, ConsoleConfig
from graph_console.core import GraphConsole
from graph_console.printer import Printer
from graph_console.terminal import LineReader, Terminal
from memory_driver import MemoryDriverPlugin


class ScriptedLineReader(LineReader):
    """LineReader that pops queued lines instead of prompting."""

    def __init__(self, terminal: 'ScriptedTerminal'):
        super().__init__(session=None)
        self._terminal = terminal

    def read_line(self, prompt: str) -> str:
        self._terminal.prompts.append(prompt)
        if not self._terminal.lines:
            raise EOFError
        line = self._terminal.lines.popleft()
        if line is KeyboardInterrupt:
            raise KeyboardInterrupt
        return line


class ScriptedTerminal(Terminal):

    def __init__(self, lines=()):
        self.lines = deque(lines)
        self.prompts = []
        self.history_files = []
        self.clear_count = 0
        self.handler = None

    def line_reader(self, history_file):
        self.history_files.append(history_file)
        return ScriptedLineReader(self)

    def clear_screen(self) -> None:
        self.clear_count += 1

    def handle_interrupt(self, handler):
        previous, self.handler = self.handler, handler
        return previous

    def fire_interrupt(self) -> None:
        """Deliver a simulated Ctrl-C to the current owner."""
        if callable(self.handler):
            self.handler(signal.SIGINT, None)


# ── Output ───────────────────────────────────────────────────────

@pytest.fixture
def out() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def err() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def printer(out, err) -> Printer:
    return Printer(out, err)


@pytest.fixture
def terminal() -> ScriptedTerminal:
    return ScriptedTerminal()


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


# ── Server ───────────────────────────────────────────────────────

@pytest.fixture
def driver() -> MemoryDriverPlugin:
    return MemoryDriverPlugin()


@pytest.fixture
def client(driver):
    c = driver.connect(DEFAULT_ADDRESS)
    yield c
    c.close()


@pytest.fixture
def cluster_client(driver):
    c = driver.connect_cluster(["node1:1729", "node2:1729", "node3:1729"])
    yield c
    c.close()


def seed_social(client) -> None:
    client.databases().create("social")
    with client.session("social", SessionType.SCHEMA) as session, \
            session.transaction(TransactionType.WRITE) as tx:
        tx.query().define(DefineQuery("define person sub entity; name sub attribute, value string;"))
        tx.commit()
    with client.session("social", SessionType.DATA) as session, \
            session.transaction(TransactionType.WRITE) as tx:
        for name in ("Alice", "Bob", "Carol"):
            list(tx.query().insert(InsertQuery(f'insert $p isa person; $n "{name}" isa name;')))
        tx.commit()


@pytest.fixture
def social(client):
    """Client whose server holds the seeded "social" database."""
    seed_social(client)
    return client


@pytest.fixture
def social_cluster(cluster_client):
    """Cluster client whose peers hold the seeded "social" database."""
    seed_social(cluster_client)
    return cluster_client


@pytest.fixture
def console(printer, terminal, tmp_path) -> GraphConsole:
    config = ConsoleConfig(
        command_history_file=tmp_path / "command-history",
        transaction_history_file=tmp_path / "transaction-history",
        poll_interval=0.01,
    )
    c = GraphConsole(printer, terminal, config)
    yield c
    c.shutdown()


@pytest.fixture
def social_driver(driver) -> MemoryDriverPlugin:
    """Driver whose default-address server holds the seeded "social" database."""
    c = driver.connect(DEFAULT_ADDRESS)
    seed_social(c)
    c.close()
    return driver
