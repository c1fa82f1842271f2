"""
    GraphConsole — the central orchestrator of the console.

    Design Patterns applied
    ───────────────────────
    • Facade       – one object the entry point talks to; hides command
                     parsing, session handling and answer printing.
    • Command      – parsed command objects dispatched on their type.
    • State        – two nested REPL levels (top level, transaction),
                     each with its own prompt, grammar and history.

    Run modes
    ─────────
    • ``run_interactive``  – read commands from the terminal.  Failures are
                             reported and the REPL carries on.
    • ``run_commands``     – run a given list of commands.  The first
                             failure aborts the rest and returns ``False``.
    • ``run_script``       – ``run_commands`` over the lines of a file.

    Every handler returns ``True`` on success and ``False`` after it has
    reported a failure; client, syntax, option and file errors never
    escape the loops.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional

from graph_console_api.client import Client, SessionType, Transaction, TransactionType
from graph_console_api.errors import ClientError, QuerySyntaxError
from graph_console_api.options import TransactionOptions
from graph_console_api.query import (
    QueryStatement,
    DefineQuery,
    UndefineQuery,
    InsertQuery,
    DeleteQuery,
    MatchQuery,
    MatchAggregateQuery,
    MatchGroupQuery,
    MatchGroupAggregateQuery,
    ComputeQuery,
    parse_queries,
)

from . import cli
from .config import ConsoleConfig
from .exceptions import InvalidOptionError, UnsupportedOperationError
from .printer import Printer
from .result_printer import CancellableResultPrinter
from .terminal import LineReader, Terminal

logger = logging.getLogger(__name__)

COPYRIGHT = (
    "\n"
    "Welcome to Graph Console. You are now connected to your graph.\n"
)

NOT_AVAILABLE_IN_SCRIPT = "Command is not available while running console script."
UNRECOGNISED_IN_SCRIPT = "Unrecognised command, exit console script."
UNRECOGNISED_INTERACTIVE = "Unrecognised command, please check help menu"


class GraphConsole:
    """
    Runs console commands against a connected ``Client``.

    One console serves one run: the answer-printing worker pool is shut
    down when any ``run_*`` method returns.
    """

    def __init__(
        self,
        printer: Printer,
        terminal: Terminal,
        config: Optional[ConsoleConfig] = None,
    ):
        self._printer = printer
        self._terminal = terminal
        self._config = config or ConsoleConfig()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="answer-printer")
        self._result_printer = CancellableResultPrinter(
            self._executor, terminal, printer, self._config.poll_interval)

    # ── Run modes ────────────────────────────────────────────────

    def run_script(self, client: Client, script: str) -> bool:
        """Run every line of ``script`` as a command; ``False`` on the first failure."""
        try:
            script_lines = Path(script).read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Cannot read script %s: %s", script, e)
            self._printer.error(f"Failed to open file '{script}'")
            self.shutdown()
            return False
        return self.run_commands(client, script_lines.split("\n"))

    def run_commands(self, client: Client, command_strings: List[str]) -> bool:
        """
        Run ``command_strings`` in order, stopping at the first failure.

        SIGINT stops the run between commands without counting as a failure.
        """
        commands = [line.strip() for line in command_strings if line.strip()]
        logger.info("Running %d console commands", len(commands))
        cancelled = threading.Event()

        def on_interrupt(signum, frame):
            cancelled.set()

        try:
            with self._terminal.interrupt_handler(on_interrupt):
                return self._run_command_list(client, iter(commands), cancelled)
        finally:
            self.shutdown()

    def run_interactive(self, client: Client, banner: bool = True) -> None:
        """Run the top-level REPL until ``exit`` or end of input."""
        if banner:
            self._printer.info(COPYRIGHT)
        logger.info("Interactive console started (cluster=%s)", client.is_cluster())
        try:
            # A stray Ctrl-C outside a streamed result must not kill the console.
            with self._terminal.interrupt_handler(_ignore_interrupt):
                self._run_repl(client)
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    # ── Scripted execution ───────────────────────────────────────

    def _run_command_list(self, client: Client, lines: Iterator[str],
                          cancelled: threading.Event) -> bool:
        is_cluster = client.is_cluster()
        for line in lines:
            if cancelled.is_set():
                logger.info("Command list interrupted by user")
                break
            self._printer.info(f"+ {line}")
            try:
                command = cli.parse_command(line, is_cluster)
            except InvalidOptionError as e:
                self._printer.error(str(e))
                return False
            if command is None:
                self._printer.error(UNRECOGNISED_IN_SCRIPT)
                return False

            if isinstance(command, (cli.Exit, cli.Help, cli.Clear)):
                self._printer.info(NOT_AVAILABLE_IN_SCRIPT)
            elif isinstance(command, cli.Transaction):
                if not self._run_transaction_commands(client, command, lines, cancelled):
                    return False
            elif not self._run_database_command(client, command):
                return False
        return True

    def _run_transaction_commands(self, client: Client, command: cli.Transaction,
                                  lines: Iterator[str], cancelled: threading.Event) -> bool:
        """Consume lines from ``lines`` until the transaction ends."""
        try:
            with client.session(command.database, command.session_type, command.options) as session, \
                    session.transaction(command.transaction_type, command.options) as tx:
                logger.info("Opened %s transaction on %s", command.transaction_type.value, command.database)
                for line in lines:
                    if cancelled.is_set():
                        logger.info("Transaction commands interrupted by user")
                        break
                    self._printer.info(f"++ {line}")
                    tx_command = cli.parse_transaction_command(line)
                    if isinstance(tx_command, cli.Commit):
                        self._run_commit(tx)
                        break
                    elif isinstance(tx_command, cli.Rollback):
                        self._run_rollback(tx)
                    elif isinstance(tx_command, cli.Close):
                        self._run_close(tx)
                        break
                    elif isinstance(tx_command, cli.Source):
                        if not self._run_source(tx, tx_command.file):
                            return False
                    elif isinstance(tx_command, cli.Query):
                        if not self._run_query(tx, tx_command.query):
                            return False
                    else:
                        self._printer.info(NOT_AVAILABLE_IN_SCRIPT)
        except ClientError as e:
            self._printer.error(str(e))
            return False
        return True

    # ── Interactive execution ────────────────────────────────────

    def _run_repl(self, client: Client) -> None:
        reader = self._terminal.line_reader(self._config.command_history_file)
        is_cluster = client.is_cluster()
        while True:
            try:
                command = self._read_command(reader, is_cluster)
            except EOFError:
                break
            logger.debug("Dispatching %r", command)

            if isinstance(command, cli.Exit):
                break
            elif isinstance(command, cli.Help):
                self._printer.info(cli.help_menu(is_cluster))
            elif isinstance(command, cli.Clear):
                self._terminal.clear_screen()
            elif isinstance(command, cli.Transaction):
                if self._run_transaction_repl(client, command):
                    break
            else:
                self._run_database_command(client, command)

    def _read_command(self, reader: LineReader, is_cluster: bool) -> cli.ReplCommand:
        """Prompt until the user enters a recognised command."""
        while True:
            line = reader.read_non_empty_line("> ")
            try:
                command = cli.parse_command(line, is_cluster)
            except InvalidOptionError as e:
                self._printer.error(str(e))
                continue
            if command is not None:
                return command
            self._printer.error(UNRECOGNISED_INTERACTIVE)

    def _run_transaction_repl(self, client: Client, command: cli.Transaction) -> bool:
        """
        Run the transaction REPL.

        Returns:
            ``True`` if the user asked to exit the console altogether.
        """
        reader = self._terminal.line_reader(self._config.transaction_history_file)
        prompt = transaction_prompt(
            command.database, command.session_type, command.transaction_type, command.options)
        try:
            with client.session(command.database, command.session_type, command.options) as session, \
                    session.transaction(command.transaction_type, command.options) as tx:
                logger.info("Opened %s transaction on %s", command.transaction_type.value, command.database)
                while True:
                    try:
                        line = reader.read_non_empty_line(prompt)
                    except EOFError:
                        break
                    tx_command = cli.parse_transaction_command(line)
                    if isinstance(tx_command, cli.Exit):
                        return True
                    elif isinstance(tx_command, cli.Clear):
                        self._terminal.clear_screen()
                    elif isinstance(tx_command, cli.Help):
                        self._printer.info(cli.transaction_help_menu())
                    elif isinstance(tx_command, cli.Commit):
                        self._run_commit(tx)
                        break
                    elif isinstance(tx_command, cli.Rollback):
                        self._run_rollback(tx)
                    elif isinstance(tx_command, cli.Close):
                        self._run_close(tx)
                        break
                    elif isinstance(tx_command, cli.Source):
                        self._run_source(tx, tx_command.file)
                    elif isinstance(tx_command, cli.Query):
                        self._run_query(tx, tx_command.query)
                    if not tx.is_open():
                        self._printer.error("The transaction is no longer open.")
                        break
        except ClientError as e:
            self._printer.error(str(e))
        return False

    # ── Shared command handlers ──────────────────────────────────

    def _run_database_command(self, client: Client, command: cli.ReplCommand) -> bool:
        if isinstance(command, cli.DatabaseList):
            return self._run_database_list(client)
        if isinstance(command, cli.DatabaseCreate):
            return self._run_database_create(client, command.database)
        if isinstance(command, cli.DatabaseDelete):
            return self._run_database_delete(client, command.database)
        if isinstance(command, cli.DatabaseSchema):
            return self._run_database_schema(client, command.database)
        if isinstance(command, cli.DatabaseReplicas):
            return self._run_database_replicas(client, command.database)
        raise TypeError(f"Not a database command: {command!r}")

    def _run_database_list(self, client: Client) -> bool:
        try:
            databases = client.databases().all()
        except ClientError as e:
            self._printer.error(str(e))
            return False
        if databases:
            for database in databases:
                self._printer.info(database.name)
        else:
            self._printer.info("No databases are present on the server.")
        return True

    def _run_database_create(self, client: Client, database: str) -> bool:
        try:
            client.databases().create(database)
        except ClientError as e:
            self._printer.error(str(e))
            return False
        self._printer.info(f"Database '{database}' created")
        return True

    def _run_database_delete(self, client: Client, database: str) -> bool:
        try:
            client.databases().get(database).delete()
        except ClientError as e:
            self._printer.error(str(e))
            return False
        self._printer.info(f"Database '{database}' deleted")
        return True

    def _run_database_schema(self, client: Client, database: str) -> bool:
        try:
            schema = client.databases().get(database).schema()
        except ClientError as e:
            self._printer.error(str(e))
            return False
        self._printer.info(schema)
        return True

    def _run_database_replicas(self, client: Client, database: str) -> bool:
        if not client.is_cluster():
            self._printer.error("The command 'database replicas' is only available in cluster mode.")
            return False
        try:
            replicas = client.databases().get(database).replicas()
        except ClientError as e:
            self._printer.error(str(e))
            return False
        for replica in replicas:
            self._printer.database_replica(replica)
        return True

    def _run_commit(self, tx: Transaction) -> None:
        tx.commit()
        self._printer.info("Transaction changes committed")

    def _run_rollback(self, tx: Transaction) -> None:
        tx.rollback()
        self._printer.info("Transaction changes have been rolled back")

    def _run_close(self, tx: Transaction) -> None:
        tx.close()
        if tx.type.is_write():
            self._printer.info("Transaction closed without committing changes")
        else:
            self._printer.info("Transaction closed")

    def _run_source(self, tx: Transaction, file: str) -> bool:
        try:
            query_string = Path(file).read_text(encoding="utf-8")
        except OSError as e:
            logger.debug("Cannot read source file %s: %s", file, e)
            self._printer.error(f"Failed to open file '{file}'")
            return False
        return self._run_query(tx, query_string)

    def _run_query(self, tx: Transaction, query_string: str) -> bool:
        try:
            queries = parse_queries(query_string)
        except QuerySyntaxError as e:
            self._printer.error(str(e))
            return False
        try:
            for query in queries:
                self._run_statement(tx, query)
        except (ClientError, UnsupportedOperationError) as e:
            self._printer.error(str(e))
            return False
        return True

    def _run_statement(self, tx: Transaction, query: QueryStatement) -> None:
        logger.debug("Running %s", type(query).__name__)
        if isinstance(query, DefineQuery):
            tx.query().define(query)
            self._printer.info("Concepts have been defined")
        elif isinstance(query, UndefineQuery):
            tx.query().undefine(query)
            self._printer.info("Concepts have been undefined")
        elif isinstance(query, InsertQuery):
            self._result_printer.print(tx.query().insert(query), self._printer.concept_map)
        elif isinstance(query, DeleteQuery):
            tx.query().delete(query)
            self._printer.info("Concepts have been deleted")
        elif isinstance(query, MatchQuery):
            self._result_printer.print(tx.query().match(query), self._printer.concept_map)
        elif isinstance(query, MatchAggregateQuery):
            self._printer.numeric(tx.query().match_aggregate(query))
        elif isinstance(query, MatchGroupQuery):
            self._result_printer.print(tx.query().match_group(query), self._printer.concept_map_group)
        elif isinstance(query, MatchGroupAggregateQuery):
            self._result_printer.print(tx.query().match_group_aggregate(query), self._printer.numeric_group)
        elif isinstance(query, ComputeQuery):
            raise UnsupportedOperationError("Compute query is not yet supported")
        else:
            raise TypeError(f"Unknown query statement: {query!r}")


def transaction_prompt(database: str, session_type: SessionType,
                       transaction_type: TransactionType, options: TransactionOptions) -> str:
    """
    Example:
        >>> transaction_prompt("social", SessionType.DATA, TransactionType.WRITE, TransactionOptions())
        'social::data::write> '
    """
    prompt = f"{database}::{session_type.value}::{transaction_type.value}"
    if options.is_cluster() and getattr(options, "read_any_replica", None):
        prompt += "[any-replica]"
    return prompt + "> "


def _ignore_interrupt(signum, frame) -> None:
    logger.debug("Interrupt ignored outside of answer printing")
