"""
    REPL Commands — the closed set of commands a user can type.

    Design Pattern: Command (data half)
    ───────────────────────────────────
    Each command is an immutable value object produced by the parser
    from one input line.  Executing it is the job of ``GraphConsole``,
    which dispatches on the command's type.

    Two command families:
        • ``ReplCommand``            – valid at the top level.
        • ``TransactionReplCommand`` – valid inside an open transaction.
    ``exit``, ``help`` and ``clear`` belong to both.

    Supported commands:
    ───────────────────
        database list
        database create   <db>
        database delete   <db>
        database schema   <db>
        database replicas <db>
        transaction <db> schema|data read|write [--option value ...]
        help
        clear
        exit

    Inside a transaction:
        commit
        rollback
        close
        source <file>
        <query>
"""
from dataclasses import dataclass, field
from typing import ClassVar

from graph_console_api.client import SessionType, TransactionType
from graph_console_api.options import TransactionOptions

DATABASE_TOKEN = "database"
TRANSACTION_OPTIONS_TOKEN = "transaction-options"


class ReplCommand:
    """Base of every top-level command."""

    token: ClassVar[str] = ""
    help_command: ClassVar[str] = ""
    description: ClassVar[str] = ""


class TransactionReplCommand:
    """Base of every command accepted inside a transaction."""

    token: ClassVar[str] = ""
    help_command: ClassVar[str] = ""
    description: ClassVar[str] = ""


# ═════════════════════════════════════════════════════════════════
#  SHARED COMMANDS
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Exit(ReplCommand, TransactionReplCommand):
    token: ClassVar[str] = "exit"
    help_command: ClassVar[str] = "exit"
    description: ClassVar[str] = "Exit console"


@dataclass(frozen=True)
class Help(ReplCommand, TransactionReplCommand):
    token: ClassVar[str] = "help"
    help_command: ClassVar[str] = "help"
    description: ClassVar[str] = "Print this help menu"


@dataclass(frozen=True)
class Clear(ReplCommand, TransactionReplCommand):
    token: ClassVar[str] = "clear"
    help_command: ClassVar[str] = "clear"
    description: ClassVar[str] = "Clear console screen"


# ═════════════════════════════════════════════════════════════════
#  DATABASE COMMANDS
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DatabaseList(ReplCommand):
    token: ClassVar[str] = "list"
    help_command: ClassVar[str] = f"{DATABASE_TOKEN} list"
    description: ClassVar[str] = "List the databases on the server"


@dataclass(frozen=True)
class DatabaseCreate(ReplCommand):
    database: str
    token: ClassVar[str] = "create"
    help_command: ClassVar[str] = f"{DATABASE_TOKEN} create <db>"
    description: ClassVar[str] = "Create a database with name <db> on the server"


@dataclass(frozen=True)
class DatabaseDelete(ReplCommand):
    database: str
    token: ClassVar[str] = "delete"
    help_command: ClassVar[str] = f"{DATABASE_TOKEN} delete <db>"
    description: ClassVar[str] = "Delete a database with name <db> on the server"


@dataclass(frozen=True)
class DatabaseSchema(ReplCommand):
    database: str
    token: ClassVar[str] = "schema"
    help_command: ClassVar[str] = f"{DATABASE_TOKEN} schema <db>"
    description: ClassVar[str] = "Print the schema of the database with name <db>"


@dataclass(frozen=True)
class DatabaseReplicas(ReplCommand):
    database: str
    token: ClassVar[str] = "replicas"
    help_command: ClassVar[str] = f"{DATABASE_TOKEN} replicas <db>"
    description: ClassVar[str] = "List the replicas of the database with name <db>"


# ═════════════════════════════════════════════════════════════════
#  TRANSACTION
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Transaction(ReplCommand):
    """Open a session and a transaction, then enter the transaction REPL."""
    database: str
    session_type: SessionType
    transaction_type: TransactionType
    options: TransactionOptions = field(default_factory=TransactionOptions)
    token: ClassVar[str] = "transaction"
    help_command: ClassVar[str] = f"transaction <db> schema|data read|write [{TRANSACTION_OPTIONS_TOKEN}]"
    description: ClassVar[str] = (
        "Start a transaction to database <db> with schema or data session, "
        "with read or write transaction"
    )


@dataclass(frozen=True)
class Commit(TransactionReplCommand):
    token: ClassVar[str] = "commit"
    help_command: ClassVar[str] = "commit"
    description: ClassVar[str] = "Commit the transaction changes and close transaction"


@dataclass(frozen=True)
class Rollback(TransactionReplCommand):
    token: ClassVar[str] = "rollback"
    help_command: ClassVar[str] = "rollback"
    description: ClassVar[str] = "Rollback the transaction to the beginning state"


@dataclass(frozen=True)
class Close(TransactionReplCommand):
    token: ClassVar[str] = "close"
    help_command: ClassVar[str] = "close"
    description: ClassVar[str] = "Close the transaction without committing changes"


@dataclass(frozen=True)
class Source(TransactionReplCommand):
    file: str
    token: ClassVar[str] = "source"
    help_command: ClassVar[str] = "source <file>"
    description: ClassVar[str] = "Run queries in file"


@dataclass(frozen=True)
class Query(TransactionReplCommand):
    query: str
    help_command: ClassVar[str] = "<query>"
    description: ClassVar[str] = "Run a query"
