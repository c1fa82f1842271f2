"""
    Command grammar — turns one input line into a command object.

    Design Pattern: Interpreter
    ───────────────────────────
    Lines are split on whitespace and matched against fixed token
    shapes.  Matching is literal and case-sensitive; there is no
    quoting.  The grammar is mode-agnostic: ``database replicas`` parses
    everywhere and is rejected at dispatch time outside a cluster.

    ``parse_command`` returns ``None`` when no shape matches; the caller
    decides whether that is fatal.  ``parse_transaction_command`` never
    fails: anything that is not a transaction keyword is a query.
"""
from typing import List, Optional

from graph_console_api.client import SessionType, TransactionType

from .commands import (
    DATABASE_TOKEN,
    ReplCommand,
    TransactionReplCommand,
    Exit,
    Help,
    Clear,
    DatabaseList,
    DatabaseCreate,
    DatabaseDelete,
    DatabaseSchema,
    DatabaseReplicas,
    Transaction,
    Commit,
    Rollback,
    Close,
    Source,
    Query,
)
from .options import parse_options

_SESSION_TYPES = {"schema": SessionType.SCHEMA, "data": SessionType.DATA}
_TRANSACTION_TYPES = {"read": TransactionType.READ, "write": TransactionType.WRITE}

_KEYWORD_COMMANDS = {cls.token: cls for cls in (Exit, Help, Clear)}
_DATABASE_COMMANDS = {
    cls.token: cls for cls in (DatabaseCreate, DatabaseDelete, DatabaseSchema, DatabaseReplicas)
}
_TRANSACTION_KEYWORD_COMMANDS = {
    cls.token: cls for cls in (Exit, Help, Clear, Commit, Rollback, Close)
}


def split_line(line: str) -> List[str]:
    return line.split()


def parse_command(line: str, is_cluster: bool) -> Optional[ReplCommand]:
    """
    Parse a top-level line.

    Returns:
        The command, or ``None`` if the line matches no command shape.

    Raises:
        InvalidOptionError: If a ``transaction`` line has a bad option tail.
    """
    tokens = split_line(line)

    if len(tokens) == 1 and tokens[0] in _KEYWORD_COMMANDS:
        return _KEYWORD_COMMANDS[tokens[0]]()

    if len(tokens) == 2 and tokens[0] == DATABASE_TOKEN and tokens[1] == DatabaseList.token:
        return DatabaseList()

    if len(tokens) == 3 and tokens[0] == DATABASE_TOKEN and tokens[1] in _DATABASE_COMMANDS:
        return _DATABASE_COMMANDS[tokens[1]](tokens[2])

    if (len(tokens) >= 4 and tokens[0] == Transaction.token
            and tokens[2] in _SESSION_TYPES and tokens[3] in _TRANSACTION_TYPES):
        return Transaction(
            database=tokens[1],
            session_type=_SESSION_TYPES[tokens[2]],
            transaction_type=_TRANSACTION_TYPES[tokens[3]],
            options=parse_options(tokens[4:], is_cluster),
        )

    return None


def parse_transaction_command(line: str) -> TransactionReplCommand:
    """Parse a line typed inside a transaction."""
    tokens = split_line(line)

    if len(tokens) == 1 and tokens[0] in _TRANSACTION_KEYWORD_COMMANDS:
        return _TRANSACTION_KEYWORD_COMMANDS[tokens[0]]()

    if len(tokens) == 2 and tokens[0] == Source.token:
        return Source(tokens[1])

    return Query(line)
