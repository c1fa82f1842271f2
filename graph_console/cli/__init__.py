"""
CLI package — command grammar, transaction options and help menus.

Design Patterns
───────────────
• Command       – each REPL operation is an immutable command object.
• Interpreter   – parsing the line syntax into structured command objects.
"""
from .command_parser import parse_command, parse_transaction_command
from .commands import (
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
from .help_menu import help_menu, transaction_help_menu
from .options import ArgKind, OptionSpec, CORE_OPTIONS, CLUSTER_OPTIONS, parse_options

__all__ = [
    'parse_command',
    'parse_transaction_command',
    'ReplCommand',
    'TransactionReplCommand',
    'Exit',
    'Help',
    'Clear',
    'DatabaseList',
    'DatabaseCreate',
    'DatabaseDelete',
    'DatabaseSchema',
    'DatabaseReplicas',
    'Transaction',
    'Commit',
    'Rollback',
    'Close',
    'Source',
    'Query',
    'help_menu',
    'transaction_help_menu',
    'ArgKind',
    'OptionSpec',
    'CORE_OPTIONS',
    'CLUSTER_OPTIONS',
    'parse_options',
]
