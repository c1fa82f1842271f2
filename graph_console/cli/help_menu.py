"""
    Help menus for the top-level and transaction REPLs.

    The top-level menu is mode-sensitive: in a cluster it adds
    ``database replicas`` and lists the cluster option registry.
"""
from typing import List, Sequence, Tuple

from . import options
from .commands import (
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

_COLUMN_GAP = 4


def build_help_menu(rows: Sequence[Tuple[str, str]]) -> str:
    """
    Lay out (command, description) rows in two aligned columns.

    Example:
        >>> print(build_help_menu([("exit", "Exit console"), ("help", "Print help")]))
        exit    Exit console
        help    Print help
    """
    if not rows:
        return ""
    width = max(len(command) for command, _ in rows) + _COLUMN_GAP
    return "\n".join(f"{command:<{width}}{description}".rstrip() for command, description in rows)


def help_rows(is_cluster: bool) -> List[Tuple[str, str]]:
    rows = [(cls.help_command, cls.description)
            for cls in (DatabaseList, DatabaseCreate, DatabaseDelete, DatabaseSchema)]
    if is_cluster:
        rows.append((DatabaseReplicas.help_command, DatabaseReplicas.description))
    rows.append((Transaction.help_command, Transaction.description))
    rows.extend(options.help_menu(is_cluster))
    rows.extend((cls.help_command, cls.description) for cls in (Help, Clear, Exit))
    return rows


def help_menu(is_cluster: bool) -> str:
    return build_help_menu(help_rows(is_cluster))


def transaction_help_menu() -> str:
    return build_help_menu([
        (cls.help_command, cls.description)
        for cls in (Commit, Rollback, Close, Source, Query, Help, Clear, Exit)
    ])
