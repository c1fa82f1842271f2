"""
    Query statements — splitting query text into typed statements.

    Design Pattern: Interpreter (front half)
    ────────────────────────────────────────
    ``parse_queries`` turns a block of query text into an ordered list of
    statement objects.  The statement classes form a closed set; the
    console dispatches on their type, the driver executes them.

    Splitting rules:
        • Clauses end with ``;`` at bracket depth 0.  Semicolons inside
          quotes, ``{}``, ``[]`` or ``()`` do not end a clause.
        • ``#`` starts a comment that runs to the end of the line.
        • ``define``, ``undefine``, ``match`` and ``compute`` always open a
          new statement; ``insert`` opens one unless it completes a
          preceding ``match``; ``delete`` must complete a ``match``.
        • ``get``/``sort``/``offset``/``limit``, ``group`` and aggregate
          clauses (``count``, ``sum`` ...) modify the preceding ``match``.
        • Any other clause continues the current statement.

    Example:
        >>> [type(q).__name__ for q in parse_queries(
        ...     "match $x isa person; get $x; count; insert $y isa dog;")]
        ['MatchAggregateQuery', 'InsertQuery']
"""
from dataclasses import dataclass
from typing import List, Optional

from .errors import QuerySyntaxError

OPENING_KEYWORDS = ("define", "undefine", "match", "compute")
WRITE_KEYWORDS = ("insert", "delete")
MODIFIER_KEYWORDS = ("get", "sort", "offset", "limit")
GROUP_KEYWORD = "group"
AGGREGATE_METHODS = ("count", "sum", "max", "min", "mean", "median", "std")

_OPEN_BRACKETS = "{[("
_CLOSE_BRACKETS = "}])"


# ── Statement types ──────────────────────────────────────────────

@dataclass(frozen=True)
class QueryStatement:
    """Base of all statements; ``text`` is the normalised statement text."""
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class DefineQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class UndefineQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class InsertQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class DeleteQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class MatchQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class MatchAggregateQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class MatchGroupQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class MatchGroupAggregateQuery(QueryStatement):
    pass


@dataclass(frozen=True)
class ComputeQuery(QueryStatement):
    pass


# ── Parsing ──────────────────────────────────────────────────────

class _StatementBuilder:
    """Accumulates the clauses of one statement while scanning."""

    def __init__(self, keyword: str, clause: str):
        self.keyword = keyword
        self.clauses: List[str] = [clause]
        self.write: Optional[str] = None
        self.grouped = False
        self.aggregated = False

    @property
    def is_open_match(self) -> bool:
        """A match that can still take a write, group or aggregate clause."""
        return self.keyword == "match" and self.write is None and not self.aggregated

    def add(self, clause: str) -> None:
        self.clauses.append(clause)

    def build(self) -> QueryStatement:
        text = "; ".join(self.clauses) + ";"
        if self.keyword == "define":
            return DefineQuery(text)
        if self.keyword == "undefine":
            return UndefineQuery(text)
        if self.keyword == "compute":
            return ComputeQuery(text)
        if self.keyword == "insert" or self.write == "insert":
            return InsertQuery(text)
        if self.write == "delete":
            return DeleteQuery(text)
        if self.grouped and self.aggregated:
            return MatchGroupAggregateQuery(text)
        if self.grouped:
            return MatchGroupQuery(text)
        if self.aggregated:
            return MatchAggregateQuery(text)
        return MatchQuery(text)


def parse_queries(text: str) -> List[QueryStatement]:
    """
    Split ``text`` into statements.

    Raises:
        QuerySyntaxError: On unbalanced brackets or quotes, a missing
            trailing ``;``, or a clause that cannot start a statement.
    """
    statements: List[QueryStatement] = []
    current: Optional[_StatementBuilder] = None

    for clause in _split_clauses(text):
        head = clause.split(None, 1)[0]

        if head in OPENING_KEYWORDS:
            if current is not None:
                statements.append(current.build())
            current = _StatementBuilder(head, clause)

        elif head in WRITE_KEYWORDS:
            if current is not None and current.is_open_match and not current.grouped:
                current.write = head
                current.add(clause)
                continue
            if head == "delete":
                raise QuerySyntaxError("A 'delete' clause must follow a 'match' clause.")
            if current is not None:
                statements.append(current.build())
            current = _StatementBuilder(head, clause)

        elif current is not None and current.is_open_match and head == GROUP_KEYWORD:
            current.grouped = True
            current.add(clause)

        elif current is not None and current.is_open_match and head in AGGREGATE_METHODS:
            current.aggregated = True
            current.add(clause)

        elif current is not None and current.is_open_match and head in MODIFIER_KEYWORDS:
            current.add(clause)

        elif current is None:
            raise QuerySyntaxError(
                f"Unexpected '{head}': a query must start with one of "
                f"{', '.join(OPENING_KEYWORDS + ('insert',))}."
            )
        else:
            current.add(clause)

    if current is not None:
        statements.append(current.build())
    return statements


def _split_clauses(text: str) -> List[str]:
    """Split on top-level ``;``, dropping comments and empty clauses."""
    clauses: List[str] = []
    buffer: List[str] = []
    depth = 0
    quote: Optional[str] = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote is not None:
            buffer.append(ch)
            if ch == "\\" and i + 1 < len(text):
                buffer.append(text[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
            buffer.append(ch)
        elif ch == "#":
            newline = text.find("\n", i)
            if newline == -1:
                break
            i = newline
            continue
        elif ch in _OPEN_BRACKETS:
            depth += 1
            buffer.append(ch)
        elif ch in _CLOSE_BRACKETS:
            depth -= 1
            if depth < 0:
                raise QuerySyntaxError(f"Unbalanced '{ch}' in query.")
            buffer.append(ch)
        elif ch == ";" and depth == 0:
            clause = "".join(buffer).strip()
            if clause:
                clauses.append(clause)
            buffer = []
        else:
            buffer.append(ch)
        i += 1

    if quote is not None:
        raise QuerySyntaxError("Unterminated string literal in query.")
    if depth > 0:
        raise QuerySyntaxError("Unbalanced brackets in query.")
    tail = "".join(buffer).strip()
    if tail:
        raise QuerySyntaxError(f"Missing ';' after '{tail}'.")
    return clauses
