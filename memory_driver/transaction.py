"""
    In-memory sessions, transactions and query execution.

    Query support is deliberately shallow: statements are read with a few
    regular expressions rather than a full grammar.

        $x isa person            binds ``x`` to a new ``person`` (insert)
                                 or selects rows holding a ``person`` (match)
        $n "Alice" isa name      binds ``n`` to a ``name`` attribute
        group $x;                groups matched rows by the concept bound to x
        count; / sum $n; ...     aggregates over the matched rows
"""
import logging
import re
import statistics
from typing import Callable, Dict, Iterator, List, Optional

from graph_console_api.answers import Concept, ConceptMap, ConceptMapGroup, Numeric, NumericGroup
from graph_console_api.client import QueryManager, Session, SessionType, Transaction, TransactionType
from graph_console_api.errors import ClientError
from graph_console_api.options import TransactionOptions
from graph_console_api.query import (
    DefineQuery,
    UndefineQuery,
    InsertQuery,
    DeleteQuery,
    MatchQuery,
    MatchAggregateQuery,
    MatchGroupQuery,
    MatchGroupAggregateQuery,
    QueryStatement,
)

from .store import MemoryServer

logger = logging.getLogger(__name__)

_ISA = re.compile(r'\$([\w-]+)\s+(?:("(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'|[\w.+-]+)\s+)?isa\s+([\w-]+)')
_WRITE_CLAUSE = re.compile(r';\s*(insert|delete)\b')
_GROUP_CLAUSE = re.compile(r';\s*group\s+\$([\w-]+)\s*;')
_AGGREGATE_CLAUSE = re.compile(r';\s*(count|sum|max|min|mean|median|std)\b\s*(?:\$([\w-]+))?\s*;')

_AGGREGATES: Dict[str, Callable[[List[float]], float]] = {
    "sum": sum,
    "max": max,
    "min": min,
    "mean": statistics.mean,
    "median": statistics.median,
    "std": statistics.stdev,
}


def _body(query: QueryStatement) -> str:
    """Statement text without its leading keyword."""
    return query.text.split(None, 1)[1] if len(query.text.split(None, 1)) > 1 else ""


def _clauses(text: str) -> List[str]:
    return [clause.strip() for clause in text.rstrip(";").split(";") if clause.strip()]


def _label(definition: str) -> str:
    return definition.split(None, 1)[0]


def _literal(token: str):
    if token[0] in "\"'":
        return token[1:-1]
    if token in ("true", "false"):
        return token == "true"
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        return token


class MemoryQueryManager(QueryManager):

    def __init__(self, tx: 'MemoryTransaction'):
        self._tx = tx

    # ── Schema ───────────────────────────────────────────────────

    def define(self, query: DefineQuery) -> None:
        self._tx.require_schema_write("define")
        for definition in _clauses(_body(query)):
            if definition not in self._tx.definitions:
                self._tx.definitions.append(definition)

    def undefine(self, query: UndefineQuery) -> None:
        self._tx.require_schema_write("undefine")
        for clause in _clauses(_body(query)):
            label = _label(clause)
            if label not in self._tx.labels():
                raise ClientError(f"The type '{label}' does not exist.")
            self._tx.definitions[:] = [d for d in self._tx.definitions if _label(d) != label]

    # ── Data writes ──────────────────────────────────────────────

    def insert(self, query: InsertQuery) -> Iterator[ConceptMap]:
        self._tx.require_data_write("insert")
        write = _WRITE_CLAUSE.search(query.text)
        insert_part = query.text[write.end():] if write else _body(query)
        concepts: Dict[str, Concept] = {}
        for variable, value, label in _ISA.findall(insert_part):
            self._tx.require_type(label)
            if value:
                concepts[variable] = Concept(label, iid=self._tx.server.next_iid(), value=_literal(value))
            else:
                concepts[variable] = Concept(label, iid=self._tx.server.next_iid())
        answer = ConceptMap(concepts)
        self._tx.rows.append(answer)
        return iter([answer])

    def delete(self, query: DeleteQuery) -> None:
        self._tx.require_data_write("delete")
        doomed = list(self._matching(query))
        self._tx.rows[:] = [row for row in self._tx.rows if row not in doomed]

    # ── Reads ────────────────────────────────────────────────────

    def match(self, query: MatchQuery) -> Iterator[ConceptMap]:
        return self._stream(list(self._matching(query)))

    def match_aggregate(self, query: MatchAggregateQuery) -> Numeric:
        return self._aggregate(query, list(self._matching(query)))

    def match_group(self, query: MatchGroupQuery) -> Iterator[ConceptMapGroup]:
        groups = self._groups(query)
        return self._stream([ConceptMapGroup(owner, rows) for owner, rows in groups.items()])

    def match_group_aggregate(self, query: MatchGroupAggregateQuery) -> Iterator[NumericGroup]:
        groups = self._groups(query)
        return self._stream([NumericGroup(owner, self._aggregate(query, rows))
                             for owner, rows in groups.items()])

    # ── Helpers ──────────────────────────────────────────────────

    def _matching(self, query: QueryStatement) -> Iterator[ConceptMap]:
        self._tx.require_open()
        write = _WRITE_CLAUSE.search(query.text)
        pattern = query.text[:write.start()] if write else query.text
        labels = {label for _, _, label in _ISA.findall(pattern)}
        for label in labels:
            self._tx.require_type(label)
        for row in list(self._tx.rows):
            if not labels or any(c.type_label in labels for c in row.concepts.values()):
                yield row

    def _groups(self, query: QueryStatement) -> Dict[Concept, List[ConceptMap]]:
        found = _GROUP_CLAUSE.search(query.text)
        groups: Dict[Concept, List[ConceptMap]] = {}
        for row in self._matching(query):
            owner = row.get(found.group(1)) if found else None
            if owner is not None:
                groups.setdefault(owner, []).append(row)
        return groups

    @staticmethod
    def _aggregate(query: QueryStatement, rows: List[ConceptMap]) -> Numeric:
        found = _AGGREGATE_CLAUSE.search(query.text)
        method = found.group(1) if found else "count"
        if method == "count":
            return Numeric(len(rows))
        variable = found.group(2)
        values = []
        for row in rows:
            concept = row.get(variable) if variable else None
            if concept is not None and isinstance(concept.value, (int, float)):
                values.append(concept.value)
        if not values or (method == "std" and len(values) < 2):
            return Numeric(None)
        return Numeric(_AGGREGATES[method](values))

    def _stream(self, answers: list) -> Iterator:
        """Yield answers one at a time, failing if the transaction closes mid-stream."""
        for answer in answers:
            self._tx.require_open()
            yield answer


class MemoryTransaction(Transaction):

    def __init__(self, session: 'MemorySession', transaction_type: TransactionType,
                 options: TransactionOptions):
        self._session = session
        self._type = transaction_type
        self.options = options
        self.server: MemoryServer = session.server
        self._open = True
        self.definitions: List[str] = []
        self.rows: List[ConceptMap] = []
        self._snapshot()

    @property
    def type(self) -> TransactionType:
        return self._type

    def query(self) -> QueryManager:
        self.require_open()
        return MemoryQueryManager(self)

    def commit(self) -> None:
        self.require_open()
        if not self._type.is_write():
            raise ClientError("Read transactions cannot be committed.")
        state = self.server.state(self._session.database_name)
        with self.server.lock:
            state.definitions = list(self.definitions)
            state.rows = list(self.rows)
        self._open = False
        logger.info("Committed transaction on '%s'", self._session.database_name)

    def rollback(self) -> None:
        self.require_open()
        self._snapshot()

    def close(self) -> None:
        if self._open:
            self._open = False
            logger.debug("Closed transaction on '%s'", self._session.database_name)

    def is_open(self) -> bool:
        return self._open

    # ── Checks used by the query manager ─────────────────────────

    def require_open(self) -> None:
        if not self._open:
            raise ClientError("The transaction has been closed and no further operation is allowed.")

    def require_schema_write(self, operation: str) -> None:
        self.require_open()
        if self._session.type is not SessionType.SCHEMA or not self._type.is_write():
            raise ClientError(f"'{operation}' requires a schema session and a write transaction.")

    def require_data_write(self, operation: str) -> None:
        self.require_open()
        if self._session.type is not SessionType.DATA or not self._type.is_write():
            raise ClientError(f"'{operation}' requires a data session and a write transaction.")

    def require_type(self, label: str) -> None:
        if label not in self.labels():
            raise ClientError(f"The type '{label}' does not exist.")

    def labels(self) -> List[str]:
        return [_label(d) for d in self.definitions]

    def _snapshot(self) -> None:
        state = self.server.state(self._session.database_name)
        with self.server.lock:
            self.definitions = list(state.definitions)
            self.rows = list(state.rows)


class MemorySession(Session):

    def __init__(self, server: MemoryServer, database: str, session_type: SessionType,
                 options: Optional[TransactionOptions] = None):
        server.state(database)
        self.server = server
        self._database = database
        self._type = session_type
        self.options = options or TransactionOptions()
        self._open = True
        self._transactions: List[MemoryTransaction] = []

    @property
    def type(self) -> SessionType:
        return self._type

    @property
    def database_name(self) -> str:
        return self._database

    def transaction(self, transaction_type: TransactionType,
                    options: Optional[TransactionOptions] = None) -> Transaction:
        if not self._open:
            raise ClientError("The session has been closed.")
        tx = MemoryTransaction(self, transaction_type, options or self.options)
        self._transactions.append(tx)
        return tx

    def close(self) -> None:
        if not self._open:
            return
        for tx in self._transactions:
            tx.close()
        self._open = False
        logger.debug("Closed %s session on '%s'", self._type.value, self._database)

    def is_open(self) -> bool:
        return self._open
