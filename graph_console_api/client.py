"""
    Client contracts — the abstract surface every driver implements.

    Design Pattern: Strategy
    ────────────────────────
    The console only ever talks to these abstractions.  A driver plugin
    (see ``plugins.base.DriverPlugin``) supplies concrete classes, so the
    console never knows whether it is speaking to a remote server, a
    cluster, or the in-memory store.

    Ownership:
        Client ─ owns ─▶ Session ─ owns ─▶ Transaction ─ exposes ─▶ QueryManager

    ``Session`` and ``Transaction`` are context managers; leaving the
    ``with`` block closes them, and closing twice is a no-op.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, List, Optional

from .answers import ConceptMap, ConceptMapGroup, Numeric, NumericGroup, Replica
from .options import TransactionOptions
from .query import (
    DefineQuery,
    UndefineQuery,
    InsertQuery,
    DeleteQuery,
    MatchQuery,
    MatchAggregateQuery,
    MatchGroupQuery,
    MatchGroupAggregateQuery,
)


class SessionType(Enum):
    DATA = "data"
    SCHEMA = "schema"


class TransactionType(Enum):
    READ = "read"
    WRITE = "write"

    def is_write(self) -> bool:
        return self is TransactionType.WRITE


class QueryManager(ABC):
    """Executes parsed statements inside one transaction."""

    @abstractmethod
    def define(self, query: DefineQuery) -> None:
        ...

    @abstractmethod
    def undefine(self, query: UndefineQuery) -> None:
        ...

    @abstractmethod
    def insert(self, query: InsertQuery) -> Iterator[ConceptMap]:
        """Return the inserted answers lazily."""
        ...

    @abstractmethod
    def delete(self, query: DeleteQuery) -> None:
        ...

    @abstractmethod
    def match(self, query: MatchQuery) -> Iterator[ConceptMap]:
        """Return matching answers lazily; rows are pulled from the server on demand."""
        ...

    @abstractmethod
    def match_aggregate(self, query: MatchAggregateQuery) -> Numeric:
        ...

    @abstractmethod
    def match_group(self, query: MatchGroupQuery) -> Iterator[ConceptMapGroup]:
        ...

    @abstractmethod
    def match_group_aggregate(self, query: MatchGroupAggregateQuery) -> Iterator[NumericGroup]:
        ...


class Transaction(ABC):
    """A unit of work; ends in commit, rollback-and-continue, or close."""

    @property
    @abstractmethod
    def type(self) -> TransactionType:
        ...

    @abstractmethod
    def query(self) -> QueryManager:
        ...

    @abstractmethod
    def commit(self) -> None:
        """Commit and close the transaction."""
        ...

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes; the transaction stays open."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def is_open(self) -> bool:
        ...

    def __enter__(self) -> 'Transaction':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Session(ABC):
    """A server-side context bound to one database in schema or data mode."""

    @property
    @abstractmethod
    def type(self) -> SessionType:
        ...

    @property
    @abstractmethod
    def database_name(self) -> str:
        ...

    @abstractmethod
    def transaction(self, transaction_type: TransactionType,
                    options: Optional[TransactionOptions] = None) -> Transaction:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    @abstractmethod
    def is_open(self) -> bool:
        ...

    def __enter__(self) -> 'Session':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Database(ABC):

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def schema(self) -> str:
        """Return the database schema as define-query text."""
        ...

    @abstractmethod
    def delete(self) -> None:
        ...

    @abstractmethod
    def replicas(self) -> List[Replica]:
        """
        List the replicas of this database.

        Raises:
            ClientError: When the client is not connected to a cluster.
        """
        ...


class DatabaseManager(ABC):

    @abstractmethod
    def all(self) -> List[Database]:
        ...

    @abstractmethod
    def create(self, name: str) -> None:
        ...

    @abstractmethod
    def get(self, name: str) -> Database:
        """
        Raises:
            ClientError: If no database with that name exists.
        """
        ...

    @abstractmethod
    def contains(self, name: str) -> bool:
        ...


class Client(ABC):
    """A connection to a server or to a cluster of servers."""

    @abstractmethod
    def is_cluster(self) -> bool:
        ...

    @abstractmethod
    def databases(self) -> DatabaseManager:
        ...

    @abstractmethod
    def session(self, database: str, session_type: SessionType,
                options: Optional[TransactionOptions] = None) -> Session:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> 'Client':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
