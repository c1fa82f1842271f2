"""
    In-memory server state shared by every client connected to one address.

    Each database keeps its schema as a list of definition clauses and its
    data as a list of answer rows.  Transactions work on private copies
    and publish them on commit, so uncommitted work is invisible to other
    transactions and a rollback is simply "copy again".
"""
import threading
from dataclasses import dataclass, field
from typing import Dict, List

from graph_console_api.answers import ConceptMap
from graph_console_api.errors import ClientError


@dataclass
class DatabaseState:
    name: str
    definitions: List[str] = field(default_factory=list)
    rows: List[ConceptMap] = field(default_factory=list)


class MemoryServer:

    def __init__(self, addresses: List[str]):
        self.addresses = list(addresses)
        self._databases: Dict[str, DatabaseState] = {}
        self._lock = threading.RLock()
        self._next_iid = 0

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._databases)

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._databases

    def create(self, name: str) -> None:
        with self._lock:
            if name in self._databases:
                raise ClientError(f"The database '{name}' already exists.")
            self._databases[name] = DatabaseState(name)

    def delete(self, name: str) -> None:
        with self._lock:
            if self._databases.pop(name, None) is None:
                raise ClientError(f"The database '{name}' does not exist.")

    def state(self, name: str) -> DatabaseState:
        with self._lock:
            state = self._databases.get(name)
        if state is None:
            raise ClientError(f"The database '{name}' does not exist.")
        return state

    def next_iid(self) -> str:
        with self._lock:
            self._next_iid += 1
            return f"0x{self._next_iid:024x}"
