import logging
from typing import Dict, Iterable, List, Optional, Tuple

from graph_console_api.answers import Replica
from graph_console_api.client import Client, Database, DatabaseManager, Session, SessionType
from graph_console_api.errors import ClientConnectionError, ClientError
from graph_console_api.options import TransactionOptions
from graph_console_api.plugins import DriverPlugin

from .store import MemoryServer
from .transaction import MemorySession

logger = logging.getLogger(__name__)


class MemoryDatabase(Database):

    def __init__(self, server: MemoryServer, name: str, is_cluster: bool):
        self._server = server
        self._name = name
        self._is_cluster = is_cluster

    @property
    def name(self) -> str:
        return self._name

    def schema(self) -> str:
        definitions = self._server.state(self._name).definitions
        if not definitions:
            return ""
        return "define\n\n" + "".join(f"{definition};\n" for definition in definitions)

    def delete(self) -> None:
        self._server.delete(self._name)
        logger.info("Deleted database '%s'", self._name)

    def replicas(self) -> List[Replica]:
        if not self._is_cluster:
            raise ClientError("Replica information is only available from a cluster.")
        self._server.state(self._name)
        # The first peer is the primary and the preferred read replica.
        return [Replica(address, self._name, is_primary=i == 0, is_preferred=i == 0, term=1)
                for i, address in enumerate(self._server.addresses)]


class MemoryDatabaseManager(DatabaseManager):

    def __init__(self, server: MemoryServer, is_cluster: bool):
        self._server = server
        self._is_cluster = is_cluster

    def all(self) -> List[Database]:
        return [MemoryDatabase(self._server, name, self._is_cluster) for name in self._server.names()]

    def create(self, name: str) -> None:
        self._server.create(name)
        logger.info("Created database '%s'", name)

    def get(self, name: str) -> Database:
        self._server.state(name)
        return MemoryDatabase(self._server, name, self._is_cluster)

    def contains(self, name: str) -> bool:
        return self._server.contains(name)


class MemoryClient(Client):

    def __init__(self, server: MemoryServer, is_cluster: bool = False):
        self._server = server
        self._is_cluster = is_cluster
        self._open = True
        self._sessions: List[MemorySession] = []

    def is_cluster(self) -> bool:
        return self._is_cluster

    def databases(self) -> DatabaseManager:
        self._require_open()
        return MemoryDatabaseManager(self._server, self._is_cluster)

    def session(self, database: str, session_type: SessionType,
                options: Optional[TransactionOptions] = None) -> Session:
        self._require_open()
        session = MemorySession(self._server, database, session_type, options)
        self._sessions.append(session)
        return session

    def close(self) -> None:
        if not self._open:
            return
        for session in self._sessions:
            session.close()
        self._open = False

    def _require_open(self) -> None:
        if not self._open:
            raise ClientError("The client has been closed.")


class MemoryDriverPlugin(DriverPlugin):
    """
    Driver backed by process-local state.

    Connecting twice to the same address (or the same set of cluster
    peers) reaches the same databases.
    """

    def __init__(self):
        self._servers: Dict[Tuple[str, ...], MemoryServer] = {}

    def get_plugin_name(self) -> str:
        return "In-memory Driver"

    def connect(self, address: str) -> Client:
        return MemoryClient(self._server((address,)))

    def connect_cluster(self, addresses: Iterable[str]) -> Client:
        return MemoryClient(self._server(tuple(addresses)), is_cluster=True)

    def _server(self, addresses: Tuple[str, ...]) -> MemoryServer:
        cleaned = tuple(address.strip() for address in addresses)
        if not cleaned or any(not address for address in cleaned):
            raise ClientConnectionError(f"Invalid server address: '{','.join(addresses)}'")
        if cleaned not in self._servers:
            logger.debug("Starting in-memory server for %s", ", ".join(cleaned))
            self._servers[cleaned] = MemoryServer(list(cleaned))
        return self._servers[cleaned]
