"""
    Abstract base class for driver plugins.
    Defines the "Contract" every client implementation must follow.
"""
from abc import ABC, abstractmethod
from typing import Iterable

from ..client import Client


class DriverPlugin(ABC):
    """
        Abstract base class for driver plugins.
        Pattern: Strategy (for reaching a server).
    """

    @abstractmethod
    def get_plugin_name(self) -> str:
        """
            Returns the human-readable name of the driver.
            Example: "In-memory Driver"
        """
        pass

    @abstractmethod
    def connect(self, address: str) -> Client:
        """
        Open a client to a single server.

        Args:
            address: ``host:port`` of the server.

        Raises:
            ClientConnectionError: If the server cannot be reached.
        """
        pass

    @abstractmethod
    def connect_cluster(self, addresses: Iterable[str]) -> Client:
        """
        Open a client to a cluster.

        Args:
            addresses: ``host:port`` of one or more cluster peers.

        Returns:
            Client: A client whose ``is_cluster()`` is ``True``.
        """
        pass
