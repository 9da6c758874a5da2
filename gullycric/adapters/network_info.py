"""Connectivity checks used to decide between the remote backend and local data."""

import socket
from abc import ABC, abstractmethod

from loguru import logger


class NetworkInfo(ABC):
    @abstractmethod
    def is_connected(self) -> bool:
        pass


class StaticNetworkInfo(NetworkInfo):
    """Fixed connectivity, for offline mode and tests."""

    def __init__(self, connected: bool = True):
        self.connected = connected

    def is_connected(self) -> bool:
        return self.connected


class SocketNetworkInfo(NetworkInfo):
    """Probe connectivity by opening a TCP connection to a well-known host."""

    def __init__(self, host: str = "8.8.8.8", port: int = 53, timeout: float = 1.5):
        self.host = host
        self.port = port
        self.timeout = timeout

    def is_connected(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.debug(f"Connectivity probe to {self.host}:{self.port} failed: {e}")
            return False
