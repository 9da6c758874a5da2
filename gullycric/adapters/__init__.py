"""Data sources and repository implementations."""

from .auth_local_datasource import AuthLocalDataSource
from .auth_mock_datasource import AuthMockDataSource
from .auth_repository import AuthRepositoryImpl
from .cricket_local_datasource import CricketLocalDataSource
from .cricket_mock_datasource import CricketMockDataSource
from .cricket_repository import CricketRepositoryImpl
from .factory import create_auth_repository, create_cricket_repository
from .key_value_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from .memory_repository import InMemoryMatchRepository
from .network_info import NetworkInfo, SocketNetworkInfo, StaticNetworkInfo

__all__ = [
    "AuthLocalDataSource",
    "AuthMockDataSource",
    "AuthRepositoryImpl",
    "CricketLocalDataSource",
    "CricketMockDataSource",
    "CricketRepositoryImpl",
    "InMemoryKeyValueStore",
    "InMemoryMatchRepository",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NetworkInfo",
    "SocketNetworkInfo",
    "StaticNetworkInfo",
    "create_auth_repository",
    "create_cricket_repository",
]
