"""Wire repositories to their data sources from configuration."""

from typing import Optional

from ..config.settings import GullyCricConfig, config as default_config
from .auth_local_datasource import AuthLocalDataSource
from .auth_mock_datasource import AuthMockDataSource
from .auth_repository import AuthRepositoryImpl
from .cricket_local_datasource import CricketLocalDataSource
from .cricket_mock_datasource import CricketMockDataSource
from .cricket_repository import CricketRepositoryImpl
from .key_value_store import JsonFileKeyValueStore, KeyValueStore
from .network_info import NetworkInfo, SocketNetworkInfo, StaticNetworkInfo


def create_store(cfg: Optional[GullyCricConfig] = None) -> KeyValueStore:
    cfg = cfg or default_config
    return JsonFileKeyValueStore(cfg.storage.store_path)


def create_network_info(cfg: Optional[GullyCricConfig] = None) -> NetworkInfo:
    cfg = cfg or default_config
    if cfg.network.offline:
        return StaticNetworkInfo(connected=False)
    return SocketNetworkInfo(
        cfg.network.probe_host, cfg.network.probe_port, cfg.network.probe_timeout
    )


def create_cricket_repository(
    cfg: Optional[GullyCricConfig] = None,
    store: Optional[KeyValueStore] = None,
    network_info: Optional[NetworkInfo] = None,
) -> CricketRepositoryImpl:
    cfg = cfg or default_config
    return CricketRepositoryImpl(
        local=CricketLocalDataSource(store or create_store(cfg)),
        mock=CricketMockDataSource(
            seed=cfg.storage.mock_seed,
            simulated_latency=cfg.network.simulated_latency,
        ),
        network_info=network_info or create_network_info(cfg),
        seed_count=cfg.storage.mock_match_count,
        seed_mock_data=cfg.storage.seed_mock_data,
    )


def create_auth_repository(
    cfg: Optional[GullyCricConfig] = None, store: Optional[KeyValueStore] = None
) -> AuthRepositoryImpl:
    cfg = cfg or default_config
    return AuthRepositoryImpl(
        remote=AuthMockDataSource(session_hours=cfg.auth.session_hours),
        local=AuthLocalDataSource(store or create_store(cfg)),
    )
