import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from domain.entities import GroupingStrategy
from infrastructure.client.in_process_gateway import InProcessSearchGateway
from infrastructure.client.search_api_client import SearchApiClient
from infrastructure.config import ContainerConfig, build_default_container
from infrastructure.repositories.in_memory_search_history_repository import InMemorySearchHistoryRepository
from infrastructure.repositories.sqlite_search_history_repository import SqliteSearchHistoryRepository


class TestBuildDefaultContainer(unittest.TestCase):
    def test_defaults(self):
        container = build_default_container()

        self.assertIsInstance(container.history_repository, InMemorySearchHistoryRepository)
        self.assertIsInstance(container.gateway, InProcessSearchGateway)
        self.assertIs(container.strategy, GroupingStrategy.INTELLIGENT)
        self.assertEqual(container.grouping.max_groups, 8)
        self.assertEqual(container.grouping.max_results_per_group, 15)
        self.assertEqual(container.default_limit, 20)

    def test_sqlite_history_creates_parent_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "nested" / "history.db"
            container = build_default_container(
                ContainerConfig(history_store="sqlite", history_db_path=str(db_path))
            )

            self.assertIsInstance(container.history_repository, SqliteSearchHistoryRepository)
            self.assertTrue(db_path.exists())

    def test_http_gateway(self):
        container = build_default_container(ContainerConfig(gateway="http", api_base_url="http://search.local"))
        self.assertIsInstance(container.gateway, SearchApiClient)

    def test_unknown_components_raise(self):
        for config in (
            ContainerConfig(catalog="ldap"),
            ContainerConfig(history_store="redis"),
            ContainerConfig(gateway="grpc"),
        ):
            with self.subTest(config=config):
                with self.assertRaises(ValueError):
                    build_default_container(config)

    def test_unknown_strategy_falls_back_to_type(self):
        container = build_default_container(ContainerConfig(grouping_strategy="nonsense"))
        self.assertIs(container.strategy, GroupingStrategy.TYPE)


class TestContainerConfigFromEnv(unittest.TestCase):
    def test_reads_environment(self):
        env = {
            "MES_SEARCH_HISTORY_STORE": "sqlite",
            "MES_SEARCH_HISTORY_DB": "/tmp/history.db",
            "MES_SEARCH_GATEWAY": "http",
            "MES_SEARCH_API_URL": "http://search.local",
            "MES_SEARCH_DEFAULT_LIMIT": "30",
            "MES_SEARCH_CACHE_EXPIRY": "60",
            "MES_SEARCH_STRATEGY": "hybrid",
            "MES_SEARCH_MAX_GROUPS": "4",
            "MES_SEARCH_MAX_RESULTS_PER_GROUP": "5",
        }
        with mock.patch.dict(os.environ, env):
            cfg = ContainerConfig.from_env()

        self.assertEqual(cfg.history_store, "sqlite")
        self.assertEqual(cfg.history_db_path, "/tmp/history.db")
        self.assertEqual(cfg.gateway, "http")
        self.assertEqual(cfg.api_base_url, "http://search.local")
        self.assertEqual(cfg.default_limit, 30)
        self.assertEqual(cfg.cache_expiry_seconds, 60.0)
        self.assertEqual(cfg.grouping_strategy, "hybrid")
        self.assertEqual(cfg.max_groups, 4)
        self.assertEqual(cfg.max_results_per_group, 5)

    def test_defaults_without_environment(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(ContainerConfig.from_env(), ContainerConfig())


if __name__ == "__main__":
    unittest.main()
