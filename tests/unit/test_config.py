"""
Test configuration management
"""
import pytest
import tempfile
import os
from pydantic import ValidationError
from distributed_fs.core.config import Config, ClusterConfig, StorageConfig, LoggingConfig


class TestConfig:
    """Test configuration management"""

    def test_cluster_config_defaults(self):
        """Four nodes and triple replication by default"""
        config = ClusterConfig()

        assert config.node_count == 4
        assert config.replication_factor == 3
        assert config.healthy_min_replicas == 2

    def test_replication_cannot_exceed_node_count(self):
        """A replication factor larger than the cluster is rejected"""
        with pytest.raises(ValidationError):
            ClusterConfig(node_count=2, replication_factor=3)

    def test_node_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            ClusterConfig(node_count=0, replication_factor=1)

    def test_storage_config_defaults(self):
        config = StorageConfig()

        assert config.node_dir_prefix == "node_"
        assert config.download_prefix == "downloaded_"

    def test_from_env(self, monkeypatch):
        """Environment variables override defaults"""
        monkeypatch.setenv("DFS_NODE_COUNT", "6")
        monkeypatch.setenv("DFS_REPLICATION_FACTOR", "2")
        monkeypatch.setenv("DFS_STORAGE_ROOT", "/tmp/dfs")
        monkeypatch.setenv("DFS_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.cluster.node_count == 6
        assert config.cluster.replication_factor == 2
        assert config.storage.storage_root == "/tmp/dfs"
        assert config.logging.level == "DEBUG"

    def test_config_serialization(self):
        """Test configuration serialization to/from file"""
        config = Config(
            cluster=ClusterConfig(node_count=5, replication_factor=2),
            storage=StorageConfig(storage_root="/tmp/cluster"),
            logging=LoggingConfig(level="INFO")
        )

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            path = f.name

        try:
            config.save_to_file(path)

            # Load config back
            loaded_config = Config.load_from_file(path)

            assert loaded_config.cluster.node_count == 5
            assert loaded_config.cluster.replication_factor == 2
            assert loaded_config.storage.storage_root == "/tmp/cluster"
            assert loaded_config.logging.level == "INFO"
        finally:
            os.unlink(path)


if __name__ == '__main__':
    pytest.main([__file__])
