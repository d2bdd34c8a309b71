"""
Configuration management for the replicated file store
"""
import os
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class ClusterConfig(BaseModel):
    """Configuration for the simulated cluster"""
    cluster_id: str = "dfs"
    node_count: int = Field(default=4, ge=1)
    replication_factor: int = Field(default=3, ge=1)
    healthy_min_replicas: int = Field(default=2, ge=1)  # live replicas needed to be "healthy"

    @model_validator(mode="after")
    def check_replication_fits(self) -> "ClusterConfig":
        if self.replication_factor > self.node_count:
            raise ValueError(
                f"replication_factor ({self.replication_factor}) cannot exceed "
                f"node_count ({self.node_count})"
            )
        return self


class StorageConfig(BaseModel):
    """Where node directories and downloads live"""
    storage_root: str = "."
    node_dir_prefix: str = "node_"
    download_dir: str = "."
    download_prefix: str = "downloaded_"


class LoggingConfig(BaseModel):
    """Logging settings"""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Config(BaseModel):
    """Main configuration class"""
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables"""
        return cls(
            cluster=ClusterConfig(
                node_count=int(os.getenv("DFS_NODE_COUNT", "4")),
                replication_factor=int(os.getenv("DFS_REPLICATION_FACTOR", "3"))
            ),
            storage=StorageConfig(
                storage_root=os.getenv("DFS_STORAGE_ROOT", "."),
                download_dir=os.getenv("DFS_DOWNLOAD_DIR", ".")
            ),
            logging=LoggingConfig(
                level=os.getenv("DFS_LOG_LEVEL", "WARNING")
            )
        )

    @classmethod
    def load_from_file(cls, file_path: str) -> "Config":
        """Load configuration from JSON file"""
        import json
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls(**data)

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file"""
        import json
        with open(file_path, 'w') as f:
            json.dump(self.model_dump(), f, indent=2)
