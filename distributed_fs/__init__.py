"""
Replicated File Store

A single-process simulation of a replicated file store: storage nodes are
local directories, uploads are copied onto several of them, and nodes can be
failed and recovered to watch replica health degrade.
"""

__version__ = "0.1.0"

from .core.config import Config, ClusterConfig, StorageConfig
from .core.manager import ReplicationManager, ReplicaHealth, FileHealth
from .core.registry import NodeRegistry, StorageNode
from .storage.metadata import MetadataIndex, FileRecord
from .storage.replica_store import ReplicaStore

__all__ = [
    "Config",
    "ClusterConfig",
    "StorageConfig",
    "ReplicationManager",
    "ReplicaHealth",
    "FileHealth",
    "NodeRegistry",
    "StorageNode",
    "MetadataIndex",
    "FileRecord",
    "ReplicaStore",
]
