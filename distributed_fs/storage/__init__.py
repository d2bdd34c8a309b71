"""
Replica bytes on node directories and the in-memory metadata index.
"""
from .metadata import MetadataIndex, FileRecord
from .replica_store import ReplicaStore

__all__ = ['MetadataIndex', 'FileRecord', 'ReplicaStore']
