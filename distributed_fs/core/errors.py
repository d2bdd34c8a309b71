"""
Error kinds raised by the replicated file store
"""
from typing import Optional


class StoreError(Exception):
    """Base class for all store failures"""

    def __init__(self, message: str, cause: Optional[OSError] = None):
        super().__init__(message)
        self.cause = cause


class SourceNotFound(StoreError):
    """The file given to upload does not exist or cannot be read"""


class InvalidFilename(StoreError):
    """Replica name is not a single plain path component"""


class InsufficientReplicas(StoreError):
    """Fewer live nodes than the replication factor"""


class ReplicationFailed(StoreError):
    """A replica copy failed during upload"""


class FileNotFound(StoreError):
    """No metadata record for the requested filename"""


class AllReplicasUnavailable(StoreError):
    """Every node holding the file is down"""


class DownloadFailed(StoreError):
    """Copying from the selected replica failed"""


class DeletionFailed(StoreError):
    """Removing a replica failed during delete"""


class InvalidNodeID(StoreError):
    """Node id outside 1..N"""
