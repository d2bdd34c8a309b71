"""
Replica storage on node directories.
Copies whole files in and out of a single node's directory.
"""

import logging
import shutil
from pathlib import Path
from typing import Union

from distributed_fs.core.errors import InvalidFilename
from distributed_fs.core.registry import NodeRegistry

PathLike = Union[str, Path]


def check_replica_name(filename: str) -> str:
    """
    Ensure filename names a file directly inside a node directory

    Raises:
        InvalidFilename: for empty names, "." or "..", names with a path
            separator or a NUL byte, and absolute paths
    """
    if not isinstance(filename, str) or filename in ("", ".", "..") \
            or "\0" in filename or Path(filename).name != filename:
        raise InvalidFilename(f"Invalid file name: {filename!r}")
    return filename


class ReplicaStore:
    """
    Stores, fetches and removes named replicas on storage nodes.

    Copies are all-or-nothing as far as the store is concerned. Any fault
    from the filesystem propagates as OSError; nothing is retried here.
    """

    def __init__(self, registry: NodeRegistry, cluster_id: str = "dfs"):
        self.registry = registry
        self.logger = logging.getLogger(f"ReplicaStore-{cluster_id}")

    def blob_path(self, node_id: int, filename: str) -> Path:
        """Path of the replica for filename on the given node"""
        return self.registry.get(node_id).directory / check_replica_name(filename)

    def has(self, node_id: int, filename: str) -> bool:
        return self.blob_path(node_id, filename).is_file()

    def put(self, node_id: int, filename: str, source: PathLike) -> Path:
        """
        Copy a source file onto a node, replacing any existing replica.

        Args:
            node_id: Target node
            filename: Name the replica is stored under
            source: Path of the bytes to copy

        Returns:
            Path of the stored replica
        """
        target = self.blob_path(node_id, filename)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            self.logger.error(f"Error storing {filename} on node {node_id}: {e}")
            raise
        self.logger.debug(f"Stored {filename} on node {node_id}")
        return target

    def get(self, node_id: int, filename: str, destination: PathLike) -> Path:
        """
        Copy a replica out of a node into destination, overwriting it.

        Args:
            node_id: Source node
            filename: Replica name
            destination: Where to write the bytes

        Returns:
            The destination path
        """
        source = self.blob_path(node_id, filename)
        destination = Path(destination)
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            self.logger.error(f"Error fetching {filename} from node {node_id}: {e}")
            raise
        self.logger.debug(f"Fetched {filename} from node {node_id} into {destination}")
        return destination

    def remove(self, node_id: int, filename: str) -> bool:
        """
        Delete a replica from a node.

        A replica that is already gone is not an error.

        Returns:
            True if a file was removed, False if there was nothing to remove
        """
        target = self.blob_path(node_id, filename)
        try:
            if not target.exists():
                return False
            target.unlink()
        except OSError as e:
            self.logger.error(f"Error removing {filename} from node {node_id}: {e}")
            raise
        self.logger.debug(f"Removed {filename} from node {node_id}")
        return True
