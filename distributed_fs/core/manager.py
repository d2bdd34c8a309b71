"""
Replication manager for the replicated file store.

Orchestrates every file operation over a fixed set of storage nodes:

- upload: copy a file onto the first R live nodes (ascending id order)
  and record where it went
- download: copy from the first live node in the recorded order
- delete: remove the replica from every recorded node, then forget the file
- replica health: recount live replicas after every liveness change

FAILURE POLICY:
- Nothing is retried. Every fault is reported to the caller as one of the
  kinds in distributed_fs.core.errors.
- A failed upload never writes metadata. Replicas copied before the failure
  stay on disk as orphans.
- A failed delete keeps the metadata record so it can be retried.
- Download stops at the first live replica. If that copy fails the whole
  download fails; other live replicas are not tried.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import ClusterConfig, StorageConfig
from .errors import (
    AllReplicasUnavailable,
    DeletionFailed,
    DownloadFailed,
    FileNotFound,
    InsufficientReplicas,
    ReplicationFailed,
    SourceNotFound,
)
from .registry import NodeRegistry
from distributed_fs.storage.metadata import FileRecord, MetadataIndex
from distributed_fs.storage.replica_store import ReplicaStore, check_replica_name

PathLike = Union[str, Path]


class ReplicaHealth(Enum):
    """Health of a file derived from its live replica count"""
    HEALTHY = "HEALTHY"
    AT_RISK = "AT_RISK"
    LOST = "LOST"


@dataclass
class FileHealth:
    """Health report for one file"""
    filename: str
    node_ids: Tuple[int, ...]
    live_replicas: int
    health: ReplicaHealth

    def to_dict(self) -> dict:
        return {
            'filename': self.filename,
            'node_ids': list(self.node_ids),
            'live_replicas': self.live_replicas,
            'health': self.health.value
        }


class ReplicationManager:
    """
    Owns the node registry, the replica store and the metadata index of one
    simulated cluster. Separate instances share no state.
    """

    def __init__(self,
                 cluster: Optional[ClusterConfig] = None,
                 storage: Optional[StorageConfig] = None):
        """
        Args:
            cluster: Node count, replication factor and health threshold
            storage: Where the node directories live
        """
        self.cluster = cluster or ClusterConfig()
        self.storage = storage or StorageConfig()
        self.logger = logging.getLogger(f"ReplicationManager-{self.cluster.cluster_id}")

        self.replication_factor = self.cluster.replication_factor
        self.healthy_min_replicas = self.cluster.healthy_min_replicas

        self.registry = NodeRegistry(
            self.cluster.node_count,
            storage_root=self.storage.storage_root,
            node_dir_prefix=self.storage.node_dir_prefix,
            cluster_id=self.cluster.cluster_id
        )
        self.store = ReplicaStore(self.registry, cluster_id=self.cluster.cluster_id)
        self.metadata = MetadataIndex()

    # ---------- File operations ----------

    def upload(self, filename: str, source: Optional[PathLike] = None) -> Tuple[int, ...]:
        """
        Replicate a file onto the first R live nodes.

        Args:
            filename: Key the file is stored and tracked under
            source: Path of the bytes to upload (defaults to filename)

        Returns:
            Node ids holding the new replicas, in fill order

        Raises:
            InvalidFilename: filename is not a plain file name
            SourceNotFound: source does not exist or cannot be examined
            ReplicationFailed: a copy raised OSError
            InsufficientReplicas: fewer than R live nodes
        """
        check_replica_name(filename)
        source = Path(source if source is not None else filename)
        try:
            found = source.is_file()
        except OSError as e:
            raise SourceNotFound(f"Cannot access source {source}: {e}", cause=e) from e
        if not found:
            raise SourceNotFound(f"File not found: {source}")

        used_nodes: List[int] = []
        for node in self.registry:
            if len(used_nodes) == self.replication_factor:
                break
            if not node.live:
                continue
            try:
                self.store.put(node.node_id, filename, source)
            except OSError as e:
                self.logger.error(f"Replication of '{filename}' failed on node {node.node_id}: {e}")
                raise ReplicationFailed(
                    f"Error during file replication of '{filename}' on node {node.node_id}: {e}",
                    cause=e
                ) from e
            used_nodes.append(node.node_id)

        if len(used_nodes) < self.replication_factor:
            self.logger.warning(
                f"Upload of '{filename}' rejected: {len(used_nodes)} active nodes, "
                f"{self.replication_factor} replicas required"
            )
            raise InsufficientReplicas(
                f"Not enough active nodes for {self.replication_factor} replicas "
                f"({len(used_nodes)} available)"
            )

        record = self.metadata.set(filename, used_nodes)
        self.logger.info(f"Uploaded '{filename}' to nodes {list(record.node_ids)}")
        return record.node_ids

    def download(self, filename: str, destination: PathLike) -> int:
        """
        Copy a file out of the first live node that holds it.

        Args:
            filename: Stored file name
            destination: Where to write the bytes

        Returns:
            Id of the node that served the file

        Raises:
            FileNotFound: filename is not stored
            DownloadFailed: the copy from the selected node raised OSError
            AllReplicasUnavailable: none of the recorded nodes is live
        """
        record = self._require(filename)

        for node_id in record.node_ids:
            if not self.registry.is_live(node_id):
                continue
            try:
                self.store.get(node_id, filename, destination)
            except OSError as e:
                self.logger.error(f"Download of '{filename}' from node {node_id} failed: {e}")
                raise DownloadFailed(
                    f"Error during download of '{filename}' from node {node_id}: {e}",
                    cause=e
                ) from e
            self.logger.info(f"Downloaded '{filename}' from node {node_id}")
            return node_id

        self.logger.warning(f"All replicas of '{filename}' are unavailable")
        raise AllReplicasUnavailable(
            f"All replicas of '{filename}' are unavailable. File cannot be downloaded."
        )

    def delete(self, filename: str):
        """
        Remove a file from every recorded node, then drop its record.

        Liveness is ignored: failed nodes are cleaned too.

        Raises:
            FileNotFound: filename is not stored
            DeletionFailed: a removal raised OSError; the record is kept
        """
        record = self._require(filename)

        for node_id in record.node_ids:
            try:
                self.store.remove(node_id, filename)
            except OSError as e:
                self.logger.error(f"Deletion of '{filename}' failed on node {node_id}: {e}")
                raise DeletionFailed(
                    f"Error during deletion of '{filename}' on node {node_id}: {e}",
                    cause=e
                ) from e

        self.metadata.remove(filename)
        self.logger.info(f"Deleted '{filename}'")

    def list_files(self) -> List[FileRecord]:
        """Snapshot of every stored file, sorted by name"""
        return self.metadata.list_all()

    # ---------- Node operations ----------

    def fail_node(self, node_id: int) -> List[FileHealth]:
        """Mark a node as failed and return the resulting replica health"""
        self.registry.set_live(node_id, False)
        self.logger.info(f"Node {node_id} is inactive")
        return self.evaluate_replica_health()

    def recover_node(self, node_id: int) -> List[FileHealth]:
        """Mark a node as live again and return the resulting replica health"""
        self.registry.set_live(node_id, True)
        self.logger.info(f"Node {node_id} is active")
        return self.evaluate_replica_health()

    def show_nodes(self) -> List[Tuple[int, bool]]:
        return [(node.node_id, node.live) for node in self.registry]

    # ---------- Replica health ----------

    def classify(self, live_replicas: int) -> ReplicaHealth:
        if live_replicas >= self.healthy_min_replicas:
            return ReplicaHealth.HEALTHY
        if live_replicas > 0:
            return ReplicaHealth.AT_RISK
        return ReplicaHealth.LOST

    def evaluate_replica_health(self) -> List[FileHealth]:
        """
        Recount live replicas for every stored file.

        Read-only: records are never changed and nothing is re-replicated.
        Files below the healthy threshold are logged as warnings.
        """
        report = []
        for record in self.metadata.list_all():
            live = sum(1 for node_id in record.node_ids if self.registry.is_live(node_id))
            health = FileHealth(
                filename=record.filename,
                node_ids=record.node_ids,
                live_replicas=live,
                health=self.classify(live)
            )
            if health.health is not ReplicaHealth.HEALTHY:
                self.logger.warning(
                    f"File '{record.filename}' has only {live} active replicas! Data loss risk!"
                )
            report.append(health)
        return report

    def get_replication_status(self) -> dict:
        """Cluster-wide summary of nodes and file health"""
        live_nodes = len(self.registry.live_nodes())

        if live_nodes >= self.replication_factor:
            cluster_status = 'OK'
        elif live_nodes > 0:
            cluster_status = 'DEGRADED'
        else:
            cluster_status = 'CRITICAL'

        return {
            'cluster_status': cluster_status,
            'total_nodes': self.registry.node_count(),
            'live_nodes': live_nodes,
            'nodes': [node.to_dict() for node in self.registry],
            'replication_factor': self.replication_factor,
            'files': [h.to_dict() for h in self.evaluate_replica_health()]
        }

    def _require(self, filename: str) -> FileRecord:
        record = self.metadata.get(filename)
        if record is None:
            raise FileNotFound(f"File not found in DFS: {filename}")
        return record

    def __str__(self) -> str:
        return (f"ReplicationManager(cluster={self.cluster.cluster_id}, "
                f"nodes={self.registry.node_count()}, files={len(self.metadata)})")

    def __repr__(self) -> str:
        return self.__str__()
