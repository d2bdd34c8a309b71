"""
Node registry for the replicated file store.

Holds the fixed set of storage nodes created at startup. Each node has a
dense integer id (1..N), a liveness flag and its own directory on disk.
The registry only answers liveness questions and flips flags; deciding
where a file goes is the ReplicationManager's job.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List

from .errors import InvalidNodeID


@dataclass
class StorageNode:
    """A simulated storage node backed by a local directory"""
    node_id: int
    directory: Path
    live: bool = True

    def fail(self):
        self.live = False

    def recover(self):
        self.live = True

    def to_dict(self) -> dict:
        return {
            'node_id': self.node_id,
            'directory': str(self.directory),
            'live': self.live
        }


class NodeRegistry:
    """
    Fixed registry of storage nodes.

    Node directories are created once, here, and never recreated. Existing
    directories (and the replicas inside them) are reused as they are.
    """

    def __init__(self, node_count: int, storage_root: str = ".",
                 node_dir_prefix: str = "node_", cluster_id: str = "dfs"):
        if node_count < 1:
            raise ValueError("node_count must be at least 1")

        self.logger = logging.getLogger(f"NodeRegistry-{cluster_id}")
        root = Path(storage_root)
        self._nodes: List[StorageNode] = []

        for node_id in range(1, node_count + 1):
            directory = root / f"{node_dir_prefix}{node_id}"
            directory.mkdir(parents=True, exist_ok=True)
            self._nodes.append(StorageNode(node_id=node_id, directory=directory))

        self.logger.info(f"Initialized with {node_count} nodes under {root}")

    def node_count(self) -> int:
        return len(self._nodes)

    def get(self, node_id: int) -> StorageNode:
        """
        Look up a node by id.

        Args:
            node_id: Node identity in 1..N

        Returns:
            The StorageNode

        Raises:
            InvalidNodeID: if node_id is out of range
        """
        # bool is an int subclass; True must not resolve to node 1
        if isinstance(node_id, bool) or not isinstance(node_id, int) \
                or not 1 <= node_id <= len(self._nodes):
            raise InvalidNodeID(f"Invalid node ID {node_id}.")
        return self._nodes[node_id - 1]

    def is_live(self, node_id: int) -> bool:
        return self.get(node_id).live

    def set_live(self, node_id: int, live: bool):
        node = self.get(node_id)
        if live:
            node.recover()
        else:
            node.fail()
        self.logger.debug(f"Node {node_id} live={live}")

    def live_nodes(self) -> List[StorageNode]:
        """Live nodes in ascending id order"""
        return [node for node in self._nodes if node.live]

    def __iter__(self) -> Iterator[StorageNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __str__(self) -> str:
        live = len(self.live_nodes())
        return f"NodeRegistry(nodes={len(self._nodes)}, live={live})"

    def __repr__(self) -> str:
        return self.__str__()
