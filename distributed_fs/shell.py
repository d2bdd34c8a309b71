"""
Interactive command loop for the replicated file store
"""
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

import click

from distributed_fs.core.config import StorageConfig
from distributed_fs.core.errors import StoreError
from distributed_fs.core.manager import ReplicaHealth, ReplicationManager

BANNER = "=== DISTRIBUTED FILE SYSTEM ==="
COMMANDS = "Commands: upload, download, delete, list, fail, recover, nodes, health, help, exit"


class CommandDispatcher:
    """
    Translates text commands into ReplicationManager calls and prints the outcome.

    Core errors are reported and swallowed here so one bad command never
    ends the session.
    """

    prompt = "DFS> "

    def __init__(self, manager: ReplicationManager, storage: Optional[StorageConfig] = None):
        self.manager = manager
        self.storage = storage or manager.storage
        self.logger = logging.getLogger("CommandDispatcher")
        self.handlers: Dict[str, Callable[[List[str]], None]] = {
            'upload': self.handle_upload,
            'download': self.handle_download,
            'delete': self.handle_delete,
            'list': self.handle_list,
            'fail': self.handle_fail,
            'recover': self.handle_recover,
            'nodes': self.handle_nodes,
            'health': self.handle_health,
            'help': self.handle_help,
        }

    def download_path(self, filename: str) -> Path:
        """Destination a download of filename is written to"""
        return Path(self.storage.download_dir) / f"{self.storage.download_prefix}{filename}"

    def run(self, stream: Optional[TextIO] = None):
        """Read and execute commands until exit or end of input"""
        stream = stream or click.get_text_stream('stdin')

        click.echo()
        click.echo(BANNER)
        click.echo(COMMANDS)
        click.echo()

        while True:
            click.echo(self.prompt, nl=False)
            line = stream.readline()
            if not line:
                click.echo()
                break
            if not self.dispatch(line):
                break

    def dispatch(self, line: str) -> bool:
        """
        Execute one command line.

        Args:
            line: Raw command text

        Returns:
            False when the session should end, True otherwise
        """
        parts = line.split()
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        if command in ('exit', 'quit'):
            return False

        handler = self.handlers.get(command)
        if handler is None:
            click.echo("Invalid command.")
            return True

        try:
            handler(args)
        except StoreError as e:
            self.logger.debug(f"{command} failed: {type(e).__name__}: {e}")
            click.echo(f"Error: {e}")
        return True

    # ---------- Handlers ----------

    def handle_upload(self, args: List[str]):
        if not args:
            click.echo("Usage: upload <filename>")
            return

        source = Path(args[0]).expanduser()
        node_ids = self.manager.upload(source.name, source)
        click.echo(f"[UPLOAD SUCCESS] File replicated to nodes: {_join(node_ids)}")
        click.echo()

    def handle_download(self, args: List[str]):
        if not args:
            click.echo("Usage: download <filename>")
            return

        filename = args[0]
        destination = self.download_path(filename)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            click.echo(f"Error: cannot create download directory {destination.parent}: {e}")
            return

        node_id = self.manager.download(filename, destination)
        click.echo(f"[DOWNLOAD SUCCESS] File downloaded from Node {node_id}")
        click.echo(f"  Saved to: {destination}")

    def handle_delete(self, args: List[str]):
        if not args:
            click.echo("Usage: delete <filename>")
            return

        self.manager.delete(args[0])
        click.echo("[DELETE SUCCESS] File removed from DFS.")
        click.echo()

    def handle_list(self, args: List[str]):
        records = self.manager.list_files()
        if not records:
            click.echo("(Empty) No files stored.")
            click.echo()
            return

        click.echo()
        click.echo("FILES IN DFS:")
        for record in records:
            click.echo(f" - {record.filename} -> Nodes: {_join(record.node_ids)}")
        click.echo()

    def handle_fail(self, args: List[str]):
        node_id = self._parse_node_id(args, 'fail')
        if node_id is None:
            return

        report = self.manager.fail_node(node_id)
        click.echo(f"[NODE FAILED] Node {node_id} is inactive.")
        self._echo_warnings(report)
        click.echo()

    def handle_recover(self, args: List[str]):
        node_id = self._parse_node_id(args, 'recover')
        if node_id is None:
            return

        report = self.manager.recover_node(node_id)
        click.echo(f"[NODE RECOVERED] Node {node_id} is active.")
        self._echo_warnings(report)
        click.echo()

    def handle_nodes(self, args: List[str]):
        click.echo()
        click.echo("NODE STATUS:")
        for node_id, live in self.manager.show_nodes():
            click.echo(f"Node {node_id}: {'Active' if live else 'Failed'}")
        click.echo()

    def handle_health(self, args: List[str]):
        report = self.manager.evaluate_replica_health()
        if not report:
            click.echo("(Empty) No files stored.")
            return

        for item in report:
            click.echo(
                f"{item.filename}: {item.health.value} "
                f"({item.live_replicas} active replicas on nodes {_join(item.node_ids)})"
            )

    def handle_help(self, args: List[str]):
        click.echo("\nAvailable commands:")
        click.echo("  upload <file>      - Replicate a local file onto the storage nodes")
        click.echo("  download <file>    - Fetch a stored file into the download directory")
        click.echo("  delete <file>      - Remove a file from every node holding it")
        click.echo("  list               - List stored files and their nodes")
        click.echo("  fail <node>        - Mark a node as failed")
        click.echo("  recover <node>     - Mark a node as active again")
        click.echo("  nodes              - Show node status")
        click.echo("  health             - Show replica health of every file")
        click.echo("  exit               - Quit")
        click.echo()

    def _parse_node_id(self, args: List[str], command: str) -> Optional[int]:
        if not args:
            click.echo(f"Usage: {command} <nodeID>")
            return None
        try:
            return int(args[0])
        except ValueError:
            click.echo(f"Error: Invalid node ID '{args[0]}'.")
            return None

    def _echo_warnings(self, report):
        for item in report:
            if item.health is not ReplicaHealth.HEALTHY:
                click.echo(
                    f"WARNING: File '{item.filename}' has only {item.live_replicas} "
                    f"active replicas! Data loss risk!"
                )


def _join(node_ids) -> str:
    return " ".join(str(n) for n in node_ids)
