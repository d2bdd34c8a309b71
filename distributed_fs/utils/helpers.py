"""
Utility functions for inspecting the on-disk replica layout
"""
import os
import re
from pathlib import Path
from typing import Any, Dict, List
import psutil


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human readable format

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string
    """
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0

    while size_bytes >= 1024 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"


def scan_node_directories(storage_root: str, node_dir_prefix: str = "node_") -> List[Dict[str, Any]]:
    """
    List the node directories under storage_root and the replicas they hold

    Only directories named <prefix><integer> are considered. Results are
    sorted by node id.

    Args:
        storage_root: Directory containing the node directories
        node_dir_prefix: Prefix of node directory names

    Returns:
        One dictionary per node with its id, path, files and total size
    """
    root = Path(storage_root)
    if not root.is_dir():
        return []

    pattern = re.compile(rf"^{re.escape(node_dir_prefix)}(\d+)$")
    nodes = []

    for entry in root.iterdir():
        match = pattern.match(entry.name)
        if not match or not entry.is_dir():
            continue

        files = sorted(p for p in entry.iterdir() if p.is_file())
        nodes.append({
            "node_id": int(match.group(1)),
            "directory": str(entry),
            "files": [p.name for p in files],
            "total_size": sum(p.stat().st_size for p in files)
        })

    nodes.sort(key=lambda n: n["node_id"])
    return nodes


def get_disk_usage(path: str) -> Dict[str, Any]:
    """
    Disk usage of the filesystem holding path

    Returns:
        Dictionary with total, used and free bytes and the used percentage
    """
    usage = psutil.disk_usage(os.path.abspath(path))
    return {
        "total": usage.total,
        "used": usage.used,
        "free": usage.free,
        "percent": usage.percent
    }
