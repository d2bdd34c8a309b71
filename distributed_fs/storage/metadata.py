"""
In-memory metadata index: which nodes hold which file.

Nothing here is persisted. Node ids are stored as given; validating
them is up to the caller.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class FileRecord:
    """Replica placement of one uploaded file"""
    filename: str
    node_ids: Tuple[int, ...]


class MetadataIndex:
    """
    Mapping filename -> FileRecord.

    Keys are case-sensitive. list_all() returns records in lexicographic
    filename order.
    """

    def __init__(self):
        self._records: Dict[str, FileRecord] = {}

    def set(self, filename: str, node_ids: Iterable[int]) -> FileRecord:
        """Create or overwrite the record for filename"""
        record = FileRecord(filename=filename, node_ids=tuple(node_ids))
        self._records[filename] = record
        return record

    def get(self, filename: str) -> Optional[FileRecord]:
        return self._records.get(filename)

    def remove(self, filename: str) -> Optional[FileRecord]:
        return self._records.pop(filename, None)

    def list_all(self) -> List[FileRecord]:
        return [self._records[name] for name in sorted(self._records)]

    def snapshot(self) -> Dict[str, FileRecord]:
        """Shallow copy of the index; records are immutable"""
        return dict(self._records)

    def __contains__(self, filename: str) -> bool:
        return filename in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __str__(self) -> str:
        return f"MetadataIndex(files={len(self._records)})"
