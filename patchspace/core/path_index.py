# patchspace/core/path_index.py
from typing import Dict, Iterator, List, Optional, Tuple
from loguru import logger

from .models import FileRecord

class PathIndex:
    """Flat mapping of project path -> FileRecord. The single source of truth for what files exist."""

    def __init__(self):
        self._records: Dict[str, FileRecord] = {}

    def get(self, path: str) -> Optional[FileRecord]:
        return self._records.get(path)

    def set(self, path: str, record: FileRecord) -> None:
        """Create or replace the record stored under path."""
        if not path:
            raise ValueError("PathIndex keys must be non-empty")
        self._records[path] = record

    def has(self, path: str) -> bool:
        return path in self._records

    def clear(self) -> None:
        logger.debug(f"Clearing path index ({len(self._records)} records).")
        self._records.clear()

    def entries(self) -> List[Tuple[str, FileRecord]]:
        # Snapshot so callers may mutate the index while iterating the result
        return list(self._records.items())

    def paths(self) -> List[str]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))
