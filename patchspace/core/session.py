# patchspace/core/session.py
from typing import Iterable, List, Optional, Tuple
from loguru import logger

from .change_applier import apply_change
from .errors import BinaryFileError, UnknownPathError
from .ingestion import ingest_entries
from .languages import get_language
from .models import ApplyResult, FileRecord, IngestEntry, ProposedChange, TreeNode
from .path_index import PathIndex
from .tree_builder import build_tree

class WorkspaceSession:
    """
    State of one loaded project: the path index, the derived tree, open tabs and
    the active file. Owned by the caller and passed to whoever needs it.
    """

    def __init__(self, ignore_patterns: Optional[Iterable[str]] = None):
        self.ignore_patterns: List[str] = list(ignore_patterns or [])
        self.index = PathIndex()
        self.tree: Optional[TreeNode] = None # None until the first build
        self.active_path: Optional[str] = None
        self.open_tabs: List[str] = []

    # --- Project loading ---

    def load_project(self, entries: Iterable[IngestEntry]) -> PathIndex:
        """Replaces the whole project with the given entries. No merging with the previous one."""
        self.index.clear()
        self.open_tabs = []
        self.active_path = None
        ingest_entries(entries, self.ignore_patterns, self.index)
        self.rebuild_tree()
        return self.index

    def rebuild_tree(self) -> TreeNode:
        self.tree = build_tree(self.index.paths())
        return self.tree

    def file_count_label(self) -> str:
        count = len(self.index)
        return f"{count} file{'' if count == 1 else 's'} loaded"

    # --- Editor collaboration ---

    def open_file(self, path: str) -> FileRecord:
        """Makes path the active file, adding a tab once. Binary records are refused untouched."""
        record = self.index.get(path)
        if record is None:
            raise UnknownPathError(path)
        if record.binary:
            raise BinaryFileError(path)
        if path not in self.open_tabs:
            self.open_tabs.append(path)
        self.active_path = path
        logger.debug(f"Opened '{path}' ({len(self.open_tabs)} tab(s) open).")
        return record

    def close_tab(self, path: str) -> Optional[str]:
        """Closes a tab. Returns the new active path, which moves to a neighbour if the active tab closed."""
        if path not in self.open_tabs:
            return self.active_path
        position = self.open_tabs.index(path)
        self.open_tabs.remove(path)
        if self.active_path == path:
            if self.open_tabs:
                self.active_path = self.open_tabs[min(position, len(self.open_tabs) - 1)]
            else:
                self.active_path = None
        return self.active_path

    def active_record(self) -> Optional[FileRecord]:
        return self.index.get(self.active_path) if self.active_path else None

    def editor_state(self) -> Optional[Tuple[str, str]]:
        """(content, language) for the active file, or None when nothing is open."""
        record = self.active_record()
        if record is None:
            return None
        return record.content, get_language(record.name)

    def update_content(self, content: str) -> None:
        """Stores an edit of the active file made in the editor."""
        record = self.active_record()
        if record is None:
            raise UnknownPathError(self.active_path or "")
        if record.content != content:
            record.content = content
            record.modified = True

    # --- Applying AI changes ---

    def apply_change(self, change: ProposedChange) -> ApplyResult:
        result = apply_change(change, self.index)
        if result.created or self.tree is None:
            self.rebuild_tree()
        self.open_file(result.path)
        return result

    def apply_changes(self, changes: Iterable[ProposedChange]) -> List[ApplyResult]:
        """Applies changes in order, each one complete before the next starts."""
        return [self.apply_change(change) for change in changes]
