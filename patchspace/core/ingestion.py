# patchspace/core/ingestion.py
import asyncio
import fnmatch
import os
from pathlib import Path
from typing import Callable, Iterable, List, Optional
from loguru import logger

from .languages import guess_mime_type, is_text_file
from .models import BINARY_PLACEHOLDER, FileRecord, IngestEntry
from .path_index import PathIndex

# --- Core Logic (Pure Python) ---

def is_ignored(path: str, ignore_patterns: Iterable[str]) -> bool:
    """True if any segment of path matches any ignore pattern (case-insensitive glob)."""
    patterns = [p.lower() for p in ignore_patterns]
    for segment in path.replace("\\", "/").split("/"):
        if not segment:
            continue
        segment = segment.lower()
        for pattern in patterns:
            if fnmatch.fnmatchcase(segment, pattern):
                logger.trace(f"Ignoring '{path}' due to pattern '{pattern}'")
                return True
    return False

def ingest_entries(entries: Iterable[IngestEntry], ignore_patterns: Iterable[str], index: Optional[PathIndex] = None) -> PathIndex:
    """
    Populates a PathIndex from ingestion entries.

    Ignored paths and unreadable entries (content None) are skipped. Binary
    entries are stored with a placeholder content and the binary flag set.
    """
    index = index if index is not None else PathIndex()
    patterns = list(ignore_patterns)
    skipped_ignored = skipped_unreadable = 0

    for entry in entries:
        path = entry.path.replace("\\", "/").strip("/")
        if not path or is_ignored(path, patterns):
            skipped_ignored += 1
            continue
        if entry.binary:
            record = FileRecord(path=path, content=BINARY_PLACEHOLDER, mime_type=entry.mime_type, binary=True)
        elif entry.content is None:
            logger.debug(f"Skipping unreadable file: {path}")
            skipped_unreadable += 1
            continue
        else:
            record = FileRecord(path=path, content=entry.content, mime_type=entry.mime_type)
        index.set(path, record)

    logger.info(f"Ingested {len(index)} files ({skipped_ignored} ignored, {skipped_unreadable} unreadable).")
    return index

def _read_entry(file_path: Path, relative_path: str) -> IngestEntry:
    """Reads one file. Failures produce an unreadable entry instead of raising."""
    mime_type = guess_mime_type(file_path.name)
    if not is_text_file(file_path.name):
        return IngestEntry(path=relative_path, content=None, binary=True, mime_type=mime_type)
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {file_path}: {e}")
        return IngestEntry(path=relative_path, content=None, mime_type=mime_type)
    return IngestEntry(path=relative_path, content=content, mime_type=mime_type)

def _walk_files(root: Path, ignore_patterns: List[str]) -> List[Path]:
    files: List[Path] = []
    for dir_path, dir_names, file_names in os.walk(root):
        current = Path(dir_path)
        # Prune ignored directories so their contents are never visited
        dir_names[:] = sorted(d for d in dir_names if not is_ignored(d, ignore_patterns) and not (current / d).is_symlink())
        for file_name in sorted(file_names):
            file_path = current / file_name
            if file_path.is_symlink():
                logger.trace(f"Ignoring symlink: {file_path}")
                continue
            files.append(file_path)
    return files

async def read_directory(root: Path, ignore_patterns: Iterable[str], progress_callback: Optional[Callable[[str], None]] = None) -> List[IngestEntry]:
    """
    Reads every non-ignored file under root concurrently.

    Paths are made relative to root's parent, so the folder name is the first
    path component. The result is the join of all individual reads; a failed
    read yields an unreadable entry and never aborts the batch.
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise ValueError(f"Provided path is not a valid directory: {root}")
    patterns = list(ignore_patterns)

    files = await asyncio.to_thread(_walk_files, root, patterns)
    logger.info(f"Reading {len(files)} files under {root}")
    if progress_callback:
        progress_callback(f"Reading {len(files)} files...")

    reads = [asyncio.to_thread(_read_entry, path, path.relative_to(root.parent).as_posix()) for path in files]
    entries = await asyncio.gather(*reads)
    return list(entries)

async def load_directory(root: Path, ignore_patterns: Iterable[str], progress_callback: Optional[Callable[[str], None]] = None) -> PathIndex:
    """Reads a folder and builds its PathIndex once every read has settled."""
    patterns = list(ignore_patterns)
    entries = await read_directory(root, patterns, progress_callback)
    return ingest_entries(entries, patterns)

# --- Qt Adapter Task ---

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from ..services.async_utils import run_in_background

class IngestionSignals(QObject):
    finished = Signal(object); error = Signal(str); progress = Signal(str)

class IngestionTask(QRunnable):
    """QRunnable adapter reading a folder in a background thread. Emits the list of IngestEntry on success."""
    def __init__(self, root_path: Path, ignore_patterns: List[str]):
        super().__init__(); self.root_path = Path(root_path); self.ignore_patterns = list(ignore_patterns)
        self.signals = IngestionSignals()
        self.setAutoDelete(True)
    @Slot()
    def run(self) -> None:
        try:
            entries = asyncio.run(read_directory(self.root_path, self.ignore_patterns, self.signals.progress.emit))
            self.signals.finished.emit(entries)
        except ValueError as ve: logger.error(f"Ingestion error for {self.root_path}: {ve}"); self.signals.error.emit(str(ve))
        except Exception as e: logger.exception(f"Unexpected error during ingestion of {self.root_path}: {e}"); self.signals.error.emit(f"Unexpected Ingestion Error: {e}")

def start_ingestion(root_path: Path, ignore_patterns: List[str],
                    on_finished: Callable[[List[IngestEntry]], None],
                    on_error: Optional[Callable[[str], None]] = None) -> IngestionTask:
    """Submits an IngestionTask to the global thread pool and wires its callbacks."""
    task = IngestionTask(root_path, ignore_patterns)
    task.signals.finished.connect(on_finished)
    if on_error:
        task.signals.error.connect(on_error)
    run_in_background(task)
    return task
