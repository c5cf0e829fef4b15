# patchspace/core/change_applier.py
from typing import Iterable, List
from loguru import logger

from .models import ApplyResult, FileRecord, ProposedChange
from .path_index import PathIndex
from .path_resolver import resolve_with_report

def apply_change(change: ProposedChange, index: PathIndex) -> ApplyResult:
    """
    Writes one proposed change into the index.

    An existing record at the resolved path is overwritten in place; otherwise a
    new text record is created. Either way the record ends up flagged modified.
    ``created`` tells the caller the key set grew and the tree needs rebuilding.
    """
    resolution = resolve_with_report(change.filename, index, is_new=change.is_new)
    path = resolution.path

    record = index.get(path)
    if record is not None:
        record.content = change.content
        record.modified = True
        if record.binary:
            # Replaced by text, so it is editable from now on
            record.binary = False
            record.mime_type = "text/plain"
        logger.info(f"Updated '{path}' from change for '{change.filename}'.")
        return ApplyResult(path=path, created=False, resolution=resolution)

    index.set(path, FileRecord(path=path, content=change.content, mime_type="text/plain", modified=True, binary=False))
    logger.info(f"Created '{path}' from change for '{change.filename}'.")
    return ApplyResult(path=path, created=True, resolution=resolution)

def apply_changes(changes: Iterable[ProposedChange], index: PathIndex) -> List[ApplyResult]:
    """Applies changes strictly in the given order; later changes to the same path win."""
    results = [apply_change(change, index) for change in changes]
    created = sum(1 for r in results if r.created)
    logger.info(f"Applied {len(results)} change(s): {created} created, {len(results) - created} updated.")
    return results
