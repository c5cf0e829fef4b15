# patchspace/core/path_resolver.py
from typing import List
from loguru import logger

from .models import Resolution
from .path_index import PathIndex

# Fallback name for a filename that is nothing but separators ("./", "/")
UNTITLED = "untitled"

def normalize_path(path: str) -> str:
    """Forward slashes, no leading './', no leading or trailing separators."""
    normalized = path.strip().replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip("/")

def _suffix_matches(filename: str, paths: List[str]) -> List[str]:
    suffixes = {"/" + filename, "\\" + filename}
    normalized = normalize_path(filename)
    if normalized:
        suffixes.add("/" + normalized)
    return [path for path in paths if any(path.endswith(suffix) for suffix in suffixes)]

def _root_component(paths: List[str]) -> str:
    """First directory component found among the existing paths, or '' for a flat project.

    Keys without a separator are skipped, so a top-level file never becomes a folder.
    """
    for path in paths:
        if "/" in path:
            return path.split("/", 1)[0]
    return ""

def resolve_with_report(filename: str, index: PathIndex, is_new: bool = False) -> Resolution:
    """
    Maps a filename taken from an AI response onto a concrete project path.

    Resolution order, first match wins:
      1. exact   - an existing path equal to filename
      2. suffix  - an existing path ending in '/filename' (or '\\filename')
      3. basename- an existing record whose name equals filename
      4. new_in_root - for new files, filename placed under the project's root folder,
                       the first component of the first existing path that has a
                       directory part (top-level files are skipped); a flat project
                       keeps filename as is
      5. verbatim- filename itself, normalized to forward slashes

    Ties within a strategy go to the first path in index enumeration order. All
    tied paths are reported in ``candidates`` so callers can flag the ambiguity.
    """
    paths = index.paths()

    if index.has(filename):
        return Resolution(path=filename, strategy="exact", candidates=[filename])

    candidates = _suffix_matches(filename, paths)
    if candidates:
        resolution = Resolution(path=candidates[0], strategy="suffix", candidates=candidates)
    else:
        candidates = [path for path, record in index.entries() if record.name == filename]
        if candidates:
            resolution = Resolution(path=candidates[0], strategy="basename", candidates=candidates)
        elif is_new:
            root = _root_component(paths)
            target = normalize_path(filename) or UNTITLED
            resolution = Resolution(path=f"{root}/{target}" if root else target, strategy="new_in_root")
        else:
            resolution = Resolution(path=normalize_path(filename) or UNTITLED, strategy="verbatim")

    if resolution.is_ambiguous:
        logger.warning(f"Ambiguous filename '{filename}' matches {len(resolution.candidates)} paths; using '{resolution.path}'.")
    logger.debug(f"Resolved '{filename}' -> '{resolution.path}' ({resolution.strategy}).")
    return resolution

def resolve_path(filename: str, index: PathIndex, is_new: bool = False) -> str:
    """Concrete path a change for filename should be written to. Never fails."""
    return resolve_with_report(filename, index, is_new).path
