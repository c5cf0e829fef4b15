# patchspace/core/models.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict

BINARY_PLACEHOLDER = "[Binary file]"
PLAINTEXT = "plaintext"

@dataclass
class FileRecord:
    """One tracked project file, keyed by its project-relative path."""
    path: str # Forward-slash separated, relative to the project root
    content: str = ""
    mime_type: str = "text/plain" # Informational only
    modified: bool = False
    binary: bool = False

    @property
    def name(self) -> str:
        """Display name: final path segment."""
        return self.path.rsplit("/", 1)[-1]

@dataclass
class TreeNode:
    """Represents a file or directory in the derived project tree."""
    name: str
    path: str
    is_dir: bool
    children: Optional[Dict[str, 'TreeNode']] = None # None for files

    def __post_init__(self):
        if self.is_dir and self.children is None:
            self.children = {}

@dataclass
class ProposedChange:
    """A file create/overwrite instruction extracted from an AI response."""
    filename: str # As written by the AI, may be a bare name or a partial path
    content: str
    language: str = PLAINTEXT
    is_new: bool = False # Advisory, resolution does not rely on it alone

@dataclass
class Resolution:
    """Outcome of mapping a ProposedChange filename onto a concrete path."""
    path: str
    strategy: str # exact, suffix, basename, new_in_root, verbatim
    candidates: List[str] = field(default_factory=list) # Every path the winning strategy matched

    @property
    def is_ambiguous(self) -> bool:
        return len(self.candidates) > 1

@dataclass
class ApplyResult:
    """What applying one ProposedChange did to the index."""
    path: str
    created: bool
    resolution: Optional[Resolution] = None

@dataclass
class IngestEntry:
    """A file handed over by an ingestion source (folder scan, drop, upload)."""
    path: str
    content: Optional[str] # None means the file could not be read
    binary: bool = False
    mime_type: str = "text/plain"
