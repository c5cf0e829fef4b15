# patchspace/core/languages.py
import mimetypes

from .models import PLAINTEXT

# Extension -> editor language identifier
LANGUAGE_MAP = {
    "js": "javascript", "jsx": "javascript",
    "ts": "typescript", "tsx": "typescript",
    "html": "html", "htm": "html",
    "css": "css", "scss": "scss", "less": "less",
    "json": "json",
    "md": "markdown",
    "py": "python",
    "rb": "ruby",
    "php": "php",
    "java": "java",
    "c": "c", "cpp": "cpp", "h": "cpp",
    "cs": "csharp",
    "go": "go",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "sql": "sql",
    "sh": "shell", "bash": "shell",
    "yaml": "yaml", "yml": "yaml",
    "xml": "xml", "svg": "xml",
}

TEXT_EXTENSIONS = frozenset(LANGUAGE_MAP) | {
    "txt", "env", "gitignore", "dockerignore", "editorconfig",
    "prettierrc", "eslintrc", "babelrc", "vue", "svelte",
}

def _extension(filename: str) -> str:
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""

def get_language(filename: str) -> str:
    """Language identifier for a filename, 'plaintext' for anything unknown."""
    return LANGUAGE_MAP.get(_extension(filename), PLAINTEXT)

def is_text_file(filename: str) -> bool:
    """Known text extension, or no extension at all (Makefile, LICENSE)."""
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    return "." not in name or _extension(name) in TEXT_EXTENSIONS

def guess_mime_type(filename: str) -> str:
    mime_type, _ = mimetypes.guess_type(filename, strict=False)
    return mime_type or "text/plain"
