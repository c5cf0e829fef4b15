# patchspace/config/schema.py
from pydantic import BaseModel, Field
from typing import List

class AppConfig(BaseModel):
    # Glob patterns matched case-insensitively against every path segment
    ignore_patterns: List[str] = Field(default_factory=lambda: [
        # Hidden files and folders (covers .git, .DS_Store, .env, ...)
        ".*",
        # Version control
        ".git",
        # Dependency caches
        "node_modules",
        # Python bytecode
        "__pycache__", "*.pyc",
        # OS metadata
        ".DS_Store", "Thumbs.db",
    ])
    max_context_file_chars: int = Field(default=5000, gt=0) # Longer files are truncated in the AI context
    max_context_tokens: int = Field(default=150_000, gt=0) # Warn above this many context tokens
    model: str = "claude-opus-4-5"
    max_response_tokens: int = Field(default=8192, gt=0)
    request_timeout: float = Field(default=300.0, gt=0) # Seconds
