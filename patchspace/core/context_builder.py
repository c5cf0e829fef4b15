# patchspace/core/context_builder.py
from typing import Dict, List
from loguru import logger

from ..config.schema import AppConfig
from .languages import get_language
from .path_index import PathIndex
from .token_counter import count_tokens

TRUNCATION_MARKER = "\n... [truncated for brevity]"

SYSTEM_PROMPT = """You are an AI coding assistant integrated into a code editor. You have access to ALL files in the user's project.

RULES FOR CODE MODIFICATIONS:
1. When modifying code, you MUST specify which file you are changing.
2. Use this EXACT format for each file change:

### FILE: [exact filename with extension]
```[language]
[complete file content]
```

3. You can modify MULTIPLE files in one response, just repeat the format above.
4. ALWAYS provide the COMPLETE file content, not just snippets.
5. Work out which file(s) need to change from the user's request.
6. When adding a new file, use: ### NEW FILE: [filename]
7. Analyze the full project structure before deciding which files to modify.

Example response format:
I'll add animations to your page. Here are the changes:

### FILE: styles.css
```css
/* complete CSS content with animations */
```

### FILE: App.jsx
```jsx
/* complete JSX content with animation classes */
```

Current context: the user has uploaded a project folder. All of their files are listed below."""

def build_project_context(index: PathIndex, max_file_chars: int) -> str:
    """Renders every text file of the project as a fenced block, truncating long files."""
    parts = ["=== PROJECT FILES ===\n\n"]
    truncated = 0
    for path, record in index.entries():
        if record.binary:
            continue
        content = record.content
        if len(content) > max_file_chars:
            content = content[:max_file_chars] + TRUNCATION_MARKER
            truncated += 1
        parts.append(f"--- {path} ---\n```{get_language(record.name)}\n{content}\n```\n\n")
    if truncated:
        logger.debug(f"Truncated {truncated} file(s) to {max_file_chars} characters for the AI context.")
    return "".join(parts)

def build_messages(index: PathIndex, request: str, config: AppConfig) -> List[Dict[str, str]]:
    """User message carrying the whole project plus the request. The system prompt is passed separately."""
    context = build_project_context(index, config.max_context_file_chars)
    tokens = count_tokens(context)
    logger.info(f"Project context: {len(context)} characters, ~{tokens} tokens.")
    if tokens > config.max_context_tokens:
        logger.warning(f"Project context ({tokens} tokens) exceeds the configured limit of {config.max_context_tokens}; the request may fail.")
    return [{"role": "user", "content": f"{context}\n\nUSER REQUEST: {request}"}]
