# patchspace/core/change_parser.py
import re
from typing import List
from loguru import logger

from .models import ProposedChange, PLAINTEXT
from .path_resolver import normalize_path

# Grammar of one change block:
#
#   ### FILE: <filename>          or   ### NEW FILE: <filename>   (three or more #)
#   ```<language>?
#   <content>
#   ```
#
# Blank lines may separate the marker from the opening fence. The closing fence
# must sit on its own line. A body never spans another marker line, so an
# unterminated block is dropped instead of swallowing the block after it.
_MARKER = r"^[ \t]*\#{3,}[ \t]*(?:NEW[ \t]+)?FILE:"

_CHANGE_BLOCK = re.compile(
    r"""
    ^[ \t]*\#{3,}[ \t]*(?P<new>NEW[ \t]+)?FILE:[ \t]*(?P<filename>[^\r\n]*?)[ \t]*\r?\n
    (?:[ \t]*\r?\n)*
    [ \t]*```[ \t]*(?P<language>[^\s`]+)?[^\r\n]*\r?\n
    (?P<body>(?:(?!""" + _MARKER + r""").)*?)
    ^[ \t]*```[ \t]*\r?$
    """,
    re.IGNORECASE | re.MULTILINE | re.DOTALL | re.VERBOSE,
)

def parse_file_changes(response: str) -> List[ProposedChange]:
    """
    Extracts the file changes an AI response proposes, in document order.

    Malformed blocks (missing or separator-only filename, no closing fence) are skipped silently.
    Several blocks may target the same file; they are all returned so that
    applying them in order lets the last one win.
    """
    changes: List[ProposedChange] = []
    if not response:
        return changes

    for match in _CHANGE_BLOCK.finditer(response):
        filename = match.group("filename").strip()
        if not normalize_path(filename):
            logger.debug(f"Skipping change block without a usable filename at offset {match.start()}.")
            continue
        changes.append(ProposedChange(
            filename=filename,
            language=match.group("language") or PLAINTEXT,
            content=match.group("body").strip(),
            is_new=match.group("new") is not None,
        ))

    logger.debug(f"Parsed {len(changes)} file change(s) from a {len(response)} character response.")
    return changes
