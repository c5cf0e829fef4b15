# patchspace/core/token_counter.py
from functools import lru_cache
from typing import Optional, Any
from loguru import logger

# --- Tiktoken Initialization ---
try:
    import tiktoken
    TIKTOKEN_AVAILABLE = True
except ImportError:
    logger.warning("tiktoken library not found. Context sizes will be estimated.")
    tiktoken = None # type: ignore
    TIKTOKEN_AVAILABLE = False

DEFAULT_ENCODING = "cl100k_base"
FALLBACK_ENCODING = "gpt2"
CHARS_PER_TOKEN = 4 # Rough estimate used when no encoder can be loaded

@lru_cache(maxsize=4)
def _get_cached_encoder(encoding_name: str) -> Optional[Any]:
    """Loads and caches a tiktoken encoder, trying the fallback encoding once."""
    if not TIKTOKEN_AVAILABLE:
        return None
    try:
        return tiktoken.get_encoding(encoding_name) # type: ignore
    except Exception as e:
        # Encoding files are downloaded on first use and may be unavailable offline
        logger.warning(f"Failed to get tiktoken encoder '{encoding_name}': {e}")
        if encoding_name == FALLBACK_ENCODING:
            return None
        return _get_cached_encoder(FALLBACK_ENCODING)

def estimate_tokens(text: str) -> int:
    return len(text) // CHARS_PER_TOKEN

def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """
    Counts tokens in text with tiktoken.
    Falls back to a character-based estimate if tiktoken is unavailable or fails.
    """
    if not text:
        return 0

    encoder = _get_cached_encoder(encoding_name)
    if encoder is None:
        return estimate_tokens(text)
    try:
        return len(encoder.encode(text, disallowed_special=()))
    except Exception as e:
        logger.error(f"Error encoding text for token count with '{encoding_name}': {e}")
        return estimate_tokens(text)
