from __future__ import annotations

TRUNCATION_MARKER = "..."
CAST_ENCODING = "utf-8"


def byte_length(text: str) -> int:
    return len(text.encode(CAST_ENCODING))


def fit_text(text: str, max_bytes: int = 1020) -> str:
    """Truncate text so its UTF-8 encoding fits within ``max_bytes``.

    Text that already fits is returned unchanged. Otherwise characters are
    dropped from the end until the prefix plus "..." fits. Works per
    character, so multi-byte sequences are never split.
    """
    if byte_length(text) <= max_bytes:
        return text

    prefix = text[:max_bytes]
    while prefix and byte_length(prefix + TRUNCATION_MARKER) > max_bytes:
        prefix = prefix[:-1]
    return prefix + TRUNCATION_MARKER
