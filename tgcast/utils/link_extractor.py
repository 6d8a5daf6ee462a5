from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

import structlog
from aiogram.enums import MessageEntityType

from tgcast.publishers.base import MAX_EMBEDS
from tgcast.telegram.models import Entity

logger = structlog.get_logger()

# Literal scan: no trailing punctuation stripping, no markdown unwrapping.
_URL_PATTERN = re.compile(r"https?://\S+")


def extract_link_entities(entities: Iterable[Entity] | None) -> list[str]:
    """Return the target URLs of text_link entities, in entity order."""
    if not entities:
        return []
    return [
        entity.url
        for entity in entities
        if entity.type == MessageEntityType.TEXT_LINK and entity.url
    ]


def extract_text_urls(text: str) -> list[str]:
    """Return every http(s) URL that appears literally in the text."""
    if not text:
        return []
    return [match.group(0) for match in _URL_PATTERN.finditer(text)]


def dedupe_urls(urls: Iterable[str]) -> list[str]:
    """Drop repeated URLs, keeping the first occurrence."""
    results: list[str] = []
    seen_urls: set[str] = set()

    for url in urls:
        if url not in seen_urls:
            seen_urls.add(url)
            results.append(url)

    return results


def prioritize_embeds(
    text: str,
    entities: Sequence[Entity] | None = None,
    media_url: str | None = None,
    limit: int = MAX_EMBEDS,
) -> list[str]:
    """Build the embed list for a cast.

    Order of preference: the resolved media URL, then text_link targets, then
    URLs found in the plain text. Duplicates are removed before the list is
    cut down to ``limit`` entries.
    """
    candidates: list[str] = []
    if media_url:
        candidates.append(media_url)
    candidates.extend(extract_link_entities(entities))
    candidates.extend(extract_text_urls(text))

    unique = dedupe_urls(candidates)
    if len(unique) > limit:
        logger.info("embeds_truncated", kept=unique[:limit], dropped=unique[limit:])
    return unique[:limit]
