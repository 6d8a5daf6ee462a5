from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

MAX_EMBEDS = 2


@dataclass(frozen=True)
class PublishRequest:
    """Text and embed URLs for a single cast."""

    text: str
    embeds: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.embeds) > MAX_EMBEDS:
            raise ValueError(f"A cast takes at most {MAX_EMBEDS} embeds, got {len(self.embeds)}")
        if len(set(self.embeds)) != len(self.embeds):
            raise ValueError("Embed URLs must be distinct")


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a publish attempt.

    ``data`` is the upstream JSON body, or a synthesized ``{"error": ...}``
    object when no usable body came back.
    """

    ok: bool
    data: dict[str, Any] = field(default_factory=dict)


class BasePublisher(ABC):
    """Something that turns a PublishRequest into a post on a social network."""

    @abstractmethod
    async def publish(self, request: PublishRequest) -> PublishResult:
        """Submit the post. Implementations report failures, they do not raise."""
        ...
