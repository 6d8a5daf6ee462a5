from tgcast.publishers.base import BasePublisher, PublishRequest, PublishResult
from tgcast.publishers.neynar import NeynarPublisher

__all__ = [
    "BasePublisher",
    "PublishRequest",
    "PublishResult",
    "NeynarPublisher",
]
