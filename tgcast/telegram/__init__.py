from tgcast.telegram.ingress import is_channel_post, parse_update
from tgcast.telegram.media import resolve_file_url, select_media
from tgcast.telegram.models import Entity, InboundPost, MediaKind, MediaRef

__all__ = [
    "Entity",
    "InboundPost",
    "MediaKind",
    "MediaRef",
    "is_channel_post",
    "parse_update",
    "resolve_file_url",
    "select_media",
]
