"""Social announcements for newly available episodes."""

from .base import BaseSocialClient, ShareError
from .weibo import WeiboClient
from .publisher import (
    SharePublisher,
    build_share_link,
    build_share_text,
    format_episode_number,
)

__all__ = [
    "BaseSocialClient",
    "ShareError",
    "WeiboClient",
    "SharePublisher",
    "build_share_link",
    "build_share_text",
    "format_episode_number",
]
