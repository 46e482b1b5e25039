"""
Storage module for the remote video store.

Provides the abstract store interface, an S3-compatible cloud backend, a
local filesystem backend, and the typed response schema both of them share.
"""

from .base import BaseVideoStore, StorageError
from .cloud import CloudVideoStore
from .local import LocalVideoStore
from .responses import (
    Ack,
    FileStat,
    FolderStat,
    NotFound,
    TierUrls,
    build_payload,
    decode_ack,
    decode_file_response,
    decode_folder_response,
)


def create_video_store(config) -> BaseVideoStore:
    """Build the backend selected by config.storage_backend."""
    if config.storage_backend == "local":
        return LocalVideoStore.from_config(config)
    return CloudVideoStore.from_config(config)


__all__ = [
    "BaseVideoStore",
    "StorageError",
    "CloudVideoStore",
    "LocalVideoStore",
    "create_video_store",
    "Ack",
    "FileStat",
    "FolderStat",
    "NotFound",
    "TierUrls",
    "build_payload",
    "decode_ack",
    "decode_file_response",
    "decode_folder_response",
]
