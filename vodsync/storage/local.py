import json
import os
import shutil
from pathlib import Path

from .base import BaseVideoStore, StorageError
from .responses import CODE_NOT_FOUND, CODE_OK, build_payload

METADATA_SUFFIX = ".meta.json"


class LocalVideoStore(BaseVideoStore):
    """
    A video store on the local filesystem (development and tests).

    Layout: {root}/{bucket}/{title}/{episode_label}. A transcoder (or a test)
    can drop a "{episode_label}.meta.json" sidecar next to the object holding
    "video_cover" and "video_play_url", which file_stat reports as-is.
    """

    def __init__(self, root: str, bucket_name: str = "videos", chunk_size: int = 1024 * 1024):
        super().__init__(bucket_name)
        self.root = Path(root) / bucket_name
        self.chunk_size = chunk_size
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Error creating local storage directory: {e}") from e

    @classmethod
    def from_config(cls, config) -> "LocalVideoStore":
        return cls(
            root=config.local_storage_root,
            bucket_name=config.bucket_name or "videos",
            chunk_size=config.upload_chunk_size,
        )

    def _path(self, key: str) -> Path:
        return self.root / key

    def _metadata_path(self, title: str, episode_label: str) -> Path:
        return self._path(self._object_key(title, episode_label + METADATA_SUFFIX))

    def folder_stat(self, title: str) -> str:
        if not self._path(self._folder_key(title)).is_dir():
            return build_payload(CODE_NOT_FOUND, "folder does not exist")
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def create_folder(self, title: str) -> str:
        try:
            self._path(self._folder_key(title)).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Error creating folder for {title}: {e}") from e
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def file_stat(self, title: str, episode_label: str) -> str:
        path = self._path(self._object_key(title, episode_label))
        if not path.is_file():
            return build_payload(CODE_NOT_FOUND, "file does not exist")

        data = {
            "filelen": path.stat().st_size,
            "access_url": path.resolve().as_uri(),
        }
        metadata_path = self._metadata_path(title, episode_label)
        if metadata_path.is_file():
            try:
                metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Unreadable metadata {metadata_path}: {e}") from e
            data["video_cover"] = metadata.get("video_cover")
            data["video_play_url"] = metadata.get("video_play_url") or {}
        return build_payload(CODE_OK, "SUCCESS", data)

    def upload_file(self, title: str, episode_label: str, local_path: str) -> str:
        target = self._path(self._object_key(title, episode_label))
        partial = target.with_name(target.name + ".part")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(local_path, "rb") as src, open(partial, "wb") as dst:
                shutil.copyfileobj(src, dst, self.chunk_size)
            os.replace(partial, target)
        except OSError as e:
            if partial.exists():
                partial.unlink()
            raise StorageError(f"Error uploading {local_path}: {e}") from e
        return build_payload(
            CODE_OK, "SUCCESS", {"access_url": target.resolve().as_uri()}
        )

    def delete_file(self, title: str, episode_label: str) -> str:
        path = self._path(self._object_key(title, episode_label))
        if not path.is_file():
            return build_payload(CODE_NOT_FOUND, "file does not exist")
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Error deleting {path}: {e}") from e
        return build_payload(CODE_OK, "SUCCESS")
