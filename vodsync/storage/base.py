from abc import ABC, abstractmethod


class StorageError(RuntimeError):
    """Transport-level failure talking to a video store (retried by the guard)."""


class BaseVideoStore(ABC):
    """
    Abstract base class for the remote video store.

    Objects are addressed as "/{title}/{episode_label}" inside one bucket,
    grouped in one folder per title. Every method returns the raw JSON text
    payload described in vodsync.storage.responses; a nonzero "code" means
    the folder or object was not found.
    """

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name

    @abstractmethod
    def folder_stat(self, title: str) -> str:
        """
        Look up the folder for a title.

        Args:
            title (str): Canonical title (folder name).

        Returns:
            str: Response payload, nonzero code when the folder is missing.
        """

    @abstractmethod
    def create_folder(self, title: str) -> str:
        """Create the folder for a title. Returns an ack payload."""

    @abstractmethod
    def file_stat(self, title: str, episode_label: str) -> str:
        """
        Look up an uploaded episode.

        Returns:
            str: Response payload carrying filelen, access_url, video_cover
            and video_play_url, or a nonzero code when the object is missing.
        """

    @abstractmethod
    def upload_file(self, title: str, episode_label: str, local_path: str) -> str:
        """Upload a local file in chunks. Returns an ack payload."""

    @abstractmethod
    def delete_file(self, title: str, episode_label: str) -> str:
        """Delete an uploaded episode. Returns an ack payload."""

    @staticmethod
    def _folder_key(title: str) -> str:
        return f"{title}/"

    @staticmethod
    def _object_key(title: str, episode_label: str) -> str:
        return f"{title}/{episode_label}"
