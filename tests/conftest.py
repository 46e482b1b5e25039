"""Shared test fixtures and fakes.

Provides a temporary SQLite database per test, an in-memory video store that
speaks the same JSON payloads as the real backends, and a recording social
client, so pipeline components can be exercised without any network access.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import pytest

# Keep log files out of the working tree (read when vodsync.logger is imported)
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="vodsync-logs-"))

from vodsync.config import SyncConfig  # noqa: E402
from vodsync.db import Database  # noqa: E402
from vodsync.localization import TitleResolver  # noqa: E402
from vodsync.remote import RemoteCallGuard  # noqa: E402
from vodsync.social import BaseSocialClient  # noqa: E402
from vodsync.storage import BaseVideoStore, build_payload  # noqa: E402
from vodsync.storage.responses import CODE_NOT_FOUND, CODE_OK  # noqa: E402

PATTERN = r"^(.+)\.S\d+E(\d+)\.mp4$"


class FakeVideoStore(BaseVideoStore):
    """In-memory video store recording every call it receives."""

    def __init__(self):
        super().__init__("test-bucket")
        self.folders: set[str] = set()
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[tuple] = []
        self.stat_failures = 0

    def put(
        self,
        title: str,
        episode_label: str,
        filelen: int,
        video_cover: Optional[str] = None,
        play_urls: Optional[dict[str, str]] = None,
    ) -> None:
        self.folders.add(title)
        self.objects[(title, episode_label)] = {
            "filelen": filelen,
            "access_url": f"https://cdn.example.com/{title}/{episode_label}",
            "video_cover": video_cover,
            "video_play_url": play_urls or {},
        }

    def calls_named(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]

    def folder_stat(self, title):
        self.calls.append(("folder_stat", title))
        if title not in self.folders:
            return build_payload(CODE_NOT_FOUND, "folder does not exist")
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def create_folder(self, title):
        self.calls.append(("create_folder", title))
        self.folders.add(title)
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def file_stat(self, title, episode_label):
        self.calls.append(("file_stat", title, episode_label))
        if self.stat_failures:
            self.stat_failures -= 1
            raise ConnectionError("upstream unavailable")
        data = self.objects.get((title, episode_label))
        if data is None:
            return build_payload(CODE_NOT_FOUND, "file does not exist")
        return build_payload(CODE_OK, "SUCCESS", data)

    def upload_file(self, title, episode_label, local_path):
        self.calls.append(("upload_file", title, episode_label, local_path))
        self.put(title, episode_label, Path(local_path).stat().st_size)
        return build_payload(
            CODE_OK,
            "SUCCESS",
            {"access_url": self.objects[(title, episode_label)]["access_url"]},
        )

    def delete_file(self, title, episode_label):
        self.calls.append(("delete_file", title, episode_label))
        self.objects.pop((title, episode_label), None)
        return build_payload(CODE_OK, "SUCCESS")


class FakeSocialClient(BaseSocialClient):
    """Records posts instead of sending them."""

    def __init__(self, publish_result: bool = True, fail_with: Optional[Exception] = None):
        self.publish_result = publish_result
        self.fail_with = fail_with
        self.shortened: list[str] = []
        self.fetched: list[str] = []
        self.posts: list[tuple[str, bytes]] = []

    def shorten(self, url):
        if self.fail_with is not None:
            raise self.fail_with
        self.shortened.append(url)
        return "https://t.cn/abc"

    def fetch_image(self, url):
        self.fetched.append(url)
        return b"\x89PNG-thumbnail"

    def publish(self, text, image):
        self.posts.append((text, image))
        return self.publish_result


@pytest.fixture
def db(tmp_path: Path) -> Database:
    """Fresh SQLite database with all tables created."""
    database = Database(f"sqlite:///{tmp_path / 'catalog.db'}")
    assert database.init_database()
    return database


@pytest.fixture
def store() -> FakeVideoStore:
    return FakeVideoStore()


@pytest.fixture
def guard() -> RemoteCallGuard:
    """Guard without delays between retries."""
    return RemoteCallGuard(base_delay=0, max_delay=0)


@pytest.fixture
def resolver() -> TitleResolver:
    """Resolver with no lookup sources configured (never touches the network)."""
    return TitleResolver([None, None, None])


@pytest.fixture
def social_client() -> FakeSocialClient:
    return FakeSocialClient()


@pytest.fixture
def download_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "downloads"
    folder.mkdir()
    return folder


@pytest.fixture
def make_video(download_dir: Path):
    """Create a local video file of a given size in the download folder."""

    def _make(name: str, size: int = 1000) -> Path:
        path = download_dir / name
        path.write_bytes(b"\0" * size)
        return path

    return _make


@pytest.fixture
def config(tmp_path: Path, download_dir: Path) -> SyncConfig:
    return SyncConfig(
        download_folder=str(download_dir),
        regex_pattern=PATTERN,
        database_url=f"sqlite:///{tmp_path / 'catalog.db'}",
        storage_backend="local",
        local_storage_root=str(tmp_path / "storage"),
        interval_seconds=0,
        retry_base_delay=0,
        retry_max_delay=0,
    )
