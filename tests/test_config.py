"""Tests for configuration loading and validation."""

from __future__ import annotations

import pytest

from vodsync.config import ConfigError, SyncConfig

ENV_KEYS = [
    "DOWNLOAD_FOLDER",
    "REGEX_PATTERN",
    "DATABASE_URL",
    "STORAGE_BACKEND",
    "BUCKET_NAME",
    "BUCKET_ENDPOINT",
    "BUCKET_KEY_ID",
    "BUCKET_ACCESS_KEY",
    "UPLOAD_CHUNK_SIZE",
    "SHARE_TO_WEIBO",
    "WEIBO_ACCESS_TOKEN",
    "EN_SITE",
    "ZH_SITE",
    "RU_SITE",
    "SYNC_INTERVAL_SECONDS",
    "RETRY_BASE_DELAY",
    "RETRY_MAX_DELAY",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset every setting (restored after the test, even if .env set it)."""
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def write_env(tmp_path, **values) -> str:
    path = tmp_path / "test.env"
    path.write_text("".join(f"{k}={v}\n" for k, v in values.items()))
    return str(path)


class TestFromEnv:
    def test_reads_local_settings(self, clean_env, tmp_path) -> None:
        clean_env.setenv("DOWNLOAD_FOLDER", "/srv/downloads")
        clean_env.setenv("REGEX_PATTERN", r"^(.+) - (\d+)\.mp4$")
        clean_env.setenv("STORAGE_BACKEND", "LOCAL")
        clean_env.setenv("SYNC_INTERVAL_SECONDS", "30")
        clean_env.setenv("SHARE_TO_WEIBO", "false")
        clean_env.setenv("EN_SITE", "https://ja.example")

        config = SyncConfig.from_env(env_file=write_env(tmp_path))

        assert config.download_folder == "/srv/downloads"
        assert config.storage_backend == "local"
        assert config.interval_seconds == 30.0
        assert config.share_to_weibo is False
        assert config.lookup_sites == ("https://ja.example", None, None)
        assert config.upload_chunk_size == 1024 * 1024

    def test_reads_env_file(self, clean_env, tmp_path) -> None:
        env_file = write_env(
            tmp_path,
            DOWNLOAD_FOLDER="/data",
            REGEX_PATTERN="(.+)_(.+)",
            STORAGE_BACKEND="local",
            UPLOAD_CHUNK_SIZE="2048",
        )
        config = SyncConfig.from_env(env_file=env_file)
        assert config.download_folder == "/data"
        assert config.upload_chunk_size == 2048

    def test_backend_override(self, clean_env, tmp_path) -> None:
        env_file = write_env(
            tmp_path, DOWNLOAD_FOLDER="/data", REGEX_PATTERN="(.+)_(.+)", STORAGE_BACKEND="cloud"
        )
        config = SyncConfig.from_env(env_file=env_file, backend="local")
        assert config.storage_backend == "local"

    def test_cloud_requires_credentials(self, clean_env, tmp_path) -> None:
        env_file = write_env(tmp_path, DOWNLOAD_FOLDER="/data", REGEX_PATTERN="(.+)_(.+)")
        with pytest.raises(ConfigError, match="BUCKET_NAME"):
            SyncConfig.from_env(env_file=env_file)

    def test_bad_number(self, clean_env, tmp_path) -> None:
        env_file = write_env(
            tmp_path,
            DOWNLOAD_FOLDER="/data",
            REGEX_PATTERN="(.+)_(.+)",
            STORAGE_BACKEND="local",
            RETRY_MAX_DELAY="soon",
        )
        with pytest.raises(ConfigError, match="RETRY_MAX_DELAY"):
            SyncConfig.from_env(env_file=env_file)

    def test_database_only_mode(self, clean_env, tmp_path) -> None:
        env_file = write_env(tmp_path, DATABASE_URL=f"sqlite:///{tmp_path / 'only.db'}")

        with pytest.raises(ConfigError, match="DOWNLOAD_FOLDER"):
            SyncConfig.from_env(env_file=env_file)

        config = SyncConfig.from_env(env_file=env_file, worker=False)
        assert config.database_url.endswith("only.db")

    def test_database_only_mode_needs_a_url(self, clean_env, tmp_path) -> None:
        clean_env.setenv("DATABASE_URL", "")
        with pytest.raises(ConfigError, match="DATABASE_URL"):
            SyncConfig.from_env(env_file=write_env(tmp_path), worker=False)


class TestValidate:
    def test_valid_local(self, config) -> None:
        config.validate()

    @pytest.mark.parametrize(
        "changes, message",
        [
            ({"download_folder": ""}, "DOWNLOAD_FOLDER"),
            ({"regex_pattern": ""}, "REGEX_PATTERN"),
            ({"storage_backend": "ftp"}, "STORAGE_BACKEND"),
            ({"share_to_weibo": True}, "WEIBO_ACCESS_TOKEN"),
            ({"interval_seconds": -1}, "SYNC_INTERVAL_SECONDS"),
            ({"retry_base_delay": -0.5}, "Retry delays"),
        ],
    )
    def test_rejects(self, config, changes, message) -> None:
        for name, value in changes.items():
            setattr(config, name, value)
        with pytest.raises(ConfigError, match=message):
            config.validate()
