"""Tests for the command line entry point."""

from __future__ import annotations

import pytest

from vodsync.__main__ import main, parse_arguments
from vodsync.db import Database, QualityCheckItem, enqueue


@pytest.fixture
def local_env(monkeypatch, tmp_path, download_dir):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DOWNLOAD_FOLDER", str(download_dir))
    monkeypatch.setenv("REGEX_PATTERN", r"^(.+)\.S\d+E(\d+)\.mp4$")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("LOCAL_STORAGE_ROOT", str(tmp_path / "storage"))
    monkeypatch.setenv("SHARE_TO_WEIBO", "false")
    monkeypatch.setenv("RETRY_BASE_DELAY", "0")
    monkeypatch.setenv("RETRY_MAX_DELAY", "0")
    monkeypatch.delenv("BUCKET_NAME", raising=False)
    monkeypatch.setattr("vodsync.__main__.install_signal_handlers", lambda event: None)
    return tmp_path


class TestParseArguments:
    def test_modes_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse_arguments(["--once", "--status"])

    def test_storage_flags_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            parse_arguments(["--local", "--cloud"])


class TestMain:
    def test_config_error_exit_code(self, monkeypatch, tmp_path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("vodsync.__main__.install_signal_handlers", lambda event: None)
        monkeypatch.setenv("DOWNLOAD_FOLDER", "")
        monkeypatch.setenv("REGEX_PATTERN", "")
        assert main(["--once"]) == 2

    def test_init_db_then_status(self, local_env, capsys) -> None:
        assert main(["--init-db"]) == 0

        db = Database(f"sqlite:///{local_env / 'cli.db'}")
        with db.session() as session:
            enqueue(session, QualityCheckItem, "c1", "Show", "02")
            session.commit()

        assert main(["--status"]) == 0
        output = capsys.readouterr().out
        assert "quality_check (1)" in output
        assert "Show" in output

    def test_once_uploads_to_local_store(self, local_env, make_video) -> None:
        make_video("Show.S01E02.mp4")
        assert main(["--init-db"]) == 0

        assert main(["--once", "--local"]) == 0

        assert (local_env / "storage" / "videos" / "Show" / "02").is_file()

    def test_database_commands_need_only_database_url(
        self, monkeypatch, tmp_path, capsys
    ) -> None:
        monkeypatch.chdir(tmp_path)
        for key in ("DOWNLOAD_FOLDER", "REGEX_PATTERN", "BUCKET_NAME", "BUCKET_ENDPOINT"):
            monkeypatch.setenv(key, "")
        monkeypatch.setenv("STORAGE_BACKEND", "cloud")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'bare.db'}")

        assert main(["--init-db"]) == 0
        assert main(["--status"]) == 0
        assert "share (0)" in capsys.readouterr().out
        assert main(["--once"]) == 2
