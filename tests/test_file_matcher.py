"""Tests for local file discovery."""

from __future__ import annotations

import re

import pytest

from vodsync.ingestion.file_matcher import (
    compile_pattern,
    discover_candidates,
    match_file_name,
    parse_episode_number,
)

from conftest import PATTERN


class TestMatchFileName:
    def test_extracts_title_and_label(self) -> None:
        assert match_file_name("Show.S01E02.mp4", re.compile(PATTERN)) == ("Show", "02")

    def test_strips_whitespace_around_groups(self) -> None:
        pattern = re.compile(r"^\[Sub\](.+)-(.+)\.mp4$")
        assert match_file_name("[Sub] My Show - 12 .mp4", pattern) == ("My Show", "12")

    def test_non_matching_name(self) -> None:
        assert match_file_name("notes.mp4", re.compile(PATTERN)) is None


class TestCompilePattern:
    def test_rejects_pattern_without_two_groups(self) -> None:
        with pytest.raises(ValueError, match="two capture groups"):
            compile_pattern(r"^(.+)\.mp4$")

    def test_rejects_invalid_regex(self) -> None:
        with pytest.raises(ValueError, match="Invalid file name pattern"):
            compile_pattern(r"^(.+")


class TestDiscoverCandidates:
    def test_yields_only_matching_mp4_files(self, download_dir, make_video) -> None:
        make_video("Show.S01E02.mp4")
        make_video("Other Show.S02E10.mp4")
        make_video("Show.S01E03.mkv")
        make_video("random clip.mp4")
        (download_dir / "Show.S01E04.mp4.part").write_bytes(b"x")
        (download_dir / "nested.S01E01.mp4").mkdir()

        candidates = list(discover_candidates(download_dir, PATTERN))

        assert [(c.title, c.episode_label) for c in candidates] == [
            ("Other Show", "10"),
            ("Show", "02"),
        ]
        assert candidates[1].path == download_dir / "Show.S01E02.mp4"

    def test_rescans_every_call(self, download_dir, make_video) -> None:
        make_video("Show.S01E02.mp4")
        assert len(list(discover_candidates(download_dir, PATTERN))) == 1

        (download_dir / "Show.S01E02.mp4").unlink()
        make_video("Show.S01E03.mp4")

        labels = [c.episode_label for c in discover_candidates(download_dir, PATTERN)]
        assert labels == ["03"]

    def test_missing_folder_yields_nothing(self, tmp_path) -> None:
        assert list(discover_candidates(tmp_path / "missing", PATTERN)) == []

    def test_candidate_size_reads_file(self, make_video, download_dir) -> None:
        make_video("Show.S01E02.mp4", size=1200)
        (candidate,) = discover_candidates(download_dir, PATTERN)
        assert candidate.size == 1200


class TestParseEpisodeNumber:
    @pytest.mark.parametrize(
        "label, expected", [("02", 2.0), ("12", 12.0), ("7.5", 7.5), ("SP", None)]
    )
    def test_parse(self, label, expected) -> None:
        assert parse_episode_number(label) == expected
