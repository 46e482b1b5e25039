"""
Discover downloaded episodes in the local download folder.

Each scheduler cycle rescans the folder from scratch; nothing is cached
between cycles, so files that appear or disappear are picked up naturally.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from vodsync.logger import setup_logging

logger = setup_logging(logger_name="file_matcher")

VIDEO_EXTENSION = ".mp4"


@dataclass(frozen=True)
class LocalFileCandidate:
    """A local video whose name yielded a (title, episode label) pair."""

    path: Path
    title: str
    episode_label: str

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def __str__(self) -> str:
        return f"{self.title} {self.episode_label}"


def compile_pattern(pattern: Union[str, "re.Pattern[str]"]) -> "re.Pattern[str]":
    """
    Compile the file-name pattern and check it captures title and episode.

    Raises:
        ValueError: If the pattern is invalid or has fewer than two groups.
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid file name pattern {pattern!r}: {e}") from e
    if compiled.groups < 2:
        raise ValueError(
            f"File name pattern {compiled.pattern!r} needs two capture groups "
            "(title, episode label)"
        )
    return compiled


def match_file_name(
    file_name: str, pattern: "re.Pattern[str]"
) -> Optional[tuple[str, str]]:
    """Return the trimmed (title, episode label) for a file name, or None."""
    match = pattern.search(file_name)
    if not match:
        return None
    title = (match.group(1) or "").strip()
    episode_label = (match.group(2) or "").strip()
    if not title or not episode_label:
        return None
    return title, episode_label


def parse_episode_number(episode_label: str) -> Optional[float]:
    """Numeric value of an episode label ("02" -> 2.0), None if not numeric."""
    try:
        return float(episode_label)
    except ValueError:
        return None


def discover_candidates(
    directory: Union[str, Path], pattern: Union[str, "re.Pattern[str]"]
) -> Iterator[LocalFileCandidate]:
    """
    Yield every .mp4 file in `directory` whose name matches `pattern`.

    Non-matching files are skipped silently: the download folder is expected
    to hold unrelated files too.

    Args:
        directory: Folder to scan (not recursive).
        pattern: Regular expression with two groups: title and episode label.

    Yields:
        LocalFileCandidate, in file name order.
    """
    compiled = compile_pattern(pattern)
    folder = Path(directory)
    if not folder.is_dir():
        logger.warning(f"Download folder {folder} does not exist")
        return

    for path in sorted(folder.iterdir()):
        if not path.is_file() or path.suffix != VIDEO_EXTENSION:
            continue
        matched = match_file_name(path.name, compiled)
        if matched is None:
            logger.debug(f"Skipping {path.name}: name does not match pattern")
            continue
        title, episode_label = matched
        yield LocalFileCandidate(path=path, title=title, episode_label=episode_label)
