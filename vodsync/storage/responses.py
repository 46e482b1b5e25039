"""
Typed view of video store responses.

Backends answer with a JSON payload of the form:

    {"code": 0, "message": "SUCCESS", "data": {...}}

where a nonzero code means "not found" (or a rejected write). The payload is
decoded exactly once, at the remote call guard, into the dataclasses below so
that the rest of the pipeline never touches raw dictionaries.

File data shape:

    {
        "filelen": 1048576,
        "access_url": "https://.../Show/02",
        "video_cover": "https://.../Show/02.jpg",
        "video_play_url": {"f0": ..., "f10": ..., "f20": ..., "f30": ...}
    }

f10/f20/f30 are the low/medium/high transcodes, f0 is the original tier.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

CODE_OK = 0
CODE_NOT_FOUND = -197

TIER_KEYS = {
    "low": "f10",
    "medium": "f20",
    "high": "f30",
    "original": "f0",
}


@dataclass(frozen=True)
class NotFound:
    """The folder or object does not exist remotely."""

    code: int
    message: str = ""


@dataclass(frozen=True)
class FolderStat:
    name: str


@dataclass(frozen=True)
class TierUrls:
    low: Optional[str] = None
    medium: Optional[str] = None
    high: Optional[str] = None
    original: Optional[str] = None


@dataclass(frozen=True)
class FileStat:
    filelen: int
    access_url: Optional[str] = None
    video_cover: Optional[str] = None
    play_urls: TierUrls = field(default_factory=TierUrls)


@dataclass(frozen=True)
class Ack:
    """Result of a write (create folder, upload, delete)."""

    code: int
    message: str = ""
    access_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == CODE_OK


FolderResponse = Union[NotFound, FolderStat]
FileResponse = Union[NotFound, FileStat]


def build_payload(code: int, message: str, data: Optional[dict] = None) -> str:
    """Serialize a response the way every backend returns it."""
    payload: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        payload["data"] = data
    return json.dumps(payload, ensure_ascii=False)


def _envelope(payload: Any) -> tuple[int, str, dict]:
    if not isinstance(payload, dict) or "code" not in payload:
        raise ValueError(f"Malformed store response: {payload!r}")
    code = int(payload["code"])
    message = str(payload.get("message") or "")
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise ValueError(f"Malformed store response data: {data!r}")
    return code, message, data


def _text(value: Any) -> Optional[str]:
    """Empty strings are treated the same as missing values."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def decode_folder_response(payload: Any) -> FolderResponse:
    code, message, data = _envelope(payload)
    if code != CODE_OK:
        return NotFound(code, message)
    return FolderStat(name=str(data.get("name") or ""))


def decode_file_response(payload: Any) -> FileResponse:
    code, message, data = _envelope(payload)
    if code != CODE_OK:
        return NotFound(code, message)
    if "filelen" not in data:
        raise ValueError("File stat response is missing 'filelen'")
    play_urls = data.get("video_play_url") or {}
    if not isinstance(play_urls, dict):
        raise ValueError(f"Malformed video_play_url: {play_urls!r}")
    return FileStat(
        filelen=int(data["filelen"]),
        access_url=_text(data.get("access_url")),
        video_cover=_text(data.get("video_cover")),
        play_urls=TierUrls(
            **{tier: _text(play_urls.get(key)) for tier, key in TIER_KEYS.items()}
        ),
    )


def decode_ack(payload: Any) -> Ack:
    code, message, data = _envelope(payload)
    return Ack(code=code, message=message, access_url=_text(data.get("access_url")))
