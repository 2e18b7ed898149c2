"""Season and episode numbers taken from media file names."""

from __future__ import annotations

import re
from dataclasses import dataclass

_I32_MAX = 2**31 - 1

_EPISODE_PATTERNS = (
    re.compile(r"s(\d+)e(\d+)(?:e(\d+))?", re.IGNORECASE),
    re.compile(r"(\d+)x(\d+)(?:x(\d+))?", re.IGNORECASE),
    re.compile(r"season\s*(\d+).*episode\s*(\d+)", re.IGNORECASE),
    re.compile(r"(\d{4})-(\d{2})-(\d{2})", re.IGNORECASE),
)


@dataclass(frozen=True)
class EpisodeInfo:
    season: int
    episode: int
    end_episode: int | None = None


def _to_i32(text: str | None) -> int | None:
    """Parse a run of ASCII digits that fits a signed 32-bit integer."""
    if text is None or not text.isascii() or not text.isdigit():
        return None
    value = int(text)
    return value if value <= _I32_MAX else None


def _groups(match: re.Match[str]) -> tuple[str | None, str | None, str | None]:
    padded = match.groups() + (None, None, None)
    return padded[0], padded[1], padded[2]


def parse_episode_from_filename(filename: str) -> EpisodeInfo | None:
    """Find season and episode numbers in a file name.

    Dated file names (``YYYY-MM-DD``) give the year as season and
    ``month * 100 + day`` as episode.
    """
    for pattern in _EPISODE_PATTERNS:
        match = pattern.search(filename)
        if match is None:
            continue
        first, second, third = _groups(match)
        if "-" in match.group(0):
            year, month, day = _to_i32(first), _to_i32(second), _to_i32(third)
            if year is not None and month is not None and day is not None:
                return EpisodeInfo(season=year, episode=month * 100 + day)
            continue
        season = _to_i32(first)
        episode = _to_i32(second)
        if season is None or episode is None:
            return None
        return EpisodeInfo(season=season, episode=episode, end_episode=_to_i32(third))
    return None


def clean_title(filename: str) -> str:
    """Derive a readable title from a file name, dropping extension and episode marker."""
    title = filename
    dot = title.rfind(".")
    if dot >= 0:
        title = title[:dot]

    for pattern in _EPISODE_PATTERNS:
        match = pattern.search(title)
        if match is not None:
            title = title[: match.start()]
            break

    return title.replace("_", " ").replace(".", " ").strip()