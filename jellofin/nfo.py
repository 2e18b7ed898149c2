"""Metadata read from Kodi-style .nfo files."""

from __future__ import annotations

import math
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .item import Person, PersonType

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")

_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&apos;", "'"),
)


@dataclass
class NfoMetadata:
    title: str | None = None
    original_title: str | None = None
    sort_title: str | None = None
    plot: str | None = None
    tagline: str | None = None
    rating: float | None = None
    mpaa: str | None = None
    year: int | None = None
    runtime: str | None = None
    premiered: datetime | None = None
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)


def parse_nfo_file(path: str | os.PathLike[str]) -> NfoMetadata | None:
    """Parse an .nfo file; None when it cannot be read as UTF-8 text."""
    try:
        with open(path, encoding="utf-8") as fh:
            content = fh.read()
    except (OSError, UnicodeDecodeError):
        return None
    return parse_nfo_content(content)


def parse_nfo_content(content: str) -> NfoMetadata:
    """Extract metadata from the text of an .nfo document."""
    meta = NfoMetadata(
        title=_extract_tag(content, "title"),
        original_title=_extract_tag(content, "originaltitle"),
        sort_title=_extract_tag(content, "sorttitle"),
        plot=_extract_tag(content, "plot") or _extract_tag(content, "overview"),
        tagline=_extract_tag(content, "tagline"),
        mpaa=_extract_tag(content, "mpaa"),
        runtime=_extract_tag(content, "runtime"),
    )

    if meta.runtime is None:
        meta.runtime = _runtime_from_fileinfo(content)

    rating = _extract_tag(content, "rating")
    if rating is not None:
        meta.rating = _parse_float(rating)

    year = _extract_tag(content, "year")
    if year is not None:
        meta.year = _parse_int(year, _I32_MIN, _I32_MAX)

    premiered = _extract_tag(content, "premiered") or _extract_tag(content, "aired")
    if premiered is not None:
        try:
            meta.premiered = datetime.strptime(premiered, "%Y-%m-%d").replace(
                tzinfo=timezone.utc
            )
        except ValueError:
            pass

    meta.genres = list(_extract_all_tags(content, "genre"))
    meta.studios = list(_extract_all_tags(content, "studio"))

    for block in _extract_blocks(content, "actor"):
        name = _extract_tag(block, "name")
        if name is not None:
            meta.people.append(
                Person(name=name, person_type=PersonType.ACTOR, role=_extract_tag(block, "role"))
            )
    meta.people.extend(
        Person(name=name, person_type=PersonType.DIRECTOR)
        for name in _extract_all_tags(content, "director")
    )
    meta.people.extend(
        Person(name=name, person_type=PersonType.WRITER)
        for name in _extract_all_tags(content, "credits")
    )
    return meta


def _runtime_from_fileinfo(content: str) -> str | None:
    """Runtime in whole minutes from fileinfo/streamdetails/video, if present."""
    fileinfo = _extract_tag(content, "fileinfo")
    streamdetails = fileinfo and _extract_tag(fileinfo, "streamdetails")
    video = streamdetails and _extract_tag(streamdetails, "video")
    if not video:
        return None

    duration = _extract_tag(video, "duration")
    if duration is not None:
        minutes = _parse_float(duration)
        if minutes is not None:
            return str(_round_to_i64(minutes))

    seconds_text = _extract_tag(video, "durationinseconds")
    if seconds_text is not None:
        seconds = _parse_float(seconds_text)
        if seconds is not None:
            return str(_round_to_i64(seconds / 60.0))
    return None


def _parse_float(text: str) -> float | None:
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _parse_int(text: str, low: int, high: int) -> int | None:
    if not text.isascii() or _INT_RE.fullmatch(text) is None:
        return None
    value = int(text)
    return value if low <= value <= high else None


def _round_to_i64(value: float) -> int:
    """Round half away from zero, saturating at the 64-bit limits."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I64_MAX if value > 0 else _I64_MIN
    rounded = int(math.copysign(math.floor(abs(value) + 0.5), value))
    return max(_I64_MIN, min(_I64_MAX, rounded))


def _decode_xml_entities(text: str) -> str:
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def _extract_tag(content: str, tag: str) -> str | None:
    """Text of the first <tag>...</tag>, trimmed and decoded; None if missing or empty."""
    start_tag, end_tag = f"<{tag}>", f"</{tag}>"
    start = content.find(start_tag)
    if start < 0:
        return None
    start += len(start_tag)
    end = content.find(end_tag, start)
    if end < 0:
        return None
    value = content[start:end].strip()
    return _decode_xml_entities(value) if value else None


def _extract_all_tags(content: str, tag: str) -> Iterator[str]:
    start_tag, end_tag = f"<{tag}>", f"</{tag}>"
    search_from = 0
    while (found := content.find(start_tag, search_from)) >= 0:
        start = found + len(start_tag)
        end = content.find(end_tag, start)
        if end < 0:
            return
        value = content[start:end].strip()
        if value:
            yield _decode_xml_entities(value)
        search_from = end + len(end_tag)


def _extract_blocks(content: str, tag: str) -> Iterator[str]:
    start_tag, end_tag = f"<{tag}>", f"</{tag}>"
    search_from = 0
    while (start := content.find(start_tag, search_from)) >= 0:
        end = content.find(end_tag, start)
        if end < 0:
            return
        end += len(end_tag)
        yield content[start:end]
        search_from = end