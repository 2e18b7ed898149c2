"""Media library items: movies, shows, seasons and episodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import ClassVar, Union


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _linked_id(item: object, attr: str | None) -> str | None:
    """Read the id stored under ``attr``, or None when the item has no parent link."""
    if attr is None:
        return None
    return getattr(item, attr)


class PersonType(enum.Enum):
    ACTOR = "Actor"
    DIRECTOR = "Director"
    WRITER = "Writer"
    PRODUCER = "Producer"


class ItemType(enum.Enum):
    MOVIE = "Movie"
    SERIES = "Series"
    SEASON = "Season"
    EPISODE = "Episode"


@dataclass
class Person:
    name: str
    person_type: PersonType
    role: str | None = None


@dataclass
class SubtitleStream:
    path: Path
    codec: str
    language: str | None = None
    title: str | None = None


@dataclass
class MediaSource:
    path: Path
    container: str
    size: int
    bitrate: int | None = None
    subtitles: list[SubtitleStream] = field(default_factory=list)


@dataclass
class ImageInfo:
    primary: Path | None = None
    backdrop: Path | None = None
    logo: Path | None = None
    thumb: Path | None = None
    banner: Path | None = None


@dataclass
class Movie:
    _PARENT_ATTR: ClassVar[str | None] = None

    id: str
    collection_id: str
    name: str
    path: Path
    sort_name: str | None = None
    original_title: str | None = None
    premiere_date: datetime | None = None
    production_year: int | None = None
    community_rating: float | None = None
    mpaa: str | None = None
    runtime_ticks: int | None = None
    overview: str | None = None
    tagline: str | None = None
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    images: ImageInfo = field(default_factory=ImageInfo)
    media_sources: list[MediaSource] = field(default_factory=list)
    date_created: datetime = field(default_factory=_now)
    date_modified: datetime = field(default_factory=_now)

    def item_type(self) -> ItemType:
        return ItemType.MOVIE

    def parent_id(self) -> str | None:
        """Movies sit directly in a collection and have no parent item."""
        return _linked_id(self, self._PARENT_ATTR)

    def display_sort_name(self) -> str:
        """The explicit sort name if set, otherwise the name."""
        return self.sort_name if self.sort_name is not None else self.name


@dataclass
class Show:
    _PARENT_ATTR: ClassVar[str | None] = None

    id: str
    collection_id: str
    name: str
    path: Path
    sort_name: str | None = None
    original_title: str | None = None
    premiere_date: datetime | None = None
    production_year: int | None = None
    community_rating: float | None = None
    mpaa: str | None = None
    overview: str | None = None
    tagline: str | None = None
    genres: list[str] = field(default_factory=list)
    studios: list[str] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    images: ImageInfo = field(default_factory=ImageInfo)
    seasons: dict[int, Season] = field(default_factory=dict)
    date_created: datetime = field(default_factory=_now)
    date_modified: datetime = field(default_factory=_now)

    def item_type(self) -> ItemType:
        return ItemType.SERIES

    def parent_id(self) -> str | None:
        """Shows sit directly in a collection and have no parent item."""
        return _linked_id(self, self._PARENT_ATTR)

    def display_sort_name(self) -> str:
        """The explicit sort name if set, otherwise the name."""
        return self.sort_name if self.sort_name is not None else self.name


@dataclass
class Season:
    # Seasons carry no year or rating of their own.
    production_year: ClassVar[int | None] = None
    community_rating: ClassVar[float | None] = None

    id: str
    show_id: str
    collection_id: str
    name: str
    season_number: int
    path: Path
    premiere_date: datetime | None = None
    overview: str | None = None
    images: ImageInfo = field(default_factory=ImageInfo)
    episodes: dict[int, Episode] = field(default_factory=dict)
    date_created: datetime = field(default_factory=_now)
    date_modified: datetime = field(default_factory=_now)

    @property
    def genres(self) -> list[str]:
        return []

    def item_type(self) -> ItemType:
        return ItemType.SEASON

    def parent_id(self) -> str | None:
        return self.show_id

    def display_sort_name(self) -> str:
        return self.name


@dataclass
class Episode:
    # Episodes carry no production year of their own.
    production_year: ClassVar[int | None] = None

    id: str
    show_id: str
    season_id: str
    collection_id: str
    name: str
    season_number: int
    episode_number: int
    path: Path
    premiere_date: datetime | None = None
    community_rating: float | None = None
    runtime_ticks: int | None = None
    overview: str | None = None
    images: ImageInfo = field(default_factory=ImageInfo)
    media_sources: list[MediaSource] = field(default_factory=list)
    date_created: datetime = field(default_factory=_now)
    date_modified: datetime = field(default_factory=_now)

    @property
    def genres(self) -> list[str]:
        return []

    def item_type(self) -> ItemType:
        return ItemType.EPISODE

    def parent_id(self) -> str | None:
        return self.season_id

    def display_sort_name(self) -> str:
        return self.name


Item = Union[Movie, Show, Season, Episode]