"""A media collection holding either movies or shows."""

from __future__ import annotations

import enum
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .item import Item, Movie, Show


class CollectionType(enum.Enum):
    MOVIES = "movies"
    SHOWS = "shows"

    @classmethod
    def parse(cls, s: str) -> CollectionType | None:
        """Parse a configured collection type; None when it is not recognised."""
        lowered = s.lower()
        if lowered in ("movies", "movie"):
            return cls.MOVIES
        if lowered in ("shows", "show", "tv", "tvshows"):
            return cls.SHOWS
        return None


@dataclass
class Collection:
    id: str
    name: str
    collection_type: CollectionType
    directory: Path
    base_url: str | None = None
    hls_server: str | None = None
    movies: dict[str, Movie] = field(default_factory=dict)
    shows: dict[str, Show] = field(default_factory=dict)

    def get_item(self, id: str) -> Item | None:
        """Find a movie, show, season or episode by id."""
        movie = self.movies.get(id)
        if movie is not None:
            return movie
        for show in self.shows.values():
            if show.id == id:
                return show
            for season in show.seasons.values():
                if season.id == id:
                    return season
                for episode in season.episodes.values():
                    if episode.id == id:
                        return episode
        return None

    def get_genres(self) -> dict[str, int]:
        """Count how many top-level items carry each genre."""
        items = (
            self.movies.values()
            if self.collection_type is CollectionType.MOVIES
            else self.shows.values()
        )
        return dict(Counter(genre for item in items for genre in item.genres))

    def item_count(self) -> int:
        if self.collection_type is CollectionType.MOVIES:
            return len(self.movies)
        return len(self.shows)