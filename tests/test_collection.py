from pathlib import Path

import pytest

from jellofin.collection import Collection, CollectionType
from jellofin.item import Episode, Movie, Season, Show


@pytest.mark.parametrize(
    "text, expected",
    [
        ("movies", CollectionType.MOVIES),
        ("Movie", CollectionType.MOVIES),
        ("shows", CollectionType.SHOWS),
        ("SHOW", CollectionType.SHOWS),
        ("tv", CollectionType.SHOWS),
        ("TvShows", CollectionType.SHOWS),
        ("music", None),
    ],
)
def test_parse(text, expected):
    assert CollectionType.parse(text) is expected


def movie(mid, genres):
    return Movie(id=mid, collection_id="c", name=mid, path=Path("/m") / mid, genres=genres)


@pytest.fixture
def shows_collection():
    episode = Episode(
        id="e1", show_id="sh1", season_id="se1", collection_id="c", name="Ep",
        season_number=1, episode_number=1, path=Path("/s/e.mkv"),
    )
    season = Season(
        id="se1", show_id="sh1", collection_id="c", name="Season 1",
        season_number=1, path=Path("/s"), episodes={1: episode},
    )
    show = Show(
        id="sh1", collection_id="c", name="Show", path=Path("/s"),
        genres=["Drama"], seasons={1: season},
    )
    coll = Collection(id="c", name="TV", collection_type=CollectionType.SHOWS, directory=Path("/s"))
    coll.shows[show.id] = show
    return coll


def test_get_item_finds_nested(shows_collection):
    assert shows_collection.get_item("sh1").name == "Show"
    assert shows_collection.get_item("se1").name == "Season 1"
    assert shows_collection.get_item("e1").name == "Ep"
    assert shows_collection.get_item("nope") is None


def test_get_item_movie():
    coll = Collection(id="c", name="Films", collection_type=CollectionType.MOVIES, directory=Path("/m"))
    coll.movies["a"] = movie("a", [])
    assert coll.get_item("a") is coll.movies["a"]


def test_genres_and_count_for_movies():
    coll = Collection(id="c", name="Films", collection_type=CollectionType.MOVIES, directory=Path("/m"))
    coll.movies["a"] = movie("a", ["Action", "Drama"])
    coll.movies["b"] = movie("b", ["Action"])
    assert coll.get_genres() == {"Action": 2, "Drama": 1}
    assert coll.item_count() == len(coll.movies)


def test_genres_and_count_for_shows(shows_collection):
    assert shows_collection.get_genres() == {"Drama": 1}
    assert shows_collection.item_count() == len(shows_collection.shows)


def test_movies_ignored_in_show_collection(shows_collection):
    shows_collection.movies["x"] = movie("x", ["Comedy"])
    assert "Comedy" not in shows_collection.get_genres()
    assert shows_collection.item_count() == len(shows_collection.shows)