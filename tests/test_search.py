from pathlib import Path

import pytest

from jellofin.collection import Collection, CollectionType
from jellofin.item import Episode, Movie, Season, Show
from jellofin.search import SearchError, SearchIndex


def _movie(movie_id, name, overview=None, genres=()):
    return Movie(
        id=movie_id,
        collection_id="films",
        name=name,
        path=Path("/media/movies") / name,
        overview=overview,
        genres=list(genres),
    )


def _collections():
    movies = {
        m.id: m
        for m in [
            _movie("m1", "The Matrix", "A hacker takes the red pill.", ["Science Fiction"]),
            _movie("m2", "Alien", "Space crew meets an alien.", ["Horror"]),
            _movie("m3", "Gravity", "Lost in space after debris.", ["Drama"]),
            _movie("m4", "Red Fish", "A pill bottle and a red balloon.", ["Comedy"]),
        ]
    }
    episode = Episode(
        id="s1:S01E01",
        show_id="s1",
        season_id="s1-season-1",
        collection_id="tv",
        name="Pilot Episode",
        season_number=1,
        episode_number=1,
        path=Path("/media/tv/Show/Season 1/pilot.mkv"),
        overview="Where it all begins.",
    )
    season = Season(
        id="s1-season-1",
        show_id="s1",
        collection_id="tv",
        name="Season 1",
        season_number=1,
        path=Path("/media/tv/Show/Season 1"),
        episodes={1: episode},
    )
    shows = {
        "s1": Show(
            id="s1",
            collection_id="tv",
            name="Galaxy Quest Series",
            path=Path("/media/tv/Show"),
            overview="Actors in space.",
            genres=["Comedy"],
            seasons={1: season},
        ),
        "s2": Show(
            id="s2",
            collection_id="tv",
            name="Another Series",
            path=Path("/media/tv/Another"),
        ),
    }
    return {
        "films": Collection(
            id="films",
            name="Films",
            collection_type=CollectionType.MOVIES,
            directory=Path("/media/movies"),
            movies=movies,
        ),
        "tv": Collection(
            id="tv",
            name="TV",
            collection_type=CollectionType.SHOWS,
            directory=Path("/media/tv"),
            shows=shows,
        ),
    }


@pytest.fixture
def index():
    idx = SearchIndex()
    idx.rebuild(_collections())
    return idx


def test_search_by_name(index):
    results = index.search("matrix", 10)
    assert [r.id for r in results] == ["m1"]
    assert results[0].item_type == "Movie"
    assert results[0].collection_id == "films"
    assert results[0].name == "The Matrix"


def test_search_is_case_insensitive(index):
    assert [r.id for r in index.search("MATRIX", 10)] == ["m1"]


def test_search_overview_and_genres(index):
    assert [r.id for r in index.search("debris", 10)] == ["m3"]
    assert [r.id for r in index.search("horror", 10)] == ["m2"]


def test_search_series_and_episode_types(index):
    assert {(r.id, r.item_type) for r in index.search("pilot", 10)} >= {
        ("s1:S01E01", "Episode")
    }
    assert [(r.id, r.item_type) for r in index.search("galaxy", 10)] == [("s1", "Series")]


def test_search_any_term_matches(index):
    ids = {r.id for r in index.search("matrix gravity", 10)}
    assert ids == {"m1", "m3"}


def test_search_respects_limit(index):
    results = index.search("space", 1)
    assert len(results) == 1
    assert results[0].id in {r.id for r in index.search("space", 10)}


def test_more_matching_terms_rank_higher(index):
    results = index.search("space alien", 10)
    assert results[0].id == "m2"


def test_phrase_query(index):
    assert [r.id for r in index.search('"red pill"', 10)] == ["m1"]
    assert {r.id for r in index.search("red pill", 10)} == {"m1", "m4"}


def test_must_not_excludes(index):
    ids = {r.id for r in index.search("space -alien", 10)}
    assert "m2" not in ids
    assert "m3" in ids


def test_must_requires_all(index):
    assert [r.id for r in index.search("+space +alien", 10)] == ["m2"]
    assert [r.id for r in index.search("space AND debris", 10)] == ["m3"]


def test_not_operator(index):
    ids = {r.id for r in index.search("space NOT debris", 10)}
    assert "m3" not in ids
    assert "m2" in ids


def test_only_exclusions_match_nothing(index):
    assert index.search("-alien", 10) == []


def test_field_query_on_item_type(index):
    assert {r.id for r in index.search("item_type:Series", 10)} == {"s1", "s2"}


def test_field_query_on_name(index):
    assert [r.id for r in index.search("name:alien", 10)] == ["m2"]


def test_unknown_field_raises(index):
    with pytest.raises(SearchError):
        index.search("director:someone", 10)


def test_unbalanced_quote_raises(index):
    with pytest.raises(SearchError):
        index.search('"red pill', 10)


def test_dangling_operator_raises(index):
    with pytest.raises(SearchError):
        index.search("space AND", 10)


def test_empty_query_returns_nothing(index):
    assert index.search("", 10) == []
    assert index.search("   ", 10) == []


def test_zero_limit_rejected(index):
    with pytest.raises(ValueError):
        index.search("space", 0)


def test_rebuild_replaces_documents(index):
    index.rebuild({})
    assert index.search("matrix", 10) == []


def test_find_similar_same_type_excluding_item(index):
    results = index.find_similar("m1", 10)
    assert {r.id for r in results} == {"m2", "m3", "m4"}
    assert all(r.item_type == "Movie" for r in results)


def test_find_similar_for_series(index):
    assert [r.id for r in index.find_similar("s1", 10)] == ["s2"]


def test_find_similar_respects_limit(index):
    assert len(index.find_similar("m1", 2)) == 2


def test_find_similar_unknown_item(index):
    assert index.find_similar("missing", 10) == []