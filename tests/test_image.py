from pathlib import Path

import pytest

from jellofin.config import CollectionConfig
from jellofin.image import find_image_path
from jellofin.item import Episode, ImageInfo, Movie, Season, Show
from jellofin.repo import CollectionRepo


class _Lookup:
    def __init__(self, *items):
        self._items = {item.id: item for item in items}

    def get_item(self, id):
        item = self._items.get(id)
        return None if item is None else ("c", item)


def _movie():
    return Movie(
        id="m1",
        collection_id="c",
        name="Movie",
        path=Path("/m"),
        images=ImageInfo(primary=Path("/m/poster.jpg"), backdrop=Path("/m/fanart.jpg")),
    )


def _episode(images):
    return Episode(
        id="e1",
        show_id="s1",
        season_id="se1",
        collection_id="c",
        name="Ep",
        season_number=1,
        episode_number=1,
        path=Path("/s/e.mkv"),
        images=images,
    )


def test_movie_primary_and_backdrop():
    lookup = _Lookup(_movie())
    assert find_image_path(lookup, "m1", "primary") == Path("/m/poster.jpg")
    assert find_image_path(lookup, "m1", "Backdrop") == Path("/m/fanart.jpg")
    assert find_image_path(lookup, "m1", "logo") is None


def test_unknown_type_or_item():
    lookup = _Lookup(_movie())
    assert find_image_path(lookup, "m1", "art") is None
    assert find_image_path(lookup, "missing", "primary") is None


def test_show_and_season_slots():
    show = Show(id="s1", collection_id="c", name="Show", path=Path("/s"),
                images=ImageInfo(logo=Path("/s/logo.png")))
    season = Season(id="se1", show_id="s1", collection_id="c", name="Season 1",
                    season_number=1, path=Path("/s/1"),
                    images=ImageInfo(banner=Path("/s/season01-banner.jpg")))
    lookup = _Lookup(show, season)
    assert find_image_path(lookup, "s1", "LOGO") == Path("/s/logo.png")
    assert find_image_path(lookup, "se1", "banner") == Path("/s/season01-banner.jpg")
    assert find_image_path(lookup, "se1", "primary") is None


def test_episode_primary_falls_back_to_thumb():
    lookup = _Lookup(_episode(ImageInfo(thumb=Path("/s/e-thumb.jpg"))))
    assert find_image_path(lookup, "e1", "primary") == Path("/s/e-thumb.jpg")
    assert find_image_path(lookup, "e1", "thumb") == Path("/s/e-thumb.jpg")


def test_episode_primary_preferred_over_thumb():
    lookup = _Lookup(_episode(ImageInfo(primary=Path("/s/e.jpg"), thumb=Path("/s/e-thumb.jpg"))))
    assert find_image_path(lookup, "e1", "primary") == Path("/s/e.jpg")


@pytest.mark.asyncio
async def test_with_scanned_repository(tmp_path):
    movie_dir = tmp_path / "movies" / "Alpha"
    movie_dir.mkdir(parents=True)
    (movie_dir / "Alpha.mkv").write_bytes(b"\0" * 4)
    (movie_dir / "poster.jpg").write_bytes(b"\0" * 4)
    repo = CollectionRepo()
    await repo.add_collection(
        CollectionConfig(name="Movies", collection_type="movies",
                         directory=str(tmp_path / "movies"), id="m")
    )
    await repo.scan_all()
    (movie,) = (await repo.get_collection("m")).movies.values()
    assert find_image_path(repo, movie.id, "primary") == movie_dir / "poster.jpg"
    assert find_image_path(repo, movie.id, "backdrop") is None