"""Filesystem scanning that fills collections with movies and shows."""

from __future__ import annotations

import hashlib
import logging
import os
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .collection import Collection, CollectionType
from .item import Episode, ImageInfo, MediaSource, Movie, Season, Show, SubtitleStream
from .nfo import parse_nfo_file
from .parse_filename import clean_title, parse_episode_from_filename

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = frozenset({"mkv", "mp4", "avi", "m4v", "mov", "wmv", "flv", "webm"})
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})
SUBTITLE_EXTENSIONS = frozenset({"srt", "vtt"})

TICKS_PER_MINUTE = 600_000_000

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_I64_MIN, _I64_MAX = -(2**63), 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")


class ScanError(Exception):
    """Scanning a collection directory failed."""


class DirectoryNotFoundError(ScanError):
    """The collection directory does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Directory not found: {path}")
        self.path = path


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _generate_id(name: str) -> str:
    return hashlib.sha256(name.encode("utf-8", "surrogatepass")).hexdigest()[:20]


def _parse_int(text: str, low: int, high: int) -> int | None:
    if not text.isascii() or _INT_RE.fullmatch(text) is None:
        return None
    value = int(text)
    return value if low <= value <= high else None


def _utf8_name(path: Path) -> str | None:
    """The final path component, or None when it is not valid UTF-8."""
    name = path.name
    if not name:
        return None
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return name


def _split_ext(name: str) -> tuple[str, str | None]:
    """Split a file name into stem and extension; a leading dot starts no extension."""
    if name == "..":
        return name, None
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return name, None
    return stem, ext


def _extension(name: str) -> str | None:
    return _split_ext(name)[1]


def _list_dir(directory: Path) -> list[Path]:
    """Entries of a directory in name order; empty when it cannot be read."""
    try:
        return sorted(directory.iterdir())
    except OSError:
        return []


def _list_dir_strict(directory: Path) -> list[Path]:
    try:
        return sorted(directory.iterdir())
    except OSError as exc:
        raise ScanError(f"IO error: {exc}") from exc


def _file_time(st: os.stat_result) -> datetime:
    """Inode change time on POSIX systems, modification time elsewhere."""
    ns = st.st_ctime_ns if os.name == "posix" else st.st_mtime_ns
    try:
        seconds, rest = divmod(ns, 10**9)
        return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(
            microseconds=rest // 1000
        )
    except (OverflowError, OSError, ValueError):
        return _now()


def _runtime_ticks(runtime: str | None) -> int | None:
    if runtime is None:
        return None
    minutes = _parse_int(runtime, _I64_MIN, _I64_MAX)
    return None if minutes is None else minutes * TICKS_PER_MINUTE


def scan_collection(collection: Collection) -> None:
    """Rescan the collection directory, replacing its movies or shows."""
    if collection.collection_type is CollectionType.MOVIES:
        _scan_movies(collection)
    else:
        _scan_shows(collection)


def _scan_movies(collection: Collection) -> None:
    directory = Path(collection.directory)
    if not directory.exists():
        raise DirectoryNotFoundError(directory)

    collection.movies.clear()
    for path in _list_dir_strict(directory):
        if not path.is_dir():
            continue
        movie = _scan_movie_dir(path, collection.id)
        if movie is not None:
            collection.movies[movie.id] = movie

    logger.debug("Scanned %d movies in collection %s", len(collection.movies), collection.name)


def _scan_movie_dir(directory: Path, collection_id: str) -> Movie | None:
    movie_name = _utf8_name(directory)
    if movie_name is None:
        return None

    video_files: list[Path] = []
    nfo_path: Path | None = None
    images = ImageInfo()

    for path in _list_dir(directory):
        filename = _utf8_name(path)
        extension = _extension(filename) if filename is not None else None
        if filename is None or extension is None:
            return None
        extension = extension.lower()
        if extension in VIDEO_EXTENSIONS:
            video_files.append(path)
        elif extension == "nfo":
            nfo_path = path
        elif extension in IMAGE_EXTENSIONS:
            assign_image(images, filename, path)

    if not video_files:
        return None
    video_files.sort()

    movie = Movie(
        id=_generate_id(movie_name),
        collection_id=collection_id,
        name=movie_name,
        path=directory,
        images=images,
    )

    if nfo_path is not None:
        meta = parse_nfo_file(nfo_path)
        if meta is not None:
            # The directory name stays the display name; a differing NFO title is kept aside.
            if meta.title is not None and meta.title != movie_name:
                movie.original_title = meta.title
            movie.sort_name = meta.sort_title
            movie.overview = meta.plot
            movie.tagline = meta.tagline
            movie.community_rating = meta.rating
            movie.mpaa = meta.mpaa
            movie.production_year = meta.year
            movie.premiere_date = meta.premiered
            movie.genres = meta.genres
            movie.studios = meta.studios
            movie.people = meta.people
            ticks = _runtime_ticks(meta.runtime)
            if ticks is not None:
                movie.runtime_ticks = ticks

    earliest: datetime | None = None
    latest: datetime | None = None
    for video in video_files:
        try:
            st = video.stat()
        except OSError:
            continue
        file_time = _file_time(st)
        earliest = file_time if earliest is None else min(earliest, file_time)
        latest = file_time if latest is None else max(latest, file_time)
        movie.media_sources.append(
            MediaSource(
                path=video,
                container=_extension(video.name) or "",
                size=st.st_size,
                subtitles=find_subtitles(video),
            )
        )

    now = _now()
    movie.date_created = earliest or now
    movie.date_modified = latest or now
    return movie


def _scan_shows(collection: Collection) -> None:
    directory = Path(collection.directory)
    if not directory.exists():
        raise DirectoryNotFoundError(directory)

    collection.shows.clear()
    for path in _list_dir_strict(directory):
        if not path.is_dir():
            continue
        show = _scan_show_dir(path, collection.id)
        if show is not None:
            collection.shows[show.id] = show

    logger.debug("Scanned %d shows in collection %s", len(collection.shows), collection.name)


def _scan_show_dir(directory: Path, collection_id: str) -> Show | None:
    show_name = _utf8_name(directory)
    if show_name is None:
        return None
    show_id = _generate_id(show_name)

    images = ImageInfo()
    nfo_path: Path | None = None
    seasons: dict[int, Season] = {}

    for path in _list_dir(directory):
        filename = _utf8_name(path)
        if filename is None:
            return None
        if path.is_dir():
            season_num = parse_season_number(filename)
            if season_num is not None:
                season = _scan_season_dir(path, show_id, show_name, collection_id, season_num)
                if season is not None:
                    seasons[season_num] = season
            continue
        extension = _extension(filename)
        if extension is None:
            return None
        extension = extension.lower()
        if extension == "nfo":
            nfo_path = path
        elif extension in IMAGE_EXTENSIONS:
            assign_image(images, filename, path)

    show = Show(
        id=show_id,
        collection_id=collection_id,
        name=show_name,
        path=directory,
        images=images,
        seasons=seasons,
    )

    if nfo_path is not None:
        meta = parse_nfo_file(nfo_path)
        if meta is not None:
            if meta.title is not None and meta.title != show_name:
                show.original_title = meta.title
            if show.original_title is None:
                show.original_title = meta.original_title
            show.sort_name = meta.sort_title
            show.overview = meta.plot
            show.tagline = meta.tagline
            show.community_rating = meta.rating
            show.mpaa = meta.mpaa
            show.production_year = meta.year
            show.premiere_date = meta.premiered
            if show.production_year is None and show.premiere_date is not None:
                show.production_year = show.premiere_date.year
            show.genres = meta.genres
            show.studios = meta.studios
            show.people = meta.people

    return show


def _scan_season_dir(
    directory: Path,
    show_id: str,
    show_name: str,
    collection_id: str,
    season_num: int,
) -> Season | None:
    season_name = "Specials" if season_num == 0 else f"Season {season_num}"
    season_id = _generate_id(f"{show_name}-season-{season_num}")

    images = ImageInfo()
    episodes: dict[int, Episode] = {}
    season_markers = (f"season{season_num:02}", f"season-{season_num:02}")

    for path in _list_dir(directory):
        if not path.is_file():
            continue
        filename = _utf8_name(path)
        extension = _extension(filename) if filename is not None else None
        if filename is None or extension is None:
            return None
        extension = extension.lower()

        if extension in VIDEO_EXTENSIONS:
            info = parse_episode_from_filename(filename)
            if info is None or info.season != season_num:
                continue
            episode = _create_episode(
                path, show_id, season_id, collection_id, info.season, info.episode
            )
            if episode is not None:
                episodes[info.episode] = episode
        elif extension in IMAGE_EXTENSIONS:
            lower = filename.lower()
            if any(marker in lower for marker in season_markers):
                assign_image(images, filename, path)

    return Season(
        id=season_id,
        show_id=show_id,
        collection_id=collection_id,
        name=season_name,
        season_number=season_num,
        path=directory,
        images=images,
        episodes=episodes,
    )


def _create_episode(
    path: Path,
    show_id: str,
    season_id: str,
    collection_id: str,
    season_num: int,
    episode_num: int,
) -> Episode | None:
    filename = _utf8_name(path)
    if filename is None:
        return None
    extension = _extension(filename)
    if extension is None:
        return None

    # Identifier layout: episode number after "S", zero-padded season number after "E".
    episode_id = f"{show_id}:S{episode_num}E{season_num:02}"
    title = clean_title(filename)
    overview = None
    premiere_date = None
    community_rating = None
    runtime_ticks = None

    nfo_path = path.with_suffix(".nfo")
    if nfo_path.exists():
        meta = parse_nfo_file(nfo_path)
        if meta is not None:
            if meta.title is not None:
                title = meta.title
            overview = meta.plot
            premiere_date = meta.premiered
            community_rating = meta.rating
            ticks = _runtime_ticks(meta.runtime)
            if ticks is not None:
                runtime_ticks = ticks

    subtitles = find_subtitles(path)
    try:
        st = path.stat()
    except OSError:
        return None
    file_time = _file_time(st)

    return Episode(
        id=episode_id,
        show_id=show_id,
        season_id=season_id,
        collection_id=collection_id,
        name=title,
        season_number=season_num,
        episode_number=episode_num,
        path=path,
        premiere_date=premiere_date,
        community_rating=community_rating,
        runtime_ticks=runtime_ticks,
        overview=overview,
        images=find_episode_images(path),
        media_sources=[
            MediaSource(path=path, container=extension, size=st.st_size, subtitles=subtitles)
        ],
        date_created=file_time,
        date_modified=file_time,
    )


def parse_season_number(dirname: str) -> int | None:
    """Season number named by a directory, 0 for specials; None if it names none."""
    lower = dirname.lower()
    if lower in ("specials", "season 0", "s0"):
        return 0
    for prefix in ("season ", "season"):
        if lower.startswith(prefix):
            return _parse_int(lower[len(prefix):].strip(), _I32_MIN, _I32_MAX)
    if lower.startswith("s"):
        return _parse_int(lower[1:], _I32_MIN, _I32_MAX)
    return None


def assign_image(images: ImageInfo, filename: str, path: Path) -> None:
    """Store ``path`` in the image slot that ``filename`` suggests."""
    lower = filename.lower()
    if "poster" in lower:
        images.primary = path
    elif "fanart" in lower or "backdrop" in lower:
        images.backdrop = path
    elif "logo" in lower:
        images.logo = path
    elif "thumb" in lower:
        images.thumb = path
    elif "banner" in lower:
        images.banner = path
    elif images.primary is None:
        images.primary = path


def _same_dir_matches(video_path: Path, extensions: frozenset[str]) -> list[tuple[Path, str, str]]:
    """Siblings of a video with one of ``extensions``: (path, stem, lowered extension)."""
    video_path = Path(video_path)
    name = _utf8_name(video_path)
    if name is None:
        return []
    video_stem = _split_ext(name)[0]
    found = []
    for path in _list_dir(video_path.parent):
        sibling = _utf8_name(path)
        if sibling is None:
            continue
        stem, ext = _split_ext(sibling)
        if ext is None or ext.lower() not in extensions:
            continue
        found.append((path, stem, ext.lower(), video_stem))
    return found


def find_episode_images(video_path: Path) -> ImageInfo:
    """Images beside a video whose names start with the video's base name."""
    images = ImageInfo()
    for path, stem, _ext, video_stem in _same_dir_matches(video_path, IMAGE_EXTENSIONS):
        if (
            stem == video_stem
            or stem.startswith(f"{video_stem}-")
            or stem.startswith(f"{video_stem}.")
        ):
            assign_image(images, stem, path)
    return images


def find_subtitles(video_path: Path) -> list[SubtitleStream]:
    """Subtitle files beside a video whose names start with the video's base name."""
    return [
        SubtitleStream(path=path, codec=ext, language=extract_language_from_filename(stem))
        for path, stem, ext, video_stem in _same_dir_matches(video_path, SUBTITLE_EXTENSIONS)
        if stem.startswith(video_stem)
    ]


def extract_language_from_filename(filename: str) -> str | None:
    """A two- or three-letter code after the last dot of a file stem."""
    parts = filename.split(".")
    if len(parts) >= 2:
        candidate = parts[-1]
        if len(candidate.encode("utf-8")) in (2, 3):
            return candidate
    return None