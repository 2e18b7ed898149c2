# jellofin

The media library core of a Jellyfin-compatible server. It reads a YAML
configuration, scans movie and TV show directories, reads Kodi-style `.nfo`
metadata, keeps an in-memory search index and filters items by Jellyfin
query parameters.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

`jellofin.config.Config.from_file` reads a YAML file; `Config.from_dict`
takes already-parsed data. Problems with reading or with the content raise
`ConfigError`.

```yaml
listen:
  port: "8096"
dbdir: /var/lib/jellofin
collections:
  - id: movies
    name: Movies
    type: movies
    directory: /media/movies
  - name: TV Shows
    type: shows
    directory: /media/tv
jellyfin:
  servername: Jellofin
  autoregister: false
```

String settings such as `port` must be written as strings. Defaults: port
`"8096"`, logfile `"stdout"`, server name `"Jellofin"`.

```python
from jellofin.config import Config

config = Config.from_file("jellofin-server.yaml")
print(config.get_database_path())   # /var/lib/jellofin/tink-items.db
```

`get_database_path` returns `database.sqlite.filename` when set, otherwise
`tink-items.db` inside `dbdir`, otherwise `None`.

## Scanning collections

```python
import asyncio

from jellofin.config import Config
from jellofin.repo import CollectionRepo


async def main():
    config = Config.from_file("jellofin-server.yaml")
    repo = CollectionRepo()
    for collection_config in config.collections:
        await repo.add_collection(collection_config)
    await repo.scan_all()

    for result in repo.search("matrix", 10):
        print(result.item_type, result.name)


asyncio.run(main())
```

Collection types accepted are `movies`/`movie` and
`shows`/`show`/`tv`/`tvshows` (any case); anything else raises
`InvalidCollectionTypeError`. A collection without an `id` gets a random
UUID. `CollectionRepo` also offers `get_collection`, `list_collections`,
`get_collection_id_for_item`, `get_item`, `find_similar` and
`start_background_scan(interval_secs)`, which returns an asyncio task that
rescans until cancelled.

Layout that `jellofin.scanner.scan_collection` understands:

- A movie collection holds one directory per movie, with video files
  (`mkv`, `mp4`, `avi`, `m4v`, `mov`, `wmv`, `flv`, `webm`), an optional
  `.nfo` file and images (`jpg`, `jpeg`, `png`, `webp`). Image names
  containing `poster`, `fanart`/`backdrop`, `logo`, `thumb` or `banner`
  go to that slot; another image becomes the primary one if none is set.
- A show collection holds one directory per show, with season directories
  such as `Season 1`, `Season01`, `S1` or `Specials` (season 0). Episodes
  are found from file names such as `Show.S01E04.mkv`, `Show.3x08.mkv` or
  `Show.2023-05-15.mkv`; a file is kept only when its season matches the
  directory. An `.nfo` beside an episode supplies its title and metadata.
- Subtitles (`srt`, `vtt`) whose names start with the video's name are
  attached to it, with a two- or three-letter language code taken from the
  last dotted part.

A missing collection directory raises `DirectoryNotFoundError`.

## Search

`SearchIndex` (used by `CollectionRepo`) indexes movies, series and
episodes by name, overview and genres and ranks matches with BM25. Queries
accept plain words, `"quoted phrases"`, `+required` and `-excluded` terms,
`field:value` (`name`, `overview`, `genres`, `id`, `collection_id`,
`item_type`) and the operators `AND`, `OR`, `NOT`. Malformed queries raise
`SearchError` (wrapped in `CollectionRepoError` by the repository); a limit
of zero or less is rejected. `find_similar` returns other items of the same
type.

## Other helpers

- `jellofin.nfo.parse_nfo_content` / `parse_nfo_file` read metadata from NFO
  text or files.
- `jellofin.parse_filename.parse_episode_from_filename` and `clean_title`
  work on episode file names.
- `jellofin.sort_name.make_sort_name` builds sort names, e.g.
  `"The Matrix (1999)"` → `"matrix"`.
- `jellofin.filter.apply_item_filter` / `apply_items_filter` apply Jellyfin
  query parameters (`includeItemTypes`, `ids`, `genres`, `studios`,
  `years`, `minCommunityRating`, `minPremiereDate`, `isPlayed`,
  `isFavorite`, `filters`, …) to item objects shaped like Jellyfin item
  records.
- `jellofin.image.find_image_path` finds the image file of a given type for
  an item; episodes without a primary image fall back to their thumbnail.
- `jellofin.branding.get_branding_configuration` and `get_branding_css`
  return the branding options and an empty stylesheet.
- `jellofin.models` holds the record types for users, access tokens, user
  data and playlists, with `DbError`, `NotFoundError` and
  `AlreadyExistsError`.

## What this package does not do

There is no HTTP server and no command to start one: the branding and
filter functions produce values for a web layer that is not included.
There is no database storage either; `jellofin.models` only defines the
records. Images are served as found, without resizing.