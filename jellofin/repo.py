"""Registry of media collections with scanning and search."""

from __future__ import annotations

import asyncio
import copy
import logging
import threading
import uuid
from pathlib import Path

from .collection import Collection, CollectionType
from .config import CollectionConfig
from .item import Item
from .scanner import ScanError, scan_collection
from .search import SearchError, SearchIndex, SearchResult

logger = logging.getLogger(__name__)


class CollectionRepoError(Exception):
    """A collection repository operation failed."""


class InvalidCollectionTypeError(CollectionRepoError):
    """The configured collection type is not recognised."""

    def __init__(self, collection_type: str) -> None:
        super().__init__(f"Invalid collection type: {collection_type}")
        self.collection_type = collection_type


def _search_error(exc: Exception) -> CollectionRepoError:
    return CollectionRepoError(f"Search error: {exc}")


class CollectionRepo:
    """Holds all collections and a search index over their items.

    The mapping of collections is replaced as a whole on every change, so
    readers always see a consistent snapshot. Returned objects are shared
    with the repository and should be treated as read-only.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._collections: dict[str, Collection] = {}
        self._search_index = SearchIndex()

    def _store(self, collection: Collection) -> None:
        with self._lock:
            updated = dict(self._collections)
            updated[collection.id] = collection
            self._collections = updated

    async def add_collection(self, config: CollectionConfig) -> None:
        """Register an (unscanned) collection described by ``config``."""
        collection_type = CollectionType.parse(config.collection_type)
        if collection_type is None:
            raise InvalidCollectionTypeError(config.collection_type)

        coll_id = config.id if config.id is not None else str(uuid.uuid4())
        self._store(
            Collection(
                id=coll_id,
                name=config.name,
                collection_type=collection_type,
                directory=Path(config.directory),
                base_url=config.baseurl,
                hls_server=config.hlsserver,
            )
        )
        logger.info("Added collection: %s (%s)", config.name, coll_id)

    async def scan_all(self) -> None:
        """Rescan every collection and rebuild the search index."""
        for coll_id in list(self._collections):
            current = self._collections.get(coll_id)
            if current is None:
                continue
            logger.info("Scanning collection: %s", current.name)

            working = copy.deepcopy(current)
            try:
                await asyncio.to_thread(scan_collection, working)
            except ScanError as exc:
                # What was scanned is kept even when the scan reports an error.
                logger.error("Failed to scan collection %s: %s", coll_id, exc)
            except Exception:
                logger.exception("Scan task failed for collection %s", coll_id)
                continue
            self._store(working)

        logger.info("Rebuilding search index")
        try:
            self._search_index.rebuild(self._collections)
        except SearchError as exc:
            raise _search_error(exc) from exc

    def search(self, query: str, limit: int) -> list[SearchResult]:
        try:
            return self._search_index.search(query, limit)
        except (SearchError, ValueError) as exc:
            raise _search_error(exc) from exc

    def find_similar(self, item_id: str, limit: int) -> list[SearchResult]:
        try:
            return self._search_index.find_similar(item_id, limit)
        except (SearchError, ValueError) as exc:
            raise _search_error(exc) from exc

    async def get_collection(self, id: str) -> Collection | None:
        return self._collections.get(id)

    async def list_collections(self) -> list[Collection]:
        return list(self._collections.values())

    async def get_collection_id_for_item(self, item_id: str) -> str | None:
        for coll_id, collection in self._collections.items():
            if collection.get_item(item_id) is not None:
                return coll_id
        return None

    def get_item(self, id: str) -> tuple[str, Item] | None:
        """The owning collection id and the item with ``id``, if any."""
        for collection in self._collections.values():
            item = collection.get_item(id)
            if item is not None:
                return collection.id, item
        return None

    def start_background_scan(self, interval_secs: float) -> asyncio.Task[None]:
        """Scan now and then every ``interval_secs`` seconds until the task is cancelled."""
        return asyncio.get_running_loop().create_task(self._scan_forever(interval_secs))

    async def _scan_forever(self, interval_secs: float) -> None:
        while True:
            logger.info("Starting background collection scan")
            try:
                await self.scan_all()
            except CollectionRepoError as exc:
                logger.error("Background scan failed: %s", exc)
            await asyncio.sleep(interval_secs)