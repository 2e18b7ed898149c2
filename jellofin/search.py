"""In-memory full-text index over the items of all collections."""

from __future__ import annotations

import enum
import math
import re
import threading
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace

from .collection import Collection
from .item import ItemType

_TEXT_FIELDS = ("name", "overview", "genres")
_RAW_FIELDS = ("id", "collection_id", "item_type")
_DEFAULT_FIELDS = _TEXT_FIELDS
_MAX_TOKEN_BYTES = 40
_K1 = 1.2
_B = 0.75

_TOKEN_RE = re.compile(r"[^\W_]+")
_SPACE_RE = re.compile(r"\s*")
_PIECE_RE = re.compile(r'([+-]?)(?:([^\s":+-][^\s":]*):)?(?:"([^"]*)"|([^\s"]+))')
_OPERATORS = ("AND", "OR", "NOT")


class SearchError(Exception):
    """A search query could not be parsed."""


@dataclass(frozen=True)
class SearchResult:
    id: str
    collection_id: str
    item_type: str
    name: str


class _Occur(enum.Enum):
    SHOULD = "should"
    MUST = "must"
    MUST_NOT = "must_not"


@dataclass(frozen=True)
class _Clause:
    occur: _Occur
    field: str | None
    terms: tuple[str, ...]


def _tokenize(text: str) -> list[str]:
    return [
        token.lower()
        for token in _TOKEN_RE.findall(text)
        if len(token.encode("utf-8")) < _MAX_TOKEN_BYTES
    ]


@dataclass
class _Document:
    result: SearchResult
    text: dict[str, list[list[str]]]
    raw: dict[str, str]

    def field_length(self, field: str) -> int:
        if field in _RAW_FIELDS:
            return 1
        return sum(len(tokens) for tokens in self.text.get(field, ()))

    def frequency(self, field: str, terms: tuple[str, ...]) -> int:
        if field in _RAW_FIELDS:
            return int(len(terms) == 1 and self.raw.get(field) == terms[0])
        width = len(terms)
        return sum(
            1
            for tokens in self.text.get(field, ())
            for window in zip(*(tokens[offset:] for offset in range(width)))
            if window == terms
        )


class _Stats:
    """Corpus statistics used for BM25 scoring."""

    def __init__(self, documents: list[_Document]) -> None:
        self._documents = documents
        self.num_docs = len(documents)
        self.avg_length = {
            field: (sum(d.field_length(field) for d in documents) / self.num_docs or 1.0)
            if self.num_docs
            else 1.0
            for field in _TEXT_FIELDS + _RAW_FIELDS
        }
        self._doc_freq: dict[tuple[str, str], int] = {}

    def idf(self, field: str, term: str) -> float:
        key = (field, term)
        if key not in self._doc_freq:
            self._doc_freq[key] = sum(
                1 for d in self._documents if d.frequency(field, (term,)) > 0
            )
        df = self._doc_freq[key]
        return math.log(1.0 + (self.num_docs - df + 0.5) / (df + 0.5))

    def score(self, doc: _Document, field: str, terms: tuple[str, ...], tf: int) -> float:
        idf = sum(self.idf(field, term) for term in terms)
        norm = 1.0 - _B + _B * doc.field_length(field) / self.avg_length[field]
        return idf * tf * (_K1 + 1.0) / (tf + _K1 * norm)


def _make_clause(prefix: str, field: str | None, value: str, negate: bool) -> _Clause | None:
    if field is not None and field not in _TEXT_FIELDS + _RAW_FIELDS:
        raise SearchError(f"Field does not exist: {field!r}")
    if negate or prefix == "-":
        occur = _Occur.MUST_NOT
    elif prefix == "+":
        occur = _Occur.MUST
    else:
        occur = _Occur.SHOULD
    terms = (value,) if field in _RAW_FIELDS else tuple(_tokenize(value))
    if not terms:
        return None
    return _Clause(occur, field, terms)


def _parse_query(query: str) -> list[_Clause]:
    clauses: list[_Clause] = []
    pending: str | None = None
    seen_operand = False
    pos = _SPACE_RE.match(query, 0).end()

    while pos < len(query):
        match = _PIECE_RE.match(query, pos)
        if match is None:
            raise SearchError(f"Syntax error in query: {query!r}")
        pos = _SPACE_RE.match(query, match.end()).end()
        prefix, field, phrase, word = match.groups()

        if phrase is None and not prefix and field is None and word in _OPERATORS:
            if pending is not None or (word != "NOT" and not seen_operand):
                raise SearchError(f"Misplaced operator {word} in query: {query!r}")
            pending = word
            if word == "AND" and clauses and clauses[-1].occur is _Occur.SHOULD:
                clauses[-1] = replace(clauses[-1], occur=_Occur.MUST)
            continue

        if phrase is None and ":" in word:
            field, _, word = word.partition(":")
            if not word:
                raise SearchError(f"Missing value for field {field!r}")

        clause = _make_clause(
            prefix, field, phrase if phrase is not None else word, pending == "NOT"
        )
        if clause is not None:
            if pending == "AND" and clause.occur is _Occur.SHOULD:
                clause = replace(clause, occur=_Occur.MUST)
            clauses.append(clause)
        pending = None
        seen_operand = True

    if pending is not None:
        raise SearchError(f"Query ends with operator {pending}: {query!r}")
    return clauses


def _check_limit(limit: int) -> None:
    if limit <= 0:
        raise ValueError("limit must be strictly greater than 0")


class SearchIndex:
    """Searchable index of movies, series and episodes, rebuilt as a whole."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._documents: list[_Document] = []

    def rebuild(self, collections: Mapping[str, Collection]) -> None:
        """Replace the indexed documents with those of the given collections."""
        documents = list(self._documents_for(collections.values()))
        with self._lock:
            self._documents = documents

    def search(self, query: str, limit: int) -> list[SearchResult]:
        """Run a query over name, overview and genres; best matches first."""
        _check_limit(limit)
        clauses = _parse_query(query)
        return self._top(self._snapshot(), clauses, limit)

    def find_similar(self, item_id: str, limit: int) -> list[SearchResult]:
        """Items of the same type as ``item_id``, excluding the item itself."""
        _check_limit(limit)
        documents = self._snapshot()
        source = next((d for d in documents if d.raw["id"] == item_id), None)
        if source is None:
            return []
        # Genres are indexed but not stored, so only the item type drives similarity.
        clauses = [
            _Clause(_Occur.MUST, "item_type", (source.raw["item_type"],)),
            _Clause(_Occur.MUST_NOT, "id", (item_id,)),
        ]
        return self._top(documents, clauses, limit)

    def _snapshot(self) -> list[_Document]:
        with self._lock:
            return self._documents

    @staticmethod
    def _documents_for(collections: Iterable[Collection]) -> Iterator[_Document]:
        for collection in collections:
            for movie in collection.movies.values():
                yield _document(
                    movie.id, movie.collection_id, movie.name, ItemType.MOVIE,
                    movie.overview, movie.genres,
                )
            for show in collection.shows.values():
                yield _document(
                    show.id, show.collection_id, show.name, ItemType.SERIES,
                    show.overview, show.genres,
                )
                for season in show.seasons.values():
                    for episode in season.episodes.values():
                        yield _document(
                            episode.id, episode.collection_id, episode.name,
                            ItemType.EPISODE, episode.overview, [],
                        )

    @staticmethod
    def _top(documents: list[_Document], clauses: list[_Clause], limit: int) -> list[SearchResult]:
        if not any(c.occur is not _Occur.MUST_NOT for c in clauses):
            return []
        stats = _Stats(documents)
        scored = [
            (score, position, doc)
            for position, doc in enumerate(documents)
            if (score := _score(doc, clauses, stats)) is not None
        ]
        scored.sort(key=lambda entry: (-entry[0], entry[1]))
        return [doc.result for _, _, doc in scored[:limit]]


def _document(
    item_id: str,
    collection_id: str,
    name: str,
    item_type: ItemType,
    overview: str | None,
    genres: Iterable[str],
) -> _Document:
    return _Document(
        result=SearchResult(
            id=item_id, collection_id=collection_id, item_type=item_type.value, name=name
        ),
        text={
            "name": [_tokenize(name)],
            "overview": [_tokenize(overview)] if overview is not None else [],
            "genres": [_tokenize(genre) for genre in genres],
        },
        raw={"id": item_id, "collection_id": collection_id, "item_type": item_type.value},
    )


def _clause_score(doc: _Document, clause: _Clause, stats: _Stats) -> float | None:
    fields = (clause.field,) if clause.field is not None else _DEFAULT_FIELDS
    total = 0.0
    matched = False
    for field in fields:
        tf = doc.frequency(field, clause.terms)
        if tf:
            matched = True
            total += stats.score(doc, field, clause.terms, tf)
    return total if matched else None


def _score(doc: _Document, clauses: list[_Clause], stats: _Stats) -> float | None:
    total = 0.0
    has_must = False
    matched_should = False
    for clause in clauses:
        score = _clause_score(doc, clause, stats)
        if clause.occur is _Occur.MUST_NOT:
            if score is not None:
                return None
        elif clause.occur is _Occur.MUST:
            has_must = True
            if score is None:
                return None
            total += score
        elif score is not None:
            matched_should = True
            total += score
    if not has_must and not matched_should:
        return None
    return total