"""Filtering of item DTOs by Jellyfin query parameters."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

_KNOWN_TYPES = ("Movie", "Series", "Season", "Episode")
_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")
_RFC3339_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})[Tt ]([0-9]{2}):([0-9]{2}):([0-9]{2})"
    r"(?:\.([0-9]+))?([Zz]|[+-][0-9]{2}:[0-9]{2})"
)

Params = Mapping[str, str]


def _eq_ascii_ci(text: str, word: str) -> bool:
    return text.isascii() and text.lower() == word.lower()


def _parse_i32(text: str) -> int | None:
    if not text.isascii() or _INT_RE.fullmatch(text) is None:
        return None
    value = int(text)
    return value if _I32_MIN <= value <= _I32_MAX else None


def _parse_float(text: str) -> float | None:
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _parse_rfc3339(text: str) -> datetime | None:
    match = _RFC3339_RE.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            return None
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    micros = int((fraction or "")[:6].ljust(6, "0"))
    try:
        return datetime(int(year), int(month), int(day), int(hour), int(minute),
                        int(second), micros, tzinfo=tz)
    except ValueError:
        return None


def _display_name(item: Any) -> str:
    return item.sort_name if item.sort_name is not None else item.name


def _include_types(item: Any, params: Params) -> bool:
    value = params.get("includeItemTypes")
    if value is None:
        return True
    return item.item_type in _KNOWN_TYPES and any(
        _eq_ascii_ci(entry.strip(), item.item_type) for entry in value.split(",")
    )


def _exclude_types(item: Any, params: Params) -> bool:
    value = params.get("excludeItemTypes")
    if value is None:
        return True
    return not (
        item.item_type in _KNOWN_TYPES
        and any(_eq_ascii_ci(entry.strip(), item.item_type) for entry in value.split(","))
    )


def _ids(item: Any, params: Params) -> bool:
    value = params.get("ids")
    if value is None:
        return True
    return any(item.id == entry.strip() for entry in value.split(","))


def _exclude_ids(item: Any, params: Params) -> bool:
    value = params.get("excludeItemIds")
    if value is None:
        return True
    return all(item.id != entry.strip() for entry in value.split(","))


def _matches_any(
    values: Iterable[Any] | None, wanted: str, key: Callable[[Any], str]
) -> bool:
    if values is None:
        return False
    values = list(values)
    return any(
        key(value) == entry.strip() for entry in wanted.split("|") for value in values
    )


def _genre_ids(item: Any, params: Params) -> bool:
    value = params.get("genreIds")
    return value is None or _matches_any(item.genre_items, value, lambda g: g.id)


def _genres(item: Any, params: Params) -> bool:
    value = params.get("genres")
    return value is None or _matches_any(item.genres, value, lambda g: g)


def _studio_ids(item: Any, params: Params) -> bool:
    value = params.get("studioIds")
    return value is None or _matches_any(item.studios, value, lambda s: s.id)


def _studio_names(item: Any, params: Params) -> bool:
    value = params.get("studios")
    return value is None or _matches_any(item.studios, value, lambda s: s.name)


def _series_id(item: Any, params: Params) -> bool:
    value = params.get("seriesId")
    return value is None or (item.series_id is not None and item.series_id == value)


def _season_id(item: Any, params: Params) -> bool:
    value = params.get("seasonId")
    return value is None or (item.season_id is not None and item.season_id == value)


def _index_check(param: str, attribute: Callable[[Any], int | None]):
    def check(item: Any, params: Params) -> bool:
        value = params.get(param)
        if value is None:
            return True
        wanted = _parse_i32(value)
        return wanted is None or attribute(item) == wanted

    return check


def _name_starts_with(item: Any, params: Params) -> bool:
    value = params.get("nameStartsWith")
    return value is None or _display_name(item).lower().startswith(value.lower())


def _name_or_greater(item: Any, params: Params) -> bool:
    value = params.get("nameStartsWithOrGreater")
    return value is None or not _display_name(item).lower() < value.lower()


def _name_less_than(item: Any, params: Params) -> bool:
    value = params.get("nameLessThan")
    return value is None or not _display_name(item).lower() > value.lower()


def _official_ratings(item: Any, params: Params) -> bool:
    value = params.get("officialRatings")
    if value is None:
        return True
    rating = item.official_rating
    return rating is not None and any(rating == entry.strip() for entry in value.split("|"))


def _min_community_rating(item: Any, params: Params) -> bool:
    value = params.get("minCommunityRating")
    if value is None:
        return True
    minimum = _parse_float(value)
    if minimum is None:
        return True
    rating = item.community_rating if item.community_rating is not None else 0.0
    return not rating < minimum


def _date_check(param: str, outside: Callable[[datetime, datetime], bool]):
    def check(item: Any, params: Params) -> bool:
        value = params.get(param)
        if value is None:
            return True
        bound = _parse_rfc3339(value)
        if bound is None:
            return True
        if item.premiere_date is None:
            return False
        premiere = _parse_rfc3339(item.premiere_date)
        return premiere is not None and not outside(premiere, bound)

    return check


def _years(item: Any, params: Params) -> bool:
    value = params.get("years")
    if value is None:
        return True
    years = (_parse_i32(entry.strip()) for entry in value.split(","))
    return any(year is not None and item.production_year == year for year in years)


def _user_flag(param: str, flag: Callable[[Any], bool]):
    def check(item: Any, params: Params) -> bool:
        value = params.get(param)
        if value is None:
            return True
        wanted = _eq_ascii_ci(value, "true")
        if item.user_data is None:
            return not wanted
        return flag(item.user_data) == wanted

    return check


def _filters(item: Any, params: Params) -> bool:
    value = params.get("filters")
    if value is None:
        return True
    for entry in value.split(","):
        entry = entry.strip()
        if _eq_ascii_ci(entry, "IsFavorite") or _eq_ascii_ci(entry, "IsFavoriteOrLikes"):
            if item.user_data is None or not item.user_data.is_favorite:
                return False
    return True


_CHECKS: tuple[Callable[[Any, Params], bool], ...] = (
    _include_types,
    _exclude_types,
    _ids,
    _exclude_ids,
    _genre_ids,
    _genres,
    _studio_ids,
    _studio_names,
    _series_id,
    _season_id,
    _index_check("parentIndexNumber", lambda item: item.parent_index_number),
    _index_check("indexNumber", lambda item: item.index_number),
    _name_starts_with,
    _name_or_greater,
    _name_less_than,
    _official_ratings,
    _min_community_rating,
    _date_check("minPremiereDate", lambda date, bound: date < bound),
    _date_check("maxPremiereDate", lambda date, bound: date > bound),
    _years,
    _user_flag("isPlayed", lambda data: data.played),
    _user_flag("isFavorite", lambda data: data.is_favorite),
    _filters,
)


def apply_item_filter(item: Any, params: Params) -> bool:
    """True when ``item`` passes every filter named in ``params``."""
    return all(check(item, params) for check in _CHECKS)


def apply_items_filter(items: Iterable[Any], params: Params) -> list[Any]:
    """The items that pass the filters, in their original order."""
    return [item for item in items if apply_item_filter(item, params)]