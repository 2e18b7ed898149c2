"""Sort names derived from display names."""

import re
import string
from itertools import dropwhile

_ARTICLES = ("the ", "a ", "an ")
_YEAR_SUFFIX = re.compile(r"\s*\(\d{4}\)\s*\Z")


def make_sort_name(name: str) -> str:
    """Lowercase, drop a leading article and punctuation, and strip a year suffix."""
    title = name.strip().lower()

    for prefix in _ARTICLES:
        if title.startswith(prefix):
            title = title[len(prefix):].lstrip()
            break

    title = "".join(
        dropwhile(lambda c: c.isspace() or c in string.punctuation, title)
    )
    return _YEAR_SUFFIX.sub("", title, count=1).strip()