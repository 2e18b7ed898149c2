import pytest

from jellofin.sort_name import make_sort_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("The Hunting Party", "hunting party"),
        ("A Beautiful Mind", "beautiful mind"),
        ("An Inconvenient Truth", "inconvenient truth"),
        ("Beauty (2022)", "beauty"),
        ("The Matrix (1999)", "matrix"),
        ("On Chesil Beach (2018)", "on chesil beach"),
    ],
)
def test_make_sort_name(name, expected):
    assert make_sort_name(name) == expected


def test_leading_punctuation_removed():
    assert make_sort_name("  '...And Justice'") == "and justice"


def test_only_one_article_removed():
    assert make_sort_name("The A Team") == "a team"


def test_word_starting_with_article_kept():
    assert make_sort_name("Theory") == "theory"