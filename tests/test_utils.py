import pytest

from filler_bot.utils import (
    extract_episode_number,
    extract_first_url,
    get_site_name_from_url,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("E3 - The Hidden Leaf", 3),
        ("E136 - The Day Naruto Dies", 136),
        ("Episode 12: Arrival", 12),
        ("S2 E07 - Return", 7),
        ("ep. 5", 5),
        ("E0 - Preview", None),
        ("The Day Naruto Dies", None),
        ("", None),
    ],
)
def test_extract_episode_number(text, expected):
    assert extract_episode_number(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("check https://example.com/watch/1.", "https://example.com/watch/1"),
        ("(http://example.com/watch/abc)", "http://example.com/watch/abc"),
        ("no links here", None),
        ("", None),
    ],
)
def test_extract_first_url(text, expected):
    assert extract_first_url(text) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.crunchyroll.com/watch/GXJHM3N9E", "CRUNCHYROLL"),
        ("https://animefillerlist.com/shows/naruto", "ANIMEFILLERLIST"),
        ("", "Unknown"),
        ("not-a-url", "Unknown"),
    ],
)
def test_get_site_name_from_url(url, expected):
    assert get_site_name_from_url(url) == expected
