import httpx
import pytest

from filler_bot.services.models import (
    CatalogUnavailable,
    ClassificationUnavailable,
    LabeledSection,
)
from filler_bot.services.resolution_service import select_filler_text
from filler_bot.services.scrapers.animefillerlist import (
    AnimeFillerListSource,
    parse_catalog_html,
    parse_classification_html,
)

CATALOG_HTML = """
<html><body>
<div id="ShowList">
  <div class="Group"><h2>N</h2>
    <ul>
      <li><a href="/shows/naruto">Naruto</a></li>
      <li><a href="/shows/naruto-shippuden">Naruto Shippuden</a></li>
      <li><a href="/shows/naruto">Naruto</a></li>
      <li><a href="/shows/empty"></a></li>
    </ul>
  </div>
  <div class="Group"><h2>O</h2>
    <ul><li><a href="/shows/one-piece"> One <b>Piece</b> </a></li></ul>
  </div>
</div>
<a href="/about">About</a>
<a href="https://twitter.com/animefillerlist">Twitter</a>
</body></html>
"""

SHOW_HTML = """
<html><body>
<div id="Condensed">
  <div class="manga_canon">
    <span class="Label">Manga Canon Episodes:</span>
    <span class="Episodes"><a href="/shows/naruto/1">1-25</a>, <a>28-52</a></span>
  </div>
  <div class="mixed_canon/filler">
    <span class="Label">Mixed Canon/Filler Episodes:</span>
    <span class="Episodes"><a>26</a>, <a>27</a></span>
  </div>
  <div class="filler">
    <span class="Label">Filler Episodes:</span>
    <span class="Episodes"><a>97-106</a>, <a>136-220</a></span>
  </div>
  <div class="anime_canon">
    <span class="Label">Anime Canon Episodes:</span>
    <span class="Episodes">131-135</span>
  </div>
</div>
</body></html>
"""


def test_parse_catalog_html_collects_show_links():
    entries = parse_catalog_html(CATALOG_HTML, "https://www.animefillerlist.com")

    assert [(e.title, e.locator) for e in entries] == [
        ("Naruto", "https://www.animefillerlist.com/shows/naruto"),
        ("Naruto Shippuden", "https://www.animefillerlist.com/shows/naruto-shippuden"),
        ("One Piece", "https://www.animefillerlist.com/shows/one-piece"),
    ]


def test_parse_catalog_html_tolerates_unexpected_markup():
    assert parse_catalog_html("<html><p>Down for maintenance</p></html>") == []
    assert parse_catalog_html("") == []


def test_parse_classification_html_keeps_labels_and_order():
    sections = parse_classification_html(SHOW_HTML)

    assert sections == [
        LabeledSection(labels=("manga_canon",), episodes_text="1-25, 28-52"),
        LabeledSection(labels=("mixed_canon/filler",), episodes_text="26, 27"),
        LabeledSection(labels=("filler",), episodes_text="97-106, 136-220"),
        LabeledSection(labels=("anime_canon",), episodes_text="131-135"),
    ]


def test_parse_classification_html_multiple_classes():
    html = (
        '<div class="filler odd"><span class="Episodes">'
        "<a>5</a></span></div>"
    )
    assert parse_classification_html(html) == [
        LabeledSection(labels=("filler", "odd"), episodes_text="5")
    ]


def test_parse_classification_html_sees_through_wrapper_elements():
    html = (
        '<div class="filler"><div class="inner"><p class="row">'
        '<span class="Label">Filler Episodes:</span>'
        '<span class="Episodes"><a>7</a>, <a>9-10</a></span>'
        "</p></div></div>"
    )
    sections = parse_classification_html(html)

    assert sections == [LabeledSection(labels=("filler",), episodes_text="7, 9-10")]
    assert select_filler_text(sections) == "7, 9-10"


def test_parse_classification_html_falls_back_to_nearest_classed_ancestor():
    html = '<div class="odd"><span class="Episodes">3</span></div>'
    assert parse_classification_html(html) == [
        LabeledSection(labels=("odd",), episodes_text="3")
    ]


def test_parse_classification_html_without_sections():
    assert parse_classification_html("<div class='filler'>No list yet</div>") == []


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_catalog_uses_shows_url():
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, text=CATALOG_HTML)

    source = AnimeFillerListSource(
        shows_url="https://www.animefillerlist.com/shows",
        client=_mock_client(handler),
    )
    entries = await source.fetch_catalog()
    await source.aclose()

    assert requested == ["https://www.animefillerlist.com/shows"]
    assert len(entries) == 3


@pytest.mark.asyncio
async def test_fetch_catalog_http_error_raises_catalog_unavailable():
    source = AnimeFillerListSource(
        client=_mock_client(lambda request: httpx.Response(503, text="busy"))
    )
    with pytest.raises(CatalogUnavailable):
        await source.fetch_catalog()


@pytest.mark.asyncio
async def test_fetch_catalog_network_error_raises_catalog_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    source = AnimeFillerListSource(client=_mock_client(handler))
    with pytest.raises(CatalogUnavailable):
        await source.fetch_catalog()


@pytest.mark.asyncio
async def test_fetch_classification_returns_sections():
    source = AnimeFillerListSource(
        client=_mock_client(lambda request: httpx.Response(200, text=SHOW_HTML))
    )
    sections = await source.fetch_classification(
        "https://www.animefillerlist.com/shows/naruto"
    )
    assert len(sections) == 4


@pytest.mark.asyncio
async def test_fetch_classification_error_raises_classification_unavailable():
    source = AnimeFillerListSource(
        client=_mock_client(lambda request: httpx.Response(404, text="missing"))
    )
    with pytest.raises(ClassificationUnavailable):
        await source.fetch_classification("https://www.animefillerlist.com/shows/x")


@pytest.mark.asyncio
async def test_aclose_is_safe_without_client():
    source = AnimeFillerListSource()
    await source.aclose()
    await source.aclose()
