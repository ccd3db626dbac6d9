import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from telegram import Bot, Chat, Message, Update, User

# Ensure root path is available for imports
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from filler_bot.services.cache import ClassificationCache  # noqa: E402
from filler_bot.services.models import (  # noqa: E402
    CatalogEntry,
    CatalogUnavailable,
    ClassificationUnavailable,
    LabeledSection,
)
from filler_bot.services.resolution_service import FillerResolver  # noqa: E402
from filler_bot.services.scrapers.base_scraper import FillerSource  # noqa: E402

NARUTO_URL = "https://www.animefillerlist.com/shows/naruto"
SHIPPUDEN_URL = "https://www.animefillerlist.com/shows/naruto-shippuden"
ONE_PIECE_URL = "https://www.animefillerlist.com/shows/one-piece"


class FakeFillerSource(FillerSource):
    """In-memory stand-in for the filler site that counts its calls."""

    def __init__(
        self,
        catalog: list[CatalogEntry] | None = None,
        sections: dict[str, list[LabeledSection]] | None = None,
        catalog_error: bool = False,
        classification_error: bool = False,
    ) -> None:
        self.catalog = catalog if catalog is not None else []
        self.sections = sections or {}
        self.catalog_error = catalog_error
        self.classification_error = classification_error
        self.catalog_calls = 0
        self.classification_calls: list[str] = []
        self.closed = False

    async def fetch_catalog(self) -> list[CatalogEntry]:
        self.catalog_calls += 1
        if self.catalog_error:
            raise CatalogUnavailable("connection refused")
        return list(self.catalog)

    async def fetch_classification(self, locator: str) -> list[LabeledSection]:
        self.classification_calls.append(locator)
        if self.classification_error:
            raise ClassificationUnavailable("502 Bad Gateway")
        return self.sections.get(locator, [])

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def catalog():
    return [
        CatalogEntry(title="Naruto", locator=NARUTO_URL),
        CatalogEntry(title="Naruto Shippuden", locator=SHIPPUDEN_URL),
        CatalogEntry(title="One Piece", locator=ONE_PIECE_URL),
    ]


@pytest.fixture
def fake_source(catalog):
    return FakeFillerSource(
        catalog=catalog,
        sections={
            NARUTO_URL: [
                LabeledSection(labels=("manga_canon",), episodes_text="1-25"),
                LabeledSection(labels=("mixed_filler",), episodes_text="26, 27"),
                LabeledSection(labels=("filler",), episodes_text="26, 97-99, 136"),
            ],
            ONE_PIECE_URL: [
                LabeledSection(labels=("filler",), episodes_text="54-61"),
            ],
        },
    )


@pytest.fixture
def resolver(fake_source):
    return FillerResolver(
        source=fake_source, classification_cache=ClassificationCache()
    )


@pytest.fixture
def user():
    return User(id=123, first_name="Test", is_bot=False)


@pytest.fixture
def chat():
    return Chat(id=456, type="private")


@pytest.fixture
def make_message(user, chat):
    def _make(text: str = "", message_id: int = 1):
        msg = Message(
            message_id=message_id,
            date=datetime.now(),
            chat=chat,
            from_user=user,
            text=text,
        )
        bot = Mock(spec=Bot)
        bot.send_message = AsyncMock()
        bot.edit_message_text = AsyncMock()
        msg.set_bot(bot)
        return msg

    return _make


@pytest.fixture
def make_update():
    def _make(message: Message | None = None, update_id: int = 1):
        return Update(update_id=update_id, message=message)

    return _make


@pytest.fixture
def progress_message():
    return SimpleNamespace(edit_text=AsyncMock())


@pytest.fixture
def context(resolver):
    bot = SimpleNamespace(send_message=AsyncMock())
    return SimpleNamespace(
        bot=bot,
        user_data={},
        bot_data={
            "ALLOWED_USER_IDS": [123],
            "RESOLVER": resolver,
            "FILLER_CONFIG": {"watch_path_marker": "/watch/", "request_timeout": 5},
        },
    )
