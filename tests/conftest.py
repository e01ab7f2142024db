"""Shared fixtures: temporary SQLite store, settings and a fake remote source."""

import asyncio
from decimal import Decimal

import pytest

from cardapio_cache.core.settings import Settings
from cardapio_cache.ports.interfaces import MenuItem
from cardapio_cache.repo.item_store import ItemStore


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeMenuSource:
    """In-memory MenuSourcePort that records calls.

    `results` is consumed in order; each entry is either a list of items or an
    exception instance to raise. The last entry is reused once exhausted.
    """

    def __init__(self, *results, delay: float = 0.0):
        self.results = list(results) or [[]]
        self.delay = delay
        self.calls = 0

    async def fetch_menu(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        result = self.results[0] if len(self.results) == 1 else self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return list(result)


def make_item(name, category, price="9.99", description=None, image=None):
    return MenuItem(
        name=name,
        description=description if description is not None else f"{name} description",
        price=Decimal(price),
        image=image or f"{name.lower().replace(' ', '')}.jpg",
        category=category,
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'menu.db'}",
        menu_url="https://menu.test/capstone.json",
        debounce_ms=20,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(settings, clock):
    """Initialized empty ItemStore on a temporary SQLite file."""
    item_store = ItemStore.from_url(settings.database_url, clock=clock)
    item_store.initialize()
    yield item_store
    item_store.close()


@pytest.fixture
def sample_items():
    """Menu items modelled on the public capstone document."""
    return [
        make_item("Greek Salad", "Starters", "12.99",
                  "The famous greek salad of crispy lettuce, peppers, olives and our Chicago style feta cheese."),
        make_item("Bruschetta", "Starters", "7.99",
                  "Our Bruschetta is made from grilled bread that has been smeared with garlic."),
        make_item("Grilled Fish", "Mains", "20.00",
                  "Barbequed catch of the day, with red onion, crisp capers, chive creme fraiche."),
        make_item("Pasta", "Mains", "6.99",
                  "Penne with fried aubergines, cherry tomatoes, tomato sauce, fresh chilli, garlic, basil & salted ricotta cheese."),
        make_item("Lemon Dessert", "Desserts", "4.99",
                  "Light and fluffy traditional homemade Italian Lemon and ricotta cake."),
    ]


@pytest.fixture
def populated_store(store, sample_items):
    store.insert_many(sample_items)
    return store
