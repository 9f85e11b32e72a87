import pytest

from infrastructure.cache import SqliteMatchCache
from factories import make_match


@pytest.fixture
def cache(tmp_path):
    c = SqliteMatchCache(tmp_path / "cache.sqlite")
    yield c
    c.close()


@pytest.fixture
def standard_match():
    return make_match(game_id=1001)
