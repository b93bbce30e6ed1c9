import datetime
import itertools

import mongomock
import pytest

from movie_reviews import create_app
from movie_reviews.store import EntityStore

START = datetime.datetime(2024, 5, 1, 12, 0, tzinfo=datetime.timezone.utc)


def ticking_clock():
    """A clock that advances one minute per call."""
    ticks = itertools.count()
    return lambda: START + datetime.timedelta(minutes=next(ticks))


@pytest.fixture
def db():
    return mongomock.MongoClient()["movie_reviews_test"]


@pytest.fixture
def store(db):
    store = EntityStore(db, clock=ticking_clock())
    store.ensure_indexes()
    return store


@pytest.fixture
def app():
    app = create_app(
        {"TESTING": True, "MONGODB_DB": "movie_reviews_test", "ENABLE_SEED": False},
        mongo_client=mongomock.MongoClient(),
    )
    app.store.clock = ticking_clock()
    return app


@pytest.fixture
def client(app):
    return app.test_client()
