"""Shared fixtures: an app on in-memory sqlite, a client, and a few seeds."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from flatjudge import create_app
from flatjudge.extensions import db
from flatjudge.routes import register_blueprints
from flatjudge.helpers.riders import create_rider
from flatjudge.helpers.judges import create_judge
from flatjudge.helpers.gate import get_settings, start_voting


T0 = datetime(2026, 5, 1, 12, 0, 0)


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "LOG_LIMIT": 1000,
    })
    register_blueprints(app)

    with app.app_context():
        db.create_all()
        get_settings()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def rider(app):
    return create_rider("Taro Yamada", rider_name="TARO")


@pytest.fixture
def other_rider(app):
    return create_rider("Hanako Sato", rider_name="HANA")


@pytest.fixture
def judge(app):
    return create_judge("Judge A")


@pytest.fixture
def second_judge(app):
    return create_judge("Judge B")


@pytest.fixture
def commit_fails(monkeypatch):
    """Every commit on the session raises as if the database went away."""
    def fail():
        raise OperationalError("COMMIT", {}, Exception("database is unavailable"))

    monkeypatch.setattr(db.session, "commit", fail)


@pytest.fixture
def voting_open(rider):
    """Voting open for `rider`, started at T0."""
    return start_voting(rider.id, now=T0)


def sheet(value, item_ids=None):
    """Judge sheet giving `value` on every default rubric item."""
    ids = item_ids or ["make_rate", "difficulty", "aggressiveness", "stability", "impact", "composition"]
    return [{"item_id": i, "score": value} for i in ids]
