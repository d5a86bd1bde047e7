# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasktracker import create_app
from tasktracker.extensions import db, hasher
from tasktracker.models import User

PASSWORD = "Passw0rd1"


@pytest.fixture()
def app(tmp_path: Path):
    """
    Application wired with TestConfig and a throwaway SQLite file.

    A file (not :memory:) so async views, which run on another thread,
    see the same database. No app context stays pushed: every request
    and every helper gets its own, like in production.
    """
    app = create_app(
        "config.TestConfig",
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}",
    )
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()
    hasher.shutdown()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Insert a user directly (sync hash) and return its id."""

    def _make(email: str = "ada@example.com", name: str = "Ada Lovelace", password: str = PASSWORD) -> int:
        with app.app_context():
            user = User(name=name, email=email.lower(), password_hash=hasher.hash_sync(password))
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture()
def login(client):
    """Log `client` in through the real form."""

    def _login(email: str = "ada@example.com", password: str = PASSWORD):
        return client.post("/users/login", data={"email": email, "password": password})

    return _login


@pytest.fixture()
def logged_in(client, make_user, login) -> int:
    user_id = make_user()
    resp = login()
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/tasks")
    # drop the "logged in" flash so tests see only their own messages
    with client.session_transaction() as sess:
        sess.pop("_flashes", None)
    return user_id
