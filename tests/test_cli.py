"""Tests for main.py -- the admin CLI.

Runs the real argparse entry point against a throwaway SQLite file and checks
soft-delete / restore round trips through the stores.
"""

import pytest

import main as cli
from auth.models import User
from auth.store import UserStore
from content.models import Author
from content.store import ContentStore
from core.config import get_settings


@pytest.fixture
def db_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    settings = get_settings().model_copy(update={"database_url": url})
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    return url


def test_users_delete_and_restore(db_url, capsys):
    store = UserStore(db_url)
    uid = store.create_user(User(name="Ada", email="ada@example.com", hashed_password="x"))

    assert cli.main(["users", "delete", "ada@example.com"]) == 0
    assert store.get_by_id(uid) is None

    assert cli.main(["users", "list"]) == 0
    assert "ada@example.com" not in capsys.readouterr().out

    assert cli.main(["users", "list", "--all"]) == 0
    assert "ada@example.com" in capsys.readouterr().out

    assert cli.main(["users", "restore", "ada@example.com"]) == 0
    assert store.get_by_id(uid) is not None
    store.close()


def test_users_unknown_email(db_url, capsys):
    assert cli.main(["users", "delete", "nobody@example.com"]) == 1
    assert "No user" in capsys.readouterr().out


def test_authors_delete_and_restore(db_url):
    store = ContentStore(db_url)
    aid = store.create_author(Author(name="Ursula"))

    assert cli.main(["authors", "delete", str(aid)]) == 0
    assert store.get_author(aid) is None
    assert cli.main(["authors", "delete", str(aid)]) == 1

    assert cli.main(["authors", "restore", str(aid)]) == 0
    assert store.get_author(aid) is not None
    store.close()


def test_posts_restore_missing(db_url):
    assert cli.main(["posts", "restore", "42"]) == 1


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
