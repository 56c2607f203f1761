import os
from unittest import mock

import pytest

from fula.keystore import SimpleKeyStorer


def test_simple_key_store(tmp_path):
    key_store = SimpleKeyStorer(str(tmp_path))
    key_store.save_key("dummy")
    assert key_store.load_key() == "dummy"


def test_creates_missing_directory(tmp_path):
    target = tmp_path / "nested" / "secrets"
    key_store = SimpleKeyStorer(str(target))
    assert target.is_dir()
    assert key_store.db_path == str(target)


def test_load_trims_whitespace(tmp_path):
    key_store = SimpleKeyStorer(str(tmp_path))
    key_store.save_key("  dummy \n")
    assert key_store.load_key() == "dummy"


def test_save_replaces_previous_key(tmp_path):
    key_store = SimpleKeyStorer(str(tmp_path))
    key_store.save_key("a much longer first key")
    key_store.save_key("short")
    assert key_store.load_key() == "short"


def test_load_without_saved_key_raises(tmp_path):
    key_store = SimpleKeyStorer(str(tmp_path))
    with pytest.raises(FileNotFoundError):
        key_store.load_key()


def test_falls_back_to_secrets_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRETS_DIR", str(tmp_path))
    with mock.patch("os.makedirs", side_effect=PermissionError):
        key_store = SimpleKeyStorer(str(tmp_path / "unwritable"))
    assert key_store.db_path == str(tmp_path)
    key_store.save_key("dummy")
    assert (tmp_path / "secret_seed.txt").read_text() == "dummy"


def test_falls_back_to_current_directory(tmp_path, monkeypatch):
    monkeypatch.delenv("SECRETS_DIR", raising=False)
    with mock.patch("os.makedirs", side_effect=PermissionError):
        key_store = SimpleKeyStorer(str(tmp_path / "unwritable"))
    assert key_store.db_path == "."


def test_existing_directory_is_kept(tmp_path):
    before = sorted(os.listdir(tmp_path))
    key_store = SimpleKeyStorer(str(tmp_path))
    assert key_store.db_path == str(tmp_path)
    assert sorted(os.listdir(tmp_path)) == before