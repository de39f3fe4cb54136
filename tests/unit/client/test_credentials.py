"""Tests for the token file store."""

import stat

import pytest

from src.book_catalog.client import TokenStore


@pytest.fixture
def store(tmp_path) -> TokenStore:
    return TokenStore(tmp_path / "nested" / "token")


def test_no_token_initially(store: TokenStore):
    assert store.get_token() is None


def test_save_and_read(store: TokenStore):
    store.save("  abc.def.ghi\n")

    assert store.get_token() == "abc.def.ghi"
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_reads_file_on_every_call(store: TokenStore):
    store.save("first")
    store.path.write_text("second")

    assert store.get_token() == "second"


def test_empty_token_rejected(store: TokenStore):
    with pytest.raises(ValueError):
        store.save("   ")


def test_clear(store: TokenStore):
    store.save("token")

    assert store.clear() is True
    assert store.get_token() is None
    assert store.clear() is False


def test_directory_in_place_of_file_reads_as_no_token(tmp_path):
    assert TokenStore(tmp_path).get_token() is None


def test_undecodable_file_reads_as_no_token(store: TokenStore):
    store.path.parent.mkdir(parents=True)
    store.path.write_bytes(b"\xff\xfe\x00bad")

    assert store.get_token() is None
