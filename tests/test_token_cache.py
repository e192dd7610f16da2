import json

from udemy_downloader.utils.token_cache import clear_cached_token, load_cached_token, save_cached_token


def test_token_round_trip_and_clear(tmp_path):
    path = str(tmp_path / "nested" / "token.json")

    save_cached_token(path, "abc123")

    assert load_cached_token(path) == "abc123"
    clear_cached_token(path)
    assert load_cached_token(path) is None


def test_corrupt_cache_is_ignored(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{not json")

    assert load_cached_token(str(path)) is None


def test_disabled_cache():
    assert load_cached_token(None) is None
    save_cached_token(None, "abc123")
    clear_cached_token(None)


def test_saved_token_records_login(tmp_path):
    path = tmp_path / "token.json"

    save_cached_token(str(path), "abc123", username="me@example.com")

    data = json.loads(path.read_text())
    assert data["username"] == "me@example.com"
    assert load_cached_token(str(path)) == "abc123"
