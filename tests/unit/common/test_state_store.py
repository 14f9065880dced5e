"""Tests for common.state_store module."""

import json
from pathlib import Path

from common.state_store import MAX_HISTORY, HistoryEntry, StateStore


class TestApiKey:
    def test_missing_file_has_no_key(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        assert store.get_api_key() is None

    def test_set_and_get(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "nested" / "state.json")
        store.set_api_key("  secret-key \n")
        assert store.get_api_key() == "secret-key"

    def test_blank_key_is_none(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"api_key": "   "}))
        assert StateStore(path).get_api_key() is None

    def test_corrupt_file_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json")
        store = StateStore(path)
        assert store.get_api_key() is None
        store.set_api_key("k")
        assert store.get_api_key() == "k"


class TestHistory:
    def test_most_recent_first(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        store.save_to_history("First", "https://a.example/1")
        history = store.save_to_history("Second", "https://a.example/2")

        assert [entry.url for entry in history] == ["https://a.example/2", "https://a.example/1"]
        assert store.get_history() == history

    def test_resaving_url_moves_it_to_front(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        store.save_to_history("One", "https://a.example/1")
        store.save_to_history("Two", "https://a.example/2")
        history = store.save_to_history("One again", "https://a.example/1")

        assert history == [
            HistoryEntry("One again", "https://a.example/1"),
            HistoryEntry("Two", "https://a.example/2"),
        ]

    def test_capped_at_max_entries(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        for i in range(MAX_HISTORY + 5):
            store.save_to_history(f"Article {i}", f"https://a.example/{i}")

        history = store.get_history()
        assert len(history) == MAX_HISTORY
        assert history[0].url == f"https://a.example/{MAX_HISTORY + 4}"
        assert history[-1].url == "https://a.example/5"

    def test_missing_title_gets_placeholder(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        history = store.save_to_history(None, "https://a.example/1")
        assert history[0].title == "Untitled Article"

    def test_history_keeps_api_key(self, tmp_path: Path) -> None:
        store = StateStore(tmp_path / "state.json")
        store.set_api_key("k")
        store.save_to_history("One", "https://a.example/1")
        store.clear_history()

        assert store.get_api_key() == "k"
        assert store.get_history() == []
