"""Persisted key-value state: the API credential and conversion history."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

MAX_HISTORY = 20


@dataclass
class HistoryEntry:
    """A successfully converted URL."""
    title: str
    url: str


class StateStore:
    """JSON file holding ``api_key`` and a most-recent-first ``history`` list.

    Every operation re-reads the file, so the store is safe to share between
    sequential conversions but not between concurrent writers.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get_api_key(self) -> Optional[str]:
        key = self._read().get("api_key")
        if isinstance(key, str) and key.strip():
            return key.strip()
        return None

    def set_api_key(self, api_key: str) -> None:
        data = self._read()
        data["api_key"] = api_key.strip()
        self._write(data)
        logger.info("API key saved to %s", self.path)

    def get_history(self) -> list[HistoryEntry]:
        entries = []
        for item in self._read().get("history", []):
            if isinstance(item, dict) and item.get("url"):
                entries.append(HistoryEntry(title=item.get("title") or "", url=item["url"]))
        return entries

    def save_to_history(self, title: Optional[str], url: str) -> list[HistoryEntry]:
        """Put ``url`` at the front, dropping an older entry for the same URL.

        Returns the updated history (never longer than MAX_HISTORY).
        """
        history = [entry for entry in self.get_history() if entry.url != url]
        history.insert(0, HistoryEntry(title=title or "Untitled Article", url=url))
        del history[MAX_HISTORY:]

        data = self._read()
        data["history"] = [asdict(entry) for entry in history]
        self._write(data)
        return history

    def clear_history(self) -> None:
        data = self._read()
        data.pop("history", None)
        self._write(data)
