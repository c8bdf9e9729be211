# catrunner/game/highscore.py
"""
Persisted best score: a single integer under a fixed key, one writer (the
session), last write wins.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Union

from .config import HIGH_SCORE_KEY, HIGH_SCORE_FILE

log = logging.getLogger(__name__)


class MemoryHighScoreStore:
    """Process-local store for headless runs and tests."""
    def __init__(self, value: int = 0):
        self._value = int(value)

    def get(self) -> int:
        return self._value

    def set(self, value: int):
        self._value = int(value)


class FileHighScoreStore:
    """JSON file store ({"runnerHighScore": 123}), shared with other keys if present."""
    def __init__(self, path: Union[str, Path] = HIGH_SCORE_FILE, key: str = HIGH_SCORE_KEY):
        self.path = Path(path).expanduser()
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # ValueError covers JSONDecodeError and undecodable bytes
            log.warning("Unreadable high score file %s (%s), starting from 0", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> int:
        raw = self._read_all().get(self.key, 0)
        try:
            return max(0, int(raw))
        except (TypeError, ValueError, OverflowError):
            log.warning("Ignoring high score %r in %s, starting from 0", raw, self.path)
            return 0

    def set(self, value: int):
        data = self._read_all()
        data[self.key] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data), encoding="utf-8")
        except OSError as e:
            log.error("Could not save high score to %s: %s", self.path, e)
