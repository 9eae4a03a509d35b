from __future__ import annotations

"""Key-value JSON file holding the all-time high score.

Layout:
{
  "geometry-games-high-score": 215
}

Other keys in the file are preserved on write.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import StorageUnavailable

log = logging.getLogger(__name__)

HIGH_SCORE_KEY = "geometry-games-high-score"


class JsonHighScoreStore:
    def __init__(self, path: str | Path, key: str = HIGH_SCORE_KEY) -> None:
        self.path = Path(path)
        self.key = key

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise StorageUnavailable(f"Corrupt high score file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageUnavailable(f"Unexpected high score layout in {self.path}")
        return data

    def load_high_score(self) -> int:
        raw = self._load().get(self.key, 0)
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            log.warning("Ignoring non-numeric high score %r in %s", raw, self.path)
            return 0

    def save_high_score(self, score: int) -> None:
        try:
            data = self._load()
        except StorageUnavailable:
            data = {}
        data[self.key] = int(score)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write {self.path}: {exc}") from exc
        log.debug("Stored high score %d in %s", score, self.path)
