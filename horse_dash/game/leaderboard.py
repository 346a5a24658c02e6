# horse_dash/game/leaderboard.py
from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

from .config import LEADERBOARD_SIZE, LEADERBOARD_NAME_PATTERN

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(LEADERBOARD_NAME_PATTERN)


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int


def is_valid_name(name: str) -> bool:
    return bool(_NAME_RE.fullmatch(name or ""))


class Leaderboard:
    """
    Top-N local high scores, best first. Ties keep the earlier entry ahead.
    Backed by a JSON file when `path` is given, otherwise memory only.
    """

    def __init__(self, path: Optional[Path] = None, size: int = LEADERBOARD_SIZE):
        self.path = Path(path) if path is not None else None
        self.size = size
        self._entries: List[ScoreEntry] = []
        if self.path is not None:
            self.load()

    @property
    def entries(self) -> List[ScoreEntry]:
        return list(self._entries)

    def qualifies(self, score: int) -> bool:
        if score <= 0:
            return False
        if len(self._entries) < self.size:
            return True
        return score > self._entries[-1].score

    def add(self, name: str, score: int) -> Optional[int]:
        """
        Insert a score. Returns its 1-based rank, or None if it fell off the board.
        Raises ValueError for a bad name or a negative score.
        """
        if not is_valid_name(name):
            raise ValueError(f"name must be 1-5 letters A-Z, got {name!r}")
        if score < 0:
            raise ValueError(f"score must be >= 0, got {score}")

        entry = ScoreEntry(name=name, score=int(score))
        rank = len(self._entries)
        for i, e in enumerate(self._entries):
            if entry.score > e.score:
                rank = i
                break
        self._entries.insert(rank, entry)
        del self._entries[self.size:]
        self.save()
        return rank + 1 if rank < self.size else None

    def load(self):
        self._entries = []
        if self.path is None or not self.path.exists():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            entries = [ScoreEntry(str(r["name"]), int(r["score"])) for r in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("ignoring unreadable score file %s: %s", self.path, e)
            return
        entries = [e for e in entries if is_valid_name(e.name) and e.score >= 0]
        entries.sort(key=lambda e: e.score, reverse=True)
        self._entries = entries[:self.size]

    def save(self):
        if self.path is None:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps([asdict(e) for e in self._entries], indent=2),
                                 encoding="utf-8")
        except OSError as e:
            # the in-memory board stays valid for this session
            logger.warning("could not write score file %s: %s", self.path, e)
