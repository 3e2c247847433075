from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Sequence
import logging

from app.core.models import Outcome, Round

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Frequency:
    high_count: int = 0
    low_count: int = 0
    total: int = 0
    high_ratio: float = 0.0
    low_ratio: float = 0.0


class HistoryStore:
    """Deduplicated, ascending, size-bounded sequence of past rounds.

    Rounds are keyed by session id (first write wins) and kept sorted by the
    numeric value of that id. Once more than ``max_length`` rounds are held,
    the oldest ones are evicted.
    """

    def __init__(self, max_length: int = 500):
        self.max_length = max_length
        self._rounds: list[Round] = []
        self._ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._rounds)

    def add_round(self, r: Round | None) -> bool:
        if r is None or not r.session_id or r.session_number is None:
            log.debug("rejected malformed round: %r", r)
            return False
        if r.session_id in self._ids:
            log.debug("rejected duplicate round %s", r.session_id)
            return False
        self._rounds.append(r)
        self._rounds.sort(key=lambda x: x.session_number)
        self._rounds = self._rounds[-self.max_length:]
        self._ids = {x.session_id for x in self._rounds}
        return True

    def replace(self, rounds: Iterable[Round]):
        """Drop everything held and load ``rounds`` under the same rules as add_round.

        Loads in one pass: first occurrence of each id kept, one sort, one truncation.
        """
        kept, seen = [], set()
        for r in rounds:
            if r is None or not r.session_id or r.session_number is None or r.session_id in seen:
                continue
            seen.add(r.session_id)
            kept.append(r)
        kept.sort(key=lambda x: x.session_number)
        self._rounds = kept[-self.max_length:]
        self._ids = {x.session_id for x in self._rounds}

    def get_all(self) -> list[Round]:
        return list(self._rounds)

    def get_recent(self, n: int) -> list[Round]:
        if n <= 0:
            return []
        return self._rounds[-n:]

    def last(self) -> Round | None:
        return self._rounds[-1] if self._rounds else None

    @staticmethod
    def frequency(subset: Sequence[Round]) -> Frequency:
        if not subset:
            return Frequency()
        high = sum(1 for r in subset if r.outcome is Outcome.HIGH)
        low = sum(1 for r in subset if r.outcome is Outcome.LOW)
        total = len(subset)
        return Frequency(high, low, total, high / total, low / total)

    @staticmethod
    def current_streak(subset: Sequence[Round], outcome: Outcome | str) -> int:
        target = Outcome.parse(outcome)
        count = 0
        for r in reversed(subset):
            if r.outcome is not target:
                break
            count += 1
        return count
