# Heuristic next-round predictor: a fixed set of weighted signals over the
# recent history, no learning.
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.analytics.patterns import dominant, is_alternating, repeats_block
from app.core.models import Outcome, Round
from app.history.store import HistoryStore

UNDETERMINED = "Chưa xác định"

MIN_CONFIDENCE = 10.0
MAX_CONFIDENCE = 99.99
SINGLE_ROUND_CONFIDENCE = 30.0
FULL_CONFIDENCE_ROUNDS = 100

Signal = Optional[Tuple[Outcome, float]]


@dataclass(frozen=True)
class SignalWeights:
    streak_break: float = 5.0
    alternation_1: float = 4.5
    alternation_2: float = 4.0
    alternation_3: float = 3.8
    pattern_repeat: float = 3.5
    recent_dominance: float = 3.2
    ratio_skew: float = 3.0
    default_reversal: float = 1.0


@dataclass(frozen=True)
class Prediction:
    outcome: Optional[Outcome]
    confidence: float
    rationale: str

    @property
    def label(self) -> str:
        return self.outcome.value if self.outcome else UNDETERMINED

    @property
    def formatted_confidence(self) -> str:
        return f"{self.confidence:.2f}"


class PredictionEngine:
    """
    Scores both outcomes with the signals below and picks the larger:
        * streak_break      (last 10)  trailing run >= 4 -> opposite, run * w
        * alternation_1/2/3 (10/10/20) block alternation -> opposite of last
        * pattern_repeat    (last 20)  last 5 == previous 5 -> first of block
        * recent_dominance  (last 10)  one side >= 5 times -> that side
        * ratio_skew        (last 30)  |high - low| > 0.3 -> minority, |diff| * 10 * w
        * default_reversal  always     opposite of last
    """

    def __init__(self, store: HistoryStore, weights: SignalWeights | None = None):
        self.store = store
        self.w = weights or SignalWeights()

    # ---------------- Core API ----------------
    def predict(self) -> Prediction:
        n = len(self.store)
        if n == 0:
            return Prediction(None, MIN_CONFIDENCE, "no data")
        last = self.store.last().outcome
        if n == 1:
            return Prediction(last.opposite, SINGLE_ROUND_CONFIDENCE, "single round: reversal")

        signals = self._signals()
        scores = self.scores(signals)
        # ties go to LOW
        guess = Outcome.HIGH if scores[Outcome.HIGH] > scores[Outcome.LOW] else Outcome.LOW
        total = scores[Outcome.HIGH] + scores[Outcome.LOW]
        confidence = scores[guess] / total * 100 if total else 0.0
        confidence *= min(1.0, n / FULL_CONFIDENCE_ROUNDS)
        confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))
        fired = ", ".join(name for name, sig in signals if sig is not None) or "none"
        return Prediction(guess, confidence, f"weighted signals: {fired}")

    def scores(self, signals=None) -> Dict[Outcome, float]:
        acc = {Outcome.HIGH: 0.0, Outcome.LOW: 0.0}
        for _, sig in signals or self._signals():
            if sig is not None:
                outcome, amount = sig
                acc[outcome] += amount
        return acc

    def fired_signals(self) -> List[str]:
        return [name for name, sig in self._signals() if sig is not None]

    @staticmethod
    def position_hints(total: int | None) -> List[int]:
        if not total:
            return []
        base = total % 6
        return [base + 10, base + 11, base + 12]

    # ---------------- Signals ----------------
    def _signals(self):
        r10 = self._outcomes(self.store.get_recent(10))
        r20 = self._outcomes(self.store.get_recent(20))
        r30 = self.store.get_recent(30)
        return [
            ("streak_break", self.streak_break(r10)),
            ("alternation_1", self.alternation(r10, 1, 6, self.w.alternation_1)),
            ("alternation_2", self.alternation(r10, 2, 8, self.w.alternation_2)),
            ("alternation_3", self.alternation(r20, 3, 12, self.w.alternation_3)),
            ("pattern_repeat", self.pattern_repeat(r20)),
            ("recent_dominance", self.recent_dominance(r10)),
            ("ratio_skew", self.ratio_skew(r30)),
            ("default_reversal", self.default_reversal(r10)),
        ]

    @staticmethod
    def _outcomes(rounds: List[Round]) -> List[Outcome]:
        return [r.outcome for r in rounds]

    def streak_break(self, window: List[Outcome]) -> Signal:
        if not window:
            return None
        last = window[-1]
        streak = 0
        for o in reversed(window):
            if o is not last:
                break
            streak += 1
        if streak >= 4:
            return last.opposite, streak * self.w.streak_break
        return None

    def alternation(self, window: List[Outcome], k: int, min_len: int, weight: float) -> Signal:
        if len(window) >= min_len and is_alternating(window, k):
            return window[-1].opposite, weight
        return None

    def pattern_repeat(self, window: List[Outcome]) -> Signal:
        if len(window) < 10:
            return None
        head = repeats_block(window, 5)
        return (head, self.w.pattern_repeat) if head else None

    def recent_dominance(self, window: List[Outcome]) -> Signal:
        if len(window) < 7:
            return None
        side = dominant(window, 5)
        return (side, self.w.recent_dominance) if side else None

    def ratio_skew(self, window: List[Round]) -> Signal:
        if len(window) < 10:
            return None
        freq = HistoryStore.frequency(window)
        diff = abs(freq.high_ratio - freq.low_ratio)
        if diff <= 0.3:
            return None
        minority = Outcome.LOW if freq.high_ratio > freq.low_ratio else Outcome.HIGH
        return minority, diff * 10 * self.w.ratio_skew

    def default_reversal(self, window: List[Outcome]) -> Signal:
        if not window:
            return None
        return window[-1].opposite, self.w.default_reversal
