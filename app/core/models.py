from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import logging

from app.core.validation import is_valid_dice, parse_session_number

log = logging.getLogger(__name__)

# every spelling the upstream (or a human) may send, already casefolded
_ALIASES = {
    "tài": "HIGH", "tai": "HIGH", "high": "HIGH", "t": "HIGH",
    "xỉu": "LOW", "xiu": "LOW", "low": "LOW", "x": "LOW",
}


class Outcome(str, Enum):
    HIGH = "Tài"
    LOW = "Xỉu"

    @classmethod
    def parse(cls, text: Any) -> "Outcome":
        if isinstance(text, cls):
            return text
        key = str(text or "").strip().casefold()
        if key not in _ALIASES:
            raise ValueError(f"unknown outcome: {text!r}")
        return cls[_ALIASES[key]]

    @property
    def opposite(self) -> "Outcome":
        return Outcome.LOW if self is Outcome.HIGH else Outcome.HIGH


@dataclass(frozen=True)
class Round:
    session_id: str
    outcome: Outcome
    total: int = 0
    dice: tuple[int, int, int] = field(default=(0, 0, 0))

    @property
    def session_number(self) -> Optional[int]:
        return parse_session_number(self.session_id)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "outcome": self.outcome.value,
            "total": self.total,
            "dice": list(self.dice),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Round":
        return cls(
            session_id=str(d["session_id"]),
            outcome=Outcome.parse(d["outcome"]),
            total=int(d.get("total") or 0),
            dice=_dice_triple(d.get("dice")),
        )


def _dice_triple(raw) -> tuple[int, int, int]:
    faces = list(raw or [])[:3]
    faces += [0] * (3 - len(faces))
    return tuple(int(f or 0) for f in faces)


def parse_round(payload: Any) -> Round | None:
    """Translate one upstream payload (phien / ket_qua / tong_diem / xuc_xac) into a Round.

    Returns None when the payload cannot describe a round: not a JSON object,
    no session id, no outcome, an outcome we do not recognise, or a total /
    dice that are not integers.
    """
    if not isinstance(payload, dict):
        log.warning("upstream payload is not an object: %r", payload)
        return None
    if not payload.get("phien") or not payload.get("ket_qua"):
        log.warning("upstream payload without phien/ket_qua: %r", payload)
        return None
    try:
        outcome = Outcome.parse(payload["ket_qua"])
    except ValueError:
        log.warning("upstream payload with unknown ket_qua: %r", payload.get("ket_qua"))
        return None
    try:
        total = int(payload.get("tong_diem") or 0)
        dice = _dice_triple(payload.get("xuc_xac"))
    except (TypeError, ValueError):
        log.warning("upstream payload with bad tong_diem/xuc_xac: %r", payload)
        return None
    if not all(is_valid_dice(d) for d in dice):
        log.debug("dice out of range for %s: %s", payload["phien"], dice)
    return Round(
        session_id=str(payload["phien"]),
        outcome=outcome,
        total=total,
        dice=dice,
    )
