import pytest
from app.core.models import Outcome, Round


def _rounds(labels, start=1):
    out = []
    for i, c in enumerate(labels, start=start):
        outcome = Outcome.HIGH if c == 'T' else Outcome.LOW
        out.append(Round(session_id=f"#{i}", outcome=outcome, total=12 if c == 'T' else 7, dice=(4, 4, 4) if c == 'T' else (2, 2, 3)))
    return out


@pytest.fixture
def make_rounds():
    """'TTX' -> three Rounds #1..#3 (T = Tài/HIGH, X = Xỉu/LOW)."""
    return _rounds
