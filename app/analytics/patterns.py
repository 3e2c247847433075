from typing import Optional, Sequence
from app.core.models import Outcome

def runs(outcomes: Sequence[Outcome], k: int = 3):
    outcomes = list(outcomes)
    out = []
    if not outcomes:
        return out
    cur = outcomes[0]
    start = 0
    for i in range(1, len(outcomes)):
        if outcomes[i] is cur:
            continue
        # close segment
        seg_len = i - start
        if seg_len >= k:
            out.append((start, i-1, cur, seg_len))
        cur = outcomes[i]
        start = i
    # tail
    seg_len = len(outcomes) - start
    if seg_len >= k:
        out.append((start, len(outcomes)-1, cur, seg_len))
    return out

def is_alternating(outcomes: Sequence[Outcome], k: int) -> bool:
    # only the pair (i, i+k) is compared for each i in the first block
    if k <= 0 or len(outcomes) < 2*k:
        return False
    tail = list(outcomes)[-2*k:]
    return all(tail[i] is not tail[i+k] for i in range(k))

def repeats_block(outcomes: Sequence[Outcome], size: int = 5) -> Optional[Outcome]:
    """Return the first outcome of the last block when it repeats the block before it."""
    if size <= 0 or len(outcomes) < 2*size:
        return None
    outcomes = list(outcomes)
    last, prev = outcomes[-size:], outcomes[-2*size:-size]
    return last[0] if last == prev else None

def dominant(outcomes: Sequence[Outcome], threshold: int) -> Optional[Outcome]:
    n_high = sum(1 for o in outcomes if o is Outcome.HIGH)
    n_low = sum(1 for o in outcomes if o is Outcome.LOW)
    if n_high >= threshold:
        return Outcome.HIGH
    if n_low >= threshold:
        return Outcome.LOW
    return None
