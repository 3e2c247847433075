import re

def is_valid_dice(d: int) -> bool:
    return isinstance(d, int) and 1 <= d <= 6

def parse_session_number(session_id: str | None) -> int | None:
    # "#12345" -> 12345
    m = re.fullmatch(r"\s*#?\s*(\d+)\s*", session_id or "")
    return int(m.group(1)) if m else None
