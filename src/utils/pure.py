import time
from typing import Any, Iterable, List, Literal, Optional, Sequence

from utils.config import CURRENCY

_ALIGN_MARKERS = {"l": ":---", "c": ":---:", "r": "---:"}


def generate_markdown_table(
    headers: Optional[Sequence[Any]],
    rows: Sequence[Sequence[Any]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Render rows as a Markdown table.

    Args:
        headers: column headers, or None to promote the first row.
        rows: table body; cells are passed through str().
        aligns: one of 'l', 'c', 'r' per column, centred by default.
    """
    if not rows:
        return ""

    body = [[str(cell) for cell in row] for row in rows]
    if headers:
        head = [str(h) for h in headers]
    else:
        head, body = body[0], body[1:]

    aligns = aligns or ["c"] * len(head)
    if len(aligns) != len(head):
        raise ValueError("Length of aligns must match number of headers.")

    def line(cells: Iterable[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    return "\n".join(
        [line(head), line(_ALIGN_MARKERS[a] for a in aligns), *map(line, body)]
    )


def format_price(amount: int) -> str:
    """2500 -> 'KSh 2,500'"""
    return f"{CURRENCY} {amount:,}"


def timestamp_id(taken: Iterable[int] = ()) -> int:
    """
    Millisecond timestamp id, bumped past any id in `taken` so ids stay
    unique and increasing even when two are minted in the same millisecond.
    """
    candidate = time.time_ns() // 1_000_000
    highest = max(taken, default=0)
    return max(candidate, highest + 1)
