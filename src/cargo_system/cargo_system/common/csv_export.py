from __future__ import annotations

from typing import Iterable, Sequence


def to_csv(headers: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    """Header line plus one comma-joined line per row.

    Cells are not quoted or escaped, so embedded commas shift columns.
    """
    lines = [",".join(str(h) for h in headers)]
    for row in rows:
        lines.append(",".join("" if cell is None else str(cell) for cell in row))
    return "\n".join(lines)
