from datetime import datetime
from typing import List, Literal, Optional


_ALIGN_MARKERS = {"l": ":---", "c": ":---:", "r": "---:"}


def _md_row(cells) -> str:
    return "| " + " | ".join(str(c) for c in cells) + " |"


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Render rows as a Markdown table for the sidebar and dashboards.

    With `headers` None the first row is the header. Columns are centered
    unless `aligns` gives one of "l", "c", "r" per column. No rows, no table.
    """
    if not rows:
        return ""
    if not headers:
        headers, rows = rows[0], rows[1:]

    aligns = aligns or ["c"] * len(headers)
    if len(aligns) != len(headers):
        raise ValueError("Length of aligns must match number of headers.")

    lines = [_md_row(headers), _md_row(_ALIGN_MARKERS[a] for a in aligns)]
    lines.extend(_md_row(row) for row in rows)
    return "\n".join(lines)


def format_price(amount: float) -> str:
    """Whole amounts print without decimals: 12500 -> "$12,500"."""
    if float(amount).is_integer():
        return f"${int(amount):,}"
    return f"${amount:,.2f}"


def format_timestamp(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M")
