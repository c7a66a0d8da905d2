"""
Control date formatting.

Dates are stored as ISO ``YYYY-MM-DD`` strings and rendered French-style
(``DD/MM/YYYY``). A contiguous run of days collapses into a range label.
"""
from datetime import date
from typing import Iterable, List, Optional

EMPTY_LABEL = "—"


def parse_iso(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip()[:10])
    except (ValueError, AttributeError):
        return None


def format_fr(value: str) -> str:
    """Format an ISO date as DD/MM/YYYY. Unparseable input is returned as-is."""
    parsed = parse_iso(value)
    if parsed is None:
        return value or EMPTY_LABEL
    return parsed.strftime("%d/%m/%Y")


def is_contiguous(dates: List[date]) -> bool:
    """True when sorted dates are consecutive calendar days."""
    ordinals = [d.toordinal() for d in dates]
    return all(b - a == 1 for a, b in zip(ordinals, ordinals[1:]))


def range_label(dates: Iterable[str]) -> str:
    """Render a set of control dates.

    - no dates: "—"
    - one date: "07/10/2025"
    - consecutive days: "du 07/10/2025 au 09/10/2025"
    - otherwise: "07/10/2025, 09/10/2025"
    """
    unique = sorted({d for d in dates if d})
    if not unique:
        return EMPTY_LABEL
    if len(unique) == 1:
        return format_fr(unique[0])

    parsed = [parse_iso(d) for d in unique]
    if all(parsed):
        parsed.sort()
        if is_contiguous(parsed):
            return f"du {parsed[0].strftime('%d/%m/%Y')} au {parsed[-1].strftime('%d/%m/%Y')}"
    return ", ".join(format_fr(d) for d in unique)
