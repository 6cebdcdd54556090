"""
Totals, fuel mirroring and search filtering.

All totals are computed over whatever rows the caller passes in. To
match what is on screen, pass the filtered rows (filter_rows), not the
full sheet.
"""

from .clock import parse_clock, format_clock
from .columns import COLS, COL_FLIGHT_TIME, COL_FOB, COL_PAX, COL_LDG
from .rows import is_ferry


def _count(value):
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    return 0


def compute_totals(rows):
    """Flights, PAX, LDG and summed FLT/T for a set of rows.

    Args:
        rows: Visible rows (ferry row included when visible).

    Returns:
        Dict with 'flights', 'pax', 'ldg' (ints) and 'flt' ('HH:MM').
    """
    rows = list(rows or [])
    pax = sum(_count(r.get(COL_PAX)) for r in rows)
    ldg = sum(_count(r.get(COL_LDG)) for r in rows)
    minutes = sum(parse_clock(str(r.get(COL_FLIGHT_TIME) or '')) for r in rows)
    return {
        'flights': len(rows),
        'pax': pax,
        'ldg': ldg,
        'flt': format_clock(minutes),
    }


def fob_target(rows):
    """Row that receives the starting fuel: first load row, else ferry."""
    loads = [r for r in rows if not is_ferry(r)]
    if loads:
        return loads[0]
    return next((r for r in rows if is_ferry(r)), None)


def seed_fob_start(rows, fob_start):
    """Copy FOB (Start) into the target row if its FOB is still empty.

    Never overwrites a fuel figure that is already there.

    Returns:
        Tuple of (rows, changed).
    """
    rows = list(rows or [])
    if not fob_start:
        return rows, False
    target = fob_target(rows)
    if target is None or str(target.get(COL_FOB) or '') != '':
        return rows, False
    seeded = []
    for row in rows:
        if row is target:
            row = dict(row, **{COL_FOB: fob_start})
        seeded.append(row)
    return seeded, True


def last_fob(rows):
    """FOB of the last load row in sheet order, or '' if none.

    This is a read-through used for the FOB (End) display; it is not
    stored anywhere.
    """
    loads = [r for r in rows or [] if not is_ferry(r)]
    if not loads:
        return ''
    return str(loads[-1].get(COL_FOB) or '').strip()


def row_matches(row, query):
    """True if any column contains the query (case-insensitive)."""
    q = (query or '').strip().lower()
    if not q:
        return True
    for col in COLS:
        value = row.get(col)
        text = '' if value is None else str(value)
        if q in text.lower():
            return True
    return False


def filter_rows(rows, query):
    """Rows visible under a search query; a blank query keeps all."""
    return [r for r in rows or [] if row_matches(r, query)]
