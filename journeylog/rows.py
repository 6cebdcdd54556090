"""
Row model and load sequencing for the journey log.

Rows are plain dicts keyed by the column labels in columns.py plus
'id'. Functions here never mutate their input rows; they return new
dicts/lists so the sheet controller can decide what to keep.
"""

import uuid

from .clock import flight_time
from .columns import (
    COLS, COL_LOAD, COL_TAKEOFF, COL_LANDING, COL_FLIGHT_TIME, COL_FOB,
    COUNT_COLUMNS, CLOCK_COLUMNS, EDITABLE_COLUMNS, CLEAR_KEEPS,
    FERRY_ID, FERRY_LABEL,
)

# Legacy sheets were pre-seeded with loads 1..19, all blank
LEGACY_SCAFFOLD_MAX_LOAD = 19


def new_row_id():
    """Fresh opaque row identifier."""
    return uuid.uuid4().hex[:8]


def blank_row(row_id, load):
    """Row with every column empty except Load."""
    row = {'id': row_id}
    for col in COLS:
        row[col] = ''
    row[COL_LOAD] = str(load)
    return row


def is_ferry(row):
    return bool(row) and row.get('id') == FERRY_ID


def load_number(label):
    """Parse a Load label as an int, or None if it is not numeric."""
    try:
        return int(str(label).strip())
    except (TypeError, ValueError):
        return None


def next_load_number(rows):
    """Next sequential load number.

    The ferry row and non-numeric labels are ignored.

    Args:
        rows: Iterable of row dicts (may be empty).

    Returns:
        max(numeric loads) + 1, or 1 if there are none.
    """
    nums = []
    for row in rows or []:
        if not row or is_ferry(row):
            continue
        num = load_number(row.get(COL_LOAD))
        if num is not None:
            nums.append(num)
    return max(nums) + 1 if nums else 1


def create_load_row(rows, default_fuel=''):
    """New load row numbered after the existing ones.

    The first load row of a sheet inherits the starting fuel; later
    rows start with an empty FOB.
    """
    row = blank_row(new_row_id(), next_load_number(rows))
    has_loads = any(not is_ferry(r) for r in rows or [])
    if not has_loads:
        row[COL_FOB] = default_fuel or ''
    return row


def create_ferry_row(default_fuel=''):
    """The ferry row, seeded with the starting fuel."""
    row = blank_row(FERRY_ID, FERRY_LABEL)
    row[COL_FOB] = default_fuel or ''
    return row


def insert_row(rows, new_row):
    """Place a new row in sheet order.

    A ferry row goes first and is a no-op when one already exists.
    A load row goes right after the ferry row, or at the end.

    Returns:
        New list of rows.
    """
    rows = list(rows or [])
    ferry_idx = next((i for i, r in enumerate(rows) if is_ferry(r)), None)

    if is_ferry(new_row):
        if ferry_idx is not None:
            return rows
        return [new_row] + rows

    if ferry_idx is not None:
        rows.insert(ferry_idx + 1, new_row)
        return rows
    rows.append(new_row)
    return rows


def parse_count(value):
    """PAX/LDG input to int, or '' when left blank.

    Raises:
        ValueError: If the input is not a whole number.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a count: {value!r}")
    if isinstance(value, int):
        return value
    text = '' if value is None else str(value).strip()
    if text == '':
        return ''
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Not a count: {value!r}") from None


def update_field(row, field, value):
    """Apply a user edit to one field and re-derive FLT/T.

    Args:
        row: Row dict.
        field: Column label; must be user-editable.
        value: New value as typed.

    Returns:
        Updated copy of the row.

    Raises:
        ValueError: For a non-editable field or a non-numeric count.
    """
    if field not in EDITABLE_COLUMNS:
        raise ValueError(f"Field is not editable: {field}")

    updated = dict(row)
    if field in COUNT_COLUMNS:
        updated[field] = parse_count(value)
    else:
        updated[field] = '' if value is None else str(value)

    if field in CLOCK_COLUMNS:
        takeoff = str(updated.get(COL_TAKEOFF) or '')
        landing = str(updated.get(COL_LANDING) or '')
        if takeoff or landing:
            updated[COL_FLIGHT_TIME] = flight_time(takeoff, landing) or ''
    return updated


def clear_row(row):
    """Blank every field except id, Load and BLK/T."""
    cleared = dict(row)
    for col in COLS:
        if col not in CLEAR_KEEPS:
            cleared[col] = ''
    return cleared


def _is_blank(row):
    return all(row.get(col) == '' for col in COLS if col != COL_LOAD)


def _is_scaffold_row(row):
    num = load_number(row.get(COL_LOAD))
    return (num is not None and 1 <= num <= LEGACY_SCAFFOLD_MAX_LOAD
            and _is_blank(row))


def saved_rows(rows):
    """Usable rows from a persisted list: dicts that carry an id.

    Anything else in the slot is dropped. A non-list value gives [].
    """
    if not isinstance(rows, list):
        return []
    return [r for r in rows if isinstance(r, dict) and r.get('id')]


def migrate_saved_rows(rows):
    """Clean a previously persisted row list for a new session.

    A saved ferry row is dropped so the new session opens without one.
    A list made only of blank rows numbered 1..19 is the old
    pre-seeded template and is discarded entirely.

    Returns:
        List of rows to keep.
    """
    kept = [r for r in saved_rows(rows) if not is_ferry(r)]
    if kept and all(_is_scaffold_row(r) for r in kept):
        kept = []
    return kept
