"""
CSV import/export for the journey log.

Format: the literal header line
    Load,T/O,L/D,FLT/T,BLK/T,FOB,F/B,PAX,LDG,F/UP,REMARKS
followed by one line per row, fields split positionally on ','.
There is no quoting, so commas inside a cell are not supported.
"""

import re

from .clock import flight_time
from .columns import (
    COLS, CSV_HEADER, COUNT_COLUMNS, COL_LOAD, COL_TAKEOFF, COL_LANDING,
    COL_FLIGHT_TIME, FERRY_ID, FERRY_LABEL,
)
from .rows import new_row_id


class CsvHeaderError(ValueError):
    """The first line of an imported CSV is not the journey log header."""

    def __init__(self, found=None):
        self.found = found
        super().__init__(f"CSV header mismatch. Expected: {', '.join(COLS)}")


def _cell_text(value):
    return '' if value is None else str(value)


def export_csv(rows):
    """Serialize rows (all of them, unfiltered) to CSV text."""
    lines = [CSV_HEADER]
    for row in rows:
        lines.append(','.join(_cell_text(row.get(col)) for col in COLS))
    return '\n'.join(lines)


def _import_count(text):
    if text == '':
        return ''
    try:
        return int(text.strip())
    except ValueError:
        # Keep what was typed; totals only add real counts
        return text


def import_csv(text):
    """Parse CSV text into rows.

    Args:
        text: Whole file contents.

    Returns:
        List of row dicts, or None if the text has no data lines.

    Raises:
        CsvHeaderError: If the header does not match column for column.
    """
    lines = [line for line in re.split(r'\r?\n', text or '') if line]
    if len(lines) < 2:
        return None

    header = lines[0].split(',')
    for i, col in enumerate(COLS):
        found = header[i].strip() if i < len(header) else ''
        if found != col:
            raise CsvHeaderError(lines[0])

    imported = []
    for line in lines[1:]:
        cells = line.split(',')
        row = {'id': new_row_id()}
        for i, col in enumerate(COLS):
            value = cells[i] if i < len(cells) else ''
            row[col] = _import_count(value) if col in COUNT_COLUMNS else value
        if not row[COL_FLIGHT_TIME]:
            row[COL_FLIGHT_TIME] = flight_time(row[COL_TAKEOFF], row[COL_LANDING])
        if row[COL_LOAD] == FERRY_LABEL:
            row['id'] = FERRY_ID
        imported.append(row)
    return imported


def read_csv_file(path):
    """Import rows from a CSV file on disk."""
    with open(path, 'r', encoding='utf-8') as f:
        rows = import_csv(f.read())
    count = len(rows) if rows else 0
    print(f"  Imported {count} rows from {path}")
    return rows


def write_csv_file(path, rows):
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(export_csv(rows))
    print(f"CSV file created: {path}")
