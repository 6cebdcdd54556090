"""
The journey log sheet: application state and lifecycle.

A Sheet owns the optional ferry row, the ordered load rows, the header
fields, the duty window and the current search query. Every mutating
operation goes through it so the Open/Closed lock is enforced in one
place. Persistence is explicit (see storage.py).

Lifecycle:
    Open --close()--> Closed --new_flight()--> Open

While closed, row edits and header edits are rejected (they return
False/None and leave state untouched). The duty window and CSV import
are not locked.
"""

from .clock import duty_time, now_hhmm
from .columns import CLOCK_COLUMNS, FERRY_ID
from .rows import (
    create_load_row, create_ferry_row, insert_row, update_field,
    clear_row, is_ferry, new_row_id,
)
from .totals import compute_totals, seed_fob_start, last_fob, filter_rows

META_FIELDS = ('pilot', 'dz', 'reg', 'date', 'fob_start')


class Sheet:
    """Journey log sheet state."""

    def __init__(self):
        self.ferry = None
        self.loads = []
        self.pilot = ''
        self.dz = ''
        self.reg = ''
        self.date = ''
        self.fob_start = ''
        self.closed = False
        self.duty_start = ''
        self.duty_end = ''
        self.search = ''

    # ---- read-outs ----

    def rows(self):
        """All rows in sheet order, ferry row first."""
        return ([self.ferry] if self.ferry else []) + list(self.loads)

    def visible_rows(self):
        return filter_rows(self.rows(), self.search)

    def find_row(self, row_id):
        return next((r for r in self.rows() if r['id'] == row_id), None)

    def totals(self):
        """Totals over the rows visible under the current search."""
        return compute_totals(self.visible_rows())

    def last_fob(self):
        return last_fob(self.rows())

    def pilot_duty(self):
        return duty_time(self.duty_start, self.duty_end)

    def meta(self):
        return {
            'pilot': self.pilot,
            'dz': self.dz,
            'reg': self.reg,
            'date': self.date,
            'fob_start': self.fob_start,
            'closed': self.closed,
        }

    def summary(self):
        """Header block for print/PDF/spreadsheet output."""
        return {
            'pilot': self.pilot,
            'dz': self.dz,
            'reg': self.reg,
            'date': self.date,
            'totals': self.totals(),
            'fob_start': self.fob_start,
            'last_fob': self.last_fob(),
        }

    # ---- internal ----

    def _set_rows(self, rows):
        self.ferry = next((r for r in rows if is_ferry(r)), None)
        self.loads = [r for r in rows if not is_ferry(r)]

    def _replace(self, row_id, new_row):
        self._set_rows([new_row if r['id'] == row_id else r for r in self.rows()])

    def seed_fob(self):
        """Push FOB (Start) into the first row whose FOB is still empty."""
        rows, changed = seed_fob_start(self.rows(), self.fob_start)
        if changed:
            self._set_rows(rows)
        return changed

    # ---- row operations ----

    def add_load_row(self):
        """Add the next numbered load row.

        Returns:
            The new row, or None if the sheet is closed.
        """
        if self.closed:
            return None
        row = create_load_row(self.rows(), self.fob_start)
        self._set_rows(insert_row(self.rows(), row))
        return row

    def add_ferry_row(self):
        """Add the ferry row at the top.

        Returns:
            The new row, or None if closed or a ferry row already exists.
        """
        if self.closed or self.ferry is not None:
            return None
        self.ferry = create_ferry_row(self.fob_start)
        return self.ferry

    def update_row(self, row_id, field, value):
        """Edit one field of a row.

        Raises:
            ValueError: For a non-editable field or a non-numeric count.
        """
        if self.closed:
            return False
        row = self.find_row(row_id)
        if row is None:
            return False
        self._replace(row_id, update_field(row, field, value))
        return True

    def set_now(self, row_id, field, now=None):
        """Stamp T/O or L/D with the current time."""
        if field not in CLOCK_COLUMNS:
            raise ValueError(f"Only {sorted(CLOCK_COLUMNS)} can be set to now")
        return self.update_row(row_id, field, now_hhmm(now))

    def clear_row(self, row_id):
        if self.closed:
            return False
        row = self.find_row(row_id)
        if row is None:
            return False
        self._replace(row_id, clear_row(row))
        return True

    def delete_row(self, row_id):
        if self.closed or self.find_row(row_id) is None:
            return False
        self._set_rows([r for r in self.rows() if r['id'] != row_id])
        return True

    def replace_rows(self, rows):
        """Replace the whole row set (CSV import).

        Not gated by the closed lock. Only the first row carrying the
        ferry id becomes the ferry row; any further one keeps its data
        under a fresh id.
        """
        kept = []
        seen_ferry = False
        for row in rows:
            row = dict(row)
            if row.get('id') == FERRY_ID:
                if seen_ferry:
                    row['id'] = new_row_id()
                else:
                    row['id'] = FERRY_ID
                    seen_ferry = True
            kept.append(row)
        self._set_rows(kept)

    # ---- header / lifecycle ----

    def set_meta(self, **fields):
        """Edit header fields (pilot, dz, reg, date, fob_start).

        Setting a non-empty FOB (Start) seeds the first row's FOB.

        Raises:
            ValueError: For an unknown header field.
        """
        unknown = set(fields) - set(META_FIELDS)
        if unknown:
            raise ValueError(f"Unknown header field(s): {', '.join(sorted(unknown))}")
        if self.closed:
            return False
        changed = False
        for key, value in fields.items():
            if value is None:
                continue
            value = str(value)
            if getattr(self, key) != value:
                setattr(self, key, value)
                changed = True
                if key == 'fob_start':
                    self.seed_fob()
        return changed

    def set_duty(self, duty_start=None, duty_end=None):
        """Set the duty window; allowed on a closed sheet."""
        if duty_start is not None:
            self.duty_start = duty_start
        if duty_end is not None:
            self.duty_end = duty_end

    def close(self):
        if self.closed:
            return False
        self.closed = True
        return True

    def new_flight(self):
        """Unlock a closed sheet with no rows, keeping the header fields."""
        if not self.closed:
            return False
        self.ferry = None
        self.loads = []
        self.closed = False
        return True
