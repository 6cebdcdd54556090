"""
Local persistence for the journey log.

Two independent JSON slots live in one directory, one file per key:
    pilotJourneyLog.simple.v2       - the row list (ferry row first)
    pilotJourneyLog.simple.v2.meta  - pilot, dz, reg, date, isClosed, fobStart

Both are read once when a sheet is loaded and rewritten whole on save.
A missing or unreadable slot falls back to an empty sheet.
"""

import json
import os

from .columns import ROWS_KEY, META_KEY
from .rows import migrate_saved_rows, saved_rows
from .sheet import Sheet


class SlotStore:
    """Key-value slots stored as JSON files under one directory."""

    def __init__(self, directory):
        self.directory = directory

    def path(self, key):
        return os.path.join(self.directory, key + '.json')

    def read(self, key):
        """Parsed slot value, or None if the slot was never written.

        Raises:
            ValueError: If the slot holds invalid JSON.
        """
        path = self.path(key)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def write(self, key, value):
        os.makedirs(self.directory, exist_ok=True)
        with open(self.path(key), 'w', encoding='utf-8') as f:
            json.dump(value, f, ensure_ascii=False, indent=1)


def meta_to_json(sheet):
    return {
        'pilot': sheet.pilot,
        'dz': sheet.dz,
        'reg': sheet.reg,
        'date': sheet.date,
        'isClosed': sheet.closed,
        'fobStart': sheet.fob_start,
    }


def _load_rows(store, resume):
    try:
        saved = store.read(ROWS_KEY)
    except (OSError, ValueError):
        store.write(ROWS_KEY, [])
        return []
    if saved is None:
        store.write(ROWS_KEY, [])
        return []
    rows = saved_rows(saved) if resume else migrate_saved_rows(saved)
    if rows != saved:
        store.write(ROWS_KEY, rows)
    return rows


def _load_meta(store, sheet):
    try:
        meta = store.read(META_KEY)
    except (OSError, ValueError):
        return
    if not isinstance(meta, dict):
        return
    sheet.pilot = meta.get('pilot') or ''
    sheet.dz = meta.get('dz') or ''
    sheet.reg = meta.get('reg') or ''
    sheet.date = meta.get('date') or ''
    sheet.fob_start = meta.get('fobStart') or ''
    sheet.closed = bool(meta.get('isClosed'))


def load_sheet(directory, resume=False):
    """Build a Sheet from the slots in a directory.

    A new session runs saved rows through migrate_saved_rows(); a
    resumed one keeps them as stored. The cleaned list is written back
    if anything was dropped. A saved FOB (Start) is seeded into the
    first row as it would be when typed.

    Args:
        directory: Storage directory.
        resume: Continue the stored session as is (ferry row and blank
            load rows included) instead of opening a new one.
    """
    store = SlotStore(directory)
    sheet = Sheet()
    sheet.replace_rows(_load_rows(store, resume))
    _load_meta(store, sheet)
    sheet.seed_fob()
    return sheet


def save_sheet(sheet, directory):
    """Write both slots. Safe to repeat with unchanged state."""
    store = SlotStore(directory)
    store.write(ROWS_KEY, sheet.rows())
    store.write(META_KEY, meta_to_json(sheet))
