"""
Printable HTML rendering of a journey log sheet.

The output is a standalone document (inline CSS, no scripts) meant to
be opened in a browser and printed.
"""

from html import escape

from .columns import COLS, TITLE

PRINT_CSS = (
    'body{font-family:ui-sans-serif,system-ui,-apple-system,Segoe UI,Roboto,Helvetica,Arial;font-size:12px;}'
    'h1{font-size:18px;margin:0 0 8px 0}'
    'table{width:100%;border-collapse:collapse}'
    'th,td{border:1px solid #000;padding:4px;text-align:left}'
    '.meta{margin:8px 0 12px 0;display:flex;gap:12px;flex-wrap:wrap}'
    '.meta div{padding:6px 8px;border:1px solid #ccc;border-radius:8px}'
)


def meta_items(summary):
    """(label, value) pairs for the header block of print and PDF output."""
    totals = summary['totals']
    return [
        ('PILOT', summary.get('pilot') or ''),
        ('DZ', summary.get('dz') or ''),
        ('REG', summary.get('reg') or ''),
        ('DATE', summary.get('date') or ''),
        ('Flights', totals['flights']),
        ('PAX', totals['pax']),
        ('LDG', totals['ldg']),
        ('FLT/T', totals['flt']),
        ('FOB (Start)', f"{summary.get('fob_start') or ''} lbs"),
        ('FOB (End)', f"{summary.get('last_fob') or ''} lbs"),
    ]


def _cell(value):
    return escape('' if value is None else str(value))


def build_print_html(summary, rows):
    """Build the print document.

    Args:
        summary: Sheet.summary() dict (header fields, totals, fuel).
        rows: Rows to print, in sheet order.

    Returns:
        HTML string.
    """
    meta_block = ''.join(
        f'<div><strong>{escape(label)}:</strong> {_cell(value)}</div>'
        for label, value in meta_items(summary)
    )
    head_row = '<thead><tr>' + ''.join(f'<th>{escape(c)}</th>' for c in COLS) + '</tr></thead>'
    body_rows = '<tbody>' + ''.join(
        '<tr>' + ''.join(f'<td>{_cell(row.get(c))}</td>' for c in COLS) + '</tr>'
        for row in rows
    ) + '</tbody>'
    return (
        '<!doctype html><html><head><meta charset="utf-8"/>'
        f'<title>{escape(TITLE)}</title><style>{PRINT_CSS}</style></head><body>'
        f'<h1>{escape(TITLE)}</h1>'
        f'<div class="meta">{meta_block}</div>'
        f'<table>{head_row}{body_rows}</table>'
        '</body></html>'
    )


def write_print_html(path, summary, rows):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(build_print_html(summary, rows))
    print(f"Print file created: {path}")
