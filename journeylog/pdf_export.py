"""
PDF rendering of a journey log sheet with reportlab.

Layout (landscape A4, points, measured from the top-left):
- title and the header block (pilot, DZ, REG, date, totals, fuel)
- a table with the eleven log columns; column widths follow the
  widest header/body text and shrink proportionally when the table
  would not fit the usable width
- long cells are cut character by character until they fit
- rows paginate, redrawing the header row on every new page

Usage:
    python -m journeylog.pdf_export --storage ./.journeylog --output log.pdf
"""

import argparse
import io

from reportlab.lib.pagesizes import A4, landscape
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .columns import COLS, TITLE
from .print_html import meta_items

FONT = 'Helvetica'
MARGIN_X = 40
MARGIN_Y = 40
ROW_HEIGHT = 18
CELL_PAD = 6
TEXT_INSET = 3
TEXT_BASELINE = 12
TITLE_SIZE = 16
META_SIZE = 10
META_LINE_HEIGHT = 14
TABLE_SIZE = 8


def build_pdf_matrix(summary, rows):
    """Table head, body and header lines for the PDF.

    Returns:
        Dict with 'head' (list with one header row), 'body' (list of
        rows of strings) and 'meta_lines' (list of strings).
    """
    head = [list(COLS)]
    body = [[_text(row.get(c)) for c in COLS] for row in rows]
    meta_lines = [f"{label}: {value}" for label, value in meta_items(summary)]
    return {'head': head, 'body': body, 'meta_lines': meta_lines}


def _text(value):
    return '' if value is None else str(value)


def column_widths(head, body, usable_width, font=FONT, size=TABLE_SIZE):
    """Natural column widths from measured text, scaled to fit."""
    widths = [0.0] * len(head)
    for row in [head] + list(body):
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], stringWidth(cell, font, size) + CELL_PAD)
    total = sum(widths)
    scale = usable_width / total if total > usable_width else 1
    return [w * scale for w in widths]


def fit_text(text, max_width, font=FONT, size=TABLE_SIZE):
    """Drop trailing characters until the text fits max_width."""
    shown = text
    while shown and stringWidth(shown, font, size) > max_width:
        shown = shown[:-1]
    return shown


def pdf_filename(summary):
    """pilot_journey_log_<date>_<reg>_<pilot>.pdf, skipping blank parts."""
    bits = [summary.get(k) or '' for k in ('date', 'reg', 'pilot')]
    name = '_'.join(b for b in bits if b).replace(' ', '-')
    return f"pilot_journey_log_{name}.pdf" if name else 'pilot_journey_log.pdf'


class _TablePainter:
    """Draws rows top-down and starts a new page when one is full."""

    def __init__(self, pdf, page_height, col_widths):
        self.pdf = pdf
        self.page_height = page_height
        self.col_widths = col_widths
        self.y = MARGIN_Y
        self.pages = 1

    def text(self, x, y, value):
        self.pdf.drawString(x, self.page_height - y, value)

    def draw_row(self, cells, truncate=True):
        x = MARGIN_X
        for cell, width in zip(cells, self.col_widths):
            self.pdf.rect(x, self.page_height - self.y - ROW_HEIGHT, width, ROW_HEIGHT)
            shown = fit_text(cell, width - CELL_PAD) if truncate else cell
            self.text(x + TEXT_INSET, self.y + TEXT_BASELINE, shown)
            x += width
        self.y += ROW_HEIGHT

    def new_page(self):
        self.pdf.showPage()
        self.pdf.setFont(FONT, TABLE_SIZE)
        self.pdf.setLineWidth(0.5)
        self.y = MARGIN_Y
        self.pages += 1

    def fits(self):
        return self.y + ROW_HEIGHT <= self.page_height - MARGIN_Y


def render_pdf(summary, rows):
    """Render the sheet to PDF bytes.

    Args:
        summary: Sheet.summary() dict.
        rows: Rows in sheet order (unfiltered).

    Returns:
        PDF document as bytes.
    """
    matrix = build_pdf_matrix(summary, rows)
    page_width, page_height = landscape(A4)
    usable_width = page_width - MARGIN_X * 2

    buf = io.BytesIO()
    pdf = canvas.Canvas(buf, pagesize=(page_width, page_height))
    pdf.setTitle(TITLE)
    painter = _TablePainter(pdf, page_height, [])

    pdf.setFont(FONT, TITLE_SIZE)
    painter.text(MARGIN_X, painter.y, TITLE)
    painter.y += 18

    pdf.setFont(FONT, META_SIZE)
    for line in matrix['meta_lines']:
        painter.text(MARGIN_X, painter.y, line)
        painter.y += META_LINE_HEIGHT
    painter.y += 6

    header = matrix['head'][0]
    painter.col_widths = column_widths(header, matrix['body'], usable_width)
    pdf.setFont(FONT, TABLE_SIZE)
    pdf.setStrokeColorRGB(0, 0, 0)
    pdf.setLineWidth(0.5)
    painter.draw_row(header, truncate=False)

    for body_row in matrix['body']:
        if not painter.fits():
            painter.new_page()
            painter.draw_row(header, truncate=False)
        painter.draw_row(body_row)

    pdf.showPage()
    pdf.save()
    return buf.getvalue()


def write_pdf(path, summary, rows):
    """Render and save the PDF; returns the path written."""
    data = render_pdf(summary, rows)
    with open(path, 'wb') as f:
        f.write(data)
    print(f"PDF created: {path}")
    return path


if __name__ == '__main__':
    from .storage import load_sheet

    parser = argparse.ArgumentParser(description='Render a stored journey log sheet to PDF')
    parser.add_argument('--storage', '-s', required=True, help='Sheet storage directory')
    parser.add_argument('--output', '-o', default=None, help='Output PDF path')
    args = parser.parse_args()
    sheet = load_sheet(args.storage, resume=True)
    write_pdf(args.output or pdf_filename(sheet.summary()), sheet.summary(), sheet.rows())
