"""
Excel export of a journey log sheet.

Creates a two-sheet workbook:
- "Journey Log": the eleven log columns, one row per entry
- "Summary": header fields, totals and fuel

Usage:
    python -m journeylog.xlsx_export --storage ./.journeylog --output log.xlsx
"""

import argparse

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .columns import COLS, COL_REMARKS, COL_FOLLOW_UP, TITLE
from .print_html import meta_items
from .rows import is_ferry


# ============ Styles ============

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=10)
HEADER_FILL = PatternFill(start_color='1F4E79', end_color='1F4E79', fill_type='solid')
DATA_FONT = Font(name='Calibri', size=9)
FERRY_FILL = PatternFill(start_color='FCE4D6', end_color='FCE4D6', fill_type='solid')
THIN_BORDER = Border(
    left=Side(style='thin', color='B4C6E7'),
    right=Side(style='thin', color='B4C6E7'),
    top=Side(style='thin', color='B4C6E7'),
    bottom=Side(style='thin', color='B4C6E7')
)

# Column widths, same order as COLS
COLUMN_WIDTHS = [7, 7, 7, 8, 8, 8, 8, 6, 6, 18, 40]

WRAP_COLUMNS = {COL_FOLLOW_UP, COL_REMARKS}


def _write_log_sheet(ws, rows):
    for col_idx, (col_name, width) in enumerate(zip(COLS, COLUMN_WIDTHS), 1):
        cell = ws.cell(row=1, column=col_idx, value=col_name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = THIN_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    ws.freeze_panes = 'A2'
    ws.auto_filter.ref = f"A1:{get_column_letter(len(COLS))}1"

    for row_num, row in enumerate(rows, 2):
        for col_idx, col in enumerate(COLS, 1):
            val = row.get(col, '')
            cell = ws.cell(row=row_num, column=col_idx, value=val if val != '' else None)
            cell.font = DATA_FONT
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal='center' if col not in WRAP_COLUMNS else 'left',
                                       vertical='center', wrap_text=col in WRAP_COLUMNS)
            if is_ferry(row):
                cell.fill = FERRY_FILL


def _write_summary_sheet(ws, summary):
    title_font = Font(name='Calibri', bold=True, size=14, color='1F4E79')
    label_font = Font(name='Calibri', bold=True, size=10)
    value_font = Font(name='Calibri', size=10)

    ws.column_dimensions['A'].width = 16
    ws.column_dimensions['B'].width = 24

    title = f"{summary['pilot']} - {TITLE}" if summary.get('pilot') else TITLE
    ws.cell(row=1, column=1, value=title).font = title_font
    ws.merge_cells('A1:B1')

    for row, (label, value) in enumerate(meta_items(summary), 3):
        ws.cell(row=row, column=1, value=label).font = label_font
        ws.cell(row=row, column=2, value=value).font = value_font
        ws.cell(row=row, column=1).border = THIN_BORDER
        ws.cell(row=row, column=2).border = THIN_BORDER


def write_xlsx(path, summary, rows):
    """Write the sheet to an .xlsx workbook.

    Args:
        path: Output file path.
        summary: Sheet.summary() dict.
        rows: Rows in sheet order.

    Returns:
        The path written.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Journey Log"
    _write_log_sheet(ws, rows)
    _write_summary_sheet(wb.create_sheet("Summary"), summary)
    wb.save(path)
    print(f"Excel file created: {path}")
    print("Sheets: Journey Log | Summary")
    return path


if __name__ == '__main__':
    from .storage import load_sheet

    parser = argparse.ArgumentParser(description='Export a stored journey log sheet to Excel')
    parser.add_argument('--storage', '-s', required=True, help='Sheet storage directory')
    parser.add_argument('--output', '-o', required=True, help='Output Excel file path')
    args = parser.parse_args()
    sheet = load_sheet(args.storage, resume=True)
    write_xlsx(args.output, sheet.summary(), sheet.rows())
