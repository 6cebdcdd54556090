#!/usr/bin/env python3
"""
Pilot journey log command-line runner.

Keeps one journey log sheet in a local storage directory and edits,
imports and exports it one command at a time.

Usage:
    python run.py show                                   # Sheet, totals, fuel
    python run.py show --search ferry                    # Filtered view + totals
    python run.py meta --pilot "Jane Doe" --dz EDXX --reg D-FXXX --date 2025-06-01 --fob 500
    python run.py ferry                                  # Add the ferry row
    python run.py add                                    # Add next load row
    python run.py set --row 1 --field T/O --value 10:10  # Edit a field
    python run.py now --row 1 --field L/D                # Stamp current time
    python run.py clear --row 1                          # Blank a row (keeps BLK/T)
    python run.py delete --row FERRY                     # Remove a row
    python run.py duty --start 07:15 --end 18:05         # Pilot duty time
    python run.py close                                  # Lock the sheet
    python run.py new-flight                             # Unlock with no rows
    python run.py import --input log.csv                 # Replace rows from CSV
    python run.py export-csv --output log.csv
    python run.py print                                  # Printable HTML
    python run.py pdf                                    # PDF
    python run.py xlsx                                   # Excel workbook
"""

import argparse
import os
import sys

from journeylog.clock import duty_time
from journeylog.columns import COLS, COL_LOAD
from journeylog.config import Config
from journeylog.csv_io import read_csv_file, write_csv_file
from journeylog.pdf_export import write_pdf, pdf_filename
from journeylog.print_html import write_print_html
from journeylog.storage import load_sheet, save_sheet
from journeylog.xlsx_export import write_xlsx


COMMANDS = [
    'show', 'add', 'ferry', 'set', 'now', 'clear', 'delete', 'meta', 'duty',
    'close', 'new-flight', 'import', 'export-csv', 'print', 'pdf', 'xlsx',
]

CLOSED_MESSAGE = "Sheet is closed. Export/print it or run 'new-flight' first."


class RowNotFound(LookupError):
    pass


def resolve_row(sheet, ref):
    """Find a row by id or by its Load label (e.g. '3' or 'FERRY')."""
    if not ref:
        raise RowNotFound("No row given. Use --row with a load number or row id.")
    row = sheet.find_row(ref)
    if row is None:
        row = next((r for r in sheet.rows() if str(r.get(COL_LOAD)) == ref), None)
    if row is None:
        raise RowNotFound(f"Row not found: {ref}")
    return row


def _report(changed, done_message, sheet):
    if changed:
        print(done_message)
    elif sheet.closed:
        print(CLOSED_MESSAGE, file=sys.stderr)
    else:
        print("Nothing changed.")
    return changed


def print_sheet(sheet):
    """Print header, the visible rows and the totals block."""
    print(f"PILOT: {sheet.pilot}  DZ: {sheet.dz}  REG: {sheet.reg}  DATE: {sheet.date}")
    print(f"Status: {'CLOSED' if sheet.closed else 'open'}")
    if sheet.search:
        print(f"Search: {sheet.search}")
    print("-" * 70)
    print(' | '.join(COLS))
    for row in sheet.visible_rows():
        print(' | '.join('' if row.get(c) is None else str(row.get(c)) for c in COLS))
    print("-" * 70)
    totals = sheet.totals()
    print(f"Flights: {totals['flights']}  PAX: {totals['pax']}  LDG: {totals['ldg']}  FLT/T: {totals['flt']}")
    print(f"FOB (Start): {sheet.fob_start} lbs  FOB (End): {sheet.last_fob()} lbs")


def run_show(sheet, config, args):
    sheet.search = args.search or ''
    print_sheet(sheet)
    return False


def run_add(sheet, config, args):
    row = sheet.add_load_row()
    return _report(row is not None, f"Added load {row[COL_LOAD] if row else ''}", sheet)


def run_ferry(sheet, config, args):
    if sheet.ferry is not None and not sheet.closed:
        print("Ferry row already present.")
        return False
    return _report(sheet.add_ferry_row() is not None, "Added ferry row", sheet)


def run_set(sheet, config, args):
    row = resolve_row(sheet, args.row)
    changed = sheet.update_row(row['id'], args.field, args.value or '')
    return _report(changed, f"Load {row[COL_LOAD]}: {args.field} = {args.value or ''}", sheet)


def run_now(sheet, config, args):
    row = resolve_row(sheet, args.row)
    changed = sheet.set_now(row['id'], args.field)
    stamped = sheet.find_row(row['id']).get(args.field)
    return _report(changed, f"Load {row[COL_LOAD]}: {args.field} = {stamped}", sheet)


def run_clear(sheet, config, args):
    row = resolve_row(sheet, args.row)
    return _report(sheet.clear_row(row['id']), f"Cleared load {row[COL_LOAD]}", sheet)


def run_delete(sheet, config, args):
    row = resolve_row(sheet, args.row)
    return _report(sheet.delete_row(row['id']), f"Deleted load {row[COL_LOAD]}", sheet)


def run_meta(sheet, config, args):
    changed = sheet.set_meta(pilot=args.pilot, dz=args.dz, reg=args.reg,
                             date=args.date, fob_start=args.fob)
    return _report(changed, "Header updated", sheet)


def run_duty(sheet, config, args):
    # The duty window is not stored with the sheet
    span = duty_time(args.start or '', args.end or '')
    print(f"PILOT DUTY TIME: {span or '--:--'}")
    return False


def run_close(sheet, config, args):
    if sheet.close():
        print("Flight closed. Sheet locked.")
        return True
    print("Sheet is already closed.")
    return False


def run_new_flight(sheet, config, args):
    if sheet.new_flight():
        print("New flight started. Header kept, rows cleared.")
        return True
    print("Sheet is open; close it before starting a new flight.")
    return False


def run_import(sheet, config, args):
    config.validate('import')
    rows = read_csv_file(config.input_file)
    if rows is None:
        print("No rows to import.")
        return False
    sheet.replace_rows(rows)
    return True


def run_export_csv(sheet, config, args):
    write_csv_file(config.csv_output, sheet.rows())
    return False


def run_print(sheet, config, args):
    write_print_html(config.print_output, sheet.summary(), sheet.rows())
    return False


def run_pdf(sheet, config, args):
    path = config.pdf_output or pdf_filename(sheet.summary())
    write_pdf(path, sheet.summary(), sheet.rows())
    return False


def run_xlsx(sheet, config, args):
    write_xlsx(config.xlsx_output, sheet.summary(), sheet.rows())
    return False


COMMAND_FUNCTIONS = {
    'show': run_show,
    'add': run_add,
    'ferry': run_ferry,
    'set': run_set,
    'now': run_now,
    'clear': run_clear,
    'delete': run_delete,
    'meta': run_meta,
    'duty': run_duty,
    'close': run_close,
    'new-flight': run_new_flight,
    'import': run_import,
    'export-csv': run_export_csv,
    'print': run_print,
    'pdf': run_pdf,
    'xlsx': run_xlsx,
}


def build_parser():
    parser = argparse.ArgumentParser(
        description='Pilot journey log sheet editor',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  show          Print the sheet (use --search to filter) and totals
  add / ferry   Add the next load row / the ferry row
  set / now     Edit a field / stamp T/O or L/D with the current time
  clear/delete  Blank a row (BLK/T kept) / remove it
  meta          Edit PILOT, DZ, REG, DATE, FOB (Start)
  duty          Compute pilot duty time from --start/--end
  close         Lock the sheet
  new-flight    Unlock a closed sheet with no rows, keeping the header
  import        Replace all rows from a CSV file
  export-csv / print / pdf / xlsx   Write the sheet out
        """,
    )
    parser.add_argument('command', choices=COMMANDS, help='What to do')
    parser.add_argument('--config', '-c', default='config.ini',
                        help='Config file path (default: config.ini)')
    parser.add_argument('--storage', default=None,
                        help='Override sheet storage directory')
    parser.add_argument('--row', '-r', default=None,
                        help='Row to act on: load number, FERRY, or row id')
    parser.add_argument('--field', '-f', default=None,
                        help='Column to edit (e.g. T/O, L/D, PAX, REMARKS)')
    parser.add_argument('--value', '-v', default=None, help='New field value')
    parser.add_argument('--search', default=None, help='Search filter for show')
    parser.add_argument('--pilot', default=None)
    parser.add_argument('--dz', default=None)
    parser.add_argument('--reg', default=None)
    parser.add_argument('--date', default=None)
    parser.add_argument('--fob', default=None, help='FOB (Start) in lbs')
    parser.add_argument('--start', default=None, help='Duty start HH:MM')
    parser.add_argument('--end', default=None, help='Duty end HH:MM')
    parser.add_argument('--input', '-i', default=None, help='CSV file to import')
    parser.add_argument('--output', '-o', default=None,
                        help='Output file for export-csv, print, pdf or xlsx')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config.from_file(args.config)
    config.override(storage_dir=args.storage, input_file=args.input)
    if args.output:
        target = {'export-csv': 'csv_output', 'print': 'print_output',
                  'pdf': 'pdf_output', 'xlsx': 'xlsx_output'}.get(args.command)
        if target:
            config.override(**{target: args.output})

    sheet = load_sheet(config.storage_dir, resume=True)

    # Pre-fill an empty header from config.ini
    if not sheet.closed:
        defaults = {k: v for k, v in config.header_defaults().items()
                    if v and not getattr(sheet, k)}
        if defaults:
            sheet.set_meta(**defaults)

    try:
        changed = COMMAND_FUNCTIONS[args.command](sheet, config, args)
    except (FileNotFoundError, RowNotFound, ValueError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)

    # Rewriting unchanged state is harmless; header defaults may have applied
    save_sheet(sheet, config.storage_dir)
    if changed:
        print("Sheet saved.")
    print(f"Storage: {os.path.abspath(config.storage_dir)}")


if __name__ == '__main__':
    main()
