"""
Web API for the pilot journey log.

Serves one journey log sheet kept in a local storage directory: row
edits, header fields, the duty window, close/new-flight, CSV import and
CSV/print/PDF/Excel downloads.

Usage:
    python -m uvicorn web.app:app --reload
    # Open http://localhost:8000
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from fastapi import FastAPI, UploadFile, File, Form, HTTPException
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response
from starlette.background import BackgroundTask

# Ensure project root is on the path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from journeylog.config import Config
from journeylog.csv_io import export_csv, import_csv, CsvHeaderError
from journeylog.pdf_export import render_pdf, pdf_filename
from journeylog.print_html import build_print_html
from journeylog.storage import load_sheet, save_sheet
from journeylog.xlsx_export import write_xlsx

app = FastAPI(title="Pilot Journey Log")

CONFIG_PATH = os.environ.get('JOURNEYLOG_CONFIG', str(PROJECT_ROOT / 'config.ini'))
STORAGE_DIR = os.environ.get('JOURNEYLOG_STORAGE') or Config.from_file(CONFIG_PATH).storage_dir

# One sheet per process, like one open browser tab: loaded from storage on
# first use (a new session, so a saved ferry row is dropped) and written
# back after every change. The duty window is never stored.
_sheet = None


def _load():
    global _sheet
    if _sheet is None:
        _sheet = load_sheet(STORAGE_DIR)
    return _sheet


def _save(sheet):
    save_sheet(sheet, STORAGE_DIR)


def _state(sheet):
    return {
        'meta': sheet.meta(),
        'rows': sheet.rows(),
        'visible_rows': sheet.visible_rows(),
        'search': sheet.search,
        'totals': sheet.totals(),
        'fob_start': sheet.fob_start,
        'last_fob': sheet.last_fob(),
        'duty': {
            'start': sheet.duty_start,
            'end': sheet.duty_end,
            'pilot_duty': sheet.pilot_duty(),
        },
    }


def _require_open(sheet):
    if sheet.closed:
        raise HTTPException(409, "Sheet is closed. Start a new flight to edit.")


def _require_row(sheet, row_id):
    if sheet.find_row(row_id) is None:
        raise HTTPException(404, f"Row not found: {row_id}")


@app.get("/", response_class=HTMLResponse)
async def index():
    """Printable view of the current sheet."""
    sheet = _load()
    return HTMLResponse(build_print_html(sheet.summary(), sheet.rows()))


@app.get("/api/sheet")
async def get_sheet(search: str = ""):
    """Current sheet; totals follow the search filter."""
    sheet = _load()
    sheet.search = search
    return JSONResponse(_state(sheet))


@app.post("/api/rows")
async def add_load_row():
    sheet = _load()
    _require_open(sheet)
    row = sheet.add_load_row()
    _save(sheet)
    return JSONResponse({'success': True, 'row': row, 'state': _state(sheet)})


@app.post("/api/rows/ferry")
async def add_ferry_row():
    """Add the ferry row; a second request leaves the sheet as it is."""
    sheet = _load()
    _require_open(sheet)
    row = sheet.add_ferry_row()
    _save(sheet)
    return JSONResponse({'success': row is not None, 'row': row, 'state': _state(sheet)})


@app.patch("/api/rows/{row_id}")
async def update_row(row_id: str, field: str = Form(...), value: str = Form("")):
    sheet = _load()
    _require_open(sheet)
    _require_row(sheet, row_id)
    try:
        sheet.update_row(row_id, field, value)
    except ValueError as e:
        raise HTTPException(400, str(e))
    _save(sheet)
    return JSONResponse({'success': True, 'row': sheet.find_row(row_id), 'state': _state(sheet)})


@app.post("/api/rows/{row_id}/now")
async def set_now(row_id: str, field: str = Form(...)):
    """Stamp T/O or L/D with the server's local time."""
    sheet = _load()
    _require_open(sheet)
    _require_row(sheet, row_id)
    try:
        sheet.set_now(row_id, field)
    except ValueError as e:
        raise HTTPException(400, str(e))
    _save(sheet)
    return JSONResponse({'success': True, 'row': sheet.find_row(row_id), 'state': _state(sheet)})


@app.post("/api/rows/{row_id}/clear")
async def clear_row(row_id: str):
    sheet = _load()
    _require_open(sheet)
    _require_row(sheet, row_id)
    sheet.clear_row(row_id)
    _save(sheet)
    return JSONResponse({'success': True, 'row': sheet.find_row(row_id), 'state': _state(sheet)})


@app.delete("/api/rows/{row_id}")
async def delete_row(row_id: str):
    sheet = _load()
    _require_open(sheet)
    _require_row(sheet, row_id)
    sheet.delete_row(row_id)
    _save(sheet)
    return JSONResponse({'success': True, 'state': _state(sheet)})


@app.put("/api/meta")
async def update_meta(
    pilot: Optional[str] = Form(None),
    dz: Optional[str] = Form(None),
    reg: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    fob_start: Optional[str] = Form(None),
):
    """Edit header fields. Only the fields sent are changed."""
    sheet = _load()
    _require_open(sheet)
    sheet.set_meta(pilot=pilot, dz=dz, reg=reg, date=date, fob_start=fob_start)
    _save(sheet)
    return JSONResponse({'success': True, 'state': _state(sheet)})


@app.put("/api/duty")
async def update_duty(start: Optional[str] = Form(None), end: Optional[str] = Form(None)):
    """Set the duty window; works on a closed sheet too."""
    sheet = _load()
    sheet.set_duty(start, end)
    return JSONResponse({'success': True, 'pilot_duty': sheet.pilot_duty()})


@app.post("/api/close")
async def close_flight():
    sheet = _load()
    changed = sheet.close()
    _save(sheet)
    return JSONResponse({'success': changed, 'state': _state(sheet)})


@app.post("/api/new-flight")
async def new_flight():
    """Clear the rows of a closed sheet and unlock it, keeping the header."""
    sheet = _load()
    if not sheet.closed:
        raise HTTPException(409, "Close the current flight first.")
    sheet.new_flight()
    _save(sheet)
    return JSONResponse({'success': True, 'state': _state(sheet)})


@app.post("/api/import")
async def import_rows(file: UploadFile = File(...)):
    """Replace every row with the contents of an uploaded CSV."""
    if not file.filename:
        raise HTTPException(400, "No file uploaded")

    content = await file.read()
    try:
        rows = import_csv(content.decode('utf-8-sig'))
    except UnicodeDecodeError:
        raise HTTPException(400, "CSV must be UTF-8 text")
    except CsvHeaderError as e:
        raise HTTPException(400, str(e))

    sheet = _load()
    if rows is None:
        return JSONResponse({'success': False, 'imported': 0, 'state': _state(sheet)})
    sheet.replace_rows(rows)
    _save(sheet)
    return JSONResponse({'success': True, 'imported': len(rows), 'state': _state(sheet)})


@app.get("/api/export.csv")
async def download_csv():
    sheet = _load()
    return Response(
        export_csv(sheet.rows()),
        media_type="text/csv; charset=utf-8",
        headers={'Content-Disposition': 'attachment; filename="pilot_journey_log.csv"'},
    )


@app.get("/api/print", response_class=HTMLResponse)
async def print_view():
    sheet = _load()
    return HTMLResponse(build_print_html(sheet.summary(), sheet.rows()))


def _attachment(filename):
    """Content-Disposition for a download whose name may hold any text."""
    fallback = filename.encode('ascii', 'ignore').decode().replace('"', '').replace('\\', '')
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@app.get("/api/export.pdf")
async def download_pdf():
    sheet = _load()
    summary = sheet.summary()
    try:
        data = render_pdf(summary, sheet.rows())
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={'success': False, 'error': f"PDF export failed: {e}"},
        )
    return Response(
        data,
        media_type="application/pdf",
        headers={'Content-Disposition': _attachment(pdf_filename(summary))},
    )


@app.get("/api/export.xlsx")
async def download_xlsx():
    sheet = _load()
    work_dir = tempfile.mkdtemp(prefix="journeylog_")
    path = os.path.join(work_dir, "pilot_journey_log.xlsx")
    write_xlsx(path, sheet.summary(), sheet.rows())
    return FileResponse(
        path,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename="pilot_journey_log.xlsx",
        background=BackgroundTask(shutil.rmtree, work_dir, ignore_errors=True),
    )
