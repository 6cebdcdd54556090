import json

from journeylog.columns import ROWS_KEY, META_KEY, FERRY_ID
from journeylog.rows import blank_row
from journeylog.sheet import Sheet
from journeylog.storage import load_sheet, save_sheet, SlotStore


def _read(directory, key):
    return json.loads((directory / f'{key}.json').read_text(encoding='utf-8'))


def test_missing_storage_gives_empty_open_sheet(tmp_path):
    sheet = load_sheet(str(tmp_path / 'store'))
    assert sheet.rows() == []
    assert not sheet.closed
    assert sheet.pilot == ''
    assert _read(tmp_path / 'store', ROWS_KEY) == []


def test_save_and_load_round_trip(tmp_path):
    sheet = Sheet()
    sheet.set_meta(pilot='Jane Doe', dz='EDXX', reg='D-FAAA', date='2025-06-01', fob_start='500')
    row = sheet.add_load_row()
    sheet.update_row(row['id'], 'T/O', '10:00')
    sheet.update_row(row['id'], 'PAX', '4')
    sheet.close()
    save_sheet(sheet, str(tmp_path))

    assert _read(tmp_path, META_KEY) == {
        'pilot': 'Jane Doe', 'dz': 'EDXX', 'reg': 'D-FAAA', 'date': '2025-06-01',
        'isClosed': True, 'fobStart': '500',
    }

    loaded = load_sheet(str(tmp_path))
    assert loaded.rows() == sheet.rows()
    assert loaded.meta() == sheet.meta()
    assert loaded.closed


def test_save_is_idempotent(tmp_path):
    sheet = Sheet()
    sheet.add_load_row()
    save_sheet(sheet, str(tmp_path))
    first = (tmp_path / f'{ROWS_KEY}.json').read_text(encoding='utf-8')
    save_sheet(sheet, str(tmp_path))
    assert (tmp_path / f'{ROWS_KEY}.json').read_text(encoding='utf-8') == first


def test_saved_ferry_row_is_dropped_on_load(tmp_path):
    sheet = Sheet()
    sheet.add_ferry_row()
    sheet.update_row(FERRY_ID, 'REMARKS', 'reposition')
    row = sheet.add_load_row()
    sheet.update_row(row['id'], 'REMARKS', 'tandem')
    save_sheet(sheet, str(tmp_path))

    loaded = load_sheet(str(tmp_path))
    assert loaded.ferry is None
    assert [r['Load'] for r in loaded.rows()] == ['1']
    assert [r['Load'] for r in _read(tmp_path, ROWS_KEY)] == ['1']


def test_legacy_scaffold_is_discarded(tmp_path):
    store = SlotStore(str(tmp_path))
    store.write(ROWS_KEY, [blank_row(f'r{i}', i) for i in range(1, 20)])
    assert load_sheet(str(tmp_path)).rows() == []
    assert _read(tmp_path, ROWS_KEY) == []


def test_corrupt_slots_fall_back_to_empty(tmp_path):
    (tmp_path / f'{ROWS_KEY}.json').write_text('{not json', encoding='utf-8')
    (tmp_path / f'{META_KEY}.json').write_text('[1, 2', encoding='utf-8')
    sheet = load_sheet(str(tmp_path))
    assert sheet.rows() == []
    assert sheet.meta()['closed'] is False
    assert _read(tmp_path, ROWS_KEY) == []


def test_saved_starting_fuel_seeds_empty_first_row(tmp_path):
    store = SlotStore(str(tmp_path))
    row = blank_row('a', 1)
    row['REMARKS'] = 'x'
    store.write(ROWS_KEY, [row])
    store.write(META_KEY, {'fobStart': '450'})
    sheet = load_sheet(str(tmp_path))
    assert sheet.rows()[0]['FOB'] == '450'


def test_resumed_session_keeps_ferry_row(tmp_path):
    sheet = Sheet()
    sheet.add_ferry_row()
    sheet.add_load_row()
    save_sheet(sheet, str(tmp_path))

    resumed = load_sheet(str(tmp_path), resume=True)
    assert resumed.ferry is not None
    assert [r['Load'] for r in resumed.rows()] == ['FERRY', '1']


def test_resumed_session_keeps_blank_load_rows(tmp_path):
    sheet = Sheet()
    sheet.add_load_row()
    sheet.add_load_row()
    save_sheet(sheet, str(tmp_path))

    resumed = load_sheet(str(tmp_path), resume=True)
    assert sorted(r['Load'] for r in resumed.rows()) == ['1', '2']
    assert len(_read(tmp_path, ROWS_KEY)) == 2

    assert load_sheet(str(tmp_path)).rows() == []


def test_saved_rows_without_id_are_dropped(tmp_path):
    store = SlotStore(str(tmp_path))
    good = blank_row('a', 1)
    good['REMARKS'] = 'x'
    store.write(ROWS_KEY, [{'Load': '2', 'REMARKS': 'no id'}, 'junk', good])

    for resume in (False, True):
        sheet = load_sheet(str(tmp_path), resume=resume)
        assert [r['id'] for r in sheet.rows()] == ['a']
        assert sheet.delete_row('a')
