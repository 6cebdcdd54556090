from datetime import datetime

import pytest

from journeylog.columns import FERRY_ID
from journeylog.sheet import Sheet


def _sheet_with_loads(n=2, fob=''):
    sheet = Sheet()
    if fob:
        sheet.set_meta(fob_start=fob)
    for _ in range(n):
        sheet.add_load_row()
    return sheet


def _load_labels(sheet):
    return [r['Load'] for r in sheet.rows()]


def test_new_sheet_is_open_and_empty():
    sheet = Sheet()
    assert not sheet.closed
    assert sheet.rows() == []
    assert sheet.totals() == {'flights': 0, 'pax': 0, 'ldg': 0, 'flt': '00:00'}
    assert sheet.last_fob() == ''


def test_add_load_rows_numbers_sequentially():
    sheet = _sheet_with_loads(3)
    assert _load_labels(sheet) == ['1', '2', '3']


def test_numbering_continues_after_delete():
    sheet = _sheet_with_loads(3)
    sheet.delete_row(sheet.rows()[1]['id'])
    sheet.add_load_row()
    assert _load_labels(sheet) == ['1', '3', '4']


def test_ferry_row_always_first_and_unique():
    sheet = _sheet_with_loads(2)
    ferry = sheet.add_ferry_row()
    assert ferry['id'] == FERRY_ID
    assert sheet.rows()[0] is ferry
    before = [dict(r) for r in sheet.rows()]
    assert sheet.add_ferry_row() is None
    assert sheet.rows() == before


def test_load_row_added_with_ferry_goes_after_it():
    sheet = _sheet_with_loads(1)
    sheet.add_ferry_row()
    sheet.add_load_row()
    assert _load_labels(sheet) == ['FERRY', '2', '1']


def test_ferry_does_not_take_a_load_number():
    sheet = Sheet()
    sheet.add_ferry_row()
    row = sheet.add_load_row()
    assert row['Load'] == '1'


def test_starting_fuel_seeds_first_load_row_once():
    sheet = _sheet_with_loads(2)
    assert sheet.set_meta(fob_start='500')
    assert [r['FOB'] for r in sheet.rows()] == ['500', '']
    sheet.set_meta(fob_start='650')
    assert [r['FOB'] for r in sheet.rows()] == ['500', '']


def test_starting_fuel_before_rows_flows_into_new_rows():
    sheet = Sheet()
    sheet.set_meta(fob_start='500')
    ferry = sheet.add_ferry_row()
    first = sheet.add_load_row()
    second = sheet.add_load_row()
    assert ferry['FOB'] == '500'
    assert first['FOB'] == '500'
    assert second['FOB'] == ''


def test_starting_fuel_seeds_ferry_when_no_loads():
    sheet = Sheet()
    sheet.add_ferry_row()
    sheet.set_meta(fob_start='480')
    assert sheet.ferry['FOB'] == '480'


def test_last_fob_mirrors_last_load_row():
    sheet = _sheet_with_loads(2, fob='500')
    rows = sheet.rows()
    sheet.update_row(rows[1]['id'], 'FOB', '320')
    assert sheet.last_fob() == '320'
    sheet.delete_row(rows[1]['id'])
    assert sheet.last_fob() == '500'


def test_update_row_derives_flight_time():
    sheet = _sheet_with_loads(1)
    row_id = sheet.rows()[0]['id']
    sheet.update_row(row_id, 'BLK/T', '01:40')
    sheet.update_row(row_id, 'T/O', '10:10')
    sheet.update_row(row_id, 'L/D', '11:40')
    row = sheet.find_row(row_id)
    assert row['FLT/T'] == '01:30'
    assert row['BLK/T'] == '01:40'
    assert sheet.totals()['flt'] == '01:30'


def test_update_unknown_row_is_noop():
    sheet = _sheet_with_loads(1)
    assert not sheet.update_row('missing', 'REMARKS', 'x')


def test_update_bad_count_raises_and_keeps_state():
    sheet = _sheet_with_loads(1)
    row_id = sheet.rows()[0]['id']
    with pytest.raises(ValueError):
        sheet.update_row(row_id, 'PAX', 'many')
    assert sheet.find_row(row_id)['PAX'] == ''


def test_set_now_stamps_clock_field():
    sheet = _sheet_with_loads(1)
    row_id = sheet.rows()[0]['id']
    sheet.update_row(row_id, 'T/O', '10:00')
    sheet.set_now(row_id, 'L/D', now=datetime(2025, 6, 1, 10, 35))
    row = sheet.find_row(row_id)
    assert row['L/D'] == '10:35'
    assert row['FLT/T'] == '00:35'
    with pytest.raises(ValueError):
        sheet.set_now(row_id, 'REMARKS')


def test_clear_row_in_place():
    sheet = _sheet_with_loads(2)
    row_id = sheet.rows()[0]['id']
    sheet.update_row(row_id, 'REMARKS', 'wx')
    sheet.update_row(row_id, 'BLK/T', '00:30')
    assert sheet.clear_row(row_id)
    row = sheet.rows()[0]
    assert row['id'] == row_id
    assert row['REMARKS'] == ''
    assert row['BLK/T'] == '00:30'
    assert len(sheet.rows()) == 2


def test_delete_ferry_row():
    sheet = _sheet_with_loads(1)
    sheet.add_ferry_row()
    assert sheet.delete_row(FERRY_ID)
    assert sheet.ferry is None
    assert sheet.add_ferry_row() is not None


def test_search_filters_totals_not_storage():
    sheet = _sheet_with_loads(3)
    ids = [r['id'] for r in sheet.rows()]
    sheet.update_row(ids[0], 'REMARKS', 'Tandem')
    sheet.update_row(ids[0], 'PAX', '2')
    sheet.update_row(ids[2], 'REMARKS', 'tandem')
    sheet.update_row(ids[2], 'PAX', '3')
    sheet.update_row(ids[1], 'PAX', '10')

    sheet.search = 'tandem'
    assert [r['id'] for r in sheet.visible_rows()] == [ids[0], ids[2]]
    assert sheet.totals()['pax'] == 5
    assert sheet.totals()['flights'] == 2
    assert len(sheet.rows()) == 3
    assert sheet.add_load_row()['Load'] == '4'

    sheet.search = ''
    assert sheet.totals()['pax'] == 15


def test_closed_sheet_rejects_mutation():
    sheet = _sheet_with_loads(2)
    sheet.set_meta(pilot='Jane', dz='EDXX', reg='D-FAAA', date='2025-06-01', fob_start='500')
    row_id = sheet.rows()[0]['id']
    assert sheet.close()
    before_rows = [dict(r) for r in sheet.rows()]
    before_meta = sheet.meta()

    assert sheet.add_load_row() is None
    assert sheet.add_ferry_row() is None
    assert not sheet.update_row(row_id, 'REMARKS', 'x')
    assert not sheet.set_now(row_id, 'T/O')
    assert not sheet.clear_row(row_id)
    assert not sheet.delete_row(row_id)
    assert not sheet.set_meta(pilot='Someone else', fob_start='900')

    assert sheet.rows() == before_rows
    assert sheet.meta() == before_meta


def test_duty_window_works_when_closed():
    sheet = Sheet()
    sheet.close()
    sheet.set_duty('22:00', '06:00')
    assert sheet.pilot_duty() == '08:00'


def test_new_flight_clears_rows_and_keeps_header():
    sheet = _sheet_with_loads(2)
    sheet.add_ferry_row()
    sheet.set_meta(pilot='Jane', dz='EDXX', reg='D-FAAA', date='2025-06-01', fob_start='500')
    assert not sheet.new_flight()
    sheet.close()
    assert sheet.new_flight()
    assert sheet.rows() == []
    assert sheet.meta() == {
        'pilot': 'Jane', 'dz': 'EDXX', 'reg': 'D-FAAA', 'date': '2025-06-01',
        'fob_start': '500', 'closed': False,
    }
    assert sheet.add_load_row()['FOB'] == '500'


def test_set_meta_rejects_unknown_field():
    with pytest.raises(ValueError):
        Sheet().set_meta(callsign='X')


def test_replace_rows_works_when_closed():
    sheet = _sheet_with_loads(2)
    sheet.close()
    ferry = {'id': FERRY_ID, 'Load': 'FERRY'}
    load = {'id': 'new1', 'Load': '1'}
    sheet.replace_rows([load, ferry])
    assert [r['id'] for r in sheet.rows()] == [FERRY_ID, 'new1']


def test_replace_rows_keeps_only_one_ferry():
    sheet = Sheet()
    sheet.replace_rows([
        {'id': FERRY_ID, 'Load': 'FERRY', 'REMARKS': 'first'},
        {'id': FERRY_ID, 'Load': 'FERRY', 'REMARKS': 'second'},
    ])
    assert sheet.ferry['REMARKS'] == 'first'
    assert len(sheet.rows()) == 2
    assert sheet.rows()[1]['id'] != FERRY_ID
    assert sheet.rows()[1]['REMARKS'] == 'second'
