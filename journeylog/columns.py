"""
Column layout of the pilot journey log sheet.

Every row is a plain dict keyed by the column labels below plus 'id'.
The labels double as the CSV header, the print table header and the
PDF/spreadsheet column titles, so their order is fixed.
"""

COL_LOAD = 'Load'
COL_TAKEOFF = 'T/O'
COL_LANDING = 'L/D'
COL_FLIGHT_TIME = 'FLT/T'   # derived from T/O and L/D
COL_BLOCK_TIME = 'BLK/T'    # manual, never derived
COL_FOB = 'FOB'             # fuel on board (lbs)
COL_FUEL_BURNED = 'F/B'     # lbs
COL_PAX = 'PAX'
COL_LDG = 'LDG'
COL_FOLLOW_UP = 'F/UP'
COL_REMARKS = 'REMARKS'

COLS = [
    COL_LOAD, COL_TAKEOFF, COL_LANDING, COL_FLIGHT_TIME, COL_BLOCK_TIME,
    COL_FOB, COL_FUEL_BURNED, COL_PAX, COL_LDG, COL_FOLLOW_UP, COL_REMARKS,
]

CSV_HEADER = ','.join(COLS)

# Counts hold an int or '' (no count entered, distinct from zero)
COUNT_COLUMNS = {COL_PAX, COL_LDG}

# Clock columns that drive FLT/T
CLOCK_COLUMNS = {COL_TAKEOFF, COL_LANDING}

# Columns a user may type into. FLT/T is derived and Load is assigned.
EDITABLE_COLUMNS = set(COLS) - {COL_LOAD, COL_FLIGHT_TIME}

# Fields a clear keeps (besides 'id')
CLEAR_KEEPS = {COL_LOAD, COL_BLOCK_TIME}

FERRY_ID = 'ferry-row-fixed'
FERRY_LABEL = 'FERRY'

# Local storage slot names
ROWS_KEY = 'pilotJourneyLog.simple.v2'
META_KEY = 'pilotJourneyLog.simple.v2.meta'

TITLE = 'Pilot Journey Log'
