"""
Clock arithmetic for the journey log.

Times are 'H:MM' / 'HH:MM' strings. Anything that does not match is
treated as absent and parses to 0, so none of these functions raise.

Note that a genuine '00:00' also parses to 0, and elapsed() treats a 0
on either side as absent. Existing sheets rely on that, so it stays.
"""

import re
from datetime import datetime

CLOCK_RE = re.compile(r'([0-9]{1,2}):([0-9]{2})')

MINUTES_PER_DAY = 24 * 60


def parse_clock(text):
    """Convert 'H:MM' or 'HH:MM' to minutes since midnight.

    Args:
        text: Clock string (may be empty or None).

    Returns:
        Minutes as int, or 0 for empty/malformed input.
    """
    if not text:
        return 0
    match = CLOCK_RE.fullmatch(str(text))
    if not match:
        return 0
    return int(match.group(1)) * 60 + int(match.group(2))


def format_clock(minutes):
    """Format minutes as zero-padded 'HH:MM'.

    Negative input is floored to 0. Hours are not wrapped at 24 because
    elapsed spans and totals go through here too ('30:15').
    """
    total = max(0, int(minutes))
    hours, mins = divmod(total, 60)
    return f"{hours:02d}:{mins:02d}"


def elapsed(start, end):
    """Elapsed 'HH:MM' between two clock strings.

    Rolls over midnight at most once: an end earlier than the start is
    taken to be on the next day.

    Args:
        start: Start clock string.
        end: End clock string.

    Returns:
        'HH:MM' span, or '' if either side is empty or parses to 0.
    """
    if not start or not end:
        return ''
    start_min = parse_clock(start)
    end_min = parse_clock(end)
    if not start_min or not end_min:
        return ''
    if end_min < start_min:
        end_min += MINUTES_PER_DAY
    return format_clock(end_min - start_min)


def flight_time(takeoff, landing):
    """FLT/T for a row from its T/O and L/D."""
    return elapsed(takeoff, landing)


def duty_time(duty_start, duty_end):
    """Pilot duty time from the duty window."""
    return elapsed(duty_start, duty_end)


def now_hhmm(now=None):
    """Current local wall-clock time as 'HH:MM'."""
    now = now or datetime.now()
    return f"{now.hour:02d}:{now.minute:02d}"
