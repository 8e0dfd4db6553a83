# joinery/schedule/utils.py

"""Install-schedule timeline layout."""

from datetime import date, datetime, timedelta

PADDING_DAYS = 3


def parse_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def bar_duration(project) -> int:
    """Install duration in days; missing or zero counts as one day."""
    return max(1, int(project.get('install_duration') or 1))


def build_timeline(projects, today=None) -> dict:
    """
    Lay projects out on a day grid.
    The window runs from the earliest of (start dates, today) minus three days
    to the latest of (end dates, today) plus three days.  Each dated project
    becomes a row with its bar's start index and length; undated projects are
    listed separately.
    """
    today = today or date.today()
    rows, unscheduled = [], []
    for p in projects:
        start = parse_date(p.get('install_commencement_date'))
        if start is None:
            unscheduled.append(p)
            continue
        duration = bar_duration(p)
        rows.append({
            'project'  : p,
            'start'    : start,
            'end'      : start + timedelta(days=duration - 1),
            'duration' : duration,
        })

    window_start = min([r['start'] for r in rows] + [today]) - timedelta(days=PADDING_DAYS)
    window_end   = max([r['end'] for r in rows] + [today]) + timedelta(days=PADDING_DAYS)
    day_count    = (window_end - window_start).days + 1
    last_index   = day_count - 1

    for r in rows:
        offset = (r['start'] - window_start).days
        r['start_index'] = max(0, min(last_index, offset))
        r['start'] = r['start'].isoformat()
        r['end'] = r['end'].isoformat()

    return {
        'start'       : window_start.isoformat(),
        'end'         : window_end.isoformat(),
        'days'        : [(window_start + timedelta(days=i)).isoformat() for i in range(day_count)],
        'today_index' : (today - window_start).days,
        'rows'        : rows,
        'unscheduled' : unscheduled,
    }


def shifted_start(project, days: int):
    """Start date moved by ``days`` (arrow-key nudge on the timeline)."""
    start = parse_date(project.get('install_commencement_date')) or date.today()
    return (start + timedelta(days=days)).isoformat()
