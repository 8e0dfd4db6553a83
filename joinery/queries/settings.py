from joinery.cache import cached_query, invalidate
from joinery.errors import NO_ROWS, StoreError
from joinery.store import require_store

TABLE = 'settings'

DEFAULT_SETTINGS = {
    'cut_and_edge_cost_per_sheet': (
        '110',
        'Cut and edge cost added to each Board/Laminate sheet',
    ),
}


def list_settings():
    return cached_query(
        ('settings',),
        lambda store: store.table(TABLE).select().order('key').execute(),
    )


def get_setting(key):
    return cached_query(
        ('setting', key),
        lambda store: store.table(TABLE).select().eq('key', key).maybe_single(),
        enabled=bool(key),
        many=False,
    )


def get_setting_value(key, default=0):
    """Numeric value of a setting, or ``default`` if missing or unparsable."""
    setting = get_setting(key)
    if not setting:
        return default
    try:
        return float(setting['value'])
    except (TypeError, ValueError):
        return default


def update_setting(key, value):
    """Update the setting, creating it when no row exists yet."""
    store = require_store()
    try:
        row = store.table(TABLE).update({'value': str(value)}).eq('key', key).select().single()
    except StoreError as exc:
        if exc.code != NO_ROWS:
            raise
        row = store.table(TABLE).insert({'key': key, 'value': str(value)}).select().single()
    invalidate(('setting', key), ('settings',))
    return row


def seed_default_settings():
    """Insert any missing default settings; returns the keys that were added."""
    store = require_store()
    added = []
    for key, (value, description) in DEFAULT_SETTINGS.items():
        if store.table(TABLE).select().eq('key', key).maybe_single() is None:
            store.table(TABLE).insert(
                {'key': key, 'value': value, 'description': description}
            ).execute()
            added.append(key)
    if added:
        invalidate(('settings',), *[('setting', k) for k in added])
    return added
