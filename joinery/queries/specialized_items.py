"""Hardware and materials attached directly to a joinery item.

``item_id`` points at a hardware row or a material row depending on
``item_type``; the referenced row is fetched separately and attached under
``hardware`` or ``material``.
"""

import enum

from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, insert_row, update_row
from joinery.store import require_store

TABLE = 'specialized_items'


class ItemType(str, enum.Enum):
    HARDWARE = 'hardware'
    MATERIAL = 'material'


# item type -> (table, embeds) for the secondary fetch
RELATED = {
    ItemType.HARDWARE: ('hardware', ('supplier',)),
    ItemType.MATERIAL: ('materials', ('supplier',)),
}


def resolve_item(store, row):
    """Attach the referenced hardware or material; missing rows become ``None``."""
    resolved = {**row, 'hardware': None, 'material': None}
    try:
        item_type = ItemType(row.get('item_type'))
    except ValueError:
        return resolved
    if not row.get('item_id'):
        return resolved
    table, embeds = RELATED[item_type]
    resolved[item_type.value] = (
        store.table(table).select(*embeds).eq('id', row['item_id']).maybe_single()
    )
    return resolved


def list_specialized_items(joinery_item_id):
    def load(store):
        rows = (
            store.table(TABLE)
            .select()
            .eq('joinery_item_id', joinery_item_id)
            .order('created_at', desc=True)
            .execute()
        )
        return [resolve_item(store, r) for r in rows]

    return cached_query(
        ('specialized-items', joinery_item_id), load, enabled=bool(joinery_item_id),
    )


def get_specialized_item(item_id):
    def load(store):
        row = store.table(TABLE).select().eq('id', item_id).single()
        return resolve_item(store, row)

    return cached_query(
        ('specialized-item', item_id), load, enabled=bool(item_id), many=False,
    )


def create_specialized_item(values):
    values = dict(values)
    if isinstance(values.get('item_type'), ItemType):
        values['item_type'] = values['item_type'].value
    row = insert_row(TABLE, {**values, 'created_by': None})
    invalidate(('specialized-items', row['joinery_item_id']))
    return resolve_item(require_store(), row)


def update_specialized_item(item_id, values):
    values = dict(values)
    if isinstance(values.get('item_type'), ItemType):
        values['item_type'] = values['item_type'].value
    row = update_row(TABLE, item_id, values)
    invalidate(('specialized-items', row['joinery_item_id']), ('specialized-item', item_id))
    return resolve_item(require_store(), row)


def delete_specialized_item(item_id):
    removed = delete_row(TABLE, item_id)
    if removed is not None:
        invalidate(
            ('specialized-items', removed['joinery_item_id']),
            ('specialized-item', item_id),
        )
    return removed
