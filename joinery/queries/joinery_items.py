from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'joinery_item'
EMBEDS = ('quote_project',)
QUOTE_EMBEDS = (
    'quote_project',
    'carcass_material.supplier',
    'face_material_1.supplier',
    'face_material_2.supplier',
    'face_material_3.supplier',
    'face_material_4.supplier',
    'hinge.supplier',
    'drawer_hardware.supplier',
)

# Single-row and per-cabinet keys for rows the store removes with a joinery item.
CHILD_KEYS = (
    ('cabinet',),
    ('cabinet-hardware',),
    ('cabinet-hardware-row',),
    ('cabinet-materials',),
    ('cabinet-material',),
    ('specialized-item',),
    ('joinery-item-material',),
)


def list_joinery_items(quote_project_id):
    return cached_query(
        ('joinery-items', quote_project_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('quote_proj_id', quote_project_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(quote_project_id),
    )


def list_joinery_items_by_type(quote_project_id, is_quote):
    return cached_query(
        ('joinery-items', quote_project_id, 'quote' if is_quote else 'project'),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('quote_proj_id', quote_project_id)
            .eq('quote', bool(is_quote))
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(quote_project_id),
    )


def list_quote_joinery_items(quote_id):
    """Quote-side items with their materials and hardware embedded."""
    return cached_query(
        ('quote-joinery-items', quote_id),
        lambda store: (
            store.table(TABLE)
            .select(*QUOTE_EMBEDS)
            .eq('quote_proj_id', quote_id)
            .eq('quote', True)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(quote_id),
    )


def get_joinery_item(item_id):
    return cached_query(
        ('joinery-item', item_id),
        fetch_by_id(TABLE, item_id, QUOTE_EMBEDS),
        enabled=bool(item_id),
        many=False,
    )


def _invalidate_parent(row, item_id=None):
    parent = row['quote_proj_id']
    keys = [('joinery-items', parent), ('quote-joinery-items', parent)]
    if item_id:
        keys.append(('joinery-item', item_id))
    invalidate(*keys)


def create_joinery_item(values):
    row = insert_row(TABLE, {**values, 'created_by': None}, QUOTE_EMBEDS)
    _invalidate_parent(row)
    return row


def update_joinery_item(item_id, values):
    row = update_row(TABLE, item_id, values, QUOTE_EMBEDS)
    _invalidate_parent(row, item_id)
    return row


def delete_joinery_item(item_id):
    removed = delete_row(TABLE, item_id)
    if removed is not None:
        _invalidate_parent(removed, item_id)
        invalidate(
            ('cabinets', item_id),
            ('specialized-items', item_id),
            ('joinery-item-materials', item_id),
            *CHILD_KEYS,
        )
    return removed
