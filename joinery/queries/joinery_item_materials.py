from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'joinery_item_materials'
EMBEDS = ('material.supplier',)


def list_joinery_item_materials(joinery_item_id):
    return cached_query(
        ('joinery-item-materials', joinery_item_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('joinery_item_id', joinery_item_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(joinery_item_id),
    )


def get_joinery_item_material(row_id):
    return cached_query(
        ('joinery-item-material', row_id),
        fetch_by_id(TABLE, row_id, EMBEDS),
        enabled=bool(row_id),
        many=False,
    )


def create_joinery_item_material(values):
    row = insert_row(TABLE, values, EMBEDS)
    invalidate(('joinery-item-materials', row['joinery_item_id']))
    return row


def update_joinery_item_material(row_id, values):
    row = update_row(TABLE, row_id, values, EMBEDS)
    invalidate(
        ('joinery-item-materials', row['joinery_item_id']),
        ('joinery-item-material', row_id),
    )
    return row


def delete_joinery_item_material(row_id):
    removed = delete_row(TABLE, row_id)
    if removed is not None:
        invalidate(
            ('joinery-item-materials', removed['joinery_item_id']),
            ('joinery-item-material', row_id),
        )
    return removed
