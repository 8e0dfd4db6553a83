from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'cab_join_material'
EMBEDS = ('material.supplier',)


def list_cabinet_materials(cabinet_id):
    return cached_query(
        ('cabinet-materials', cabinet_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('cab_id', cabinet_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(cabinet_id),
    )


def get_cabinet_material(row_id):
    return cached_query(
        ('cabinet-material', row_id),
        fetch_by_id(TABLE, row_id, EMBEDS),
        enabled=bool(row_id),
        many=False,
    )


def create_cabinet_material(values):
    row = insert_row(TABLE, values, EMBEDS)
    invalidate(('cabinet-materials', row['cab_id']))
    return row


def update_cabinet_material(row_id, values):
    row = update_row(TABLE, row_id, values, EMBEDS)
    invalidate(('cabinet-materials', row['cab_id']), ('cabinet-material', row_id))
    return row


def delete_cabinet_material(row_id):
    removed = delete_row(TABLE, row_id)
    if removed is not None:
        invalidate(('cabinet-materials', removed['cab_id']), ('cabinet-material', row_id))
    return removed
