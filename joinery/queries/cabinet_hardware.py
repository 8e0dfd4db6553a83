from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'cab_join_hardware'
EMBEDS = ('hardware.supplier',)


def list_cabinet_hardware(cabinet_id):
    return cached_query(
        ('cabinet-hardware', cabinet_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('cab_id', cabinet_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(cabinet_id),
    )


def get_cabinet_hardware(row_id):
    return cached_query(
        ('cabinet-hardware-row', row_id),
        fetch_by_id(TABLE, row_id, EMBEDS),
        enabled=bool(row_id),
        many=False,
    )


def create_cabinet_hardware(values):
    row = insert_row(TABLE, values, EMBEDS)
    invalidate(('cabinet-hardware', row['cab_id']))
    return row


def update_cabinet_hardware(row_id, values):
    row = update_row(TABLE, row_id, values, EMBEDS)
    invalidate(('cabinet-hardware', row['cab_id']), ('cabinet-hardware-row', row_id))
    return row


def delete_cabinet_hardware(row_id):
    removed = delete_row(TABLE, row_id)
    if removed is not None:
        invalidate(('cabinet-hardware', removed['cab_id']), ('cabinet-hardware-row', row_id))
    return removed
