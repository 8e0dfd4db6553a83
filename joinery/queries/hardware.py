from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'hardware'
EMBEDS = ('supplier',)


def list_hardware():
    return cached_query(
        ('hardware',),
        lambda store: store.table(TABLE).select(*EMBEDS).order('created_at', desc=True).execute(),
    )


def get_hardware(hardware_id):
    return cached_query(
        ('hardware-item', hardware_id),
        fetch_by_id(TABLE, hardware_id, EMBEDS),
        enabled=bool(hardware_id),
        many=False,
    )


def create_hardware(values):
    row = insert_row(TABLE, {**values, 'created_by': None}, EMBEDS)
    invalidate(('hardware',))
    return row


def update_hardware(hardware_id, values):
    row = update_row(TABLE, hardware_id, values, EMBEDS)
    invalidate(('hardware',), ('hardware-item', hardware_id))
    return row


def delete_hardware(hardware_id):
    delete_row(TABLE, hardware_id)
    invalidate(
        ('hardware',),
        ('hardware-item', hardware_id),
        ('joinery-items',),
        ('quote-joinery-items',),
        ('joinery-item',),
    )
