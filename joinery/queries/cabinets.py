from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'cabinet'
EMBEDS = ('template_cabinet', 'joinery_item')

# Columns copied from a template when a cabinet is created from it.
TEMPLATE_FIELDS = (
    'type',
    'category',
    'name',
    'width',
    'height',
    'depth',
    'assigned_face_material',
    'end_panels_qty',
    'hinge_qty',
    'drawer_qty',
    'door_qty',
    'shelf_qty',
    'drawer_hardware_qty',
)


def list_cabinets(joinery_item_id):
    return cached_query(
        ('cabinets', joinery_item_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('joinery_item_id', joinery_item_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(joinery_item_id),
    )


def get_cabinet(cabinet_id):
    return cached_query(
        ('cabinet', cabinet_id),
        fetch_by_id(TABLE, cabinet_id, EMBEDS),
        enabled=bool(cabinet_id),
        many=False,
    )


def create_cabinet(values):
    row = insert_row(TABLE, {**values, 'created_by': None}, EMBEDS)
    invalidate(('cabinets', row['joinery_item_id']))
    return row


def cabinet_values_from_template(template, joinery_item_id, quantity=1, quote=True, overrides=None):
    """Cabinet values copied from a template, with ``overrides`` applied last."""
    values = {field: template.get(field) for field in TEMPLATE_FIELDS}
    values.update(
        template_id=template['id'],
        joinery_item_id=joinery_item_id,
        quantity=quantity,
        quote=quote,
    )
    values.update(overrides or {})
    return values


def create_cabinet_from_template(template, joinery_item_id, quantity=1, quote=True, overrides=None):
    return create_cabinet(
        cabinet_values_from_template(template, joinery_item_id, quantity, quote, overrides)
    )


def update_cabinet(cabinet_id, values):
    row = update_row(TABLE, cabinet_id, values, EMBEDS)
    invalidate(('cabinets', row['joinery_item_id']), ('cabinet', cabinet_id))
    return row


def delete_cabinet(cabinet_id):
    removed = delete_row(TABLE, cabinet_id)
    if removed is not None:
        invalidate(
            ('cabinets', removed['joinery_item_id']),
            ('cabinet', cabinet_id),
            ('cabinet-hardware', cabinet_id),
            ('cabinet-materials', cabinet_id),
        )
    return removed
