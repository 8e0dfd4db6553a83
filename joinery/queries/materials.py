from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'materials'
EMBEDS = ('supplier',)


def list_materials():
    return cached_query(
        ('materials',),
        lambda store: store.table(TABLE).select(*EMBEDS).order('created_at', desc=True).execute(),
    )


def get_material(material_id):
    return cached_query(
        ('material', material_id),
        fetch_by_id(TABLE, material_id, EMBEDS),
        enabled=bool(material_id),
        many=False,
    )


def create_material(values):
    row = insert_row(TABLE, {**values, 'created_by': None}, EMBEDS)
    invalidate(('materials',))
    return row


def update_material(material_id, values):
    row = update_row(TABLE, material_id, values, EMBEDS)
    invalidate(('materials',), ('material', material_id))
    return row


def delete_material(material_id):
    delete_row(TABLE, material_id)
    # supplier prices cascade; joinery item material slots are nulled
    invalidate(
        ('materials',),
        ('material', material_id),
        ('supplier-materials',),
        ('supplier-material',),
        ('joinery-items',),
        ('quote-joinery-items',),
        ('joinery-item',),
    )
