from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'sup_join_material'
EMBEDS = ('supplier', 'material')


def list_supplier_materials(supplier_id):
    return cached_query(
        ('supplier-materials', supplier_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('sup_id', supplier_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(supplier_id),
    )


def get_supplier_material(row_id):
    return cached_query(
        ('supplier-material', row_id),
        fetch_by_id(TABLE, row_id, EMBEDS),
        enabled=bool(row_id),
        many=False,
    )


def create_supplier_material(values):
    row = insert_row(TABLE, values, EMBEDS)
    invalidate(('supplier-materials',))
    return row


def update_supplier_material(row_id, values):
    row = update_row(TABLE, row_id, values, EMBEDS)
    invalidate(('supplier-materials',), ('supplier-material', row_id))
    return row


def delete_supplier_material(row_id):
    delete_row(TABLE, row_id)
    invalidate(('supplier-materials',), ('supplier-material', row_id))
