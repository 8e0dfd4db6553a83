from joinery.cache import cached_query, invalidate
from joinery.errors import StoreError, friendly_delete_error
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'suppliers'


def list_suppliers():
    return cached_query(
        ('suppliers',),
        lambda store: store.table(TABLE).select().order('name').execute(),
    )


def get_supplier(supplier_id):
    return cached_query(
        ('supplier', supplier_id),
        fetch_by_id(TABLE, supplier_id),
        enabled=bool(supplier_id),
        many=False,
    )


def create_supplier(values):
    row = insert_row(TABLE, {**values, 'created_by': None})
    invalidate(('suppliers',))
    return row


def update_supplier(supplier_id, values):
    row = update_row(TABLE, supplier_id, values)
    invalidate(('suppliers',), ('supplier', supplier_id))
    return row


def delete_supplier(supplier_id):
    """Delete a supplier; referenced suppliers fail with a readable message."""
    try:
        delete_row(TABLE, supplier_id)
    except StoreError as exc:
        raise friendly_delete_error('supplier', exc) from exc
    invalidate(
        ('suppliers',),
        ('supplier', supplier_id),
        ('supplier-materials', supplier_id),
        ('supplier-material',),
    )
