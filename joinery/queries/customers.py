from joinery.cache import cached_query, invalidate
from joinery.errors import StoreError, friendly_delete_error
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'customer'


def list_customers():
    return cached_query(
        ('customers',),
        lambda store: store.table(TABLE).select().order('company_name').execute(),
    )


def get_customer(customer_id):
    return cached_query(
        ('customer', customer_id),
        fetch_by_id(TABLE, customer_id),
        enabled=bool(customer_id),
        many=False,
    )


def create_customer(values):
    row = insert_row(TABLE, {**values, 'created_by': None})
    invalidate(('customers',))
    return row


def update_customer(customer_id, values):
    row = update_row(TABLE, customer_id, values)
    invalidate(('customers',), ('customer', customer_id))
    return row


def delete_customer(customer_id):
    try:
        delete_row(TABLE, customer_id)
    except StoreError as exc:
        raise friendly_delete_error('customer', exc) from exc
    invalidate(('customers',), ('customer', customer_id))
