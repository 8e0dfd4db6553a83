import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from joinery import create_app
from joinery.errors import FOREIGN_KEY_VIOLATION, NO_ROWS, UNIQUE_VIOLATION, StoreError
from joinery.store import UNKNOWN_COLUMN, UNKNOWN_RELATION, UNKNOWN_TABLE, get_store


def setup_app():
    return create_app('testing')


def add_customer(store, name='Acme'):
    return store.table('customer').insert(
        {'company_name': name, 'email': f'{name.lower()}@example.com'}
    ).select().single()


def add_quote(store, customer_id, **extra):
    values = {'name': 'Kitchen', 'customer_id': customer_id, 'quote': True, **extra}
    return store.table('quote_project').insert(values).select('customer').single()


def test_insert_returns_row_with_embed():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        quote = add_quote(store, customer['id'], quote_num='Q-1', quote_date='2024-03-01')
        assert quote['id']
        assert quote['quote_date'] == '2024-03-01'
        assert quote['customer']['company_name'] == 'Acme'
        assert quote['markup_percentage'] == 40.0


def test_nested_embed():
    app = setup_app()
    with app.app_context():
        store = get_store()
        supplier = store.table('suppliers').insert({'name': 'Hettich'}).select().single()
        hinge = store.table('hardware').insert(
            {'name': 'Soft close', 'cost_per_unit': 4.5, 'supplier_id': supplier['id']}
        ).select().single()
        customer = add_customer(store)
        quote = add_quote(store, customer['id'])
        store.table('joinery_item').insert(
            {'name': 'Island', 'quote_proj_id': quote['id'], 'hinge_id': hinge['id']}
        ).execute()

        item = (
            store.table('joinery_item')
            .select('hinge.supplier', 'carcass_material')
            .eq('quote_proj_id', quote['id'])
            .single()
        )
        assert item['hinge']['name'] == 'Soft close'
        assert item['hinge']['supplier']['name'] == 'Hettich'
        assert item['carcass_material'] is None


def test_single_and_maybe_single():
    app = setup_app()
    with app.app_context():
        store = get_store()
        with pytest.raises(StoreError) as exc:
            store.table('customer').select().eq('id', 'missing').single()
        assert exc.value.code == NO_ROWS
        assert store.table('customer').select().eq('id', 'missing').maybe_single() is None


def test_unknown_names():
    app = setup_app()
    with app.app_context():
        store = get_store()
        with pytest.raises(StoreError) as exc:
            store.table('nope')
        assert exc.value.code == UNKNOWN_TABLE
        with pytest.raises(StoreError) as exc:
            store.table('customer').select().eq('colour', 'red')
        assert exc.value.code == UNKNOWN_COLUMN
        with pytest.raises(StoreError) as exc:
            store.table('customer').select('orders').execute()
        assert exc.value.code == UNKNOWN_RELATION


def test_foreign_key_and_unique_codes():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        add_quote(store, customer['id'], quote_num='Q-1')

        with pytest.raises(StoreError) as exc:
            add_quote(store, customer['id'], quote_num='Q-1')
        assert exc.value.code == UNIQUE_VIOLATION

        with pytest.raises(StoreError) as exc:
            store.table('customer').delete().eq('id', customer['id']).execute()
        assert exc.value.code == FOREIGN_KEY_VIOLATION
        assert store.table('customer').select().eq('id', customer['id']).maybe_single()


def test_delete_cascades_to_children():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        quote = add_quote(store, customer['id'])
        store.table('joinery_item').insert({'name': 'Vanity', 'quote_proj_id': quote['id']}).execute()

        removed = store.table('quote_project').delete().eq('id', quote['id']).execute()
        assert [r['id'] for r in removed] == [quote['id']]
        assert store.table('joinery_item').select().execute() == []


def test_update_returns_changed_rows():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        row = (
            store.table('customer')
            .update({'phone': '555-0100'})
            .eq('id', customer['id'])
            .select()
            .single()
        )
        assert row['phone'] == '555-0100'
        assert row['company_name'] == 'Acme'
        nothing = store.table('customer').update({'phone': 'x'}).eq('id', 'missing').execute()
        assert nothing == []


def test_order_nulls_last_and_in_filter():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        late = add_quote(store, customer['id'], quote=False, install_commencement_date='2024-05-10')
        undated = add_quote(store, customer['id'], quote=False)
        early = add_quote(store, customer['id'], quote=False, install_commencement_date='2024-05-01')

        rows = (
            store.table('quote_project')
            .select()
            .order('install_commencement_date', nulls_last=True)
            .execute()
        )
        assert [r['id'] for r in rows] == [early['id'], late['id'], undated['id']]

        subset = store.table('quote_project').select().in_('id', [late['id'], early['id']]).execute()
        assert {r['id'] for r in subset} == {late['id'], early['id']}
        assert store.table('quote_project').select().in_('id', []).execute() == []


def test_eq_none_matches_null():
    app = setup_app()
    with app.app_context():
        store = get_store()
        customer = add_customer(store)
        dated = add_quote(store, customer['id'], quote_date='2024-01-01')
        undated = add_quote(store, customer['id'])
        rows = store.table('quote_project').select().eq('quote_date', None).execute()
        assert [r['id'] for r in rows] == [undated['id']]
        assert dated['id'] != undated['id']
