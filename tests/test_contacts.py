import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from joinery import create_app
from joinery.cache import get_cache
from joinery.errors import DELETE_MESSAGES, FOREIGN_KEY_VIOLATION, StoreError
from joinery.forms import CustomerForm, SupplierForm
from joinery.queries.customers import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)
from joinery.queries.hardware import create_hardware
from joinery.queries.quote_projects import create_quote_project
from joinery.queries.suppliers import create_supplier, delete_supplier, list_suppliers


def setup_app():
    return create_app('testing')


def test_customer_crud_refreshes_lists():
    app = setup_app()
    with app.app_context():
        assert list_customers() == []
        assert ('customers',) in get_cache()

        created = create_customer({'company_name': 'Birch & Co', 'email': 'info@birch.example.com'})
        assert ('customers',) not in get_cache()
        assert [c['id'] for c in list_customers()] == [created['id']]

        update_customer(created['id'], {'phone': '0400 000 000'})
        assert get_customer(created['id'])['phone'] == '0400 000 000'

        delete_customer(created['id'])
        assert list_customers() == []


def test_customers_sorted_by_company_name():
    app = setup_app()
    with app.app_context():
        create_customer({'company_name': 'Zeta', 'email': 'z@example.com'})
        create_customer({'company_name': 'Alpha', 'email': 'a@example.com'})
        assert [c['company_name'] for c in list_customers()] == ['Alpha', 'Zeta']


def test_referenced_customer_delete_is_friendly():
    app = setup_app()
    with app.app_context():
        customer = create_customer({'company_name': 'Oak', 'email': 'oak@example.com'})
        create_quote_project({'name': 'Laundry', 'customer_id': customer['id'], 'quote': True})

        with pytest.raises(StoreError) as exc:
            delete_customer(customer['id'])
        assert exc.value.code == FOREIGN_KEY_VIOLATION
        assert exc.value.message == DELETE_MESSAGES['customer']
        assert get_customer(customer['id'])['company_name'] == 'Oak'


def test_referenced_customer_delete_http_conflict():
    app = setup_app()
    client = app.test_client()
    with app.app_context():
        customer = create_customer({'company_name': 'Elm', 'email': 'elm@example.com'})
        create_quote_project({'name': 'Ensuite', 'customer_id': customer['id'], 'quote': False})

    res = client.delete(f"/contacts/customers/{customer['id']}")
    assert res.status_code == 409
    assert res.get_json() == {'error': DELETE_MESSAGES['customer'], 'code': FOREIGN_KEY_VIOLATION}
    assert client.get(f"/contacts/customers/{customer['id']}").status_code == 200


def test_referenced_supplier_delete_is_friendly():
    app = setup_app()
    with app.app_context():
        supplier = create_supplier({'name': 'Blum'})
        create_hardware({'name': 'Runner', 'cost_per_unit': 12, 'supplier_id': supplier['id']})

        with pytest.raises(StoreError) as exc:
            delete_supplier(supplier['id'])
        assert exc.value.message == DELETE_MESSAGES['supplier']
        assert len(list_suppliers()) == 1


def test_customer_form_requires_company_name():
    app = setup_app()
    with app.app_context():
        form = CustomerForm()
        assert form.submit({'company_name': '  ', 'email': 'x@example.com'}) is None
        assert form.errors == {'company_name': 'Company name is required'}
        assert list_customers() == []


def test_customer_form_rejects_bad_email_and_keeps_draft():
    app = setup_app()
    with app.app_context():
        form = CustomerForm()
        assert form.submit({'company_name': 'Ash', 'email': 'not-an-email'}) is None
        assert form.errors['email'] == 'Please enter a valid email address'
        assert form.draft['company_name'] == 'Ash'

        form.set('email', 'ash@example.com')
        assert 'email' not in form.errors
        saved = form.submit()
        assert saved['company_name'] == 'Ash'
        assert form.is_editing


def test_supplier_form_edit_updates_record():
    app = setup_app()
    with app.app_context():
        supplier = create_supplier({'name': 'Polytec'})
        form = SupplierForm(record=supplier)
        assert form.draft['name'] == 'Polytec'
        saved = form.submit({'notes': 'Board supplier'})
        assert saved['id'] == supplier['id']
        assert saved['notes'] == 'Board supplier'


def test_contacts_http_flow():
    app = setup_app()
    client = app.test_client()

    res = client.post('/contacts/customers', json={'company_name': 'Pine', 'email': 'pine@example.com'})
    assert res.status_code == 201
    customer_id = res.get_json()['id']

    res = client.post('/contacts/customers', json={'email': 'pine@example.com'})
    assert res.status_code == 400
    assert res.get_json()['errors']['company_name'] == 'Company name is required'

    res = client.get('/contacts/')
    body = res.get_json()
    assert [c['company_name'] for c in body['customers']] == ['Pine']
    assert body['suppliers'] == []

    res = client.patch(f'/contacts/customers/{customer_id}', json={'mobile': '0411 111 111'})
    assert res.status_code == 200
    assert res.get_json()['mobile'] == '0411 111 111'

    assert client.get('/contacts/customers/missing').status_code == 404

    res = client.post(f'/contacts/customers/{customer_id}/delete')
    assert res.get_json() == {'success': True}
    assert client.get('/contacts/customers').get_json()['items'] == []


def test_supplier_materials_nested_route():
    app = setup_app()
    client = app.test_client()
    supplier = client.post('/contacts/suppliers', json={'name': 'Laminex'}).get_json()
    material = client.post('/materials/', json={
        'name': 'White melamine', 'length': 2400, 'width': 1200, 'cost_per_unit': 80,
    }).get_json()

    res = client.post(f"/contacts/suppliers/{supplier['id']}/materials",
                      json={'mat_id': material['id'], 'sup_cost': 75})
    assert res.status_code == 201

    rows = client.get(f"/contacts/suppliers/{supplier['id']}/materials").get_json()['items']
    assert len(rows) == 1
    assert rows[0]['sup_cost'] == 75
