# joinery/contacts/routes.py

from flask import Blueprint, jsonify

from joinery.crud import register_collection, register_member
from joinery.forms import CustomerForm, SupplierForm, SupplierMaterialForm
from joinery.queries.customers import delete_customer, get_customer, list_customers
from joinery.queries.suppliers import delete_supplier, get_supplier, list_suppliers
from joinery.queries.supplier_materials import (
    delete_supplier_material,
    get_supplier_material,
    list_supplier_materials,
)

bp = Blueprint('contacts', __name__)


@bp.route('/')
def list_contacts():
    """Customers and suppliers side by side."""
    return jsonify(customers=list_customers(), suppliers=list_suppliers())


register_collection(bp, 'customers', '/customers', CustomerForm, list_customers)
register_member(bp, 'customer', '/customers/<row_id>', CustomerForm, get_customer, delete_customer)

register_collection(bp, 'suppliers', '/suppliers', SupplierForm, list_suppliers)
register_member(bp, 'supplier', '/suppliers/<row_id>', SupplierForm, get_supplier, delete_supplier)

register_collection(
    bp, 'supplier_materials', '/suppliers/<parent_id>/materials', SupplierMaterialForm,
    list_supplier_materials, parent_field='sup_id',
)
register_member(
    bp, 'supplier_material', '/supplier-materials/<row_id>', SupplierMaterialForm,
    get_supplier_material, delete_supplier_material,
)
