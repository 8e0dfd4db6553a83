# joinery/library/routes.py

"""Hardware, materials and template cabinets."""

from flask import Blueprint, jsonify, request

from joinery.crud import register_collection, register_member
from joinery.forms import (
    HardwareForm,
    MaterialForm,
    TemplateCabinetForm,
    TemplateCabinetMaterialForm,
)
from joinery.models import CABINET_CATEGORIES
from joinery.queries.hardware import delete_hardware, get_hardware, list_hardware
from joinery.queries.materials import delete_material, get_material, list_materials
from joinery.queries.template_cabinet_materials import (
    delete_template_cabinet_material,
    get_template_cabinet_material,
    list_template_cabinet_materials,
)
from joinery.queries.template_cabinets import (
    delete_template_cabinet,
    get_template_cabinet,
    list_template_cabinets,
)

hardware_bp = Blueprint('hardware', __name__)
materials_bp = Blueprint('materials', __name__)
cabinets_bp = Blueprint('cabinets', __name__)


register_collection(hardware_bp, 'list_hardware', '/', HardwareForm, list_hardware)
register_member(hardware_bp, 'hardware_item', '/<row_id>', HardwareForm, get_hardware, delete_hardware)

register_collection(materials_bp, 'list_materials', '/', MaterialForm, list_materials)
register_member(materials_bp, 'material', '/<row_id>', MaterialForm, get_material, delete_material)


@cabinets_bp.route('/', methods=['GET'])
def list_cabinets():
    """
    Template cabinets, optionally narrowed with ?category=base.
    Returns { items: [...], categories: [...] }.
    """
    category = request.args.get('category') or None
    return jsonify(
        items=list_template_cabinets(category),
        categories=list(CABINET_CATEGORIES),
    )


register_collection(cabinets_bp, 'create_cabinet', '/', TemplateCabinetForm)
register_member(
    cabinets_bp, 'cabinet', '/<row_id>', TemplateCabinetForm,
    get_template_cabinet, delete_template_cabinet,
)

register_collection(
    cabinets_bp, 'cabinet_materials', '/<parent_id>/materials', TemplateCabinetMaterialForm,
    list_template_cabinet_materials, parent_field='temp_cab_id',
)
register_member(
    cabinets_bp, 'cabinet_material', '/materials/<row_id>', TemplateCabinetMaterialForm,
    get_template_cabinet_material, delete_template_cabinet_material,
)
