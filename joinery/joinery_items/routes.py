# joinery/joinery_items/routes.py

"""Joinery items and everything hanging off them: cabinets, cabinet hardware
and materials, specialized items and item materials."""

from flask import Blueprint, abort, current_app, jsonify, request

from joinery.crud import register_collection, register_member, request_data, save
from joinery.forms import (
    CabinetForm,
    CabinetHardwareForm,
    CabinetMaterialForm,
    JoineryItemForm,
    JoineryItemMaterialForm,
    SpecializedItemForm,
)
from joinery.queries.cabinet_hardware import (
    delete_cabinet_hardware,
    get_cabinet_hardware,
    list_cabinet_hardware,
)
from joinery.queries.cabinet_materials import (
    delete_cabinet_material,
    get_cabinet_material,
    list_cabinet_materials,
)
from joinery.queries.cabinets import (
    cabinet_values_from_template,
    delete_cabinet,
    get_cabinet,
    list_cabinets,
)
from joinery.queries.joinery_item_materials import (
    delete_joinery_item_material,
    get_joinery_item_material,
    list_joinery_item_materials,
)
from joinery.models import CHECKLIST_FIELDS
from joinery.queries.joinery_items import (
    delete_joinery_item,
    get_joinery_item,
    update_joinery_item,
)
from joinery.queries.settings import get_setting_value
from joinery.queries.specialized_items import (
    delete_specialized_item,
    get_specialized_item,
    list_specialized_items,
)
from joinery.queries.template_cabinets import get_template_cabinet
from joinery.quotes.costing import cabinet_costs
from joinery.store import require_store

bp = Blueprint('joinery_items', __name__)


register_member(bp, 'joinery_item', '/<row_id>', JoineryItemForm, get_joinery_item, delete_joinery_item)


@bp.route('/<item_id>/cabinets', methods=['GET'])
def item_cabinets(item_id):
    """Cabinets of a joinery item with their cost breakdown."""
    item = get_joinery_item(item_id)
    if item is None:
        abort(404)
    cut_and_edge = get_setting_value(
        current_app.config['CUT_AND_EDGE_SETTING_KEY'],
        current_app.config['CUT_AND_EDGE_DEFAULT'],
    )
    cabinets = list_cabinets(item_id)
    costs = [cabinet_costs(c, item, cut_and_edge) for c in cabinets]
    return jsonify(
        items=cabinets,
        costs=costs,
        total=sum(c['total_cost'] for c in costs),
        cut_and_edge_cost=cut_and_edge,
    )


@bp.route('/<item_id>/cabinets/from-template', methods=['POST'])
def add_cabinet_from_template(item_id):
    """Copy a template into a new cabinet; quantity and overrides go through the cabinet form."""
    require_store()
    data = request_data()
    template = get_template_cabinet(data.get('template_id'))
    item = get_joinery_item(item_id)
    if template is None or item is None:
        abort(404)
    overrides = data.get('overrides') or {}
    if not isinstance(overrides, dict):
        return jsonify(errors={'overrides': 'Invalid overrides'}), 400
    values = cabinet_values_from_template(
        template,
        item_id,
        quantity=data.get('quantity') or 1,
        quote=bool(item.get('quote', True)),
        overrides={k: v for k, v in overrides.items() if v is not None},
    )
    return save(CabinetForm, data=values, status=201)



register_collection(bp, 'add_cabinet', '/<parent_id>/cabinets', CabinetForm, parent_field='joinery_item_id')
register_member(bp, 'cabinet', '/cabinets/<row_id>', CabinetForm, get_cabinet, delete_cabinet)

register_collection(
    bp, 'cabinet_hardware', '/cabinets/<parent_id>/hardware', CabinetHardwareForm,
    list_cabinet_hardware, parent_field='cab_id',
)
register_member(
    bp, 'cabinet_hardware_row', '/cabinet-hardware/<row_id>', CabinetHardwareForm,
    get_cabinet_hardware, delete_cabinet_hardware,
)

register_collection(
    bp, 'cabinet_materials', '/cabinets/<parent_id>/materials', CabinetMaterialForm,
    list_cabinet_materials, parent_field='cab_id',
)
register_member(
    bp, 'cabinet_material', '/cabinet-materials/<row_id>', CabinetMaterialForm,
    get_cabinet_material, delete_cabinet_material,
)

register_collection(
    bp, 'specialized_items', '/<parent_id>/specialized-items', SpecializedItemForm,
    list_specialized_items, parent_field='joinery_item_id',
)
register_member(
    bp, 'specialized_item', '/specialized-items/<row_id>', SpecializedItemForm,
    get_specialized_item, delete_specialized_item,
)

register_collection(
    bp, 'item_materials', '/<parent_id>/materials', JoineryItemMaterialForm,
    list_joinery_item_materials, parent_field='joinery_item_id',
)
register_member(
    bp, 'item_material', '/materials/<row_id>', JoineryItemMaterialForm,
    get_joinery_item_material, delete_joinery_item_material,
)


@bp.route('/<item_id>/checklist', methods=['POST'])
def toggle_checklist(item_id):
    """Flip one project checklist box: { field: 'board_ordered' }."""
    require_store()
    field = request_data().get('field') or request.args.get('field')
    if field not in CHECKLIST_FIELDS:
        abort(400)
    item = get_joinery_item(item_id)
    if item is None:
        abort(404)
    return jsonify(update_joinery_item(item_id, {field: not item.get(field)}))
