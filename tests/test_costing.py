import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from joinery.quotes import costing
from joinery.quotes.costing import FormulaError, cabinet_costs, evaluate


BOARD = {'material_type': 'Board/Laminate', 'cost_per_unit': 90, 'length': 1000, 'width': 1000}
HINGE = {'cost_per_unit': 3.5}


def base_cabinet(**extra):
    cabinet = {
        'id': 'cab-1', 'type': 'door', 'category': 'base',
        'width': 600, 'height': 720, 'depth': 560, 'quantity': 2,
        'door_qty': 2, 'drawer_qty': 0, 'end_panels_qty': 1, 'shelf_qty': 1,
        'hinge_qty': 'door_qty*2', 'extra_hinges': 1, 'extra_drawers': 0,
        'assigned_face_material': 1, 'template_cabinet': None,
    }
    cabinet.update(extra)
    return cabinet


def test_evaluate_arithmetic_only():
    assert evaluate('(2 * depth * height) + (width * height)',
                    {'depth': 560, 'height': 720, 'width': 600}) == 1238400
    assert evaluate('-width / 2', {'width': 600}) == -300
    for bad in ('__import__("os")', 'width ** 2', 'depth.real', 'unknown + 1', '1 +'):
        with pytest.raises(FormulaError):
            evaluate(bad, {'width': 600, 'depth': 1})


def test_square_meter_rate():
    assert costing.square_meter_rate(BOARD, 10) == pytest.approx(100)
    assert costing.square_meter_rate({**BOARD, 'material_type': 'Edgetape'}, 10) is None
    assert costing.square_meter_rate({**BOARD, 'width': 0}, 10) is None
    assert costing.square_meter_rate(None, 10) is None


def test_default_box_costs():
    item = {'carcass_material': BOARD, 'face_material_1': BOARD, 'hinge': HINGE}
    costs = cabinet_costs(base_cabinet(), item, 10)
    # carcass 0.6*(0.56+0.72+0.1) + 2*0.56*0.72 m² per cabinet
    assert costs['carcass_cost'] == pytest.approx(100 * 1.6344 * 2)
    # face 0.6*0.72 plus one end panel 0.56*0.72
    assert costs['face_cost'] == pytest.approx(100 * 0.8352 * 2)
    # (door_qty*2 + 1 extra) hinges per cabinet
    assert costs['hinge_cost'] == pytest.approx(5 * 2 * 3.5)
    assert costs['drawer_hardware_cost'] == 0
    assert costs['total_cost'] == pytest.approx(
        costs['carcass_cost'] + costs['face_cost'] + costs['hinge_cost'])


def test_wall_cabinet_uses_deeper_box():
    cabinet = base_cabinet(category='wall', end_panels_qty=0)
    area = costing.carcass_area(cabinet)
    assert area == pytest.approx(0.6 * (2 * 0.56 + 0.72) + 2 * 0.56 * 0.72)


def test_template_formula_overrides_box():
    template = {
        'carcass_calculation': '(2 * depth * height) + (width * height)',
        'face_calculation': '0',
    }
    cabinet = base_cabinet(template_cabinet=template)
    assert costing.carcass_area(cabinet) == pytest.approx(1.2384)
    assert costing.face_area(cabinet) == 0.0


def test_unassigned_face_slot_costs_nothing():
    item = {'carcass_material': None, 'face_material_1': BOARD}
    costs = cabinet_costs(base_cabinet(assigned_face_material=None), item, 10)
    assert costs['face_cost'] == 0
    assert costs['carcass_cost'] == 0


def test_quantity_formulas_round_half_up():
    assert costing.quantity_from_formula('4', 0, 0) == 4
    assert costing.quantity_from_formula('door_qty / 2', 3, 0) == 2
    assert costing.quantity_from_formula('2.5', 0, 0) == 3
    assert costing.quantity_from_formula('bogus(', 1, 1) == 0
    assert costing.quantity_from_formula('', 1, 1) == 0


def test_drawer_hardware_defaults_to_drawer_count():
    cabinet = base_cabinet(drawer_qty=3, extra_drawers=1, quantity=1)
    assert costing.drawer_hardware_per_cabinet(cabinet) == 3
    assert costing.drawer_hardware_cost(cabinet, {'cost_per_unit': 10}) == 40
    cabinet['drawer_hardware_qty'] = 'drawer_qty*2'
    assert costing.drawer_hardware_per_cabinet(cabinet) == 6


def test_values_fall_back_to_template():
    template = {'width': 900, 'height': 720, 'depth': 560, 'door_qty': 1, 'hinge_qty': 'door_qty*2'}
    cabinet = {'quantity': 1, 'template_cabinet': template, 'hinge_qty': None}
    assert costing.hinges_per_cabinet(cabinet) == 2
    assert costing.face_area(cabinet) == pytest.approx(0.9 * 0.72)
