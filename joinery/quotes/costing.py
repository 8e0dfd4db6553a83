# joinery/quotes/costing.py
"""Per-cabinet cost breakdown for quote joinery items.

Dimensions are millimetres.  Board/Laminate sheets are priced per square
metre including the cut-and-edge charge, then applied to the carcass and face
areas of each cabinet.  Template formulas such as
``(2 * depth * height) + (width * height)`` give areas in mm².
"""

import ast
import logging
import math
import operator

logger = logging.getLogger(__name__)

BOARD = 'Board/Laminate'
MM2_PER_M2 = 1_000_000

AREA_VARIABLES = (
    'width',
    'height',
    'depth',
    'shelf_qty',
    'drawer_qty',
    'door_qty',
    'end_panels_qty',
)

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class FormulaError(ValueError):
    pass


def evaluate(formula, variables):
    """Evaluate an arithmetic formula over ``variables``; nothing else is allowed."""
    try:
        tree = ast.parse(formula.strip(), mode='eval')
    except SyntaxError as exc:
        raise FormulaError(f'Invalid formula: {formula!r}') from exc

    def walk(node):
        if isinstance(node, ast.Expression):
            return walk(node.body)
        if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) \
                and not isinstance(node.value, bool):
            return node.value
        if isinstance(node, ast.Name):
            if node.id not in variables:
                raise FormulaError(f'Unknown variable {node.id!r} in {formula!r}')
            return variables[node.id]
        if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
            return _BIN_OPS[type(node.op)](walk(node.left), walk(node.right))
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](walk(node.operand))
        raise FormulaError(f'Unsupported expression in {formula!r}')

    try:
        return walk(tree)
    except ZeroDivisionError as exc:
        raise FormulaError(f'Division by zero in {formula!r}') from exc


def round_half_up(value):
    return int(math.floor(value + 0.5))


def square_meter_rate(material, cut_and_edge_cost):
    """Cost per m² of a Board/Laminate sheet, or ``None`` when it can't be priced."""
    if not material or material.get('material_type') != BOARD:
        return None
    cost = material.get('cost_per_unit')
    length = material.get('length')
    width = material.get('width')
    if cost is None or not length or not width or length <= 0 or width <= 0:
        return None
    return (cost + cut_and_edge_cost) / (length * width / MM2_PER_M2)


def _dimension(cabinet, name):
    """Cabinet value, falling back to its template, then zero."""
    value = cabinet.get(name)
    if value is None:
        value = (cabinet.get('template_cabinet') or {}).get(name)
    return value or 0


def _variables(cabinet):
    return {name: _dimension(cabinet, name) for name in AREA_VARIABLES}


def area_from_formula(formula, variables):
    """Area in m² from a template formula; empty or ``'0'`` formulas are zero."""
    if not formula or formula.strip() in ('', '0'):
        return 0.0
    try:
        return evaluate(formula, variables) / MM2_PER_M2
    except FormulaError:
        logger.exception('Error evaluating area formula %r', formula)
        return 0.0


def _descriptor(cabinet):
    template = cabinet.get('template_cabinet') or {}
    kind = (cabinet.get('type') or template.get('type') or '').lower()
    category = (cabinet.get('category') or template.get('category') or '').lower()
    return kind + ' ' + category


def _is_tall_or_wall(cabinet):
    text = _descriptor(cabinet)
    return 'tall' in text or 'wall' in text


def _is_open(cabinet):
    text = _descriptor(cabinet)
    return 'open' in text or 'shelf' in text


def _box_area(cabinet, width, height, depth):
    w, h, d = width / 1000, height / 1000, depth / 1000
    if _is_tall_or_wall(cabinet):
        return w * (2 * d + h) + 2 * d * h
    return w * (d + h + 0.1) + 2 * d * h


def carcass_area(cabinet):
    v = _variables(cabinet)
    formula = (cabinet.get('template_cabinet') or {}).get('carcass_calculation')
    if formula:
        return area_from_formula(formula, v)
    return _box_area(cabinet, v['width'], v['height'], v['depth'])


def face_area(cabinet):
    v = _variables(cabinet)
    formula = (cabinet.get('template_cabinet') or {}).get('face_calculation')
    if formula:
        # template formulas already include the end panels
        return area_from_formula(formula, v)
    if _is_open(cabinet):
        area = _box_area(cabinet, v['width'], v['height'], v['depth'])
    else:
        area = (v['width'] / 1000) * (v['height'] / 1000)
    if v['end_panels_qty'] > 0 and v['depth'] > 0 and v['height'] > 0:
        area += (v['depth'] / 1000) * (v['height'] / 1000) * v['end_panels_qty']
    return area


def carcass_cost(cabinet, rate):
    if not rate:
        return 0.0
    v = _variables(cabinet)
    if v['width'] <= 0 or v['height'] <= 0 or v['depth'] <= 0:
        return 0.0
    return rate * carcass_area(cabinet) * (cabinet.get('quantity') or 0)


def face_material_for(cabinet, joinery_item):
    slot = cabinet.get('assigned_face_material')
    if slot not in (1, 2, 3, 4):
        return None
    return joinery_item.get(f'face_material_{slot}')


def face_cost(cabinet, material, cut_and_edge_cost):
    rate = square_meter_rate(material, cut_and_edge_cost)
    if not rate:
        return 0.0
    v = _variables(cabinet)
    if v['width'] <= 0 or v['height'] <= 0:
        return 0.0
    return rate * face_area(cabinet) * (cabinet.get('quantity') or 0)


def quantity_from_formula(formula, door_qty, drawer_qty):
    """Evaluate a count formula like ``door_qty*2``, rounded to a whole number."""
    if not formula:
        return 0
    text = formula.strip()
    if text.isdigit():
        return int(text)
    try:
        return round_half_up(evaluate(text, {'door_qty': door_qty, 'drawer_qty': drawer_qty}))
    except FormulaError:
        logger.exception('Error evaluating formula %r', formula)
        return 0


def hinges_per_cabinet(cabinet):
    template = cabinet.get('template_cabinet') or {}
    formula = cabinet.get('hinge_qty') or template.get('hinge_qty')
    if not formula:
        return 0
    return quantity_from_formula(
        formula, _dimension(cabinet, 'door_qty'), _dimension(cabinet, 'drawer_qty'),
    )


def drawer_hardware_per_cabinet(cabinet):
    template = cabinet.get('template_cabinet') or {}
    drawers = _dimension(cabinet, 'drawer_qty')
    formula = cabinet.get('drawer_hardware_qty') or template.get('drawer_hardware_qty')
    if not formula:
        return drawers
    return quantity_from_formula(formula, 0, drawers)


def hinge_cost(cabinet, hinge):
    if not hinge or not hinge.get('cost_per_unit'):
        return 0.0
    count = (hinges_per_cabinet(cabinet) + (cabinet.get('extra_hinges') or 0)) \
        * (cabinet.get('quantity') or 0)
    return count * hinge['cost_per_unit']


def drawer_hardware_cost(cabinet, drawer_hardware):
    if not drawer_hardware or not drawer_hardware.get('cost_per_unit'):
        return 0.0
    count = (drawer_hardware_per_cabinet(cabinet) + (cabinet.get('extra_drawers') or 0)) \
        * (cabinet.get('quantity') or 0)
    return count * drawer_hardware['cost_per_unit']


def cabinet_costs(cabinet, joinery_item, cut_and_edge_cost):
    """Carcass, face, hinge and drawer hardware costs for one cabinet row."""
    rate = square_meter_rate(joinery_item.get('carcass_material'), cut_and_edge_cost)
    costs = {
        'cabinet_id': cabinet.get('id'),
        'carcass_cost': carcass_cost(cabinet, rate),
        'face_cost': face_cost(
            cabinet, face_material_for(cabinet, joinery_item), cut_and_edge_cost,
        ),
        'hinge_cost': hinge_cost(cabinet, joinery_item.get('hinge')),
        'drawer_hardware_cost': drawer_hardware_cost(
            cabinet, joinery_item.get('drawer_hardware'),
        ),
    }
    costs['total_cost'] = (
        costs['carcass_cost']
        + costs['face_cost']
        + costs['hinge_cost']
        + costs['drawer_hardware_cost']
    )
    return costs
