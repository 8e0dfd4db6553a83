from typing import Any, Literal, Optional

from pydantic import EmailStr, Field, ValidationInfo, field_validator, model_validator

from joinery.models import (
    CABINET_CATEGORIES,
    CABINET_TYPES,
    EDGE_SIZES,
    MATERIAL_TYPES,
    MATERIAL_UNITS,
    PRIORITY_LEVELS,
    ProjectStatus,
    QuoteStatus,
)
from joinery.queries.specialized_items import ItemType
from joinery.quotes.costing import AREA_VARIABLES, FormulaError, evaluate
from joinery.validation import FormSchema, IsoDate, custom_error

EMAIL_MESSAGES = {'invalid': 'Please enter a valid email address'}
FACE_SLOT_MESSAGE = 'Invalid assigned face material'


# ============================================================================
# Contacts
# ============================================================================

class CustomerSchema(FormSchema):
    company_name: str = Field(title='Company name')
    contact_name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None

    messages = {'email': EMAIL_MESSAGES}


class SupplierSchema(FormSchema):
    name: str = Field(title='Supplier name')
    contact_info: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    messages = {'email': EMAIL_MESSAGES}


# ============================================================================
# Library
# ============================================================================

class HardwareSchema(FormSchema):
    name: str = Field(title='Hardware name')
    description: Optional[str] = None
    dimension: Optional[str] = None
    cost_per_unit: float = Field(0.0, ge=0, title='Cost')
    supplier_id: Optional[str] = None


class MaterialSchema(FormSchema):
    """Board/Laminate is sized by length and width, Edgetape by edge size."""

    name: str = Field(title='Material name')
    material_type: Literal[MATERIAL_TYPES] = 'Board/Laminate'
    thickness: Optional[float] = Field(None, ge=0)
    board_size: Optional[str] = None
    length: Optional[float] = Field(None, gt=0, validate_default=True)
    width: Optional[float] = Field(None, gt=0, validate_default=True)
    edge_size: Optional[Literal[EDGE_SIZES]] = Field(None, validate_default=True)
    unit: Literal[MATERIAL_UNITS] = 'sheet'
    cost_per_unit: Optional[float] = Field(None, ge=0, title='Cost')
    supplier_id: Optional[str] = None

    @model_validator(mode='before')
    @classmethod
    def drop_unused_sizes(cls, data: Any) -> Any:
        """Sizes that don't apply to the material type are cleared, not validated."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        kind = data.get('material_type', 'Board/Laminate')
        if kind == 'Board/Laminate':
            data.pop('edge_size', None)
        elif kind == 'Edgetape':
            data.pop('length', None)
            data.pop('width', None)
        return data

    @field_validator('length', 'width')
    @classmethod
    def board_needs_size(cls, value, info: ValidationInfo):
        if value is None and info.data.get('material_type') == 'Board/Laminate':
            raise custom_error(
                'board_size', f'{cls.label(info.field_name)} is required for Board/Laminate',
            )
        return value

    @field_validator('edge_size')
    @classmethod
    def edgetape_needs_edge(cls, value, info: ValidationInfo):
        if value is None and info.data.get('material_type') == 'Edgetape':
            raise custom_error('edge_size', 'Edge size is required for Edgetape')
        return value


def _check_formula(value):
    if value is None or value.strip() == '0':
        return value
    try:
        evaluate(value, {v: 1 for v in AREA_VARIABLES})
    except FormulaError:
        raise custom_error('formula', 'Invalid formula')
    return value


class TemplateCabinetSchema(FormSchema):
    type: Literal[CABINET_TYPES] = 'door'
    category: Literal[CABINET_CATEGORIES] = 'base'
    name: Optional[str] = None
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    depth: float = Field(gt=0)
    description: Optional[str] = None
    assigned_face_material: int = Field(1, ge=1, le=4)
    end_panels_qty: int = Field(0, ge=0)
    hinge_qty: Optional[str] = None
    drawer_qty: int = Field(0, ge=0)
    door_qty: int = Field(0, ge=0)
    shelf_qty: int = Field(0, ge=0)
    drawer_hardware_qty: Optional[str] = None
    carcass_calculation: Optional[str] = None
    face_calculation: Optional[str] = None

    messages = {
        'width': {'required': 'Width must be greater than 0'},
        'height': {'required': 'Height must be greater than 0'},
        'depth': {'required': 'Depth must be greater than 0'},
        'assigned_face_material': FACE_SLOT_MESSAGE,
    }

    @field_validator('carcass_calculation', 'face_calculation')
    @classmethod
    def formula_is_arithmetic(cls, value):
        return _check_formula(value)


class TemplateCabinetMaterialSchema(FormSchema):
    temp_cab_id: str = Field(title='Cabinet')
    material_id: str = Field(title='Material')
    qty: float = Field(1, gt=0, title='Quantity')


class SupplierMaterialSchema(FormSchema):
    sup_id: str = Field(title='Supplier')
    mat_id: str = Field(title='Material')
    sup_cost: float = Field(0.0, ge=0, title='Cost')


# ============================================================================
# Quotes and projects
# ============================================================================

class QuoteSchema(FormSchema):
    quote_num: str = Field(title='Quote number')
    name: str = Field(title='Project name')
    customer_id: str = Field(title='Customer')
    description: Optional[str] = None
    address: Optional[str] = None
    quote_date: Optional[IsoDate] = None
    valid_until: Optional[IsoDate] = None
    status: QuoteStatus = QuoteStatus.DRAFT
    total_amount: float = Field(0.0, ge=0)
    markup_percentage: float = Field(40.0, ge=0)


class ProjectSchema(FormSchema):
    name: str = Field(title='Project name')
    customer_id: str = Field(title='Customer')
    proj_num: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    priority_level: Literal[PRIORITY_LEVELS] = 'medium'
    install_commencement_date: Optional[IsoDate] = None
    install_duration: int = Field(0, ge=0)
    budget: float = Field(0.0, ge=0)


class JoineryItemSchema(FormSchema):
    quote_proj_id: str = Field(title='Quote or project')
    name: str = Field(title='Item name')
    joinery_number: Optional[str] = None
    description: Optional[str] = None
    qty: int = Field(1, gt=0, title='Quantity')
    quote: bool = True
    factory_hours: Optional[float] = Field(None, ge=0)
    install_hours: Optional[float] = Field(None, ge=0)
    budget: float = Field(0.0, ge=0)
    install_commencement_date: Optional[IsoDate] = None
    install_duration: int = Field(0, ge=0)
    carcass_material_id: Optional[str] = None
    face_material_1_id: Optional[str] = None
    face_material_2_id: Optional[str] = None
    face_material_3_id: Optional[str] = None
    face_material_4_id: Optional[str] = None
    hinge_id: Optional[str] = None
    drawer_hardware_id: Optional[str] = None

    # project checklist
    shop_drawings_approved: bool = False
    board_ordered: bool = False
    hardware_ordered: bool = False
    site_measured: bool = False
    microvellum_ready_to_process: bool = False
    processed_to_factory: bool = False
    picked_up_from_factory: bool = False
    install_scheduled: bool = False
    plans_printed: bool = False
    assembled: bool = False
    delivered: bool = False
    installed: bool = False
    invoiced: bool = False


class CabinetSchema(FormSchema):
    joinery_item_id: str = Field(title='Joinery item')
    template_id: Optional[str] = None
    type: Optional[Literal[CABINET_TYPES]] = None
    category: Optional[Literal[CABINET_CATEGORIES]] = None
    name: Optional[str] = None
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    depth: Optional[float] = Field(None, gt=0)
    quantity: int = Field(1, gt=0)
    quote: bool = True
    assigned_face_material: Optional[int] = Field(None, ge=1, le=4)
    extra_hinges: int = Field(0, ge=0)
    extra_drawers: int = Field(0, ge=0)
    end_panels_qty: int = Field(0, ge=0)
    drawer_qty: int = Field(0, ge=0)
    door_qty: int = Field(0, ge=0)
    shelf_qty: int = Field(0, ge=0)
    hinge_qty: Optional[str] = None
    drawer_hardware_qty: Optional[str] = None

    messages = {'assigned_face_material': FACE_SLOT_MESSAGE}


class CabinetHardwareSchema(FormSchema):
    cab_id: str = Field(title='Cabinet')
    hardware_id: str = Field(title='Hardware')
    qty: int = Field(1, gt=0, title='Quantity')
    notes: Optional[str] = None


class CabinetMaterialSchema(FormSchema):
    cab_id: str = Field(title='Cabinet')
    material_id: str = Field(title='Material')
    qty: float = Field(1, gt=0, title='Quantity')
    notes: Optional[str] = None


class JoineryItemMaterialSchema(FormSchema):
    joinery_item_id: str = Field(title='Joinery item')
    material_id: str = Field(title='Material')
    quantity: float = Field(1, gt=0)


class SpecializedItemSchema(FormSchema):
    joinery_item_id: str = Field(title='Joinery item')
    item_type: ItemType
    item_id: str = Field(title='Item')
    quantity: float = Field(1, gt=0)
    unit_cost: float = Field(0.0, ge=0)
    notes: Optional[str] = None


# ============================================================================
# Scheduling
# ============================================================================

class ProjectTaskSchema(FormSchema):
    """Flags change only through the flag toggle, which enforces the limit."""

    project_id: str = Field(title='Project')
    task_description: str
    is_completed: bool = False


class InstallerSchema(FormSchema):
    name: str = Field(title='Installer name')
    contact_info: Optional[str] = None
