# joinery/forms.py
"""Entity forms: draft state, validation and the create/update submit."""

import logging

from joinery import schemas
from joinery.errors import (
    UNIQUE_VIOLATION,
    JoineryError,
    StoreError,
    error_message,
)
from joinery.queries import (
    cabinet_hardware,
    cabinet_materials,
    cabinets,
    customers,
    hardware,
    installers,
    joinery_item_materials,
    joinery_items,
    materials,
    project_tasks,
    quote_projects,
    specialized_items,
    suppliers,
    supplier_materials,
    template_cabinet_materials,
    template_cabinets,
)
from joinery.validation import FormSchema, validate

logger = logging.getLogger(__name__)


class EntityForm:
    """Base for every entity form.

    ``record`` is the row being edited, or ``None`` when creating.  The draft
    keeps the user's input across failed submits.
    """

    noun = 'record'
    schema = FormSchema

    def __init__(self, record=None, on_success=None):
        self.record = record
        self.on_success = on_success
        self.errors = {}
        self.failure = None
        self.draft = self.initial_values()

    @property
    def is_editing(self):
        return self.record is not None

    @property
    def fallback_message(self):
        return f'Failed to save {self.noun}. Please try again.'

    def initial_values(self):
        draft = self.schema.defaults()
        if self.record:
            draft.update({k: self.record[k] for k in self.schema.field_names() if k in self.record})
        return draft

    def set(self, field, value):
        """Update one draft value and clear that field's error."""
        self.draft[field] = value
        self.errors.pop(field, None)

    def validate(self):
        return validate(self.schema, self.draft)

    def payload(self, values):
        return values

    def create(self, values):
        raise NotImplementedError

    def update(self, record_id, values):
        raise NotImplementedError

    def handle_store_error(self, exc):
        self.errors['submit'] = error_message(exc, self.fallback_message)

    def submit(self, data=None):
        """Validate and save; returns the saved row or ``None`` on failure."""
        self.errors = {}
        self.failure = None
        for name in self.schema.field_names():
            if data and name in data:
                self.draft[name] = data[name]

        values, errors = self.validate()
        if errors:
            self.errors = errors
            return None

        values = self.payload(values)
        try:
            if self.is_editing:
                saved = self.update(self.record['id'], values)
            else:
                saved = self.create(values)
        except JoineryError as exc:
            logger.warning('Failed to save %s: %s', self.noun, exc)
            self.failure = exc
            self.handle_store_error(exc)
            return None
        except Exception as exc:
            logger.exception('Unexpected error saving %s', self.noun)
            self.failure = exc
            self.errors['submit'] = self.fallback_message
            return None

        self.record = saved
        if self.on_success:
            self.on_success(saved)
        return saved


# ---------------------------------------------------------------------------
# Contacts
# ---------------------------------------------------------------------------

class CustomerForm(EntityForm):
    noun = 'customer'
    schema = schemas.CustomerSchema

    def create(self, values):
        return customers.create_customer(values)

    def update(self, record_id, values):
        return customers.update_customer(record_id, values)


class SupplierForm(EntityForm):
    noun = 'supplier'
    schema = schemas.SupplierSchema

    def create(self, values):
        return suppliers.create_supplier(values)

    def update(self, record_id, values):
        return suppliers.update_supplier(record_id, values)


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------

class HardwareForm(EntityForm):
    noun = 'hardware'
    schema = schemas.HardwareSchema

    def create(self, values):
        return hardware.create_hardware(values)

    def update(self, record_id, values):
        return hardware.update_hardware(record_id, values)


class MaterialForm(EntityForm):
    noun = 'material'
    schema = schemas.MaterialSchema

    def create(self, values):
        return materials.create_material(values)

    def update(self, record_id, values):
        return materials.update_material(record_id, values)


class TemplateCabinetForm(EntityForm):
    noun = 'cabinet'
    schema = schemas.TemplateCabinetSchema

    def create(self, values):
        return template_cabinets.create_template_cabinet(values)

    def update(self, record_id, values):
        return template_cabinets.update_template_cabinet(record_id, values)


class TemplateCabinetMaterialForm(EntityForm):
    noun = 'cabinet material'
    schema = schemas.TemplateCabinetMaterialSchema

    def create(self, values):
        return template_cabinet_materials.create_template_cabinet_material(values)

    def update(self, record_id, values):
        return template_cabinet_materials.update_template_cabinet_material(record_id, values)


class SupplierMaterialForm(EntityForm):
    noun = 'supplier material'
    schema = schemas.SupplierMaterialSchema

    def create(self, values):
        return supplier_materials.create_supplier_material(values)

    def update(self, record_id, values):
        return supplier_materials.update_supplier_material(record_id, values)


# ---------------------------------------------------------------------------
# Quotes and projects
# ---------------------------------------------------------------------------

class QuoteForm(EntityForm):
    noun = 'quote'
    schema = schemas.QuoteSchema

    def payload(self, values):
        values = {**values, 'quote': True}
        if not self.is_editing:
            # quotes carry no budget, project number or install details
            values.update(
                budget=0,
                proj_num=None,
                install_commencement_date=None,
                install_duration=None,
                priority_level=None,
            )
        return values

    def handle_store_error(self, exc):
        if isinstance(exc, StoreError) and exc.code == UNIQUE_VIOLATION:
            self.errors['quote_num'] = 'Quote number already exists'
        else:
            super().handle_store_error(exc)

    def create(self, values):
        return quote_projects.create_quote_project(values)

    def update(self, record_id, values):
        return quote_projects.update_quote_project(record_id, values)


class ProjectForm(EntityForm):
    noun = 'project'
    schema = schemas.ProjectSchema

    def payload(self, values):
        return {**values, 'quote': False}

    def create(self, values):
        return quote_projects.create_quote_project(values)

    def update(self, record_id, values):
        return quote_projects.update_quote_project(record_id, values)


class JoineryItemForm(EntityForm):
    noun = 'joinery item'
    schema = schemas.JoineryItemSchema

    def create(self, values):
        return joinery_items.create_joinery_item(values)

    def update(self, record_id, values):
        return joinery_items.update_joinery_item(record_id, values)


class CabinetForm(EntityForm):
    noun = 'cabinet'
    schema = schemas.CabinetSchema

    def create(self, values):
        return cabinets.create_cabinet(values)

    def update(self, record_id, values):
        return cabinets.update_cabinet(record_id, values)


class CabinetHardwareForm(EntityForm):
    noun = 'cabinet hardware'
    schema = schemas.CabinetHardwareSchema

    def create(self, values):
        return cabinet_hardware.create_cabinet_hardware(values)

    def update(self, record_id, values):
        return cabinet_hardware.update_cabinet_hardware(record_id, values)


class CabinetMaterialForm(EntityForm):
    noun = 'cabinet material'
    schema = schemas.CabinetMaterialSchema

    def create(self, values):
        return cabinet_materials.create_cabinet_material(values)

    def update(self, record_id, values):
        return cabinet_materials.update_cabinet_material(record_id, values)


class JoineryItemMaterialForm(EntityForm):
    noun = 'material'
    schema = schemas.JoineryItemMaterialSchema

    def create(self, values):
        return joinery_item_materials.create_joinery_item_material(values)

    def update(self, record_id, values):
        return joinery_item_materials.update_joinery_item_material(record_id, values)


class SpecializedItemForm(EntityForm):
    noun = 'specialized item'
    schema = schemas.SpecializedItemSchema

    def payload(self, values):
        return {**values, 'total_cost': values['quantity'] * values['unit_cost']}

    def create(self, values):
        return specialized_items.create_specialized_item(values)

    def update(self, record_id, values):
        return specialized_items.update_specialized_item(record_id, values)


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

class ProjectTaskForm(EntityForm):
    noun = 'task'
    schema = schemas.ProjectTaskSchema

    def create(self, values):
        return project_tasks.create_project_task(values)

    def update(self, record_id, values):
        return project_tasks.update_project_task(record_id, values)


class InstallerForm(EntityForm):
    noun = 'installer'
    schema = schemas.InstallerSchema

    def create(self, values):
        return installers.create_installer(values)

    def update(self, record_id, values):
        return installers.update_installer(record_id, values)
