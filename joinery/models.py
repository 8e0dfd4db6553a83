import enum
import uuid
from datetime import date, datetime, timezone

from joinery import db


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class QuoteStatus(str, enum.Enum):
    DRAFT = 'draft'
    SENT = 'sent'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    EXPIRED = 'expired'


class ProjectStatus(str, enum.Enum):
    PLANNING = 'planning'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    ON_HOLD = 'on_hold'


PRIORITY_LEVELS = ('low', 'medium', 'high')
CABINET_CATEGORIES = ('base', 'wall', 'tall', 'commercial', 'accessories')
CABINET_TYPES = (
    'door',
    'drawer',
    'open',
    'int_dishwasher',
    'accessories',
    'int_rangehood',
    'int_fridge',
)
MATERIAL_TYPES = ('Board/Laminate', 'Edgetape')
EDGE_SIZES = ('21x1', '21x2', '29x1', '29x2', '38x1', '38x2')
MATERIAL_UNITS = ('sheet', 'meters', 'units', 'hours')


class SerializerMixin:
    """Column-level dict conversion; embedded relations are added by the store."""

    def to_dict(self):
        out = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            out[column.key] = value
        return out


class Timestamped:
    id         = db.Column(db.String(36), primary_key=True, default=new_id)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


# ---------------------------------------------------------------------------
# Libraries
# ---------------------------------------------------------------------------

class Customer(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'customer'
    created_by   = db.Column(db.String(36), nullable=True)
    company_name = db.Column(db.String(200), nullable=False)
    contact_name = db.Column(db.String(200))
    email        = db.Column(db.String(200), nullable=False)
    phone        = db.Column(db.String(50))
    mobile       = db.Column(db.String(50))
    address      = db.Column(db.Text)


class Supplier(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'suppliers'
    created_by   = db.Column(db.String(36), nullable=True)
    name         = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.Text)
    email        = db.Column(db.String(200))
    phone        = db.Column(db.String(50))
    address      = db.Column(db.Text)
    notes        = db.Column(db.Text)


class Hardware(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'hardware'
    created_by    = db.Column(db.String(36), nullable=True)
    name          = db.Column(db.String(200), nullable=False)
    description   = db.Column(db.Text)
    dimension     = db.Column(db.String(100))
    cost_per_unit = db.Column(db.Float, nullable=False, default=0.0)
    supplier_id   = db.Column(db.String(36), db.ForeignKey('suppliers.id'), nullable=True)

    supplier = db.relationship('Supplier', lazy='select')


class Material(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'materials'
    created_by    = db.Column(db.String(36), nullable=True)
    name          = db.Column(db.String(200), nullable=False)
    material_type = db.Column(db.String(32))
    thickness     = db.Column(db.Float)
    board_size    = db.Column(db.String(50))
    length        = db.Column(db.Float)
    width         = db.Column(db.Float)
    edge_size     = db.Column(db.String(8))
    unit          = db.Column(db.String(16))
    cost_per_unit = db.Column(db.Float)
    supplier_id   = db.Column(db.String(36), db.ForeignKey('suppliers.id'), nullable=True)

    supplier = db.relationship('Supplier', lazy='select')


class TemplateCabinet(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'template_cabinet'
    created_by             = db.Column(db.String(36), nullable=True)
    type                   = db.Column(db.String(32))
    category               = db.Column(db.String(32))
    name                   = db.Column(db.String(200))
    width                  = db.Column(db.Float)
    height                 = db.Column(db.Float)
    depth                  = db.Column(db.Float)
    description            = db.Column(db.Text)
    assigned_face_material = db.Column(db.Integer, nullable=False, default=1)
    end_panels_qty         = db.Column(db.Integer, nullable=False, default=0)
    hinge_qty              = db.Column(db.String(100))
    drawer_qty             = db.Column(db.Integer, nullable=False, default=0)
    door_qty               = db.Column(db.Integer, nullable=False, default=0)
    shelf_qty              = db.Column(db.Integer, nullable=False, default=0)
    drawer_hardware_qty    = db.Column(db.String(100))
    carcass_calculation    = db.Column(db.Text)
    face_calculation       = db.Column(db.Text)


StandardCabinet = TemplateCabinet


class SupplierMaterial(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'sup_join_material'
    sup_id   = db.Column(db.String(36), db.ForeignKey('suppliers.id', ondelete='CASCADE'), nullable=False)
    mat_id   = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='CASCADE'), nullable=False)
    sup_cost = db.Column(db.Float, nullable=False, default=0.0)

    supplier = db.relationship('Supplier', lazy='select')
    material = db.relationship('Material', lazy='select')


class TemplateCabinetMaterial(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'temp_cab_join_material'
    material_id = db.Column(db.String(36), db.ForeignKey('materials.id'), nullable=False)
    temp_cab_id = db.Column(db.String(36), db.ForeignKey('template_cabinet.id', ondelete='CASCADE'), nullable=False)
    qty         = db.Column(db.Float, nullable=False, default=1)

    material         = db.relationship('Material', lazy='select')
    template_cabinet = db.relationship('TemplateCabinet', lazy='select')


# ---------------------------------------------------------------------------
# Quotes and projects
# ---------------------------------------------------------------------------

class QuoteProject(SerializerMixin, Timestamped, db.Model):
    """A sales quote (``quote=True``) or an active build project (``quote=False``)."""

    __tablename__ = 'quote_project'
    created_by                = db.Column(db.String(36), nullable=True)
    quote                     = db.Column(db.Boolean, nullable=False, default=True)
    quote_num                 = db.Column(db.String(50), unique=True)
    proj_num                  = db.Column(db.String(50))
    name                      = db.Column(db.String(200), nullable=False)
    description               = db.Column(db.Text)
    customer_id               = db.Column(db.String(36), db.ForeignKey('customer.id'), nullable=False)
    address                   = db.Column(db.Text)
    quote_date                = db.Column(db.Date)
    valid_until               = db.Column(db.Date)
    status                    = db.Column(db.String(32))
    total_amount              = db.Column(db.Float, nullable=False, default=0.0)
    budget                    = db.Column(db.Float, nullable=False, default=0.0)
    install_commencement_date = db.Column(db.Date)
    install_duration          = db.Column(db.Integer)
    priority_level            = db.Column(db.String(16))
    markup_percentage         = db.Column(db.Float, nullable=False, default=40.0)

    customer = db.relationship('Customer', lazy='select')


Quote = Project = QuoteProject


class JoineryItem(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'joinery_item'
    created_by                = db.Column(db.String(36), nullable=True)
    quote                     = db.Column(db.Boolean, nullable=False, default=True)
    joinery_number            = db.Column(db.String(50))
    name                      = db.Column(db.String(200), nullable=False)
    description               = db.Column(db.Text)
    qty                       = db.Column(db.Integer, nullable=False, default=1)
    quote_proj_id             = db.Column(db.String(36), db.ForeignKey('quote_project.id', ondelete='CASCADE'), nullable=False)
    factory_hours             = db.Column(db.Float)
    install_hours             = db.Column(db.Float)
    budget                    = db.Column(db.Float, nullable=False, default=0.0)
    install_commencement_date = db.Column(db.Date)
    install_duration          = db.Column(db.Integer)

    carcass_material_id = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='SET NULL'))
    face_material_1_id  = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='SET NULL'))
    face_material_2_id  = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='SET NULL'))
    face_material_3_id  = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='SET NULL'))
    face_material_4_id  = db.Column(db.String(36), db.ForeignKey('materials.id', ondelete='SET NULL'))
    hinge_id            = db.Column(db.String(36), db.ForeignKey('hardware.id', ondelete='SET NULL'))
    drawer_hardware_id  = db.Column(db.String(36), db.ForeignKey('hardware.id', ondelete='SET NULL'))

    # project checklist, only meaningful when quote is False
    shop_drawings_approved       = db.Column(db.Boolean, nullable=False, default=False)
    board_ordered                = db.Column(db.Boolean, nullable=False, default=False)
    hardware_ordered             = db.Column(db.Boolean, nullable=False, default=False)
    site_measured                = db.Column(db.Boolean, nullable=False, default=False)
    microvellum_ready_to_process = db.Column(db.Boolean, nullable=False, default=False)
    processed_to_factory         = db.Column(db.Boolean, nullable=False, default=False)
    picked_up_from_factory       = db.Column(db.Boolean, nullable=False, default=False)
    install_scheduled            = db.Column(db.Boolean, nullable=False, default=False)
    plans_printed                = db.Column(db.Boolean, nullable=False, default=False)
    assembled                    = db.Column(db.Boolean, nullable=False, default=False)
    delivered                    = db.Column(db.Boolean, nullable=False, default=False)
    installed                    = db.Column(db.Boolean, nullable=False, default=False)
    invoiced                     = db.Column(db.Boolean, nullable=False, default=False)

    # maintained by the store
    calculated_cabinet_cost     = db.Column(db.Float)
    calculated_specialized_cost = db.Column(db.Float)
    calculated_hours_cost       = db.Column(db.Float)
    calculated_total_cost       = db.Column(db.Float)

    quote_project    = db.relationship('QuoteProject', lazy='select')
    carcass_material = db.relationship('Material', foreign_keys=[carcass_material_id], lazy='select')
    face_material_1  = db.relationship('Material', foreign_keys=[face_material_1_id], lazy='select')
    face_material_2  = db.relationship('Material', foreign_keys=[face_material_2_id], lazy='select')
    face_material_3  = db.relationship('Material', foreign_keys=[face_material_3_id], lazy='select')
    face_material_4  = db.relationship('Material', foreign_keys=[face_material_4_id], lazy='select')
    hinge            = db.relationship('Hardware', foreign_keys=[hinge_id], lazy='select')
    drawer_hardware  = db.relationship('Hardware', foreign_keys=[drawer_hardware_id], lazy='select')


CHECKLIST_FIELDS = (
    'shop_drawings_approved',
    'board_ordered',
    'hardware_ordered',
    'site_measured',
    'microvellum_ready_to_process',
    'processed_to_factory',
    'picked_up_from_factory',
    'install_scheduled',
    'plans_printed',
    'assembled',
    'delivered',
    'installed',
    'invoiced',
)


class Cabinet(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'cabinet'
    created_by             = db.Column(db.String(36), nullable=True)
    type                   = db.Column(db.String(32))
    category               = db.Column(db.String(32))
    name                   = db.Column(db.String(200))
    width                  = db.Column(db.Float)
    height                 = db.Column(db.Float)
    depth                  = db.Column(db.Float)
    quantity               = db.Column(db.Integer, nullable=False, default=1)
    template_id            = db.Column(db.String(36), db.ForeignKey('template_cabinet.id', ondelete='SET NULL'))
    quote                  = db.Column(db.Boolean, nullable=False, default=True)
    joinery_item_id        = db.Column(db.String(36), db.ForeignKey('joinery_item.id', ondelete='CASCADE'), nullable=False)
    assigned_face_material = db.Column(db.Integer)
    extra_hinges           = db.Column(db.Integer, nullable=False, default=0)
    extra_drawers          = db.Column(db.Integer, nullable=False, default=0)
    end_panels_qty         = db.Column(db.Integer, nullable=False, default=0)
    hinge_qty              = db.Column(db.String(100))
    drawer_qty             = db.Column(db.Integer, nullable=False, default=0)
    door_qty               = db.Column(db.Integer, nullable=False, default=0)
    shelf_qty              = db.Column(db.Integer, nullable=False, default=0)
    drawer_hardware_qty    = db.Column(db.String(100))

    template_cabinet = db.relationship('TemplateCabinet', lazy='select')
    joinery_item     = db.relationship('JoineryItem', lazy='select')


JoineryItemCabinet = QuoteJoineryItemCabinet = Cabinet


class CabinetHardware(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'cab_join_hardware'
    hardware_id = db.Column(db.String(36), db.ForeignKey('hardware.id'), nullable=False)
    cab_id      = db.Column(db.String(36), db.ForeignKey('cabinet.id', ondelete='CASCADE'), nullable=False)
    qty         = db.Column(db.Integer, nullable=False, default=1)
    notes       = db.Column(db.Text)

    hardware = db.relationship('Hardware', lazy='select')
    cabinet  = db.relationship('Cabinet', lazy='select')


class CabinetMaterial(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'cab_join_material'
    material_id = db.Column(db.String(36), db.ForeignKey('materials.id'), nullable=False)
    cab_id      = db.Column(db.String(36), db.ForeignKey('cabinet.id', ondelete='CASCADE'), nullable=False)
    qty         = db.Column(db.Float, nullable=False, default=1)
    notes       = db.Column(db.Text)

    material = db.relationship('Material', lazy='select')
    cabinet  = db.relationship('Cabinet', lazy='select')


class JoineryItemMaterial(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'joinery_item_materials'
    joinery_item_id = db.Column(db.String(36), db.ForeignKey('joinery_item.id', ondelete='CASCADE'), nullable=False)
    material_id     = db.Column(db.String(36), db.ForeignKey('materials.id'), nullable=False)
    quantity        = db.Column(db.Float, nullable=False, default=1)

    material     = db.relationship('Material', lazy='select')
    joinery_item = db.relationship('JoineryItem', lazy='select')


QuoteJoineryItemMaterial = JoineryItemMaterial


class SpecializedItem(SerializerMixin, Timestamped, db.Model):
    """Hardware or material attached to a joinery item.

    ``item_id`` points at ``hardware.id`` or ``materials.id`` depending on
    ``item_type``, so there is no foreign key to embed through.
    """

    __tablename__ = 'specialized_items'
    created_by      = db.Column(db.String(36), nullable=True)
    joinery_item_id = db.Column(db.String(36), db.ForeignKey('joinery_item.id', ondelete='CASCADE'), nullable=False)
    item_type       = db.Column(db.String(16), nullable=False)
    item_id         = db.Column(db.String(36), nullable=False)
    quantity        = db.Column(db.Float, nullable=False, default=1)
    unit_cost       = db.Column(db.Float, nullable=False, default=0.0)
    total_cost      = db.Column(db.Float, nullable=False, default=0.0)
    notes           = db.Column(db.Text)

    joinery_item = db.relationship('JoineryItem', lazy='select')


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

class ProjectTask(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'project_tasks'
    project_id       = db.Column(db.String(36), db.ForeignKey('quote_project.id', ondelete='CASCADE'), nullable=False)
    task_description = db.Column(db.Text, nullable=False)
    is_completed     = db.Column(db.Boolean, nullable=False, default=False)
    is_flagged       = db.Column(db.Boolean, nullable=False, default=False)

    project = db.relationship('QuoteProject', lazy='select')


class Installer(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'installers'
    name         = db.Column(db.String(200), nullable=False)
    contact_info = db.Column(db.Text)


class ProjectInstaller(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'project_installers'
    __table_args__ = (db.UniqueConstraint('project_id', 'installer_id'),)
    project_id   = db.Column(db.String(36), db.ForeignKey('quote_project.id', ondelete='CASCADE'), nullable=False)
    installer_id = db.Column(db.String(36), db.ForeignKey('installers.id', ondelete='CASCADE'), nullable=False)

    installer = db.relationship('Installer', lazy='select')
    project   = db.relationship('QuoteProject', lazy='select')


class Setting(SerializerMixin, Timestamped, db.Model):
    __tablename__ = 'settings'
    key         = db.Column(db.String(100), unique=True, nullable=False)
    value       = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)


TABLES = {
    model.__tablename__: model
    for model in (
        Customer,
        Supplier,
        Hardware,
        Material,
        TemplateCabinet,
        SupplierMaterial,
        TemplateCabinetMaterial,
        QuoteProject,
        JoineryItem,
        Cabinet,
        CabinetHardware,
        CabinetMaterial,
        JoineryItemMaterial,
        SpecializedItem,
        ProjectTask,
        Installer,
        ProjectInstaller,
        Setting,
    )
}
