from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'template_cabinet'


def list_template_cabinets(category=None):
    """Templates ordered category, type, width, height; optionally one category."""
    def load(store):
        query = store.table(TABLE).select()
        if category:
            query = query.eq('category', category)
        else:
            query = query.order('category')
        return query.order('type').order('width').order('height').execute()

    key = ('template-cabinets', category) if category else ('template-cabinets',)
    return cached_query(key, load)


def get_template_cabinet(template_id):
    return cached_query(
        ('template-cabinet', template_id),
        fetch_by_id(TABLE, template_id),
        enabled=bool(template_id),
        many=False,
    )


def create_template_cabinet(values):
    row = insert_row(TABLE, {**values, 'created_by': None})
    invalidate(('template-cabinets',))
    return row


def update_template_cabinet(template_id, values):
    row = update_row(TABLE, template_id, values)
    invalidate(('template-cabinets',), ('template-cabinet', template_id))
    return row


def delete_template_cabinet(template_id):
    delete_row(TABLE, template_id)
    invalidate(
        ('template-cabinets',),
        ('template-cabinet', template_id),
        ('template-cabinet-materials', template_id),
        ('template-cabinet-material',),
        ('cabinets',),
        ('cabinet',),
    )
