from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'temp_cab_join_material'
EMBEDS = ('material.supplier',)


def list_template_cabinet_materials(template_id):
    return cached_query(
        ('template-cabinet-materials', template_id),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('temp_cab_id', template_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(template_id),
    )


def get_template_cabinet_material(row_id):
    return cached_query(
        ('template-cabinet-material', row_id),
        fetch_by_id(TABLE, row_id, EMBEDS),
        enabled=bool(row_id),
        many=False,
    )


def create_template_cabinet_material(values):
    row = insert_row(TABLE, values, EMBEDS)
    invalidate(('template-cabinet-materials',))
    return row


def update_template_cabinet_material(row_id, values):
    row = update_row(TABLE, row_id, values, EMBEDS)
    invalidate(('template-cabinet-materials',), ('template-cabinet-material', row_id))
    return row


def delete_template_cabinet_material(row_id):
    delete_row(TABLE, row_id)
    invalidate(('template-cabinet-materials',), ('template-cabinet-material', row_id))
