from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row
from joinery.store import require_store

TABLE = 'installers'
ASSIGNMENTS = 'project_installers'


def list_installers():
    return cached_query(
        ('installers',),
        lambda store: store.table(TABLE).select().order('name').execute(),
    )


def get_installer(installer_id):
    return cached_query(
        ('installer', installer_id),
        fetch_by_id(TABLE, installer_id),
        enabled=bool(installer_id),
        many=False,
    )


def create_installer(values):
    row = insert_row(TABLE, values)
    invalidate(('installers',))
    return row


def update_installer(installer_id, values):
    row = update_row(TABLE, installer_id, values)
    invalidate(('installers',), ('installer', installer_id))
    return row


def delete_installer(installer_id):
    delete_row(TABLE, installer_id)
    invalidate(('installers',), ('installer', installer_id), ('project-installers',))


def list_project_installers(project_id):
    return cached_query(
        ('project-installers', project_id),
        lambda store: (
            store.table(ASSIGNMENTS).select('installer').eq('project_id', project_id).execute()
        ),
        enabled=bool(project_id),
    )


def assign_installer(project_id, installer_id):
    row = insert_row(
        ASSIGNMENTS, {'project_id': project_id, 'installer_id': installer_id}, ('installer',),
    )
    invalidate(('project-installers', project_id))
    return row


def remove_installer(project_id, installer_id):
    (
        require_store()
        .table(ASSIGNMENTS)
        .delete()
        .eq('project_id', project_id)
        .eq('installer_id', installer_id)
        .execute()
    )
    invalidate(('project-installers',))
