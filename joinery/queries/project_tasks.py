from flask import current_app

from joinery.cache import cached_query, invalidate
from joinery.errors import FlagLimitError
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row

TABLE = 'project_tasks'


def _invalidate_tasks(task_id=None):
    keys = [('project-tasks',), ('all-tasks',)]
    if task_id:
        keys.append(('project-task', task_id))
    invalidate(*keys)


def list_project_tasks(project_id):
    return cached_query(
        ('project-tasks', project_id),
        lambda store: (
            store.table(TABLE)
            .select()
            .eq('project_id', project_id)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(project_id),
    )


def list_all_tasks(project_ids):
    """Tasks across several projects in one query, keyed by the id list."""
    project_ids = list(project_ids or [])
    return cached_query(
        ('all-tasks', project_ids),
        lambda store: (
            store.table(TABLE)
            .select()
            .in_('project_id', project_ids)
            .order('created_at', desc=True)
            .execute()
        ),
        enabled=bool(project_ids),
    )


def get_project_task(task_id):
    return cached_query(
        ('project-task', task_id),
        fetch_by_id(TABLE, task_id),
        enabled=bool(task_id),
        many=False,
    )


def create_project_task(values):
    """New tasks start unflagged; ``toggle_task_flag`` is the only way to flag."""
    values = {'is_completed': False, **values, 'is_flagged': False}
    row = insert_row(TABLE, values)
    _invalidate_tasks()
    return row


def update_project_task(task_id, values):
    row = update_row(TABLE, task_id, values)
    _invalidate_tasks(task_id)
    return row


def delete_project_task(task_id):
    removed = delete_row(TABLE, task_id)
    _invalidate_tasks(task_id)
    return removed


def toggle_task_completed(task):
    return update_project_task(task['id'], {'is_completed': not task['is_completed']})


def toggle_task_flag(task, active_tasks):
    """Flip ``is_flagged``; flagging fails once the limit is already reached.

    ``active_tasks`` is every task across the non-completed projects.
    Unflagging is always allowed.
    """
    if not task['is_flagged']:
        limit = current_app.config['MAX_FLAGGED_TASKS']
        flagged = sum(1 for t in active_tasks if t.get('is_flagged'))
        if flagged >= limit:
            raise FlagLimitError(limit)
    return update_project_task(task['id'], {'is_flagged': not task['is_flagged']})
