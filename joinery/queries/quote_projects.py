"""Quotes and projects share the ``quote_project`` table.

The ``quote`` flag decides which list a row appears in; every list is keyed
under ``('quote-projects', ...)`` so one prefix invalidation refreshes all of
them after any write.
"""

from flask import current_app

from joinery.cache import cached_query, invalidate
from joinery.queries.common import delete_row, fetch_by_id, insert_row, update_row
from joinery.queries.joinery_items import CHILD_KEYS

TABLE = 'quote_project'
EMBEDS = ('customer',)


def _listing(quote=None):
    def load(store):
        query = store.table(TABLE).select(*EMBEDS)
        if quote is not None:
            query = query.eq('quote', quote)
        return query.order('created_at', desc=True).execute()
    return load


def list_quote_projects():
    return cached_query(('quote-projects',), _listing())


def list_quotes():
    return cached_query(('quote-projects', 'quotes'), _listing(quote=True))


def list_projects():
    return cached_query(('quote-projects', 'projects'), _listing(quote=False))


def list_install_schedule():
    """Projects ordered by install commencement date, undated ones last."""
    return cached_query(
        ('quote-projects', 'install-schedule'),
        lambda store: (
            store.table(TABLE)
            .select(*EMBEDS)
            .eq('quote', False)
            .order('install_commencement_date', nulls_last=True)
            .execute()
        ),
    )


def get_quote_project(quote_project_id):
    return cached_query(
        ('quote-project', quote_project_id),
        fetch_by_id(TABLE, quote_project_id, EMBEDS),
        enabled=bool(quote_project_id),
        many=False,
    )


def create_quote_project(values):
    row = insert_row(TABLE, {**values, 'created_by': None}, EMBEDS)
    invalidate(('quote-projects',))
    return row


def update_quote_project(quote_project_id, values):
    row = update_row(TABLE, quote_project_id, values, EMBEDS)
    invalidate(('quote-projects',), ('quote-project', quote_project_id))
    return row


def delete_quote_project(quote_project_id):
    delete_row(TABLE, quote_project_id)
    invalidate(
        ('quote-projects',),
        ('quote-project', quote_project_id),
        ('joinery-items', quote_project_id),
        ('quote-joinery-items', quote_project_id),
        ('project-tasks', quote_project_id),
        ('all-tasks',),
        ('project-task',),
        ('project-installers', quote_project_id),
        ('joinery-item',),
        ('cabinets',),
        ('specialized-items',),
        ('joinery-item-materials',),
        *CHILD_KEYS,
    )


def reschedule_project(project_id, start_date, duration):
    """Move or resize a project's bar on the install timeline."""
    return update_quote_project(project_id, {
        'install_commencement_date': start_date,
        'install_duration': duration,
    })


def set_markup(quote_project_id, percentage=None):
    if percentage is None:
        percentage = current_app.config['DEFAULT_MARKUP_PERCENTAGE']
    return update_quote_project(quote_project_id, {'markup_percentage': percentage})
