"""Single-row write helpers shared by the entity query modules."""

from joinery.store import require_store


def fetch_by_id(table, row_id, embeds=()):
    """Return a loader for ``cached_query`` that reads one row by id."""
    return lambda store: store.table(table).select(*embeds).eq('id', row_id).single()


def insert_row(table, values, embeds=()):
    return require_store().table(table).insert(dict(values)).select(*embeds).single()


def update_row(table, row_id, values, embeds=()):
    return (
        require_store()
        .table(table)
        .update(dict(values))
        .eq('id', row_id)
        .select(*embeds)
        .single()
    )


def delete_row(table, row_id):
    """Delete by id; returns the removed row or ``None`` if nothing matched."""
    rows = require_store().table(table).delete().eq('id', row_id).execute()
    return rows[0] if rows else None
