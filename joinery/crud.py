# joinery/crud.py
"""Route wiring shared by the entity blueprints.

A collection rule answers GET (list) and POST (create through the form); a
member rule answers GET, POST/PATCH (update through the form) and DELETE,
plus ``POST <rule>/delete`` for plain HTML forms.
"""

from flask import abort, jsonify, request

from joinery.errors import StoreUnavailableError
from joinery.store import require_store


def request_data() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return dict(data)


def save(form_cls, record=None, data=None, status=200):
    """Submit ``form_cls`` and turn the outcome into a JSON response."""
    form = form_cls(record=record)
    saved = form.submit(request_data() if data is None else data)
    if saved is not None:
        return jsonify(saved), status
    if isinstance(form.failure, StoreUnavailableError):
        return jsonify(errors=form.errors), 503
    if set(form.errors) == {'submit'}:
        return jsonify(errors=form.errors), 500
    return jsonify(errors=form.errors), 400


def register_collection(bp, endpoint, rule, form_cls, list_fn=None, parent_field=None, defaults=None):
    """List and create rows, optionally scoped to a parent id in the URL."""

    def collection(parent_id=None):
        if request.method == 'GET':
            rows = list_fn(parent_id) if parent_field else list_fn()
            return jsonify(items=rows)
        data = {**(defaults or {}), **request_data()}
        if parent_field:
            data[parent_field] = parent_id
        return save(form_cls, data=data, status=201)

    methods = ['GET', 'POST'] if list_fn else ['POST']
    bp.add_url_rule(rule, endpoint, collection, methods=methods)


def register_member(bp, endpoint, rule, form_cls, get_fn, delete_fn):
    """Read, update and delete a single row by id."""

    def member(row_id):
        if request.method == 'GET':
            row = get_fn(row_id)
            if row is None:
                abort(404)
            return jsonify(row)
        require_store()
        if request.method == 'DELETE':
            delete_fn(row_id)
            return jsonify(success=True)
        record = get_fn(row_id)
        if record is None:
            abort(404)
        return save(form_cls, record=record)

    def remove(row_id):
        require_store()
        delete_fn(row_id)
        return jsonify(success=True)

    bp.add_url_rule(rule, endpoint, member, methods=['GET', 'POST', 'PATCH', 'DELETE'])
    bp.add_url_rule(f'{rule}/delete', f'{endpoint}_delete', remove, methods=['POST'])
