# joinery/settings/routes.py

from flask import Blueprint, abort, jsonify

from joinery.crud import request_data
from joinery.errors import ValidationError
from joinery.queries.settings import get_setting, list_settings, update_setting

bp = Blueprint('settings', __name__)


@bp.route('/')
def list_all():
    return jsonify(items=list_settings())


@bp.route('/<key>')
def view_setting(key):
    setting = get_setting(key)
    if setting is None:
        abort(404)
    return jsonify(setting)


@bp.route('/<key>', methods=['POST', 'PUT', 'PATCH'])
def save_setting(key):
    value = request_data().get('value')
    if value is None or str(value).strip() == '':
        raise ValidationError({'value': 'Value is required'})
    return jsonify(update_setting(key, str(value).strip()))
