# joinery/schedule/routes.py

from flask import Blueprint, abort, jsonify, request

from joinery.cache import invalidate
from joinery.crud import register_collection, register_member, request_data
from joinery.errors import ValidationError
from joinery.forms import InstallerForm
from joinery.queries.installers import (
    assign_installer,
    delete_installer,
    get_installer,
    list_installers,
    list_project_installers,
    remove_installer,
)
from joinery.queries.quote_projects import (
    get_quote_project,
    list_install_schedule,
    reschedule_project,
)
from joinery.schedule.utils import bar_duration, build_timeline, parse_date, shifted_start
from joinery.store import require_store

bp = Blueprint('schedule', __name__)


@bp.route('/')
def timeline():
    """Projects on the install timeline; ?refresh=1 re-issues the query."""
    if request.args.get('refresh'):
        invalidate(('quote-projects', 'install-schedule'))
    return jsonify(build_timeline(list_install_schedule()))


@bp.route('/<project_id>', methods=['POST'])
def move_project(project_id):
    """
    Move or resize a project's bar.
    Accepts any of { start_date, duration, shift } where ``shift`` nudges the
    start by a number of days.
    """
    require_store()
    project = get_quote_project(project_id)
    if project is None or project.get('quote'):
        abort(404)
    data = request_data()

    errors = {}
    start = project.get('install_commencement_date')
    if data.get('shift') not in (None, ''):
        try:
            start = shifted_start(project, int(data['shift']))
        except (TypeError, ValueError):
            errors['shift'] = 'Shift must be a whole number of days'
    elif data.get('start_date'):
        try:
            start = parse_date(data['start_date']).isoformat()
        except ValueError:
            errors['start_date'] = 'Start date must be a valid date'

    duration = bar_duration(project)
    if data.get('duration') not in (None, ''):
        try:
            duration = max(1, int(data['duration']))
        except (TypeError, ValueError):
            errors['duration'] = 'Duration must be a whole number of days'

    if errors:
        raise ValidationError(errors)
    return jsonify(reschedule_project(project_id, start, duration))


register_collection(bp, 'installers', '/installers', InstallerForm, list_installers)
register_member(bp, 'installer', '/installers/<row_id>', InstallerForm, get_installer, delete_installer)


@bp.route('/<project_id>/installers', methods=['GET'])
def project_installers(project_id):
    return jsonify(items=list_project_installers(project_id))


@bp.route('/<project_id>/installers', methods=['POST'])
def add_project_installer(project_id):
    installer_id = request_data().get('installer_id')
    if not installer_id:
        raise ValidationError({'installer_id': 'Installer is required'})
    return jsonify(assign_installer(project_id, installer_id)), 201


@bp.route('/<project_id>/installers/<installer_id>', methods=['DELETE'])
@bp.route('/<project_id>/installers/<installer_id>/delete', methods=['POST'])
def remove_project_installer(project_id, installer_id):
    remove_installer(project_id, installer_id)
    return jsonify(success=True)
