# joinery/tasks/routes.py

from flask import Blueprint, abort, current_app, jsonify

from joinery.crud import request_data, save
from joinery.forms import ProjectTaskForm
from joinery.queries.project_tasks import (
    delete_project_task,
    get_project_task,
    list_all_tasks,
    list_project_tasks,
    toggle_task_completed,
    toggle_task_flag,
)
from joinery.queries.quote_projects import list_projects
from joinery.store import require_store
from joinery.tasks.utils import active_projects, flagged_count, group_tasks

bp = Blueprint('tasks', __name__)


def _active_tasks():
    projects = active_projects(list_projects())
    tasks = list_all_tasks([p['id'] for p in projects])
    return projects, tasks


@bp.route('/')
def list_tasks():
    """Tasks for every non-completed project, grouped by project."""
    projects, tasks = _active_tasks()
    limit = current_app.config['MAX_FLAGGED_TASKS']
    flagged = flagged_count(tasks)
    return jsonify(
        projects=group_tasks(projects, tasks),
        flagged_count=flagged,
        flag_limit=limit,
        can_flag_more=flagged < limit,
    )


@bp.route('/projects/<project_id>', methods=['GET'])
def project_tasks(project_id):
    return jsonify(items=list_project_tasks(project_id))


@bp.route('/projects/<project_id>', methods=['POST'])
def add_task(project_id):
    data = {**request_data(), 'project_id': project_id}
    return save(ProjectTaskForm, data=data, status=201)


@bp.route('/<task_id>', methods=['GET'])
def view_task(task_id):
    task = get_project_task(task_id)
    if task is None:
        abort(404)
    return jsonify(task)


@bp.route('/<task_id>', methods=['POST', 'PATCH'])
def edit_task(task_id):
    require_store()
    task = get_project_task(task_id)
    if task is None:
        abort(404)
    return save(ProjectTaskForm, record=task)


@bp.route('/<task_id>', methods=['DELETE'])
@bp.route('/<task_id>/delete', methods=['POST'])
def remove_task(task_id):
    require_store()
    delete_project_task(task_id)
    return jsonify(success=True)


@bp.route('/<task_id>/toggle-complete', methods=['POST'])
def toggle_complete(task_id):
    require_store()
    task = get_project_task(task_id)
    if task is None:
        abort(404)
    return jsonify(toggle_task_completed(task))


@bp.route('/<task_id>/toggle-flag', methods=['POST'])
def toggle_flag(task_id):
    """Flag or unflag; flagging past the limit answers 409."""
    require_store()
    task = get_project_task(task_id)
    if task is None:
        abort(404)
    _, tasks = _active_tasks()
    return jsonify(toggle_task_flag(task, tasks))
