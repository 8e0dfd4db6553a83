# joinery/projects/routes.py

from flask import Blueprint, abort, jsonify

from joinery.crud import register_collection, save
from joinery.forms import JoineryItemForm, ProjectForm
from joinery.queries.installers import list_project_installers
from joinery.queries.joinery_items import list_joinery_items_by_type
from joinery.queries.project_tasks import list_project_tasks
from joinery.queries.quote_projects import (
    delete_quote_project,
    get_quote_project,
    list_projects,
)
from joinery.store import require_store
from joinery.tasks.utils import sort_tasks

bp = Blueprint('projects', __name__)


register_collection(bp, 'list_projects', '/', ProjectForm, list_projects)


def _project_or_404(project_id):
    project = get_quote_project(project_id)
    if project is None or project.get('quote'):
        abort(404)
    return project


@bp.route('/<project_id>')
def view_project(project_id):
    """Project with its joinery items, tasks and installers."""
    project = _project_or_404(project_id)
    return jsonify(
        project=project,
        items=list_joinery_items_by_type(project_id, False),
        tasks=sort_tasks(list_project_tasks(project_id)),
        installers=list_project_installers(project_id),
    )


@bp.route('/<project_id>', methods=['POST', 'PATCH'])
def edit_project(project_id):
    require_store()
    return save(ProjectForm, record=_project_or_404(project_id))


@bp.route('/<project_id>', methods=['DELETE'])
@bp.route('/<project_id>/delete', methods=['POST'])
def delete_project(project_id):
    require_store()
    _project_or_404(project_id)
    delete_quote_project(project_id)
    return jsonify(success=True)


register_collection(
    bp, 'add_joinery_item', '/<parent_id>/items', JoineryItemForm,
    parent_field='quote_proj_id', defaults={'quote': False},
)
