import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from joinery import create_app
from joinery.errors import FlagLimitError
from joinery.queries import project_tasks
from joinery.queries.customers import create_customer
from joinery.queries.project_tasks import (
    create_project_task,
    list_all_tasks,
    list_project_tasks,
    toggle_task_completed,
    toggle_task_flag,
)
from joinery.queries.quote_projects import create_quote_project
from joinery.tasks.utils import active_projects, group_tasks, sort_tasks


def setup_app():
    return create_app('testing')


def make_project(status='in_progress', name='Fitout'):
    customer = create_customer({'company_name': 'Cedar', 'email': 'cedar@example.com'})
    return create_quote_project({
        'name': name, 'customer_id': customer['id'], 'quote': False, 'status': status,
    })


def test_sort_flagged_then_incomplete():
    tasks = [
        {'id': 'done', 'is_flagged': False, 'is_completed': True},
        {'id': 'open', 'is_flagged': False, 'is_completed': False},
        {'id': 'flag', 'is_flagged': True, 'is_completed': True},
    ]
    assert [t['id'] for t in sort_tasks(tasks)] == ['flag', 'open', 'done']


def test_group_tasks_by_project():
    projects = [{'id': 'p1'}, {'id': 'p2'}]
    tasks = [{'id': 't1', 'project_id': 'p2'}, {'id': 't2', 'project_id': 'p1'}]
    groups = group_tasks(projects, tasks)
    assert [g['project']['id'] for g in groups] == ['p1', 'p2']
    assert [t['id'] for t in groups[1]['tasks']] == ['t1']
    assert active_projects([{'status': 'completed'}, {'status': 'on_hold'}]) == [{'status': 'on_hold'}]


def test_create_defaults_and_toggle_complete():
    app = setup_app()
    with app.app_context():
        project = make_project()
        task = create_project_task({'project_id': project['id'], 'task_description': 'Order board'})
        assert task['is_completed'] is False
        assert task['is_flagged'] is False

        assert list_project_tasks(project['id'])[0]['id'] == task['id']
        toggled = toggle_task_completed(task)
        assert toggled['is_completed'] is True
        assert list_project_tasks(project['id'])[0]['is_completed'] is True


def flag_tasks(project, count):
    tasks = []
    for i in range(count):
        task = create_project_task({'project_id': project['id'], 'task_description': f'T{i}'})
        tasks.append(toggle_task_flag(task, list_all_tasks([project['id']])))
    return tasks


def test_flag_limit_blocks_before_any_write(monkeypatch):
    app = setup_app()
    with app.app_context():
        project = make_project()
        flagged = flag_tasks(project, 3)
        assert all(t['is_flagged'] for t in flagged)
        extra = create_project_task({'project_id': project['id'], 'task_description': 'T4'})
        active = list_all_tasks([project['id']])

        calls = []
        monkeypatch.setattr(project_tasks, 'update_project_task', lambda *a: calls.append(a))
        with pytest.raises(FlagLimitError) as exc:
            toggle_task_flag(extra, active)
        assert exc.value.message == (
            'Maximum of 3 tasks can be flagged at once. Please unflag a task first.'
        )
        assert calls == []

        monkeypatch.undo()
        unflagged = toggle_task_flag(flagged[0], active)
        assert unflagged['is_flagged'] is False


def test_flag_again_after_unflag_reads_fresh_tasks():
    app = setup_app()
    with app.app_context():
        project = make_project()
        flagged = flag_tasks(project, 3)
        fourth = create_project_task({'project_id': project['id'], 'task_description': 'T4'})
        fifth = create_project_task({'project_id': project['id'], 'task_description': 'T5'})

        toggle_task_flag(flagged[1], list_all_tasks([project['id']]))
        fresh = list_all_tasks([project['id']])
        assert sum(1 for t in fresh if t['is_flagged']) == 2

        assert toggle_task_flag(fourth, fresh)['is_flagged'] is True
        with pytest.raises(FlagLimitError):
            toggle_task_flag(fifth, list_all_tasks([project['id']]))
        assert sum(1 for t in list_all_tasks([project['id']]) if t['is_flagged']) == 3


def test_create_ignores_flag_value():
    app = setup_app()
    with app.app_context():
        project = make_project()
        task = create_project_task({
            'project_id': project['id'], 'task_description': 'Order board', 'is_flagged': True,
        })
        assert task['is_flagged'] is False


def test_all_tasks_key_follows_project_ids():
    app = setup_app()
    with app.app_context():
        first = make_project(name='One')
        assert list_all_tasks([]) == []
        assert list_all_tasks([first['id']]) == []
        create_project_task({'project_id': first['id'], 'task_description': 'Measure'})
        assert len(list_all_tasks([first['id']])) == 1


def test_tasks_http_flow():
    app = setup_app()
    client = app.test_client()
    with app.app_context():
        active = make_project(name='Active')
        done = make_project(status='completed', name='Done')

    for i in range(3):
        res = client.post(f"/tasks/projects/{active['id']}", json={'task_description': f'Task {i}'})
        assert res.status_code == 201
        res = client.post(f"/tasks/{res.get_json()['id']}/toggle-flag")
        assert res.get_json()['is_flagged'] is True
    res = client.post(f"/tasks/projects/{active['id']}", json={'task_description': 'Task 3'})
    spare = res.get_json()
    client.post(f"/tasks/projects/{done['id']}", json={'task_description': 'Old task'})

    res = client.post(f"/tasks/projects/{active['id']}", json={'task_description': ''})
    assert res.status_code == 400

    body = client.get('/tasks/').get_json()
    assert [g['project']['id'] for g in body['projects']] == [active['id']]
    assert body['flagged_count'] == 3
    assert body['can_flag_more'] is False

    res = client.post(f"/tasks/{spare['id']}/toggle-flag")
    assert res.status_code == 409
    assert 'Maximum of 3 tasks' in res.get_json()['error']
    assert client.get(f"/tasks/{spare['id']}").get_json()['is_flagged'] is False

    res = client.post(f"/tasks/{spare['id']}/toggle-complete")
    assert res.get_json()['is_completed'] is True

    assert client.delete(f"/tasks/{spare['id']}").get_json() == {'success': True}
    assert len(client.get(f"/tasks/projects/{active['id']}").get_json()['items']) == 3


def test_task_form_cannot_set_flag():
    app = setup_app()
    client = app.test_client()
    with app.app_context():
        project = make_project()
        flag_tasks(project, 3)

    res = client.post(f"/tasks/projects/{project['id']}",
                      json={'task_description': 'Sneaky', 'is_flagged': True})
    assert res.status_code == 201
    task = res.get_json()
    assert task['is_flagged'] is False

    res = client.patch(f"/tasks/{task['id']}", json={'is_flagged': True, 'is_completed': True})
    assert res.status_code == 200
    assert res.get_json()['is_flagged'] is False
    assert res.get_json()['is_completed'] is True

    body = client.get('/tasks/').get_json()
    assert body['flagged_count'] == 3
    assert client.patch('/tasks/missing', json={'task_description': 'x'}).status_code == 404
