# joinery/tasks/utils.py

from joinery.models import ProjectStatus


def active_projects(projects) -> list:
    """Projects that are not completed."""
    return [p for p in projects if p.get('status') != ProjectStatus.COMPLETED.value]


def sort_tasks(tasks) -> list:
    """Flagged first, then incomplete before complete; stable otherwise."""
    return sorted(tasks, key=lambda t: (not t.get('is_flagged'), bool(t.get('is_completed'))))


def group_tasks(projects, tasks) -> list:
    """One section per project, in project order, each with its sorted tasks."""
    by_project = {}
    for t in tasks:
        by_project.setdefault(t['project_id'], []).append(t)
    return [
        {'project': p, 'tasks': sort_tasks(by_project.get(p['id'], []))}
        for p in projects
    ]


def flagged_count(tasks) -> int:
    return sum(1 for t in tasks if t.get('is_flagged'))
