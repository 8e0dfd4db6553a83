import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from joinery import create_app
from joinery.cache import get_cache
from joinery.queries.customers import create_customer
from joinery.queries.quote_projects import create_quote_project, list_install_schedule
from joinery.schedule.utils import bar_duration, build_timeline, shifted_start


def setup_app():
    return create_app('testing')


def test_bar_duration_minimum_one_day():
    assert bar_duration({'install_duration': 0}) == 1
    assert bar_duration({'install_duration': None}) == 1
    assert bar_duration({'install_duration': 4}) == 4


def test_timeline_window_and_rows():
    projects = [
        {'id': 'a', 'install_commencement_date': '2024-06-10', 'install_duration': 5},
        {'id': 'b', 'install_commencement_date': None},
        {'id': 'c', 'install_commencement_date': '2024-06-03', 'install_duration': 0},
    ]
    timeline = build_timeline(projects, today=date(2024, 6, 5))

    # earliest start minus three days, latest end plus three days
    assert timeline['start'] == '2024-05-31'
    assert timeline['end'] == '2024-06-17'
    assert len(timeline['days']) == 18
    assert timeline['today_index'] == 5
    assert [p['id'] for p in timeline['unscheduled']] == ['b']

    rows = {r['project']['id']: r for r in timeline['rows']}
    assert rows['a']['start_index'] == 10
    assert rows['a']['end'] == '2024-06-14'
    assert rows['c']['duration'] == 1
    assert rows['c']['start_index'] == 3


def test_timeline_includes_today():
    timeline = build_timeline([], today=date(2024, 1, 10))
    assert timeline['start'] == '2024-01-07'
    assert timeline['end'] == '2024-01-13'
    assert timeline['today_index'] == 3
    assert timeline['rows'] == []


def test_shifted_start():
    assert shifted_start({'install_commencement_date': '2024-02-28'}, 2) == '2024-03-01'
    assert shifted_start({'install_commencement_date': '2024-03-01'}, -1) == '2024-02-29'


def test_schedule_orders_undated_last():
    app = setup_app()
    with app.app_context():
        customer = create_customer({'company_name': 'Elm', 'email': 'elm@example.com'})
        undated = create_quote_project({'name': 'A', 'customer_id': customer['id'], 'quote': False})
        later = create_quote_project({
            'name': 'B', 'customer_id': customer['id'], 'quote': False,
            'install_commencement_date': '2024-08-01',
        })
        sooner = create_quote_project({
            'name': 'C', 'customer_id': customer['id'], 'quote': False,
            'install_commencement_date': '2024-07-01',
        })
        create_quote_project({'name': 'Quote', 'customer_id': customer['id'], 'quote': True})

        ids = [p['id'] for p in list_install_schedule()]
        assert ids == [sooner['id'], later['id'], undated['id']]


def test_refresh_reissues_query():
    app = setup_app()
    client = app.test_client()
    client.get('/install-schedule/')
    with app.app_context():
        assert ('quote-projects', 'install-schedule') in get_cache()
        get_cache().set(('quote-projects', 'install-schedule'), [{'id': 'stale'}])

    cached = client.get('/install-schedule/').get_json()
    assert [p['id'] for p in cached['unscheduled']] == ['stale']

    fresh = client.get('/install-schedule/?refresh=1').get_json()
    assert fresh['unscheduled'] == []
    with app.app_context():
        assert get_cache().get(('quote-projects', 'install-schedule')) == []


def test_move_project_http():
    app = setup_app()
    client = app.test_client()
    with app.app_context():
        customer = create_customer({'company_name': 'Elm', 'email': 'elm@example.com'})
        project = create_quote_project({
            'name': 'Fitout', 'customer_id': customer['id'], 'quote': False,
            'install_commencement_date': '2024-07-01', 'install_duration': 3,
        })

    res = client.post(f"/install-schedule/{project['id']}", json={'shift': 2})
    assert res.status_code == 200
    assert res.get_json()['install_commencement_date'] == '2024-07-03'
    assert res.get_json()['install_duration'] == 3

    res = client.post(f"/install-schedule/{project['id']}", json={'start_date': '2024-09-09', 'duration': 0})
    assert res.get_json()['install_commencement_date'] == '2024-09-09'
    assert res.get_json()['install_duration'] == 1

    res = client.post(f"/install-schedule/{project['id']}", json={'shift': 'soon'})
    assert res.status_code == 400
    assert 'shift' in res.get_json()['errors']

    rows = client.get('/install-schedule/').get_json()['rows']
    assert rows[0]['project']['id'] == project['id']


def test_installers_assignment():
    app = setup_app()
    client = app.test_client()
    with app.app_context():
        customer = create_customer({'company_name': 'Elm', 'email': 'elm@example.com'})
        project = create_quote_project({'name': 'Fitout', 'customer_id': customer['id'], 'quote': False})

    installer = client.post('/install-schedule/installers', json={'name': 'Sam'}).get_json()
    res = client.post(f"/install-schedule/{project['id']}/installers", json={'installer_id': installer['id']})
    assert res.status_code == 201

    rows = client.get(f"/install-schedule/{project['id']}/installers").get_json()['items']
    assert rows[0]['installer']['name'] == 'Sam'

    client.delete(f"/install-schedule/{project['id']}/installers/{installer['id']}")
    assert client.get(f"/install-schedule/{project['id']}/installers").get_json()['items'] == []
