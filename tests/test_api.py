import pytest
from fastapi.testclient import TestClient

from eventlens.core.config import Settings
from eventlens.main import create_app
from eventlens.repositories.aggregate_repository import InMemoryAggregateRepository

REF = 1_700_000_000_000


def wire_event(id, event_type='page_view', revenue=None, device='desktop', user='u_1'):
    event = {
        'id': id,
        'userId': user,
        'sessionId': 's_1',
        'timestamp': REF - 1000,
        'eventType': event_type,
        'url': '/home',
        'device': device,
        'country': 'Germany',
    }
    if revenue is not None:
        event['revenue'] = revenue
    return event


@pytest.fixture
def client():
    settings = Settings(cache_backend='memory', max_event_count=50_000)
    app = create_app(settings, aggregate_repo=InMemoryAggregateRepository())
    return TestClient(app)


def test_root_and_health(client):
    assert client.get('/').json()['service'] == 'EventLens API'
    health = client.get('/health').json()
    assert health['status'] == 'healthy'
    assert health['cache'] == 'memory'


def test_get_events(client):
    params = {'seed': 42, 'days': 30, 'count': 5, 'reference_time': REF}
    response = client.get('/api/events', params=params)

    assert response.status_code == 200
    data = response.json()['data']
    assert len(data) == 5
    assert [e['timestamp'] for e in data] == sorted((e['timestamp'] for e in data), reverse=True)
    for event in data:
        assert ('revenue' in event) == (event['eventType'] == 'purchase')

    assert client.get('/api/events', params=params).json()['data'] == data


@pytest.mark.parametrize('params', [{'count': -1}, {'days': 0}, {'days': 366}])
def test_get_events_query_validation(client, params):
    assert client.get('/api/events', params=params).status_code == 422


def test_count_above_configured_limit(client):
    response = client.get('/api/events', params={'count': 50_001})
    assert response.status_code == 400


def test_kpis_for_supplied_events(client):
    events = [
        wire_event('e1', 'purchase', revenue=100, user='u_1'),
        wire_event('e2', 'purchase', revenue=50, user='u_2'),
        wire_event('e3', user='u_3'),
    ]
    response = client.post('/api/kpis', json={'events': events})

    assert response.status_code == 200
    kpis = response.json()
    assert kpis['total_revenue'] == 150
    assert kpis['unique_users'] == 3
    assert kpis['conversion_rate'] == pytest.approx(2 / 3)


def test_invalid_event_is_400(client):
    response = client.post('/api/kpis', json={'events': [wire_event('e1', 'page_view', revenue=10)]})
    assert response.status_code == 400


def test_zero_revenue_on_non_purchase_accepted(client):
    events = [wire_event('e1', 'page_view', revenue=0), wire_event('e2', 'purchase', revenue=40, user='u_2')]
    response = client.post('/api/kpis', json={'events': events})

    assert response.status_code == 200
    assert response.json()['total_revenue'] == 40


def test_filter_generated_events(client):
    body = {'seed': 1, 'count': 300, 'reference_time': REF, 'filters': {'devices': ['mobile'], 'countries': ['Japan']}}
    data = client.post('/api/events/filter', json=body).json()['data']

    assert data
    assert all(e['device'] == 'mobile' and e['country'] == 'Japan' for e in data)


def test_unknown_filter_value_is_400(client):
    response = client.post('/api/events/filter', json={'count': 10, 'filters': {'devices': ['watch']}})
    assert response.status_code == 400


def test_rollup(client):
    response = client.post('/api/rollup', json={'count': 200, 'days': 30, 'window_days': 14, 'reference_time': REF})

    assert response.status_code == 200
    body = response.json()
    assert body['window_days'] == 14
    assert len(body['data']) == 14
    assert body['data'][-1]['day_end'] == REF


def test_breakdown(client):
    events = [wire_event(f'e{i}', device=d) for i, d in enumerate(['desktop'] * 5 + ['mobile'] * 3 + ['tablet'])]
    response = client.post('/api/breakdown', json={'events': events, 'field': 'device', 'top_n': 2})

    data = response.json()['data']
    assert [(e['value'], e['count']) for e in data] == [('desktop', 5), ('mobile', 3)]
    assert data[0]['percentage'] == pytest.approx(55.56, abs=0.01)


def test_breakdown_unknown_field(client):
    response = client.post('/api/breakdown', json={'count': 10, 'field': 'browser'})
    assert response.status_code == 400


def test_overview(client):
    response = client.post('/api/overview', json={'seed': 42, 'days': 7, 'count': 500, 'reference_time': REF, 'top_n': 2})

    assert response.status_code == 200
    body = response.json()
    assert body['event_count'] == 500
    assert body['reference_time'] == REF
    assert len(body['rollup']) == 7
    assert sum(b['event_count'] for b in body['rollup']) == 500
    assert all(len(entries) <= 2 for entries in body['breakdowns'].values())


def test_export_then_import(client):
    exported = client.post('/api/events/export', json={'seed': 5, 'count': 20, 'reference_time': REF})

    assert exported.status_code == 200
    assert exported.headers['content-type'].startswith('text/csv')
    assert exported.text.startswith('id,userId,sessionId,timestamp,eventType')

    imported = client.post('/api/events/import', content=exported.text, headers={'Content-Type': 'text/csv'})
    assert imported.status_code == 200
    generated = client.get('/api/events', params={'seed': 5, 'count': 20, 'reference_time': REF}).json()['data']
    assert imported.json()['data'] == generated


def test_import_without_valid_rows(client):
    response = client.post('/api/events/import', content='id,userId\n1,2\n', headers={'Content-Type': 'text/csv'})
    assert response.status_code == 400


def test_ga4_requires_credentials(client):
    response = client.post('/api/ga4/events', json={'property_id': '123', 'service_account': {}})
    assert response.status_code == 401


def test_ga4_events(client):
    body = {
        'property_id': '123',
        'service_account': {'client_email': 'svc@example.com'},
        'days': 1,
        'reference_time': REF,
    }
    data = client.post('/api/ga4/events', json=body).json()['data']
    assert data
    for event in data:
        assert ('revenue' in event) == (event['eventType'] == 'purchase')

    realtime = client.post('/api/ga4/events', json={**body, 'realtime': True}).json()['data']
    assert 2 <= len(realtime) <= 12
