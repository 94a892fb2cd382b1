import json

import pytest

from modules.realtime.broker import ChangeBroker, broker, ANY
from modules.realtime.listeners import (
    event_stream, employee_points_listener, tasks_listener, ticket_comments_listener,
    renegotiations_listener,
)
from modules.projects.service import create_project
from modules.renegotiation.service import create_request
from modules.rewards.service import update_employee_points
from modules.tasks.service import create_task


def _event(chunk):
    assert chunk.startswith('data: ')
    return json.loads(chunk[len('data: '):])


def test_broker_matches_keys_and_wildcards():
    b = ChangeBroker()
    one = b.subscribe([('tasks', 'project:1')])
    anything = b.subscribe([('tasks', ANY)])
    other = b.subscribe([('projects', 'project:1')])

    assert b.publish('tasks', 'project:1', 'employee:4') == 2
    assert one.wait(0.01)['keys'] == ['project:1', 'employee:4']
    assert anything.wait(0.01)['collection'] == 'tasks'
    assert other.wait(0.01) is None

    b.unsubscribe(one)
    assert b.publish('tasks', 'project:1') == 1
    assert b.subscriber_count == 2


def test_subscription_needs_topics():
    with pytest.raises(ValueError):
        ChangeBroker().subscribe([])


def test_full_queue_drops_instead_of_blocking():
    b = ChangeBroker(maxsize=2)
    sub = b.subscribe([('tickets', ANY)])
    for _ in range(5):
        b.publish('tickets', 'employer:1')
    assert sub.dropped == 3
    assert sub.wait(0.01) is not None
    # the burst collapses into one wake-up
    assert sub.wait(0.01) is None


def test_points_stream_snapshot_then_change(employee):
    stream = event_stream(employee_points_listener(employee.id), heartbeat=0.01, max_events=2)

    first = _event(next(stream))
    assert first['listener'] == 'employee_points'
    assert first['data'] is None

    update_employee_points(employee.id, 12)
    second = _event(next(stream))
    assert second['data']['points'] == 12
    assert second['change'] == 'employee_points'

    with pytest.raises(StopIteration):
        next(stream)
    assert broker.subscriber_count == 0


def test_idle_stream_sends_heartbeat(employee):
    stream = event_stream(ticket_comments_listener(999), heartbeat=0.01)
    next(stream)
    assert next(stream) == ': heartbeat\n\n'
    stream.close()
    assert broker.subscriber_count == 0


def test_tasks_stream_merges_projects(employer):
    a = create_project({'name': 'A'}, employer)
    b = create_project({'name': 'B'}, employer)
    create_task({'project_id': a.id, 'title': 'in a'}, employer)

    stream = event_stream(tasks_listener(project_ids=[a.id, b.id]), heartbeat=0.01)
    assert [t['title'] for t in _event(next(stream))['data']] == ['in a']

    create_task({'project_id': b.id, 'title': 'in b'}, employer)
    chunk = next(stream)
    while chunk.startswith(':'):
        chunk = next(stream)
    assert [t['title'] for t in _event(chunk)['data']] == ['in a', 'in b']
    stream.close()


def test_sse_route_sends_initial_snapshot(employer_client, employer):
    create_project({'name': 'Streamed'}, employer)
    resp = employer_client.get('/api/live/projects', buffered=False)
    assert resp.status_code == 200
    assert resp.mimetype == 'text/event-stream'

    chunk = next(iter(resp.response))
    chunk = chunk.decode() if isinstance(chunk, bytes) else chunk
    assert [p['name'] for p in _event(chunk)['data']] == ['Streamed']
    resp.close()


def test_employee_cannot_listen_to_colleague(employee_client, employee):
    assert employee_client.get(f'/api/live/employees/{employee.id}/tasks').status_code == 403
    own = employee_client.get(f'/api/live/employees/{employee_client.employee.id}/nonsense')
    assert own.status_code == 404


def test_task_stream_refuses_foreign_projects(employer_client, employer, other_employer):
    secret = create_project({'name': 'Secret'}, other_employer)
    create_task({'project_id': secret.id, 'title': 'rival plan'}, other_employer)
    own = create_project({'name': 'Own'}, employer)

    assert employer_client.get(f'/api/live/tasks?project_id={secret.id}').status_code == 403
    resp = employer_client.get(f'/api/live/tasks?project_id={own.id}&project_id={secret.id}')
    assert resp.status_code == 403
    assert employer_client.get('/api/live/tasks?project_id=9999').status_code == 404


def test_employer_streams_ignore_other_tenants(employer, other_employer):
    stream = event_stream(tasks_listener(employer_id=employer.id), heartbeat=0.01)
    assert _event(next(stream))['data'] == []

    rival = create_project({'name': 'Rival'}, other_employer)
    create_task({'project_id': rival.id, 'title': 'not yours'}, other_employer)
    assert next(stream) == ': heartbeat\n\n'

    mine = create_project({'name': 'Mine'}, employer)
    create_task({'project_id': mine.id, 'title': 'yours'}, employer)
    chunk = next(stream)
    while chunk.startswith(':'):
        chunk = next(stream)
    assert [t['title'] for t in _event(chunk)['data']] == ['yours']
    stream.close()


def test_renegotiation_stream_follows_own_projects(employer, employee):
    project = create_project({'name': 'Launch', 'team': [employee.id]}, employer)
    task = create_task({'project_id': project.id, 'title': 'Copy', 'assigned_to': employee.id,
                        'due_date': '2030-01-05'}, employer)
    stream = event_stream(renegotiations_listener(employer.id), heartbeat=0.01)
    assert _event(next(stream))['data'] == []

    create_request({'task_id': task.id, 'requested_due_date': '2030-01-20',
                    'reason': 'Waiting on legal'}, employee)
    chunk = next(stream)
    while chunk.startswith(':'):
        chunk = next(stream)
    assert [r['reason'] for r in _event(chunk)['data']] == ['Waiting on legal']
    stream.close()
