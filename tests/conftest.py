"""Shared fixtures: an app on in-memory SQLite and logged-in clients per role."""
from datetime import date, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from modules.auth.service import register_user
from modules.employees.service import create_employee
from modules.realtime.broker import broker


@pytest.fixture
def app():
    app = create_app(TestConfig)
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        broker.clear()
        ctx.pop()


def login(client, email, password):
    resp = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert resp.status_code == 200, resp.get_json()
    return client


@pytest.fixture
def employer(app):
    return register_user('boss@acme.test', 'secret1', 'Bea Boss', 'employer', company_name='Acme')


@pytest.fixture
def other_employer(app):
    return register_user('rival@other.test', 'secret1', 'Rita Rival', 'employer', company_name='Other')


@pytest.fixture
def employer_client(app, employer):
    return login(app.test_client(), 'boss@acme.test', 'secret1')


@pytest.fixture
def make_employee(app, employer):
    """Factory: employee of `employer` with a login; returns (employee, temp_password)"""
    counter = {'n': 0}

    def _make(name=None, department='Engineering', position='Developer', employer_id=None, **extra):
        counter['n'] += 1
        data = {
            'name': name or f'Employee {counter["n"]}',
            'email': f'emp{counter["n"]}@acme.test',
            'department': department,
            'position': position,
        }
        data.update(extra)
        employee, temp_password, _ = create_employee(data, employer_id or employer.id)
        return employee, temp_password

    return _make


@pytest.fixture
def employee(make_employee):
    employee, _ = make_employee(name='Eve Worker')
    return employee


@pytest.fixture
def employee_client(app, make_employee):
    employee, temp_password = make_employee(name='Ed Client')
    client = login(app.test_client(), employee.email, temp_password)
    client.employee = employee
    return client


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def project_payload(today):
    def _payload(**overrides):
        data = {
            'name': 'Website Relaunch',
            'description': 'New marketing site',
            'start_date': today.isoformat(),
            'end_date': (today + timedelta(days=30)).isoformat(),
            'priority': 'high',
            'category': 'General',
        }
        data.update(overrides)
        return data
    return _payload
