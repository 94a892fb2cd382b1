import pytest

from models import User
from modules.errors import ValidationError, Conflict
from modules.settings.service import (
    create_manager, list_managers, update_manager, delete_manager, get_settings, update_settings,
)


def test_defaults_when_unsaved(employer):
    settings = get_settings(employer.id)
    assert settings['notifications']['email_notifications'] is True
    assert settings['system']['time_format'] == '12h'
    assert settings['company_profile']['name'] == ''


def test_update_merges_sections(employer):
    update_settings(employer.id, {'system': {'timezone': 'Europe/Berlin'}})
    settings = update_settings(employer.id, {'notifications': {'weekly_reports': 'false'},
                                              'company_profile': {'name': 'Acme'}})
    assert settings['system']['timezone'] == 'Europe/Berlin'
    assert settings['system']['time_format'] == '12h'
    assert settings['notifications']['weekly_reports'] is False
    assert settings['company_profile']['name'] == 'Acme'


def test_unknown_setting_rejected(employer):
    with pytest.raises(ValidationError):
        update_settings(employer.id, {'system': {'theme': 'dark'}})


def test_manager_lifecycle(employer):
    manager, temp_password = create_manager(
        {'name': 'Mo Manager', 'email': 'mo@acme.test', 'position': 'Lead'}, employer.id)
    user = User.query.filter_by(email='mo@acme.test').one()
    assert user.user_type == 'manager'
    assert user.employer_id == employer.id
    assert user.check_password(temp_password)
    assert [m.name for m in list_managers(employer.id)] == ['Mo Manager']

    update_manager(manager.id, {'name': 'Mo M.'}, employer.id)
    assert user.full_name == 'Mo M.'

    with pytest.raises(Conflict):
        create_manager({'name': 'Again', 'email': 'mo@acme.test'}, employer.id)

    delete_manager(manager.id, employer.id)
    assert list_managers(employer.id) == []
    assert User.query.filter_by(email='mo@acme.test').first() is None


def test_manager_acts_for_employer_but_cannot_change_settings(app, employer, employer_client):
    resp = employer_client.post('/api/settings/managers', json={'name': 'Mia', 'email': 'mia@acme.test'})
    password = resp.get_json()['temp_password']

    client = app.test_client()
    client.post('/api/auth/login', json={'email': 'mia@acme.test', 'password': password})
    assert client.get('/api/settings/').status_code == 200
    assert client.get('/api/employees/').status_code == 200
    assert client.patch('/api/settings/', json={'system': {'language': 'German'}}).status_code == 403
    assert client.post('/api/settings/managers', json={'name': 'X', 'email': 'x@acme.test'}).status_code == 403
    me = client.get('/api/auth/me').get_json()
    assert me['dashboard'] == '/api/employer/dashboard'
