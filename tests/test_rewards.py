import pytest

from modules.errors import ValidationError, PermissionDenied
from modules.rewards.service import (
    create_reward, update_reward, list_rewards, assign_reward, employee_rewards,
    update_employee_reward_status, create_achievement, employee_achievements,
    get_employee_points, update_employee_points, request_reward,
)


@pytest.fixture
def reward(employer):
    return create_reward({'name': 'Day off', 'type': 'time-off', 'value': '1 day',
                          'points_cost': 50, 'criteria': 'Ship on time'}, employer.id)


def test_reward_validation(employer):
    with pytest.raises(ValidationError):
        create_reward({'name': 'Bad', 'type': 'cash'}, employer.id)
    with pytest.raises(ValidationError):
        create_reward({'name': ''}, employer.id)


def test_list_filters_by_status(employer, reward):
    update_reward(reward.id, {'status': 'inactive'}, employer.id)
    create_reward({'name': 'Book', 'type': 'development'}, employer.id)
    assert [r.name for r in list_rewards(employer.id, 'active')] == ['Book']
    assert len(list_rewards(employer.id)) == 2


def test_other_employer_cannot_edit(other_employer, reward):
    with pytest.raises(PermissionDenied):
        update_reward(reward.id, {'value': '2 days'}, other_employer.id)


def test_assign_and_claim(employer, employee, reward):
    awarded = assign_reward(employee.id, reward.id, employer.id)
    assert awarded.status == 'pending'
    assert (awarded.reward_name, awarded.reward_type, awarded.reward_value) == ('Day off', 'time-off', '1 day')

    update_employee_reward_status(awarded.id, 'approved', employer_id=employer.id)
    assert awarded.claimed_date is None
    update_employee_reward_status(awarded.id, 'claimed', employer_id=employer.id)
    assert awarded.status == 'claimed'
    assert awarded.claimed_date is not None
    assert [r.id for r in employee_rewards(employee.id)] == [awarded.id]


def test_points_start_missing_then_accumulate(employer, employee):
    assert get_employee_points(employee.id) is None
    create_achievement({'employee_id': employee.id, 'name': 'First ship', 'points_awarded': 30}, employer.id)
    create_achievement({'employee_id': employee.id, 'name': 'Bug bash', 'points_awarded': 25}, employer.id)
    assert get_employee_points(employee.id).points == 55
    assert [a.name for a in employee_achievements(employee.id)][0] in ('Bug bash', 'First ship')
    assert len(employee_achievements(employee.id)) == 2


def test_request_reward_needs_enough_points(employee, reward):
    update_employee_points(employee.id, 40)
    with pytest.raises(ValidationError):
        request_reward(employee, reward.id)

    update_employee_points(employee.id, 15)
    awarded = request_reward(employee, reward.id)
    assert awarded.status == 'pending'
    assert get_employee_points(employee.id).points == 5


def test_inactive_reward_cannot_be_requested(employer, employee, reward):
    update_reward(reward.id, {'status': 'inactive'}, employer.id)
    update_employee_points(employee.id, 500)
    with pytest.raises(ValidationError):
        request_reward(employee, reward.id)


def test_employee_rewards_api(employee_client, employer):
    me = employee_client.employee
    free = create_reward({'name': 'Sticker', 'points_cost': 0}, employer.id)

    body = employee_client.get('/api/rewards/mine').get_json()
    assert body['points'] is None
    assert [r['name'] for r in body['available']] == ['Sticker']

    resp = employee_client.post(f'/api/rewards/{free.id}/request')
    assert resp.status_code == 201
    assert [r.reward_name for r in employee_rewards(me.id)] == ['Sticker']
