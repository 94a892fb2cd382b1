# modules/employees/service.py
from datetime import datetime
from typing import List, Optional, Tuple

from flask import current_app

from models import (
    db, Employee, Task, Activity, DueDateRenegotiation, TimeEntry,
    EmployeeReward, Achievement, EmployeePoints,
)
from modules.auth.service import create_account_for, normalize_email
from modules.common import parse_date, get_or_raise, check_employer
from modules.errors import ValidationError, Conflict
from modules.realtime.broker import publish
from .csv_utils import is_valid_email, validate_employee_data

EMPLOYEE_FIELDS = ('name', 'email', 'position', 'department', 'status', 'avatar', 'whatsapp_number')


def _apply_fields(employee, data):
    for key in EMPLOYEE_FIELDS:
        if key in data:
            value = data.get(key)
            setattr(employee, key, value.strip() if isinstance(value, str) else value)
    if 'email' in data:
        employee.email = normalize_email(data.get('email'))
    if 'join_date' in data and data.get('join_date'):
        employee.join_date = parse_date(data.get('join_date'), 'join_date')

    if not (employee.name or '').strip():
        raise ValidationError('Name is required')
    if not is_valid_email(employee.email):
        raise ValidationError('Invalid email format')


def _ensure_unique(employer_id, email, exclude_id=None):
    query = Employee.query.filter_by(employer_id=employer_id, email=email)
    if exclude_id:
        query = query.filter(Employee.id != exclude_id)
    if query.first():
        raise Conflict(f'An employee with email {email} already exists')


def _attach_account(employee) -> Tuple[str, bool]:
    """
    Give the employee a login. Returns (temp_password, account_created).
    A failure here is logged and never undoes the employee record.
    """
    try:
        user, temp_password = create_account_for(employee.email, employee.name, 'employee',
                                                 employee.employer_id)
        if temp_password or (user.user_type == 'employee' and user.employer_id == employee.employer_id):
            employee.user_id = user.id
        db.session.commit()
        return temp_password, bool(temp_password)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Error creating user account for {employee.email}: {e}')
        return '', False


def create_employee(data, employer_id) -> Tuple[Employee, str, bool]:
    """Store the employee, then create a login when the email has none"""
    employee = Employee(employer_id=employer_id, status='active')
    _apply_fields(employee, data)
    employee.status = employee.status or 'active'
    _ensure_unique(employer_id, employee.email)
    db.session.add(employee)
    db.session.commit()

    temp_password, created = _attach_account(employee)
    publish('employees', f'employer:{employer_id}')
    return employee, temp_password, created


def bulk_create_employees(rows, employer_id) -> List[dict]:
    """
    Create every row; the batch is rejected as a whole when any row fails
    validation. Each result carries temp_password and account_created.
    """
    max_rows = current_app.config.get('CSV_MAX_ROWS', 500)
    if len(rows) > max_rows:
        raise ValidationError(f'Too many rows (max {max_rows})')
    errors = validate_employee_data(rows)
    if errors:
        raise ValidationError('; '.join(errors))

    employees = []
    for row in rows:
        employee = Employee(employer_id=employer_id, status='active')
        _apply_fields(employee, row)
        employee.status = employee.status or 'active'
        _ensure_unique(employer_id, employee.email)
        db.session.add(employee)
        db.session.flush()
        employees.append(employee)
    db.session.commit()

    results = []
    for employee in employees:
        temp_password, created = _attach_account(employee)
        data = employee.to_dict()
        data.update(temp_password=temp_password, account_created=created)
        results.append(data)

    current_app.logger.info(f'Bulk created {len(results)} employees for employer {employer_id}')
    publish('employees', f'employer:{employer_id}')
    return results


def get_employee(employee_id, employer_id=None) -> Employee:
    employee = get_or_raise(Employee, employee_id, 'Employee')
    if employer_id is not None:
        check_employer(employee.employer_id, employer_id, 'employee')
    return employee


def get_employee_by_email(email, employer_id=None) -> Optional[Employee]:
    query = Employee.query.filter_by(email=normalize_email(email))
    if employer_id is not None:
        query = query.filter_by(employer_id=employer_id)
    return query.first()


def list_employees(employer_id, department=None, status=None, q=None) -> List[Employee]:
    query = Employee.query.filter_by(employer_id=employer_id)
    if department and department != 'all':
        query = query.filter(Employee.department.ilike(department))
    if status and status != 'all':
        query = query.filter_by(status=status)
    if q:
        like = f'%{q}%'
        query = query.filter(db.or_(Employee.name.ilike(like), Employee.email.ilike(like)))
    return query.order_by(Employee.name).all()


def update_employee(employee_id, data, employer_id) -> Employee:
    employee = get_employee(employee_id, employer_id)
    _apply_fields(employee, data)
    _ensure_unique(employer_id, employee.email, exclude_id=employee.id)
    employee.updated_at = datetime.utcnow()
    db.session.commit()
    publish('employees', f'employer:{employer_id}')
    return employee


def delete_employee(employee_id, employer_id) -> dict:
    employee = get_employee(employee_id, employer_id)
    project_ids = [p.id for p in employee.projects]
    Task.query.filter_by(assigned_to=employee.id).update({'assigned_to': None})
    Activity.query.filter_by(employee_id=employee.id).update({'employee_id': None})
    # Rows owned by the employee go with it
    for model in (DueDateRenegotiation, TimeEntry, EmployeeReward, Achievement, EmployeePoints):
        model.query.filter_by(employee_id=employee.id).delete()
    employee.projects = []
    db.session.delete(employee)
    db.session.commit()
    publish('employees', f'employer:{employer_id}')
    publish('projects', *[f'project:{pid}' for pid in project_ids])
    publish('renegotiations', f'employer:{employer_id}')
    return {'success': True}


def departments(employer_id) -> List[str]:
    rows = (db.session.query(Employee.department)
            .filter(Employee.employer_id == employer_id, Employee.department.isnot(None))
            .distinct().all())
    return sorted(d for (d,) in rows if d)


