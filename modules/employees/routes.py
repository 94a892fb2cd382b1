# modules/employees/routes.py
from flask import request, jsonify, Response, current_app

from . import employees_bp
from . import service
from .csv_utils import parse_csv, validate_employee_data, employee_csv_template
from .whatsapp import whatsapp_link, company_added_message, project_added_message, task_assigned_message
from models import Project, Task, User
from modules.auth.service import current_user, require_employee, role_required
from modules.common import payload, get_or_raise, check_employer
from modules.errors import ValidationError


def _employer_id():
    return current_user().relevant_employer_id


@employees_bp.get('/')
@role_required('employer')
def index():
    employees = service.list_employees(
        _employer_id(),
        department=request.args.get('department'),
        status=request.args.get('status'),
        q=(request.args.get('q') or '').strip(),
    )
    return jsonify(ok=True, employees=[e.to_dict() for e in employees],
                   departments=service.departments(_employer_id()))


@employees_bp.post('/')
@role_required('employer')
def create():
    employee, temp_password, created = service.create_employee(payload(), _employer_id())
    return jsonify(ok=True, employee=employee.to_dict(),
                   temp_password=temp_password, account_created=created), 201


@employees_bp.get('/<int:employee_id>')
@role_required('employer')
def detail(employee_id):
    employee = service.get_employee(employee_id, _employer_id())
    return jsonify(ok=True, employee=employee.to_dict())


@employees_bp.route('/<int:employee_id>', methods=['PUT', 'PATCH'])
@role_required('employer')
def update(employee_id):
    employee = service.update_employee(employee_id, payload(), _employer_id())
    return jsonify(ok=True, employee=employee.to_dict())


@employees_bp.delete('/<int:employee_id>')
@role_required('employer')
def delete(employee_id):
    service.delete_employee(employee_id, _employer_id())
    return jsonify(ok=True)


@employees_bp.get('/me')
@role_required('employee')
def me():
    return jsonify(ok=True, employee=require_employee().to_dict())


# ==================== BULK UPLOAD ====================

@employees_bp.get('/template.csv')
@role_required('employer')
def csv_template():
    return Response(
        employee_csv_template(),
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=employee_template.csv'},
    )


def _uploaded_rows():
    file = request.files.get('file')
    if file and file.filename:
        if not file.filename.lower().endswith('.csv'):
            raise ValidationError('Choose a .csv file')
        return parse_csv(file.read())
    data = payload()
    if isinstance(data.get('rows'), list):
        return data['rows']
    if data.get('csv'):
        return parse_csv(data['csv'])
    raise ValidationError('No CSV data received')


@employees_bp.post('/bulk/preview')
@role_required('employer')
def bulk_preview():
    """Parse and validate without writing"""
    rows = _uploaded_rows()
    errors = validate_employee_data(rows)
    return jsonify(ok=not errors, rows=rows, errors=errors, total=len(rows))


@employees_bp.post('/bulk')
@role_required('employer')
def bulk_create():
    rows = _uploaded_rows()
    errors = validate_employee_data(rows)
    if errors:
        return jsonify(ok=False, error='CSV has errors', errors=errors), 400
    created = service.bulk_create_employees(rows, _employer_id())
    return jsonify(ok=True, employees=created, count=len(created)), 201


# ==================== WHATSAPP ====================

def _number_for(employee):
    if not employee.whatsapp_number:
        raise ValidationError(f'{employee.name} has no WhatsApp number')
    return employee.whatsapp_number


@employees_bp.get('/<int:employee_id>/whatsapp')
@role_required('employer')
def whatsapp(employee_id):
    """
    Invitation link for an employee.
    ?project_id=N -> "added to project", ?task_id=N -> "assigned task",
    otherwise the company welcome message.
    """
    employee = service.get_employee(employee_id, _employer_id())
    app_url = current_app.config['APP_URL']

    task_id = request.args.get('task_id', type=int)
    project_id = request.args.get('project_id', type=int)
    if task_id:
        task = get_or_raise(Task, task_id, 'Task')
        check_employer(task.project.created_by, _employer_id(), 'task')
        due = task.due_date.isoformat() if task.due_date else 'not set'
        message = task_assigned_message(task.title, task.project.name, due, app_url)
    elif project_id:
        project = get_or_raise(Project, project_id, 'Project')
        check_employer(project.created_by, _employer_id(), 'project')
        message = project_added_message(project.name, app_url)
    else:
        company = current_user().company_name or current_app.config['APP_NAME']
        if current_user().user_type == 'manager':
            employer = get_or_raise(User, _employer_id(), 'Employer')
            company = employer.company_name or company
        message = company_added_message(company, app_url)

    return jsonify(ok=True, message=message, link=whatsapp_link(_number_for(employee), message))
