# modules/employees/whatsapp.py
"""
WhatsApp deep links with pre-filled invitation messages
"""
from urllib.parse import quote

# Characters encodeURIComponent leaves alone
_SAFE = "-_.!~*'()"


def whatsapp_link(phone_number: str, message: str) -> str:
    """Phone number with country code, no '+'"""
    number = (phone_number or '').strip().lstrip('+').replace(' ', '')
    return f'https://wa.me/{number}?text={quote(message, safe=_SAFE)}'


def project_added_message(project_name: str, app_url: str) -> str:
    return (f'You have been added to the project "{project_name}". '
            f'Visit {app_url} to view details and start collaborating.')


def task_assigned_message(task_title: str, project_name: str, due_date: str, app_url: str) -> str:
    return (f'You have been assigned a new task "{task_title}" in project "{project_name}". '
            f'Due date: {due_date}. Visit {app_url} to view details.')


def company_added_message(company_name: str, app_url: str) -> str:
    return (f'Welcome to {company_name}! You have been added as a team member. '
            f'Visit {app_url} to complete your profile and get started.')
