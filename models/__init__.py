# models/__init__.py
"""
Models initialization file
Imports all models for easy access throughout the application
"""
from .base import db
from .users import User, USER_TYPES
from .projects import Project, Activity, project_members
from .tasks import Task, TASK_STATUSES, TASK_PRIORITIES
from .employees import Employee, Manager, EmployeePerformance
from .renegotiation import DueDateRenegotiation, RENEGOTIATION_STATUSES
from .rewards import Reward, EmployeeReward, Achievement, EmployeePoints, REWARD_TYPES
from .tickets import Ticket, TicketComment, TICKET_CATEGORIES, TICKET_STATUSES, TICKET_PRIORITIES
from .time_tracking import TimeEntry
from .settings import EmployerSettings

__all__ = [
    'db',
    # Accounts
    'User',
    'USER_TYPES',
    # Projects and tasks
    'Project',
    'Activity',
    'project_members',
    'Task',
    'TASK_STATUSES',
    'TASK_PRIORITIES',
    # People
    'Employee',
    'Manager',
    'EmployeePerformance',
    # Workflows
    'DueDateRenegotiation',
    'RENEGOTIATION_STATUSES',
    'Ticket',
    'TicketComment',
    'TICKET_CATEGORIES',
    'TICKET_STATUSES',
    'TICKET_PRIORITIES',
    'TimeEntry',
    # Rewards
    'Reward',
    'EmployeeReward',
    'Achievement',
    'EmployeePoints',
    'REWARD_TYPES',
    # Settings
    'EmployerSettings',
]
