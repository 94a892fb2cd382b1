# modules/projects/constants.py
"""
Project constants and configuration
"""

# Suggested project categories (free text is accepted)
PROJECT_CATEGORIES = [
    'Development',
    'Marketing',
    'Design',
    'Operations',
    'Research',
    'Sales',
    'General'
]

# Status options. The first three are derived from task progress.
PROJECT_STATUSES = [
    'Not started',
    'In progress',
    'Completed',
    'On hold',
    'Cancelled'
]

# Priority levels
PRIORITY_LEVELS = [
    'low',
    'medium',
    'high',
    'critical'
]

# Project priority -> priority of generated tasks
TASK_PRIORITY_FOR_PROJECT = {
    'low': 'Low',
    'medium': 'Medium',
    'high': 'High',
    'critical': 'Critical'
}

# Task statuses that count as work under way
IN_PROGRESS_TASK_STATUSES = ('In Progress', 'Started')
