# modules/projects/task_generator.py
"""
Template-based task generation for new projects.

Every project gets the management templates; category templates are added
for each category name found in the project's category ("Web Development",
"Design & Marketing", ...). Tasks are spread evenly over the project dates.
"""
import math
import random
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

from flask import current_app

from models import db, Task
from modules.realtime.broker import publish
from .constants import TASK_PRIORITY_FOR_PROJECT
from .service import recalculate_project_progress

DEFAULT_CHECKLIST = [
    'Define requirements',
    'Implement core functionality',
    'Review and finalize',
]


@dataclass
class TaskTemplate:
    title: str
    description: str
    role: str
    depends_on: Optional[str] = None


@dataclass
class GenerationPlan:
    templates: List[TaskTemplate] = field(default_factory=list)
    duration_days: int = 1


MANAGEMENT_TEMPLATES = [
    TaskTemplate('Project Planning', 'Define scope, milestones and deliverables', 'Management'),
    TaskTemplate('Resource Allocation', 'Assign people and budget to the work streams', 'Management'),
    TaskTemplate('Progress Review', 'Review progress against milestones and adjust the plan', 'Management'),
    TaskTemplate('Final Review', 'Sign off deliverables and close the project', 'Management'),
]

CATEGORY_TEMPLATES = {
    'development': [
        TaskTemplate('Project Setup', 'Set up repositories, environments and tooling', 'Engineering'),
        TaskTemplate('Database Schema Design', 'Design the data model and schema', 'Engineering'),
        TaskTemplate('Backend Development', 'Implement server-side features', 'Engineering', 'Project Setup'),
        TaskTemplate('Frontend Development', 'Implement the user interface', 'Engineering', 'Project Setup'),
        TaskTemplate('API Integration', 'Connect frontend and backend through the API', 'Engineering', 'Backend Development'),
        TaskTemplate('Testing', 'Test features and fix defects', 'Quality Assurance', 'API Integration'),
        TaskTemplate('Deployment', 'Release to production', 'Engineering', 'Testing'),
    ],
    'marketing': [
        TaskTemplate('Market Research', 'Research the market and target audience', 'Marketing'),
        TaskTemplate('Marketing Strategy', 'Define channels, messaging and budget', 'Marketing', 'Market Research'),
        TaskTemplate('Content Creation', 'Produce campaign content', 'Marketing', 'Marketing Strategy'),
        TaskTemplate('Social Media Campaign', 'Run the campaign on social channels', 'Marketing', 'Content Creation'),
        TaskTemplate('Performance Analysis', 'Measure campaign results', 'Marketing', 'Social Media Campaign'),
    ],
    'design': [
        TaskTemplate('User Research', 'Interview users and collect requirements', 'Design'),
        TaskTemplate('Wireframing', 'Sketch layouts and flows', 'Design', 'User Research'),
        TaskTemplate('UI Design', 'Produce high fidelity designs', 'Design', 'Wireframing'),
        TaskTemplate('Prototyping', 'Build an interactive prototype', 'Design', 'UI Design'),
        TaskTemplate('User Testing', 'Test the prototype with users', 'Design', 'Prototyping'),
        TaskTemplate('Design Refinement', 'Refine the design from test feedback', 'Design', 'User Testing'),
    ],
}


def select_templates(category: Optional[str]) -> List[TaskTemplate]:
    templates = list(MANAGEMENT_TEMPLATES)
    category = (category or '').lower()
    for name, extra in CATEGORY_TEMPLATES.items():
        if name in category:
            templates.extend(extra)
    return templates


def build_plan(project) -> GenerationPlan:
    templates = select_templates(project.category)
    duration = max(1, math.ceil(project.duration_days / len(templates)))
    return GenerationPlan(templates=templates, duration_days=duration)


def pick_assignee(members, role: str, rng=random):
    """Team member whose department or position mentions the role, else anyone on the team"""
    if not members:
        return None
    role = role.lower()
    matching = [m for m in members
                if role in (m.department or '').lower() or role in (m.position or '').lower()]
    return rng.choice(matching or list(members))


def generate_tasks_for_project(project, rng=random):
    """Create the template tasks for a project, then refresh counts and progress"""
    members = list(project.members)
    if not members:
        current_app.logger.info(f'No team members on project {project.id}; no tasks generated')
        return []

    plan = build_plan(project)
    priority = TASK_PRIORITY_FOR_PROJECT.get((project.priority or 'medium').lower(), 'Medium')
    generated = {}
    positions = {}

    for index, template in enumerate(plan.templates):
        dependency = generated.get(template.depends_on) if template.depends_on else None

        due_date = None
        if project.start_date:
            # A dependent task is scheduled in its prerequisite's slot
            slot = positions[template.depends_on] if dependency is not None else index
            start = project.start_date + timedelta(days=slot * plan.duration_days)
            due_date = start + timedelta(days=plan.duration_days)
            if project.end_date and due_date > project.end_date:
                due_date = project.end_date
        if not project.set_deadlines:
            due_date = project.end_date

        assignee = pick_assignee(members, template.role, rng)
        task = Task(
            project_id=project.id,
            title=template.title,
            description=template.description,
            status='Not Started',
            priority=priority,
            due_date=due_date,
            assigned_to=assignee.id if assignee else None,
            created_by=project.created_by,
            checklist=[{'id': i + 1, 'text': text, 'completed': False}
                       for i, text in enumerate(DEFAULT_CHECKLIST)],
            attachments=[],
            depends_on_id=dependency.id if (dependency is not None and project.create_dependencies) else None,
        )
        db.session.add(task)
        db.session.flush()
        generated[template.title] = task
        positions[template.title] = index

    project.tasks_count = Task.query.filter_by(project_id=project.id).count()
    db.session.commit()
    current_app.logger.info(f'Generated {len(generated)} tasks for project {project.id}')

    assignees = {t.assigned_to for t in generated.values() if t.assigned_to}
    publish('tasks', f'project:{project.id}', f'employer:{project.created_by}',
            *[f'employee:{a}' for a in assignees])

    recalculate_project_progress(project.id)
    return list(generated.values())
