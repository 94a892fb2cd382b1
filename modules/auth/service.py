# modules/auth/service.py
import secrets
import string
from functools import wraps
from typing import Optional

from flask import g, session, jsonify, current_app

from models import db, User, Employee, USER_TYPES
from modules.errors import ServiceError, ValidationError, Conflict, NotFound

_TEMP_ALPHABET = string.ascii_lowercase + string.digits


def generate_temp_password() -> str:
    """'Temp' + 8 random lowercase letters/digits"""
    return 'Temp' + ''.join(secrets.choice(_TEMP_ALPHABET) for _ in range(8))


def normalize_email(email: Optional[str]) -> str:
    return (email or '').strip().lower()


def get_user(user_id) -> Optional[User]:
    if user_id is None:
        return None
    return db.session.get(User, int(user_id))


def get_user_by_email(email: str) -> Optional[User]:
    email = normalize_email(email)
    if not email:
        return None
    return User.query.filter_by(email=email).first()


def relevant_employer_id(user) -> Optional[int]:
    """Own id for employers, the owning employer for managers and employees"""
    if user is None:
        return None
    if isinstance(user, int):
        user = get_user(user)
        if user is None:
            return None
    return user.relevant_employer_id


def register_user(email, password, full_name, user_type='employer',
                  company_name=None, employer_id=None, commit=True) -> User:
    email = normalize_email(email)
    if not email or '@' not in email:
        raise ValidationError('A valid email is required')
    if not password or len(password) < 6:
        raise ValidationError('Password must be at least 6 characters')
    if not (full_name or '').strip():
        raise ValidationError('Full name is required')
    if user_type not in USER_TYPES:
        raise ValidationError(f'Unknown user type: {user_type}')
    if user_type != 'employer' and not employer_id:
        raise ValidationError(f'A {user_type} account needs an employer')
    if get_user_by_email(email):
        raise Conflict(f'An account already exists for {email}')

    user = User(
        email=email,
        full_name=full_name.strip(),
        user_type=user_type,
        company_name=(company_name or '').strip() or None,
        employer_id=employer_id if user_type != 'employer' else None,
    )
    user.set_password(password)
    db.session.add(user)
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return user


def create_account_for(email, full_name, user_type, employer_id):
    """
    Create a login with a temporary password on behalf of an employer.
    The caller's session is left untouched.

    Returns (user, temp_password), or (existing_user, '') when the email
    already has an account.
    """
    existing = get_user_by_email(email)
    if existing:
        current_app.logger.info(f'User account already exists for: {existing.email}')
        return existing, ''
    temp_password = generate_temp_password()
    user = register_user(email, temp_password, full_name, user_type=user_type,
                         employer_id=employer_id, commit=False)
    current_app.logger.info(f'Created {user_type} account for: {user.email}')
    return user, temp_password


def authenticate(email, password) -> User:
    user = get_user_by_email(email)
    if not user or not user.check_password(password or ''):
        raise ServiceError('Invalid email or password', 401)
    return user


def login_user(user: User) -> None:
    session.clear()
    session['user_id'] = user.id
    g.user = user


def logout_user() -> None:
    session.clear()
    g.user = None


def current_user() -> Optional[User]:
    user_id = session.get('user_id')
    cached = g.get('user')
    # g can outlive one request when an app context is already active
    if cached is None or cached.id != user_id:
        g.user = get_user(user_id)
    return g.user


def current_employee() -> Optional[Employee]:
    """Employee record behind the logged-in employee account"""
    user = current_user()
    if user is None:
        return None
    employee = Employee.query.filter_by(user_id=user.id).first()
    if employee is None and user.employer_id:
        employee = Employee.query.filter_by(employer_id=user.employer_id, email=user.email).first()
    return employee


def require_employee() -> Employee:
    employee = current_employee()
    if employee is None:
        raise NotFound('No employee profile is linked to this account')
    return employee


def role_allows(user: User, required_role: Optional[str], allow_manager=True) -> bool:
    if required_role is None:
        return True
    if required_role == 'employer' and user.user_type == 'manager' and allow_manager:
        return True
    if required_role == 'employee' and user.user_type == 'manager':
        return False
    return user.user_type == required_role


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return jsonify(ok=False, error='Login required'), 401
        return view(*args, **kwargs)
    return wrapped


def role_required(required_role, allow_manager=True):
    """Restrict a view to one role; employer views admit managers unless allow_manager=False"""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            user = current_user()
            if user is None:
                return jsonify(ok=False, error='Login required'), 401
            if not role_allows(user, required_role, allow_manager):
                return jsonify(ok=False, error='Not allowed for this role',
                               dashboard=dashboard_path(user)), 403
            return view(*args, **kwargs)
        return wrapped
    return decorator


def dashboard_path(user: User) -> str:
    """Managers share the employer dashboard"""
    role = 'employee' if user.user_type == 'employee' else 'employer'
    return f'/api/{role}/dashboard'
