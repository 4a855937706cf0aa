from functools import wraps
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from jetsetgo.extensions import db
from jetsetgo.models.user import User
from jetsetgo.models.enums import UserRole
from jetsetgo.utils.api_response import APIResponse


def current_user_or_none():
    """Load the active user behind the request's JWT, if any"""
    user_id = get_jwt_identity()
    if not user_id:
        return None
    user = db.session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user


def role_required(*roles):
    """
    Decorator to require specific user roles

    The role is read from the database rather than the token claims, so a
    demoted user loses access without waiting for the token to expire.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            verify_jwt_in_request()
            user = current_user_or_none()
            if not user:
                return APIResponse.unauthorized("Please login to continue")

            if user.role.value not in roles:
                return APIResponse.forbidden("You don't have permission to access this resource")

            return f(*args, **kwargs)
        return decorated_function
    return decorator


def admin_required():
    return role_required(UserRole.ADMIN.value)


def editor_required():
    return role_required(UserRole.EDITOR.value, UserRole.ADMIN.value)
