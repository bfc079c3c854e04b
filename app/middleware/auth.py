"""
Authentication Middleware - route decorators for bearer-token principals
"""
from functools import wraps
from flask_login import current_user
from exceptions import AuthenticationException, AuthorizationException
import logging

logger = logging.getLogger('main')


def login_required_json(f):
    """Reject anonymous callers with a JSON 401"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthenticationException()
        return f(*args, **kwargs)
    return decorated_function


def not_banned(f):
    """Reject writes from banned users with a JSON 403 carrying the ban reason"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthenticationException()
        if current_user.is_banned:
            logger.info(f"Blocked write from banned user {current_user.id}")
            reason = current_user.ban_reason or 'No reason provided'
            raise AuthorizationException(f"Your account has been banned: {reason}")
        return f(*args, **kwargs)
    return decorated_function


def admin_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise AuthenticationException()
        if not current_user.is_admin:
            raise AuthorizationException('Admin access required')
        return f(*args, **kwargs)
    return decorated_function
