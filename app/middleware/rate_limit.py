"""
Rate limiting - shared Flask-Limiter instance and key functions
"""
from flask import current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import current_user

limiter = Limiter(key_func=get_remote_address, storage_uri="memory://")


def user_or_ip_key():
    """Authenticated callers are limited per user, anonymous ones per IP"""
    if current_user.is_authenticated:
        return f"user:{current_user.id}"
    return get_remote_address()


def login_rate_limit():
    return current_app.settings.login_rate_limit


def comment_post_rate_limit():
    return current_app.settings.comment_post_rate_limit
