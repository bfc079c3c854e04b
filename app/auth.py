from flask import Blueprint, current_app, request
from flask_login import LoginManager, current_user
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import timedelta
from sqlalchemy.exc import IntegrityError
from db import db
from models.user import User
from constants import (
    ROLE_ADMIN,
    ROLE_USER,
    USERNAME_MIN_LENGTH,
    USERNAME_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
)
from api_responses import success_response, handle_api_errors
from exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    ValidationException,
)
from middleware.auth import login_required_json
from middleware.rate_limit import limiter, login_rate_limit
from repositories.user_repository import UserRepository
from utils import now_utc
import jwt
import os
import secrets
import re
import logging

# Retrieve main logger
logger = logging.getLogger("main")

ALGORITHM = "HS256"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")

auth_blueprint = Blueprint("auth", __name__, url_prefix="/api/auth")

login_manager = LoginManager()


def create_access_token(user, secret=None, expires_minutes=None):
    """Signed access token carrying the user id and role"""
    settings = current_app.settings
    minutes = expires_minutes or settings.access_token_minutes
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "role": user.role,
        "type": "access",
        "exp": now_utc() + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token, secret=None):
    """Decode and verify an access token. Returns payload or None."""
    try:
        payload = jwt.decode(token, secret or current_app.settings.jwt_secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid access token: {e}")
        return None
    if payload.get("type") != "access":
        logger.warning(f"Token type mismatch: expected 'access', got '{payload.get('type')}'")
        return None
    return payload


def bearer_token(req):
    auth_header = req.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[len("Bearer "):].strip() or None


@login_manager.request_loader
def load_user_from_request(req):
    """Resolve the Bearer token into the calling user"""
    token = bearer_token(req)
    if not token:
        return None
    payload = decode_access_token(token)
    if not payload:
        return None
    try:
        user = UserRepository.get_by_id(int(payload["sub"]))
    except (KeyError, TypeError, ValueError):
        return None
    if user is None or not user.is_active:
        return None
    return user


def hash_password(password):
    return generate_password_hash(password, method="pbkdf2:sha256")


def validate_registration(data):
    username = str(data.get("username") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH or not USERNAME_RE.match(username):
        raise ValidationException(
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters, "
            "letters, numbers and underscores only"
        )
    if not EMAIL_RE.match(email):
        raise ValidationException("Must be a valid email address")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationException(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    return username, email, password


def register_user(username, email, password, role=ROLE_USER):
    if UserRepository.get_by_email(email):
        raise ConflictException("Email is already registered")
    if UserRepository.get_by_username(username):
        raise ConflictException("Username is already taken")
    try:
        return UserRepository.create(
            username=username, email=email, password_hash=hash_password(password), role=role
        )
    except IntegrityError:
        raise ConflictException("Username or email is already registered")


def authenticate(identifier, password):
    """Return the user for valid credentials, raising on failure or ban"""
    identifier = (identifier or "").strip()
    user = UserRepository.get_by_email(identifier) if "@" in identifier else UserRepository.get_by_username(identifier)

    # take the user-supplied password, hash it, and compare it to the hashed password in the database
    if not user or not password or not check_password_hash(user.password_hash, password):
        logger.warning(f"Incorrect login for {identifier}")
        raise AuthenticationException("Invalid credentials")
    if not user.is_active:
        raise AuthenticationException("Account is disabled")
    if user.is_banned:
        raise AuthorizationException(f"Your account has been banned: {user.ban_reason or 'No reason provided'}")

    user.last_active = now_utc()
    db.session.commit()
    logger.info(f"Successful login for user {user.username}")
    return user


def create_or_update_admin(email, password, username=None):
    """
    Create the admin account, or promote and reset an existing one.
    """
    email = email.strip().lower()
    user = UserRepository.get_by_email(email)
    try:
        if user:
            logger.info(f"Updating existing admin {email}")
            user.role = ROLE_ADMIN
            user.password_hash = hash_password(password)
            user.is_banned = False
        else:
            logger.info(f"Creating admin {email}")
            base = re.sub(r"[^A-Za-z0-9_]", "_", username or email.split("@")[0])[:USERNAME_MAX_LENGTH]
            user = User(
                username=base.ljust(USERNAME_MIN_LENGTH, "_"),
                email=email,
                password_hash=hash_password(password),
                role=ROLE_ADMIN,
            )
            db.session.add(user)
        db.session.commit()
    except Exception as e:
        logger.error(f"Error saving admin {email}: {e}")
        db.session.rollback()
        raise e
    return user


def init_admin_from_environment(environ=None):
    """
    allow to seed the first admin from MANGASHELF_ADMIN_EMAIL / MANGASHELF_ADMIN_PASSWORD
    """
    environ = os.environ if environ is None else environ
    email = environ.get("MANGASHELF_ADMIN_EMAIL")
    password = environ.get("MANGASHELF_ADMIN_PASSWORD")
    if email and password:
        logger.info("Initializing an admin user from environment variables...")
        return create_or_update_admin(email, password, username=environ.get("MANGASHELF_ADMIN_USERNAME"))
    return None


def session_payload(user):
    return {"token": create_access_token(user), "user": user.to_dict()}


@auth_blueprint.route("/register", methods=["POST"])
@handle_api_errors
def register():
    data = request.get_json(silent=True) or {}
    username, email, password = validate_registration(data)
    user = register_user(username, email, password)
    logger.info(f"Registered user {user.username}")
    return success_response(session_payload(user), message="Registration successful", status_code=201)


@auth_blueprint.route("/login", methods=["POST"])
@limiter.limit(login_rate_limit)
@handle_api_errors
def login():
    data = request.get_json(silent=True) or {}
    identifier = data.get("email") or data.get("username")
    if not identifier or not data.get("password"):
        raise ValidationException("email (or username) and password are required")
    user = authenticate(identifier, data.get("password"))
    return success_response(session_payload(user), message="Login successful")


@auth_blueprint.route("/me")
@login_required_json
def me():
    return success_response(current_user.to_dict())


def _require_password(user, password, field):
    if not password:
        raise ValidationException(f"{field} is required")
    if not check_password_hash(user.password_hash, password):
        raise ValidationException(f"{field} is incorrect")


def update_profile(user, data):
    """Only the username is editable"""
    username = str(data.get("username") or "").strip()
    if not username:
        return user
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH or not USERNAME_RE.match(username):
        raise ValidationException(
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters, "
            "letters, numbers and underscores only"
        )
    taken = UserRepository.get_by_username(username)
    if taken is not None and taken.id != user.id:
        raise ConflictException("Username is already taken")
    return UserRepository.update(user.id, username=username)


def change_password(user, current_password, new_password):
    _require_password(user, current_password, "Current password")
    if len(new_password or "") < PASSWORD_MIN_LENGTH:
        raise ValidationException(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    UserRepository.update(user.id, password_hash=hash_password(new_password))
    logger.info(f"Password changed for user {user.username}")


def delete_account(user, password):
    """
    Soft delete: the row stays so comments and reports keep their author,
    but it can no longer log in and frees its username. Banned users keep
    their email so it cannot be registered again.
    """
    _require_password(user, password, "Password")
    placeholder = f"del_{user.id}"
    changes = {
        "username": placeholder,
        "password_hash": hash_password(secrets.token_hex(32)),
        "active": False,
    }
    if not user.is_banned:
        changes["email"] = placeholder
    UserRepository.update(user.id, **changes)
    logger.info(f"Deleted account of user {user.id}")


@auth_blueprint.route("/profile")
@login_required_json
@handle_api_errors
def profile():
    return success_response(
        {"user": current_user.to_dict(), "stats": UserRepository.activity_counts(current_user.id)}
    )


@auth_blueprint.route("/profile", methods=["PUT"])
@login_required_json
@handle_api_errors
def edit_profile():
    user = update_profile(current_user, request.get_json(silent=True) or {})
    return success_response(user.to_dict(), message="Profile updated successfully")


@auth_blueprint.route("/change-password", methods=["PUT"])
@login_required_json
@handle_api_errors
def change_password_route():
    data = request.get_json(silent=True) or {}
    change_password(current_user, data.get("currentPassword"), data.get("newPassword"))
    return success_response(message="Password changed successfully")


@auth_blueprint.route("/delete-account", methods=["DELETE"])
@login_required_json
@handle_api_errors
def delete_account_route():
    data = request.get_json(silent=True) or {}
    delete_account(current_user, data.get("password"))
    return success_response(message="Account deleted successfully")
