"""
User administration Routes - ban / unban
"""

from flask import Blueprint, request
from flask_login import current_user
from api_responses import success_response, handle_api_errors
from exceptions import NotFoundException, ValidationException
from middleware.auth import admin_required
from repositories.user_repository import UserRepository
from utils import now_utc
import logging

logger = logging.getLogger("main")

users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.route("/<int:user_id>/ban", methods=["POST"])
@admin_required
@handle_api_errors
def ban_user(user_id):
    if user_id == current_user.id:
        raise ValidationException("You cannot ban yourself")
    data = request.get_json(silent=True) or {}
    reason = str(data.get("reason") or "").strip() or None
    user = UserRepository.update(user_id, is_banned=True, ban_reason=reason, banned_at=now_utc())
    if user is None:
        raise NotFoundException("User", user_id)
    logger.info(f"User {user_id} banned by {current_user.id}")
    return success_response(user.to_dict(), message="User banned")


@users_bp.route("/<int:user_id>/unban", methods=["POST"])
@admin_required
@handle_api_errors
def unban_user(user_id):
    user = UserRepository.update(user_id, is_banned=False, ban_reason=None, banned_at=None)
    if user is None:
        raise NotFoundException("User", user_id)
    logger.info(f"User {user_id} unbanned by {current_user.id}")
    return success_response(user.to_dict(), message="User unbanned")
