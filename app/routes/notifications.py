"""
Notification Routes - the caller's own stored notifications
"""

from flask import Blueprint, current_app, request
from flask_login import current_user
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from middleware.auth import login_required_json
from repositories.notification_repository import NotificationRepository
from services import notification_service

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


@notifications_bp.route("")
@login_required_json
@handle_api_errors
def list_notifications():
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = NotificationRepository.get_paged_for_user(current_user.id, page, per_page)
    return paginated_response(pagination, lambda n: n.to_dict())


@notifications_bp.route("/unread-count")
@login_required_json
@handle_api_errors
def unread_count():
    return success_response({"count": NotificationRepository.unread_count(current_user.id)})


@notifications_bp.route("/<int:notification_id>/read", methods=["PUT"])
@login_required_json
@handle_api_errors
def mark_read(notification_id):
    notification = notification_service.mark_read(current_user.id, notification_id)
    return success_response(notification.to_dict(), message="Notification marked as read")


@notifications_bp.route("/mark-all-read", methods=["PUT"])
@login_required_json
@handle_api_errors
def mark_all_read():
    updated = notification_service.mark_all_read(current_user.id)
    return success_response({"updatedCount": updated}, message="All notifications marked as read")


@notifications_bp.route("/<int:notification_id>", methods=["DELETE"])
@login_required_json
@handle_api_errors
def delete_notification(notification_id):
    notification_service.delete_notification(current_user.id, notification_id)
    return success_response(message="Notification deleted")
