"""
Bookmark Routes - per-user reading list
"""

from flask import Blueprint, request
from flask_login import current_user
from api_responses import success_response, handle_api_errors
from middleware.auth import login_required_json, not_banned
from services import bookmark_service

bookmarks_bp = Blueprint("bookmarks", __name__, url_prefix="/api/bookmarks")


@bookmarks_bp.route("")
@login_required_json
@handle_api_errors
def my_bookmarks():
    return success_response(bookmark_service.list_bookmarks(current_user.id))


@bookmarks_bp.route("", methods=["POST"])
@not_banned
@handle_api_errors
def add_bookmark():
    bookmark = bookmark_service.add_bookmark(current_user.id, request.get_json(silent=True) or {})
    data = bookmark.to_dict()
    data["manga"] = bookmark.manga.to_summary() if bookmark.manga else None
    return success_response(data, message="Bookmark added", status_code=201)


@bookmarks_bp.route("/<int:manga_id>/progress", methods=["PUT"])
@not_banned
@handle_api_errors
def update_progress(manga_id):
    bookmark = bookmark_service.update_progress(current_user.id, manga_id, request.get_json(silent=True) or {})
    return success_response(bookmark.to_dict(), message="Progress updated")


@bookmarks_bp.route("/<int:manga_id>", methods=["DELETE"])
@not_banned
@handle_api_errors
def remove_bookmark(manga_id):
    bookmark_service.remove_bookmark(current_user.id, manga_id)
    return success_response(message="Bookmark removed successfully")
