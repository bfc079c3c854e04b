"""
Comment Routes
"""

from flask import Blueprint, current_app, request
from flask_login import current_user
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from constants import COMMENT_SORTS
from exceptions import NotFoundException
from middleware.auth import login_required_json, not_banned
from middleware.rate_limit import limiter, comment_post_rate_limit, user_or_ip_key
from repositories.comment_repository import CommentRepository
from repositories.manga_repository import MangaRepository
from services import comment_service

comments_bp = Blueprint("comments", __name__, url_prefix="/api/comments")


@comments_bp.route("")
@login_required_json
@handle_api_errors
def my_comments():
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = CommentRepository.get_paged_for_user(current_user.id, page, per_page)
    return paginated_response(pagination, lambda c: c.to_dict())


@comments_bp.route("/manga/<int:manga_id>")
@handle_api_errors
def comments_for_manga(manga_id):
    if MangaRepository.get_by_id(manga_id) is None:
        raise NotFoundException("Manga", manga_id)
    page, per_page = get_pagination_args(request, current_app.settings)
    sort = request.args.get("sort", COMMENT_SORTS[0])
    if sort not in COMMENT_SORTS:
        sort = COMMENT_SORTS[0]
    pagination = CommentRepository.get_paged_for_manga(
        manga_id, page, per_page, chapter_id=request.args.get("chapterId", type=int), sort=sort
    )
    return paginated_response(pagination, lambda c: c.to_dict())


@comments_bp.route("", methods=["POST"])
@not_banned
@limiter.limit(comment_post_rate_limit, key_func=user_or_ip_key)
@handle_api_errors
def create_comment():
    comment = comment_service.create_comment(current_user.id, request.get_json(silent=True) or {})
    return success_response(comment.to_dict(), message="Comment created successfully", status_code=201)


@comments_bp.route("/<int:comment_id>", methods=["PUT"])
@not_banned
@handle_api_errors
def edit_comment(comment_id):
    comment = comment_service.edit_comment(current_user.principal, comment_id, request.get_json(silent=True))
    return success_response(comment.to_dict(), message="Comment updated successfully")


@comments_bp.route("/<int:comment_id>", methods=["DELETE"])
@login_required_json
@handle_api_errors
def delete_comment(comment_id):
    comment_service.delete_comment(current_user.principal, comment_id)
    return success_response(message="Comment deleted successfully")


@comments_bp.route("/<int:comment_id>/reactions", methods=["POST"])
@not_banned
@handle_api_errors
def react_to_comment(comment_id):
    result = comment_service.react_to_comment(current_user.id, comment_id, request.get_json(silent=True))
    return success_response(result, message="Reaction updated")
