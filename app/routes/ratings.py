"""
Rating Routes
"""

from flask import Blueprint, current_app, request
from flask_login import current_user
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from middleware.auth import login_required_json, not_banned
from repositories.rating_repository import RatingRepository
from services import rating_service

ratings_bp = Blueprint("ratings", __name__, url_prefix="/api/ratings")


@ratings_bp.route("")
@login_required_json
@handle_api_errors
def my_ratings():
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = RatingRepository.get_paged_for_user(current_user.id, page, per_page)
    return paginated_response(pagination, lambda r: r.to_dict(include_manga=True))


@ratings_bp.route("/manga/<int:manga_id>")
@login_required_json
@handle_api_errors
def my_rating_for_manga(manga_id):
    rating = RatingRepository.get_for_user_and_manga(current_user.id, manga_id)
    return success_response(rating.to_dict() if rating else None)


@ratings_bp.route("", methods=["POST"])
@not_banned
@handle_api_errors
def submit_rating():
    rating, created = rating_service.submit_rating(current_user.id, request.get_json(silent=True) or {})
    message = "Rating created successfully" if created else "Rating updated successfully"
    return success_response(rating.to_dict(), message=message, status_code=201 if created else 200)


@ratings_bp.route("/<int:manga_id>", methods=["DELETE"])
@not_banned
@handle_api_errors
def delete_rating(manga_id):
    rating_service.remove_rating(current_user.id, manga_id)
    return success_response(message="Rating deleted successfully")
