"""
Manga Routes - catalog listing, search, detail and admin writes
"""

from flask import Blueprint, current_app, request
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from exceptions import NotFoundException
from middleware.auth import admin_required
from repositories.manga_repository import MangaRepository
from search import SearchEngine
from services import manga_service
from utils import flag_true
import logging

logger = logging.getLogger("main")

manga_bp = Blueprint("manga", __name__, url_prefix="/api/manga")


def run_search(query, page, limit):
    engine = SearchEngine(MangaRepository, current_app.settings.search)
    return engine.search(query, page=page, limit=limit)


@manga_bp.route("/search")
@handle_api_errors
def search_manga():
    """Relevance-ranked search over titles and alternative titles"""
    result = run_search(request.args.get("q"), request.args.get("page", 1), request.args.get("limit"))
    return success_response(result.to_dict())


@manga_bp.route("")
@handle_api_errors
def list_manga():
    search = request.args.get("search")
    if search is not None and search.strip():
        result = run_search(search, request.args.get("page", 1), request.args.get("limit"))
        return success_response(result.to_dict())

    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = MangaRepository.get_paged(
        page, per_page, genre=request.args.get("genre"), status=request.args.get("status")
    )
    return paginated_response(pagination, lambda m: m.to_summary())


@manga_bp.route("/genre/<genre>")
@handle_api_errors
def manga_by_genre(genre):
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = MangaRepository.get_paged(page, per_page, genre=genre)
    return paginated_response(pagination, lambda m: m.to_summary())


@manga_bp.route("/slug/<slug>")
@handle_api_errors
def manga_by_slug(slug):
    manga = MangaRepository.get_by_slug(slug)
    if manga is None:
        raise NotFoundException("Manga", slug)
    return success_response(manga_service.manga_detail(manga))


@manga_bp.route("/<int:manga_id>")
@handle_api_errors
def manga_by_id(manga_id):
    manga = MangaRepository.get_by_id(manga_id)
    if manga is None:
        raise NotFoundException("Manga", manga_id)
    # refreshes after a rating or bookmark pass skipIncrement so views are not double counted
    increment = not flag_true(request.args.get("skipIncrement", ""))
    return success_response(manga_service.manga_detail(manga, increment=increment))


@manga_bp.route("", methods=["POST"])
@admin_required
@handle_api_errors
def create_manga():
    manga = manga_service.create_manga(request.get_json(silent=True))
    return success_response(manga.to_dict(), message="Manga created", status_code=201)


@manga_bp.route("/<int:manga_id>", methods=["PUT"])
@admin_required
@handle_api_errors
def update_manga(manga_id):
    manga = manga_service.update_manga(manga_id, request.get_json(silent=True))
    return success_response(manga.to_dict(), message="Manga updated")


@manga_bp.route("/<int:manga_id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_manga(manga_id):
    manga_service.delete_manga(manga_id)
    logger.info(f"Manga {manga_id} deleted")
    return success_response(message="Manga deleted successfully")
