"""
Chapter Routes
"""

from flask import Blueprint, request
from api_responses import success_response, handle_api_errors
from constants import CHAPTER_SORT_FIELDS
from exceptions import NotFoundException
from middleware.auth import admin_required
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository
from services import chapter_service

chapters_bp = Blueprint("chapters", __name__, url_prefix="/api/chapters")


def _with_manga(chapter, include_cover=False, include_pages=True):
    data = chapter.to_dict(include_pages=include_pages)
    if chapter.manga is not None:
        manga = {"id": chapter.manga.id, "title": chapter.manga.title}
        if include_cover:
            manga["coverImage"] = chapter.manga.cover_image
            manga["slug"] = chapter.manga.slug
        data["manga"] = manga
    return data


def _limit_arg(default=10, maximum=50):
    limit = request.args.get("limit", default, type=int)
    return min(max(1, limit), maximum)


@chapters_bp.route("/manga/<int:manga_id>")
@handle_api_errors
def chapters_for_manga(manga_id):
    if MangaRepository.get_by_id(manga_id) is None:
        raise NotFoundException("Manga", manga_id)
    sort_by = request.args.get("sortBy", "chapterNumber")
    if sort_by not in CHAPTER_SORT_FIELDS:
        sort_by = "chapterNumber"
    order = "desc" if request.args.get("order") == "desc" else "asc"
    chapters = ChapterRepository.list_for_manga(manga_id, sort_by=sort_by, order=order)
    return success_response([c.to_dict(include_pages=False) for c in chapters])


@chapters_bp.route("/latest")
@handle_api_errors
def latest_chapters():
    chapters = ChapterRepository.latest(_limit_arg())
    return success_response([_with_manga(c, include_cover=True, include_pages=False) for c in chapters])


@chapters_bp.route("/<int:chapter_id>")
@handle_api_errors
def chapter_detail(chapter_id):
    chapter = ChapterRepository.get_by_id(chapter_id)
    if chapter is None:
        raise NotFoundException("Chapter", chapter_id)
    ChapterRepository.increment_views(chapter)
    return success_response(_with_manga(chapter))


@chapters_bp.route("", methods=["POST"])
@admin_required
@handle_api_errors
def create_chapter():
    chapter = chapter_service.create_chapter(request.get_json(silent=True))
    return success_response(chapter.to_dict(), message="Chapter created", status_code=201)


@chapters_bp.route("/<int:chapter_id>", methods=["PUT"])
@admin_required
@handle_api_errors
def update_chapter(chapter_id):
    chapter = chapter_service.update_chapter(chapter_id, request.get_json(silent=True))
    return success_response(chapter.to_dict(), message="Chapter updated")


@chapters_bp.route("/<int:chapter_id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_chapter(chapter_id):
    chapter_service.delete_chapter(chapter_id)
    return success_response(message="Chapter deleted successfully")
