"""
Discovery Routes - genres and trending lists
"""

from flask import Blueprint, current_app, request
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from constants import RECENT_FEED_CHAPTERS
from exceptions import NotFoundException
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository
from utils import generate_slug

trending_bp = Blueprint("trending", __name__, url_prefix="/api/trending")
genres_bp = Blueprint("genres", __name__, url_prefix="/api/genres")


def _limit_arg(default, maximum=100):
    limit = request.args.get("limit", default, type=int)
    return min(max(1, limit), maximum)


def _genre_dict(name, count):
    return {
        "name": name,
        "displayName": name[:1].upper() + name[1:],
        "slug": generate_slug(name),
        "count": count,
    }


def _find_genre(key):
    """Genre in use whose slug or name matches key, ignoring case"""
    key = key.strip().lower()
    for name, count in MangaRepository.genre_counts():
        if key in (generate_slug(name), name.lower()):
            return name, count
    return None


@genres_bp.route("")
@handle_api_errors
def list_genres():
    """Genres in use across the catalog, most used first"""
    genres = MangaRepository.genre_counts()[: _limit_arg(50)]
    return success_response([_genre_dict(name, count) for name, count in genres])


@genres_bp.route("/<slug>")
@handle_api_errors
def genre_detail(slug):
    found = _find_genre(slug)
    if found is None:
        raise NotFoundException("Genre", slug)
    name, count = found
    data = _genre_dict(name, count)
    data["mangaCount"] = data.pop("count")
    return success_response(data)


@genres_bp.route("/<genre>/manga")
@handle_api_errors
def manga_for_genre(genre):
    found = _find_genre(genre)
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = MangaRepository.get_paged(page, per_page, genre=found[0] if found else genre)
    return paginated_response(pagination, lambda m: m.to_summary())


@trending_bp.route("/top-rated")
@handle_api_errors
def top_rated():
    limit = _limit_arg(10)
    manga = MangaRepository.top_rated(limit)
    if not manga:
        # nothing rated yet
        manga = MangaRepository.recent(limit)
    return success_response([m.to_summary() for m in manga])


@trending_bp.route("/recent")
@handle_api_errors
def recent():
    return success_response([m.to_summary() for m in MangaRepository.recent(_limit_arg(20))])


@trending_bp.route("/latest-chapters")
@handle_api_errors
def latest_chapters():
    items = []
    for chapter in ChapterRepository.latest(_limit_arg(20)):
        data = chapter.to_brief()
        if chapter.manga is not None:
            data["manga"] = {
                "id": chapter.manga.id,
                "slug": chapter.manga.slug,
                "title": chapter.manga.title,
                "coverImage": chapter.manga.cover_image,
            }
        items.append(data)
    return success_response(items)


@trending_bp.route("/recent-with-chapters")
@handle_api_errors
def recent_with_chapters():
    """Recently updated manga, each with its newest chapters"""
    page, per_page = get_pagination_args(request, current_app.settings, default_per_page=15)
    pagination = MangaRepository.get_paged(page, per_page)

    def serialize(manga):
        data = manga.to_summary()
        data["latestChapters"] = [
            c.to_brief() for c in ChapterRepository.recent_for_manga(manga.id, RECENT_FEED_CHAPTERS)
        ]
        return data

    return paginated_response(pagination, serialize)
