"""
Manga service: payload validation for admin writes and the detail view.
"""
import logging

from sqlalchemy.exc import IntegrityError

from constants import DEFAULT_MANGA_DESCRIPTION, MANGA_STATUSES
from exceptions import ConflictException, NotFoundException, ValidationException
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository

logger = logging.getLogger("main")

# payload key -> column
EDITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "coverImage": "cover_image",
    "author": "author",
    "publicationYear": "publication_year",
}


def normalize_status(value):
    """Match a status case-insensitively against the allowed values"""
    for status in MANGA_STATUSES:
        if str(value).strip().lower() == status.lower():
            return status
    raise ValidationException(
        f"status must be one of {', '.join(MANGA_STATUSES)}", details={"status": value}
    )


def _string_list(value, name):
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ValidationException(f"{name} must be a list of strings")
    return [str(v).strip() for v in value if str(v).strip()]


def validate_manga_payload(data, partial=False):
    """
    Translate a JSON payload into column values.

    With ``partial`` only the keys present are validated and returned.
    """
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")

    values = {}
    for key, column in EDITABLE_FIELDS.items():
        if key in data:
            values[column] = data[key]

    if not partial or "title" in data:
        title = str(data.get("title") or "").strip()
        if not title:
            raise ValidationException("title is required")
        values["title"] = title

    if not partial or "coverImage" in data:
        cover = str(data.get("coverImage") or "").strip()
        if not cover:
            raise ValidationException("coverImage is required")
        values["cover_image"] = cover

    if "status" in data:
        values["status"] = normalize_status(data["status"])
    elif not partial:
        values["status"] = MANGA_STATUSES[0]

    if "description" in data or not partial:
        values["description"] = str(data.get("description") or "").strip() or DEFAULT_MANGA_DESCRIPTION

    if "publicationYear" in data and data["publicationYear"] not in (None, ""):
        try:
            values["publication_year"] = int(data["publicationYear"])
        except (TypeError, ValueError):
            raise ValidationException("publicationYear must be an integer")

    if "genres" in data or not partial:
        values["genres_json"] = _string_list(data.get("genres"), "genres")

    alternative_titles = None
    if "alternativeTitles" in data or not partial:
        alternative_titles = _string_list(data.get("alternativeTitles"), "alternativeTitles")

    return values, alternative_titles


def create_manga(data):
    values, alternative_titles = validate_manga_payload(data)
    try:
        manga = MangaRepository.create(alternative_titles=alternative_titles, **values)
    except IntegrityError:
        raise ConflictException("A manga with this slug already exists")
    logger.info(f"Created manga {manga.id} ({manga.slug})")
    return manga


def update_manga(manga_id, data):
    values, alternative_titles = validate_manga_payload(data, partial=True)
    manga = MangaRepository.update(manga_id, alternative_titles=alternative_titles, **values)
    if manga is None:
        raise NotFoundException("Manga", manga_id)
    return manga


def delete_manga(manga_id):
    if not MangaRepository.delete(manga_id):
        raise NotFoundException("Manga", manga_id)
    return True


def manga_detail(manga, increment=True):
    """Full record plus its chapter list, ascending"""
    if increment:
        MangaRepository.increment_views(manga)
    data = manga.to_dict()
    data["chapters"] = [c.to_brief() for c in ChapterRepository.list_for_manga(manga.id)]
    return data
