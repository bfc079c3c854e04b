"""
Chapter writes, keeping the owning manga's totalChapters and lastUpdated
in step with its chapter list.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from db import db
from exceptions import ConflictException, NotFoundException, StoreUnavailableException, ValidationException
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository
from utils import ensure_utc

logger = logging.getLogger("main")


def _chapter_number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationException("chapterNumber must be a number", details={"chapterNumber": value})
    if number < 0:
        raise ValidationException("chapterNumber must not be negative")
    return number


def _pages(value):
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationException("pages must be a list")
    pages = []
    for i, page in enumerate(value, start=1):
        if isinstance(page, str):
            page = {"pageNumber": i, "imageUrl": page}
        if not isinstance(page, dict) or not page.get("imageUrl"):
            raise ValidationException("each page needs an imageUrl")
        pages.append({"pageNumber": int(page.get("pageNumber") or i), "imageUrl": str(page["imageUrl"])})
    return pages


def _chapter_values(data, partial=False):
    values = {}
    if "chapterNumber" in data or not partial:
        values["chapter_number"] = _chapter_number(data.get("chapterNumber"))
    if "title" in data:
        values["title"] = str(data.get("title") or "").strip()
    if "name" in data:
        values["name"] = str(data.get("name") or "").strip()
    if "pages" in data:
        values["pages_json"] = _pages(data.get("pages"))
    if data.get("publishedAt"):
        published = ensure_utc(data["publishedAt"])
        if published is None:
            raise ValidationException("publishedAt must be an ISO-8601 timestamp")
        values["published_at"] = published
    return values


def create_chapter(data):
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    try:
        manga_id = int(data.get("mangaId"))
    except (TypeError, ValueError):
        raise ValidationException("mangaId is required")
    manga = MangaRepository.get_by_id(manga_id)
    if manga is None:
        raise NotFoundException("Manga", manga_id)

    values = _chapter_values(data)
    try:
        chapter = ChapterRepository.add(manga_id=manga_id, **values)
        MangaRepository.adjust_counter(manga, "total_chapters", 1)
        MangaRepository.touch(manga)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictException("A chapter with this number already exists for this manga")
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not save chapter: {e.__class__.__name__}") from e

    logger.info(f"Created chapter {chapter.number} for manga {manga_id}")
    return chapter


def update_chapter(chapter_id, data):
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    chapter = ChapterRepository.update(chapter_id, **_chapter_values(data, partial=True))
    if chapter is None:
        raise NotFoundException("Chapter", chapter_id)
    return chapter


def delete_chapter(chapter_id):
    chapter = ChapterRepository.get_by_id(chapter_id)
    if chapter is None:
        raise NotFoundException("Chapter", chapter_id)

    manga = MangaRepository.get_by_id(chapter.manga_id)
    try:
        if manga is not None:
            MangaRepository.adjust_counter(manga, "total_chapters", -1)
            MangaRepository.touch(manga)
        db.session.delete(chapter)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not delete chapter: {e.__class__.__name__}") from e
    return True
