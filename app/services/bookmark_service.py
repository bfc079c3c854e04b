"""
Bookmark service: per-user bookmarks with reading progress and the
manga bookmarkCount counter.
"""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from db import db
from exceptions import ConflictException, NotFoundException, StoreUnavailableException, ValidationException
from repositories.bookmark_repository import BookmarkRepository
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository
from utils import ensure_utc

logger = logging.getLogger("main")


def _int_or_none(value, name):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{name} must be an integer", details={name: value})


def reading_progress(last_read, latest):
    """lastRead.chapterNumber / latest.chapterNumber, 0 when either is unknown"""
    if last_read is None or latest is None or not latest.chapter_number or latest.chapter_number <= 0:
        return 0
    return last_read.chapter_number / latest.chapter_number


def _created_ts(bookmark):
    created = ensure_utc(bookmark.created_at)
    return created.timestamp() if created else 0


def _chapter_ref(chapter):
    if chapter is None:
        return None
    return {"id": chapter.id, "chapterNumber": chapter.number, "title": chapter.title}


def list_bookmarks(user_id):
    """Bookmarks with manga summary and progress, furthest read first"""
    entries = []
    for bookmark in BookmarkRepository.all_for_user(user_id):
        if bookmark.manga is None:
            continue
        latest = ChapterRepository.latest_for_manga(bookmark.manga_id)
        progress = reading_progress(bookmark.last_read, latest)
        data = bookmark.to_dict()
        data.update(
            {
                "manga": bookmark.manga.to_summary(),
                "lastRead": _chapter_ref(bookmark.last_read),
                "latestChapter": _chapter_ref(latest),
                "readingProgress": progress,
            }
        )
        entries.append((bookmark, data))

    # created desc first, then a stable sort on progress desc keeps that as the tie-break
    entries.sort(key=lambda e: _created_ts(e[0]), reverse=True)
    entries.sort(key=lambda e: e[1]["readingProgress"], reverse=True)
    return [data for _, data in entries]


def add_bookmark(user_id, data):
    manga_id = _int_or_none(data.get("mangaId"), "mangaId")
    if manga_id is None:
        raise ValidationException("mangaId is required")
    manga = MangaRepository.get_by_id(manga_id)
    if manga is None:
        raise NotFoundException("Manga", manga_id)
    if BookmarkRepository.get_for_user_and_manga(user_id, manga_id):
        raise ConflictException("Bookmark already exists")

    requested = _int_or_none(data.get("lastReadId"), "lastReadId")
    if requested is not None:
        chapter = ChapterRepository.get_by_id(requested)
        if chapter is None:
            raise NotFoundException("Chapter", requested)
        if chapter.manga_id != manga_id:
            raise ValidationException("Chapter does not belong to this manga")

    # New bookmarks start at the first chapter when there is one
    first = ChapterRepository.first_for_manga(manga_id)
    last_read_id = first.id if first else requested

    try:
        bookmark = BookmarkRepository.add(user_id=user_id, manga_id=manga_id, last_read_id=last_read_id)
        MangaRepository.adjust_counter(manga, "bookmark_count", 1)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictException("Bookmark already exists")
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not save bookmark: {e.__class__.__name__}") from e

    logger.info(f"Bookmark added user={user_id} manga={manga_id}")
    return bookmark


def update_progress(user_id, manga_id, data):
    bookmark = BookmarkRepository.get_for_user_and_manga(user_id, manga_id)
    if bookmark is None:
        raise NotFoundException("Bookmark")

    last_read_id = _int_or_none(data.get("lastReadId"), "lastReadId")
    if last_read_id is not None:
        chapter = ChapterRepository.get_by_id(last_read_id)
        if chapter is None:
            raise NotFoundException("Chapter", last_read_id)
        if chapter.manga_id != bookmark.manga_id:
            raise ValidationException("Chapter does not belong to this manga")

    bookmark.last_read_id = last_read_id
    db.session.commit()
    return bookmark


def remove_bookmark(user_id, manga_id):
    bookmark = BookmarkRepository.get_for_user_and_manga(user_id, manga_id)
    if bookmark is None:
        raise NotFoundException("Bookmark")

    manga = MangaRepository.get_by_id(manga_id)
    try:
        BookmarkRepository.remove(bookmark)
        if manga is not None:
            MangaRepository.adjust_counter(manga, "bookmark_count", -1)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not remove bookmark: {e.__class__.__name__}") from e
    return True
