"""
Repository for Chapter database operations
"""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from db import db
from exceptions import ConflictException
from models.chapter import Chapter

SORT_COLUMNS = {
    "chapterNumber": Chapter.chapter_number,
    "publishedAt": Chapter.published_at,
    "views": Chapter.views,
}


class ChapterRepository:
    """Repository for Chapter database operations"""

    @staticmethod
    def get_by_id(id):
        return db.session.get(Chapter, id)

    @staticmethod
    def list_for_manga(manga_id, sort_by="chapterNumber", order="asc"):
        column = SORT_COLUMNS.get(sort_by, Chapter.chapter_number)
        ordering = column.desc() if order == "desc" else column.asc()
        return Chapter.query.filter_by(manga_id=manga_id).order_by(ordering, Chapter.id.asc()).all()

    @staticmethod
    def first_for_manga(manga_id):
        """Lowest-numbered chapter"""
        return Chapter.query.filter_by(manga_id=manga_id).order_by(Chapter.chapter_number.asc()).first()

    @staticmethod
    def latest_for_manga(manga_id):
        """Highest-numbered chapter"""
        return Chapter.query.filter_by(manga_id=manga_id).order_by(Chapter.chapter_number.desc()).first()

    @staticmethod
    def latest(limit):
        return Chapter.query.order_by(Chapter.published_at.desc(), Chapter.id.desc()).limit(limit).all()

    @staticmethod
    def add(**kwargs):
        """Stage a new chapter; raises ConflictException on a duplicate number"""
        existing = Chapter.query.filter_by(
            manga_id=kwargs.get("manga_id"), chapter_number=kwargs.get("chapter_number")
        ).first()
        if existing:
            raise ConflictException(f"Chapter {existing.number} already exists for this manga")
        item = Chapter(**kwargs)
        db.session.add(item)
        return item

    @staticmethod
    def update(id, **kwargs):
        """Update Chapter record"""
        item = db.session.get(Chapter, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictException("A chapter with this number already exists for this manga")
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return item

    @staticmethod
    def increment_views(item):
        item.views = (item.views or 0) + 1
        db.session.commit()
        return item

    @staticmethod
    def count():
        """Count total Chapter records"""
        return Chapter.query.count()

    @staticmethod
    def recent_for_manga(manga_id, limit):
        """Highest-numbered chapters first"""
        return (
            Chapter.query.filter_by(manga_id=manga_id)
            .order_by(Chapter.chapter_number.desc())
            .limit(limit)
            .all()
        )
