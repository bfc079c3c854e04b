"""
Repository for Bookmark database operations
"""

from db import db
from models.bookmark import Bookmark


class BookmarkRepository:
    """Repository for Bookmark database operations"""

    @staticmethod
    def get_for_user_and_manga(user_id, manga_id):
        return Bookmark.query.filter_by(user_id=user_id, manga_id=manga_id).first()

    @staticmethod
    def all_for_user(user_id):
        return Bookmark.query.filter_by(user_id=user_id).order_by(Bookmark.created_at.desc()).all()

    @staticmethod
    def add(**kwargs):
        item = Bookmark(**kwargs)
        db.session.add(item)
        return item

    @staticmethod
    def remove(item):
        db.session.delete(item)
