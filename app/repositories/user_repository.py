"""
Repository for User database operations
"""

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from db import db
from models.bookmark import Bookmark
from models.comment import Comment
from models.rating import Rating
from models.user import User


class UserRepository:
    """Repository for User database operations"""

    @staticmethod
    def get_by_id(id):
        """Get User by ID"""
        return db.session.get(User, id)

    @staticmethod
    def get_by_email(email):
        return User.query.filter(func.lower(User.email) == (email or "").strip().lower()).first()

    @staticmethod
    def get_by_username(username):
        return User.query.filter_by(username=(username or "").strip()).first()

    @staticmethod
    def create(**kwargs):
        """Create new User record"""
        try:
            item = User(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(id, **kwargs):
        """Update User record"""
        item = db.session.get(User, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)

        db.session.commit()
        return item

    @staticmethod
    def count():
        """Count total User records"""
        return User.query.count()

    @staticmethod
    def activity_counts(user_id):
        """How many bookmarks, ratings and comments a user holds"""
        return {
            "bookmarks": Bookmark.query.filter_by(user_id=user_id).count(),
            "ratings": Rating.query.filter_by(user_id=user_id).count(),
            "comments": Comment.query.filter_by(user_id=user_id).count(),
        }
