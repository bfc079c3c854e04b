"""
Repository for Rating database operations
"""

from db import db
from models.rating import Rating


class RatingRepository:
    """Repository for Rating database operations"""

    @staticmethod
    def get_for_user_and_manga(user_id, manga_id):
        return Rating.query.filter_by(user_id=user_id, manga_id=manga_id).first()

    @staticmethod
    def get_paged_for_user(user_id, page, per_page):
        return (
            Rating.query.filter_by(user_id=user_id)
            .order_by(Rating.created_at.desc(), Rating.id.desc())
            .paginate(page=page, per_page=per_page, error_out=False)
        )

    @staticmethod
    def add(**kwargs):
        item = Rating(**kwargs)
        db.session.add(item)
        return item

    @staticmethod
    def remove(item):
        db.session.delete(item)
