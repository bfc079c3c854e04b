"""
Repository for Notification database operations
"""

from sqlalchemy.exc import SQLAlchemyError
from db import db
from models.notification import Notification


class NotificationRepository:
    """Repository for Notification database operations"""

    @staticmethod
    def get_for_user(id, user_id):
        """Notification by ID, only when it belongs to user_id"""
        return Notification.query.filter_by(id=id, user_id=user_id).first()

    @staticmethod
    def get_paged_for_user(user_id, page, per_page):
        return (
            Notification.query.filter_by(user_id=user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .paginate(page=page, per_page=per_page, error_out=False)
        )

    @staticmethod
    def unread_count(user_id):
        return Notification.query.filter_by(user_id=user_id, read=False).count()

    @staticmethod
    def create(**kwargs):
        """Create new Notification record"""
        try:
            item = Notification(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def mark_read(item):
        item.read = True
        db.session.commit()
        return item

    @staticmethod
    def mark_all_read(user_id):
        """Returns the number of notifications flipped to read"""
        updated = Notification.query.filter_by(user_id=user_id, read=False).update(
            {Notification.read: True}, synchronize_session=False
        )
        db.session.commit()
        return updated

    @staticmethod
    def delete(item):
        db.session.delete(item)
        db.session.commit()
        return True

    @staticmethod
    def delete_older_than(cutoff):
        deleted = Notification.query.filter(Notification.created_at < cutoff).delete(synchronize_session=False)
        db.session.commit()
        return deleted
