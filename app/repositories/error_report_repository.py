"""
Repository for ErrorReport database operations
"""

from sqlalchemy.exc import SQLAlchemyError
from db import db
from models.error_report import ErrorReport
from constants import REPORT_OPEN_STATUSES


class ErrorReportRepository:
    """Repository for ErrorReport database operations"""

    @staticmethod
    def get_by_id(id):
        return db.session.get(ErrorReport, id)

    @staticmethod
    def find_open(user_id, report_type, comment_id=None, manga_id=None, chapter_number=None):
        """The user's pending or reviewed report on the same target, if any"""
        query = ErrorReport.query.filter(
            ErrorReport.user_id == user_id,
            ErrorReport.type == report_type,
            ErrorReport.status.in_(REPORT_OPEN_STATUSES),
        )
        if report_type == "comment":
            query = query.filter(ErrorReport.comment_id == comment_id)
        else:
            query = query.filter(ErrorReport.manga_id == manga_id, ErrorReport.chapter_number == chapter_number)
        return query.first()

    @staticmethod
    def get_paged(page, per_page, report_type=None, status=None):
        """Admin listing, newest first"""
        query = ErrorReport.query
        if report_type:
            query = query.filter(ErrorReport.type == report_type)
        if status:
            query = query.filter(ErrorReport.status == status)
        return query.order_by(ErrorReport.created_at.desc(), ErrorReport.id.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

    @staticmethod
    def get_paged_for_user(user_id, page, per_page):
        return (
            ErrorReport.query.filter_by(user_id=user_id)
            .order_by(ErrorReport.created_at.desc(), ErrorReport.id.desc())
            .paginate(page=page, per_page=per_page, error_out=False)
        )

    @staticmethod
    def create(**kwargs):
        """Create new ErrorReport record"""
        try:
            item = ErrorReport(**kwargs)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(item, **kwargs):
        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)
        db.session.commit()
        return item

    @staticmethod
    def delete(item):
        db.session.delete(item)
        db.session.commit()
        return True
