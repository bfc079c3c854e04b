"""
Repository for Comment database operations
"""

from sqlalchemy.exc import SQLAlchemyError
from db import db
from models.comment import Comment, CommentReaction
from models.error_report import ErrorReport


class CommentRepository:
    """Repository for Comment database operations"""

    @staticmethod
    def get_by_id(id):
        return db.session.get(Comment, id)

    @staticmethod
    def get_paged_for_manga(manga_id, page, per_page, chapter_id=None, sort="newest"):
        query = Comment.query.filter_by(manga_id=manga_id)
        if chapter_id is not None:
            query = query.filter_by(chapter_id=chapter_id)
        if sort == "oldest":
            query = query.order_by(Comment.created_at.asc(), Comment.id.asc())
        else:
            query = query.order_by(Comment.created_at.desc(), Comment.id.desc())
        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get_paged_for_user(user_id, page, per_page):
        return (
            Comment.query.filter_by(user_id=user_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .paginate(page=page, per_page=per_page, error_out=False)
        )

    @staticmethod
    def create(**kwargs):
        """Create new Comment record"""
        try:
            item = Comment(**kwargs)
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
        """Delete a comment together with its replies and their reactions"""
        thread_ids = [item.id] + [
            id for (id,) in db.session.query(Comment.id).filter_by(parent_comment_id=item.id)
        ]
        CommentReaction.query.filter(CommentReaction.comment_id.in_(thread_ids)).delete(
            synchronize_session=False
        )
        # Reports outlive the comment they point at
        ErrorReport.query.filter(ErrorReport.comment_id.in_(thread_ids)).update(
            {ErrorReport.comment_id: None}, synchronize_session=False
        )
        Comment.query.filter_by(parent_comment_id=item.id).delete(synchronize_session=False)
        db.session.delete(item)
        db.session.commit()
        return True

    @staticmethod
    def get_reaction(comment_id, user_id):
        return CommentReaction.query.filter_by(comment_id=comment_id, user_id=user_id).first()

    @staticmethod
    def set_reaction(item, user_id, reaction_type):
        """
        Toggle a user's reaction on a comment.

        The same type twice removes it, a different type switches it.
        Returns the user's reaction type afterwards, or None.
        """
        existing = CommentRepository.get_reaction(item.id, user_id)
        try:
            if existing is None:
                db.session.add(CommentReaction(comment_id=item.id, user_id=user_id, reaction_type=reaction_type))
                _bump(item, reaction_type, 1)
                current = reaction_type
            elif existing.reaction_type == reaction_type:
                db.session.delete(existing)
                _bump(item, reaction_type, -1)
                current = None
            else:
                _bump(item, existing.reaction_type, -1)
                existing.reaction_type = reaction_type
                _bump(item, reaction_type, 1)
                current = reaction_type
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return current


def _bump(item, reaction_type, delta):
    field = "like_count" if reaction_type == "likes" else "dislike_count"
    setattr(item, field, max(0, (getattr(item, field) or 0) + delta))
