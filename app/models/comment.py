"""
Model: Comment, CommentReaction
"""

from db import db, now_utc
from utils import isoformat


class Comment(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"), nullable=False)
    chapter_id = db.Column(db.Integer, db.ForeignKey("chapter.id", ondelete="SET NULL"), nullable=True)
    parent_comment_id = db.Column(db.Integer, db.ForeignKey("comment.id", ondelete="CASCADE"), nullable=True)
    content = db.Column(db.Text, nullable=False)
    is_edited = db.Column(db.Boolean, default=False)
    edited_at = db.Column(db.DateTime)
    # Denormalized from CommentReaction rows
    like_count = db.Column(db.Integer, default=0, nullable=False)
    dislike_count = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    user = db.relationship("User")
    manga = db.relationship("Manga")
    chapter = db.relationship("Chapter")

    __table_args__ = (
        db.Index("idx_comment_manga_created", "manga_id", "created_at"),
        db.Index("idx_comment_user_created", "user_id", "created_at"),
        db.Index("idx_comment_parent", "parent_comment_id"),
    )

    def reaction_counts(self):
        return {"likes": self.like_count or 0, "dislikes": self.dislike_count or 0}

    def to_dict(self):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "mangaId": self.manga_id,
            "chapterId": self.chapter_id,
            "parentCommentId": self.parent_comment_id,
            "content": self.content,
            "isEdited": bool(self.is_edited),
            "editedAt": isoformat(self.edited_at),
            "reactionCounts": self.reaction_counts(),
            "createdAt": isoformat(self.created_at),
        }
        if self.user is not None:
            data["user"] = {"id": self.user.id, "username": self.user.username}
        return data


class CommentReaction(db.Model):
    """One like or dislike per (comment, user)"""
    id = db.Column(db.Integer, primary_key=True)
    comment_id = db.Column(db.Integer, db.ForeignKey("comment.id", ondelete="CASCADE"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    reaction_type = db.Column(db.String(10), nullable=False)  # likes | dislikes
    created_at = db.Column(db.DateTime, default=now_utc)

    __table_args__ = (db.UniqueConstraint("comment_id", "user_id", name="uq_reaction_comment_user"),)
