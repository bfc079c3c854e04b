"""
Model: ErrorReport
User reports against a comment or a chapter, reviewed by admins.
"""

from db import db, now_utc
from utils import isoformat


def _user_ref(user):
    return {"id": user.id, "username": user.username} if user is not None else None


class ErrorReport(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(20), nullable=False)  # comment | chapter
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    comment_id = db.Column(db.Integer, db.ForeignKey("comment.id", ondelete="SET NULL"))
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"))
    chapter_number = db.Column(db.String(20))
    # Author of the reported content, when it can be determined
    defaulter_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="SET NULL"))
    reason = db.Column(db.String(20), nullable=False)
    description = db.Column(db.String(1000), default="")
    status = db.Column(db.String(20), default="pending", nullable=False, index=True)
    reviewed_by = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="SET NULL"))
    reviewed_at = db.Column(db.DateTime)
    review_notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=now_utc, index=True)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    reporter = db.relationship("User", foreign_keys=[user_id])
    defaulter = db.relationship("User", foreign_keys=[defaulter_id])
    reviewer = db.relationship("User", foreign_keys=[reviewed_by])
    comment = db.relationship("Comment")
    manga = db.relationship("Manga")

    __table_args__ = (
        db.Index("idx_report_type_status", "type", "status"),
        db.Index("idx_report_manga_chapter", "manga_id", "chapter_number"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "user": _user_ref(self.reporter),
            "defaulter": _user_ref(self.defaulter),
            "comment": {"id": self.comment.id, "content": self.comment.content} if self.comment else None,
            "manga": {"id": self.manga.id, "title": self.manga.title} if self.manga else None,
            "chapterNumber": self.chapter_number,
            "reason": self.reason,
            "description": self.description or "",
            "status": self.status,
            "reviewedBy": _user_ref(self.reviewer),
            "reviewedAt": isoformat(self.reviewed_at),
            "reviewNotes": self.review_notes,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
