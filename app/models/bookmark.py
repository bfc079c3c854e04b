"""
Model: Bookmark
"""

from db import db, now_utc
from utils import isoformat


class Bookmark(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"), nullable=False)
    last_read_id = db.Column(db.Integer, db.ForeignKey("chapter.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    manga = db.relationship("Manga")
    last_read = db.relationship("Chapter")

    __table_args__ = (
        db.UniqueConstraint("user_id", "manga_id", name="uq_bookmark_user_manga"),
        db.Index("idx_bookmark_user_created", "user_id", "created_at"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "mangaId": self.manga_id,
            "lastReadId": self.last_read_id,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
