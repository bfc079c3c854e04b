"""
Model: Rating
One rating per user per manga.
"""

from db import db, now_utc
from utils import isoformat


class Rating(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"), nullable=False)
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    review = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    manga = db.relationship("Manga")

    __table_args__ = (
        db.UniqueConstraint("user_id", "manga_id", name="uq_rating_user_manga"),
        db.Index("idx_rating_manga_value", "manga_id", "rating"),
        db.Index("idx_rating_user_created", "user_id", "created_at"),
    )

    def to_dict(self, include_manga=False):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "mangaId": self.manga_id,
            "rating": self.rating,
            "review": self.review,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
        if include_manga and self.manga is not None:
            data["manga"] = {
                "id": self.manga.id,
                "title": self.manga.title,
                "coverImage": self.manga.cover_image,
            }
        return data
