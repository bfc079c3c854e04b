"""
Model: Chapter
"""

from db import db, now_utc
from utils import isoformat


class Chapter(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"), nullable=False)
    chapter_number = db.Column(db.Float, nullable=False)
    title = db.Column(db.String, default="")
    name = db.Column(db.String, default="")
    pages_json = db.Column(db.JSON, default=list)  # [{"pageNumber": 1, "imageUrl": "..."}]
    published_at = db.Column(db.DateTime, default=now_utc, index=True)
    views = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    manga = db.relationship("Manga", backref=db.backref("chapters", lazy="dynamic", passive_deletes=True))

    __table_args__ = (
        db.UniqueConstraint("manga_id", "chapter_number", name="uq_chapter_manga_number"),
        db.Index("idx_chapter_manga_number", "manga_id", "chapter_number"),
    )

    @property
    def number(self):
        # 12.0 -> 12, 12.5 stays 12.5
        n = self.chapter_number
        return int(n) if n is not None and float(n).is_integer() else n

    def to_brief(self):
        return {
            "id": self.id,
            "chapterNumber": self.number,
            "title": self.title,
            "publishedAt": isoformat(self.published_at),
            "views": self.views or 0,
        }

    def to_dict(self, include_pages=True):
        data = self.to_brief()
        data.update(
            {
                "mangaId": self.manga_id,
                "name": self.name,
                "createdAt": isoformat(self.created_at),
            }
        )
        if include_pages:
            data["pages"] = sorted(self.pages_json or [], key=lambda p: p.get("pageNumber", 0))
        return data
