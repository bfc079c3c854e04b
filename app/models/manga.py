"""
Model: Manga
Title records searched by the catalog engine, plus their alternative titles.
"""

from db import db, now_utc
from constants import DEFAULT_MANGA_DESCRIPTION
from utils import isoformat


class Manga(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String, unique=True, index=True, nullable=False)
    title = db.Column(db.String, nullable=False)
    description = db.Column(db.Text, default=DEFAULT_MANGA_DESCRIPTION)
    cover_image = db.Column(db.String, nullable=False)
    author = db.Column(db.String)
    genres_json = db.Column(db.JSON, default=list)  # ["Action", "Fantasy"]
    status = db.Column(db.String(20), default="Ongoing", index=True)
    publication_year = db.Column(db.Integer)

    # === STATS ===
    views = db.Column(db.Integer, default=0, nullable=False)
    total_chapters = db.Column(db.Integer, default=0, nullable=False)
    total_ratings = db.Column(db.Integer, default=0, nullable=False)
    average_rating = db.Column(db.Float, default=0.0, nullable=False)
    bookmark_count = db.Column(db.Integer, default=0, nullable=False)

    # Touched whenever the chapter list changes
    last_updated = db.Column(db.DateTime, default=now_utc, index=True)
    created_at = db.Column(db.DateTime, default=now_utc)
    updated_at = db.Column(db.DateTime, default=now_utc, onupdate=now_utc)

    alternative_titles = db.relationship(
        "AlternativeTitle",
        order_by="AlternativeTitle.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def alt_titles(self):
        return [alt.title for alt in self.alternative_titles]

    @property
    def genres(self):
        return list(self.genres_json or [])

    def set_alternative_titles(self, titles):
        """Replace the ordered alternative titles"""
        cleaned = [str(t).strip() for t in (titles or []) if str(t).strip()]
        self.alternative_titles = [
            AlternativeTitle(position=i, title=t) for i, t in enumerate(cleaned)
        ]

    def stats_dict(self):
        return {
            "views": self.views or 0,
            "totalChapters": self.total_chapters or 0,
            "averageRating": self.average_rating or 0,
            "totalRatings": self.total_ratings or 0,
            "bookmarkCount": self.bookmark_count or 0,
        }

    def to_summary(self):
        """Fields returned by list and search endpoints"""
        return {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "coverImage": self.cover_image,
            "genres": self.genres,
            "status": self.status,
            "author": self.author,
            "description": self.description,
            "stats": self.stats_dict(),
            "lastUpdated": isoformat(self.last_updated),
            "alternativeTitles": self.alt_titles,
        }

    def to_dict(self):
        data = self.to_summary()
        data.update(
            {
                "publicationYear": self.publication_year,
                "createdAt": isoformat(self.created_at),
                "updatedAt": isoformat(self.updated_at),
            }
        )
        return data


class AlternativeTitle(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    manga_id = db.Column(db.Integer, db.ForeignKey("manga.id", ondelete="CASCADE"), nullable=False, index=True)
    position = db.Column(db.Integer, default=0, nullable=False)
    title = db.Column(db.String, nullable=False)
