"""
Repository for Manga database operations
"""

import logging
from sqlalchemy import case, cast, func, or_
from sqlalchemy.exc import SQLAlchemyError
from db import db
from metrics import track_db_query
from models.manga import Manga, AlternativeTitle
from models.chapter import Chapter
from models.rating import Rating
from models.bookmark import Bookmark
from models.comment import Comment, CommentReaction
from models.error_report import ErrorReport
from search.clauses import Field
from utils import generate_slug, now_utc

logger = logging.getLogger("main")


def escape_like(value, escape="\\"):
    return value.replace(escape, escape * 2).replace("%", escape + "%").replace("_", escape + "_")


def clause_condition(clause, dialect_name=None):
    """SQL condition for a single search clause, rendered for the bound database"""
    pattern = clause.pattern_for(dialect_name or db.engine.dialect.name)
    if clause.field is Field.TITLE:
        return Manga.title.regexp_match(pattern)
    return Manga.alternative_titles.any(AlternativeTitle.title.regexp_match(pattern))


class MangaRepository:
    """Repository for Manga database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Manga by primary key ID"""
        return db.session.get(Manga, id)

    @staticmethod
    def get_by_slug(slug):
        return Manga.query.filter_by(slug=slug).first()

    @staticmethod
    def get_paged(page, per_page, genre=None, status=None):
        """Catalog listing, most recently updated first"""
        query = Manga.query
        if genre:
            pattern = f'%"{escape_like(genre)}"%'
            query = query.filter(cast(Manga.genres_json, db.Text).ilike(pattern, escape="\\"))
        if status:
            query = query.filter(func.lower(Manga.status) == status.lower())
        query = query.order_by(Manga.last_updated.desc(), Manga.id.desc())
        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def unique_slug(title, exclude_id=None):
        """Slug derived from the title, suffixed -1, -2, ... until unused"""
        base = generate_slug(title) or "manga"
        candidate = base
        counter = 1
        while True:
            query = Manga.query.filter(Manga.slug == candidate)
            if exclude_id is not None:
                query = query.filter(Manga.id != exclude_id)
            if query.first() is None:
                return candidate
            candidate = f"{base}-{counter}"
            counter += 1

    @staticmethod
    def create(alternative_titles=None, **kwargs):
        """Create new Manga record"""
        try:
            item = Manga(**kwargs)
            if not item.slug:
                item.slug = MangaRepository.unique_slug(item.title)
            item.set_alternative_titles(alternative_titles)
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def update(id, alternative_titles=None, **kwargs):
        """Update Manga record"""
        item = db.session.get(Manga, id)
        if not item:
            return None

        for key, value in kwargs.items():
            if hasattr(item, key):
                setattr(item, key, value)
        if "title" in kwargs:
            item.slug = MangaRepository.unique_slug(item.title, exclude_id=item.id)
        if alternative_titles is not None:
            item.set_alternative_titles(alternative_titles)

        db.session.commit()
        return item

    @staticmethod
    def delete(id):
        """Delete Manga and everything hanging off it"""
        item = db.session.get(Manga, id)
        if not item:
            return False

        try:
            Bookmark.query.filter_by(manga_id=id).delete(synchronize_session=False)
            Rating.query.filter_by(manga_id=id).delete(synchronize_session=False)
            comment_ids = db.select(Comment.id).where(Comment.manga_id == id)
            CommentReaction.query.filter(CommentReaction.comment_id.in_(comment_ids)).delete(
                synchronize_session=False
            )
            ErrorReport.query.filter_by(manga_id=id).delete(synchronize_session=False)
            Comment.query.filter_by(manga_id=id).delete(synchronize_session=False)
            Chapter.query.filter_by(manga_id=id).delete(synchronize_session=False)
            db.session.delete(item)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        logger.info(f"Deleted manga {id} with its chapters")
        return True

    @staticmethod
    def increment_views(item):
        item.views = (item.views or 0) + 1
        db.session.commit()
        return item

    @staticmethod
    def adjust_counter(item, field, delta):
        """Add delta to a stats counter without going below zero"""
        setattr(item, field, max(0, (getattr(item, field) or 0) + delta))
        return item

    @staticmethod
    def touch(item):
        item.last_updated = now_utc()
        return item

    @staticmethod
    @track_db_query("search_candidates")
    def find_candidates(clauses, limit):
        """
        Records matching any clause, ordered by the priority of the first
        matching clause, then most recently updated.
        """
        conditions = [clause_condition(c) for c in clauses]
        priority = case(
            *[(condition, clause.priority) for condition, clause in zip(conditions, clauses)],
            else_=len(clauses),
        )
        return (
            Manga.query.filter(or_(*conditions))
            .order_by(priority, Manga.last_updated.desc(), Manga.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    @track_db_query("search_count")
    def count_matching(clauses):
        return Manga.query.filter(or_(*[clause_condition(c) for c in clauses])).count()

    @staticmethod
    def top_rated(limit):
        return (
            Manga.query.filter(Manga.total_ratings > 0)
            .order_by(Manga.average_rating.desc(), Manga.total_ratings.desc(), Manga.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def recent(limit):
        return Manga.query.order_by(Manga.last_updated.desc(), Manga.id.desc()).limit(limit).all()

    @staticmethod
    def genre_counts():
        """(genre, count) pairs over the whole catalog, most used first"""
        genre_dist = {}
        for (genres,) in db.session.query(Manga.genres_json).filter(Manga.genres_json.isnot(None)):
            for g in genres or []:
                genre_dist[g] = genre_dist.get(g, 0) + 1
        return sorted(genre_dist.items(), key=lambda x: (-x[1], x[0]))

    @staticmethod
    def count():
        """Count total Manga records"""
        return Manga.query.count()
