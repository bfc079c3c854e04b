"""
Rating service: one rating per user per manga, with the manga's
averageRating/totalRatings kept up to date incrementally.
"""
import logging
import math

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from constants import RATING_MAX, RATING_MIN, REVIEW_MAX_LENGTH
from db import db
from exceptions import ConflictException, NotFoundException, StoreUnavailableException, ValidationException
from repositories.manga_repository import MangaRepository
from repositories.rating_repository import RatingRepository
from utils import round_half_up

logger = logging.getLogger("main")


def _finite(value):
    return value is not None and not math.isnan(value) and not math.isinf(value)


def aggregate_after_new(avg, n, rating):
    """(average, total) after adding a rating"""
    avg = avg or 0
    n = n or 0
    new_total = n + 1
    if n == 0:
        new_avg = float(rating)
    else:
        new_avg = (avg * n + rating) / new_total
    if not _finite(new_avg):
        logger.warning("Invalid average after new rating, falling back to the rating itself")
        new_avg = float(rating)
    return round_half_up(new_avg), new_total


def aggregate_after_update(avg, n, old, new):
    """(average, total) after replacing ``old`` with ``new``"""
    avg = avg or 0
    n = n or 0
    if n <= 0:
        # No recorded ratings: the updated one becomes the only rating
        return float(new), 1
    new_avg = (avg * n - old + new) / n
    if not _finite(new_avg):
        logger.warning("Invalid average after rating update, falling back to the rating itself")
        return float(new), n
    return round_half_up(new_avg), n


def aggregate_after_delete(avg, n, rating):
    """(average, total) after removing a rating"""
    avg = avg or 0
    n = n or 0
    if n <= 1:
        return 0.0, 0
    new_avg = (avg * n - rating) / (n - 1)
    if not _finite(new_avg):
        logger.warning("Invalid average after rating deletion, resetting to 0")
        new_avg = 0.0
    return round_half_up(new_avg), n - 1


def validate_rating_payload(data):
    try:
        manga_id = int(data.get("mangaId"))
    except (TypeError, ValueError):
        raise ValidationException("mangaId is required", details={"mangaId": data.get("mangaId")})

    rating = data.get("rating")
    if isinstance(rating, bool) or not isinstance(rating, int) or not RATING_MIN <= rating <= RATING_MAX:
        raise ValidationException(
            f"rating must be an integer between {RATING_MIN} and {RATING_MAX}", details={"rating": rating}
        )

    review = data.get("review")
    if review is not None:
        review = str(review).strip()
        if len(review) > REVIEW_MAX_LENGTH:
            raise ValidationException(f"review must be at most {REVIEW_MAX_LENGTH} characters")
    return manga_id, rating, review or None


def submit_rating(user_id, data):
    """
    Create or update the caller's rating for a manga.

    Returns (rating, created).
    """
    manga_id, value, review = validate_rating_payload(data)
    manga = MangaRepository.get_by_id(manga_id)
    if manga is None:
        raise NotFoundException("Manga", manga_id)

    existing = RatingRepository.get_for_user_and_manga(user_id, manga_id)
    try:
        if existing is None:
            item = RatingRepository.add(user_id=user_id, manga_id=manga_id, rating=value, review=review)
            manga.average_rating, manga.total_ratings = aggregate_after_new(
                manga.average_rating, manga.total_ratings, value
            )
            created = True
        else:
            old = existing.rating
            existing.rating = value
            if review is not None:
                existing.review = review
            item = existing
            manga.average_rating, manga.total_ratings = aggregate_after_update(
                manga.average_rating, manga.total_ratings, old, value
            )
            created = False
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictException("Rating was submitted concurrently, please retry")
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not save rating: {e.__class__.__name__}") from e

    logger.info(
        f"Rating {'created' if created else 'updated'} user={user_id} manga={manga_id} "
        f"avg={manga.average_rating} n={manga.total_ratings}"
    )
    return item, created


def remove_rating(user_id, manga_id):
    existing = RatingRepository.get_for_user_and_manga(user_id, manga_id)
    if existing is None:
        raise NotFoundException("Rating")

    manga = MangaRepository.get_by_id(manga_id)
    try:
        if manga is not None and (manga.total_ratings or 0) > 0:
            manga.average_rating, manga.total_ratings = aggregate_after_delete(
                manga.average_rating, manga.total_ratings, existing.rating
            )
        RatingRepository.remove(existing)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreUnavailableException(f"Could not delete rating: {e.__class__.__name__}") from e
    return True
