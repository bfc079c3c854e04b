"""
Tests for incremental rating aggregates
"""
import pytest

from exceptions import ConflictException, NotFoundException, ValidationException
from services.rating_service import (
    aggregate_after_delete,
    aggregate_after_new,
    aggregate_after_update,
    remove_rating,
    submit_rating,
)


class TestAggregates:
    def test_first_rating(self):
        assert aggregate_after_new(0, 0, 4) == (4.0, 1)

    def test_second_rating(self):
        assert aggregate_after_new(4.0, 1, 2) == (3.0, 2)

    def test_rounds_half_up(self):
        # (4.5 * 2 + 5) / 3 = 4.666.. -> 4.7 ; (1 + 2 + 2 + 2)/4 = 1.75 -> 1.8
        assert aggregate_after_new(4.5, 2, 5) == (4.7, 3)
        assert aggregate_after_new(5 / 3, 3, 2) == (1.8, 4)

    def test_update_keeps_total(self):
        assert aggregate_after_update(3.0, 2, 2, 5) == (4.5, 2)

    def test_update_with_no_recorded_ratings(self):
        assert aggregate_after_update(0, 0, 3, 5) == (5.0, 1)

    def test_delete(self):
        assert aggregate_after_delete(3.0, 2, 4) == (2.0, 1)
        assert aggregate_after_delete(2.0, 1, 2) == (0.0, 0)
        assert aggregate_after_delete(0, 0, 2) == (0.0, 0)

    def test_non_finite_results_fall_back(self):
        assert aggregate_after_new(float('nan'), 2, 4) == (4.0, 3)
        assert aggregate_after_update(float('inf'), 2, 3, 5) == (5.0, 2)
        assert aggregate_after_delete(float('nan'), 3, 4) == (0.0, 2)


class TestSubmitRating:
    def test_create_then_update_then_delete(self, app, make_user, make_manga):
        manga = make_manga('Vinland Saga')
        alice = make_user('alice')
        bob = make_user('bob')

        _, created = submit_rating(alice.id, {'mangaId': manga.id, 'rating': 4})
        assert created
        submit_rating(bob.id, {'mangaId': manga.id, 'rating': 2})
        assert (manga.average_rating, manga.total_ratings) == (3.0, 2)

        rating, created = submit_rating(bob.id, {'mangaId': manga.id, 'rating': 5, 'review': 'Great'})
        assert not created
        assert rating.review == 'Great'
        assert (manga.average_rating, manga.total_ratings) == (4.5, 2)

        remove_rating(alice.id, manga.id)
        assert (manga.average_rating, manga.total_ratings) == (5.0, 1)

    def test_delete_leaves_remaining_rating(self, app, make_user, make_manga):
        manga = make_manga('Monster')
        alice = make_user('alice')
        bob = make_user('bob')
        submit_rating(alice.id, {'mangaId': manga.id, 'rating': 4})
        submit_rating(bob.id, {'mangaId': manga.id, 'rating': 2})

        remove_rating(alice.id, manga.id)
        assert (manga.average_rating, manga.total_ratings) == (2.0, 1)

    @pytest.mark.parametrize('value', [0, 6, 3.5, '4', True, None])
    def test_invalid_rating_values(self, app, user, make_manga, value):
        manga = make_manga('Pluto')
        with pytest.raises(ValidationException):
            submit_rating(user.id, {'mangaId': manga.id, 'rating': value})

    def test_review_length(self, app, user, make_manga):
        manga = make_manga('Pluto')
        with pytest.raises(ValidationException):
            submit_rating(user.id, {'mangaId': manga.id, 'rating': 3, 'review': 'x' * 1001})

    def test_unknown_manga(self, app, user):
        with pytest.raises(NotFoundException):
            submit_rating(user.id, {'mangaId': 999, 'rating': 3})

    def test_remove_missing_rating(self, app, user, make_manga):
        manga = make_manga('Pluto')
        with pytest.raises(NotFoundException):
            remove_rating(user.id, manga.id)

    def test_conflict_type_is_exposed(self):
        assert ConflictException('x').status_code == 409
