"""
Pytest fixtures and configuration for MangaShelf tests
"""
import os
import sys
from datetime import timedelta

import pytest

# Add app directory to path
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'app'))


@pytest.fixture
def app_settings():
    """In-memory database, fixed JWT secret, no config file or environment"""
    from settings import load_settings

    return load_settings(
        config_file=None,
        environ={},
        testing=True,
        overrides={
            'database': {'uri': 'sqlite://'},
            'auth': {'jwt_secret': 'test-secret-key'},
            'logging': {'level': 'WARNING'},
        },
    )


@pytest.fixture
def app(app_settings):
    from flask import g

    from app import create_app
    from db import db
    from middleware.rate_limit import limiter

    _app = create_app(app_settings)

    @_app.teardown_request
    def reset_request_globals(exc):
        # Client requests reuse the app context held open below, and with it ``g``.
        # Drop the cached login user and limiter state so the next request starts clean.
        for key in list(g):
            g.pop(key, None)

    with _app.app_context():
        limiter.reset()
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def make_user(app):
    from auth import hash_password
    from repositories.user_repository import UserRepository

    def _make_user(username='reader', email=None, password='password123', role='user', **kwargs):
        return UserRepository.create(
            username=username,
            email=email or f'{username}@example.com',
            password_hash=hash_password(password),
            role=role,
            **kwargs,
        )

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user('reader')


@pytest.fixture
def admin(make_user):
    return make_user('admin_user', role='admin')


@pytest.fixture
def auth_headers(app):
    from auth import create_access_token

    def _auth_headers(user):
        return {'Authorization': f'Bearer {create_access_token(user)}'}

    return _auth_headers


@pytest.fixture
def user_headers(user, auth_headers):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)


@pytest.fixture
def make_manga(app):
    """Create a manga; ``days_ago`` sets lastUpdated relative to now"""
    from repositories.manga_repository import MangaRepository
    from utils import now_utc

    def _make_manga(title, alternative_titles=None, genres=None, days_ago=30, **kwargs):
        kwargs.setdefault('cover_image', f'covers/{title.lower().replace(" ", "-")}.jpg')
        return MangaRepository.create(
            title=title,
            alternative_titles=alternative_titles or [],
            genres_json=genres or [],
            last_updated=now_utc() - timedelta(days=days_ago),
            **kwargs,
        )

    return _make_manga


@pytest.fixture
def make_chapter(app):
    from db import db
    from repositories.chapter_repository import ChapterRepository

    def _make_chapter(manga, number, **kwargs):
        chapter = ChapterRepository.add(manga_id=manga.id, chapter_number=number, **kwargs)
        db.session.commit()
        return chapter

    return _make_chapter


@pytest.fixture
def reload():
    """Re-read a row after requests changed it in another session"""
    from db import db

    def _reload(obj):
        db.session.refresh(obj)
        return obj

    return _reload
