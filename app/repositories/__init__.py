"""
Repositories package

Each repository encapsulates database operations for a model:
- manga_repository.py (also the store behind catalog search)
- chapter_repository.py
- rating_repository.py
- bookmark_repository.py
- comment_repository.py
- user_repository.py
- notification_repository.py
- error_report_repository.py

Usage:
    from repositories.manga_repository import MangaRepository
    manga = MangaRepository.get_by_slug("one-piece")
"""
