"""
Models package

- manga.py (Manga, AlternativeTitle)
- chapter.py
- rating.py
- bookmark.py
- comment.py (Comment, CommentReaction)
- notification.py
- error_report.py
- user.py
"""

from .user import User, Principal
from .manga import Manga, AlternativeTitle
from .chapter import Chapter
from .rating import Rating
from .bookmark import Bookmark
from .comment import Comment, CommentReaction
from .notification import Notification
from .error_report import ErrorReport

__all__ = [
    "User",
    "Principal",
    "Manga",
    "AlternativeTitle",
    "Chapter",
    "Rating",
    "Bookmark",
    "Comment",
    "CommentReaction",
    "Notification",
    "ErrorReport",
]
