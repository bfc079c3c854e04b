"""
Comment service
"""
import logging

from constants import COMMENT_MAX_LENGTH, NOTIFICATION_COMMENT_REPLY, REACTION_TYPES, ROLE_ADMIN
from exceptions import AuthorizationException, NotFoundException, ValidationException
from repositories.chapter_repository import ChapterRepository
from repositories.comment_repository import CommentRepository
from repositories.manga_repository import MangaRepository
from services import notification_service
from utils import now_utc

logger = logging.getLogger("main")


def _content(data):
    content = str(data.get("content") or "").strip()
    if not content:
        raise ValidationException("Comment content is required")
    if len(content) > COMMENT_MAX_LENGTH:
        raise ValidationException(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")
    return content


def _optional_id(data, key):
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{key} must be an integer", details={key: value})


def create_comment(user_id, data):
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    manga_id = _optional_id(data, "mangaId")
    if manga_id is None:
        raise ValidationException("mangaId is required")
    content = _content(data)

    if MangaRepository.get_by_id(manga_id) is None:
        raise NotFoundException("Manga", manga_id)

    chapter_id = _optional_id(data, "chapterId")
    if chapter_id is not None:
        chapter = ChapterRepository.get_by_id(chapter_id)
        if chapter is None or chapter.manga_id != manga_id:
            raise ValidationException("chapterId does not belong to this manga")

    parent = None
    parent_id = _optional_id(data, "parentCommentId")
    if parent_id is not None:
        parent = CommentRepository.get_by_id(parent_id)
        if parent is None or parent.manga_id != manga_id:
            raise ValidationException("parentCommentId does not belong to this manga")

    comment = CommentRepository.create(
        user_id=user_id,
        manga_id=manga_id,
        chapter_id=chapter_id,
        parent_comment_id=parent_id,
        content=content,
    )
    logger.info(f"Comment {comment.id} posted by user {user_id} on manga {manga_id}")
    if parent is not None and parent.user_id != user_id:
        notification_service.notify(
            parent.user_id,
            NOTIFICATION_COMMENT_REPLY,
            "New reply to your comment",
            f"{comment.user.username} replied to your comment",
            {"commentId": comment.id, "parentCommentId": parent.id, "mangaId": manga_id},
        )
    return comment


def edit_comment(principal, comment_id, data):
    """Only the author may edit"""
    comment = CommentRepository.get_by_id(comment_id)
    if comment is None or comment.user_id != principal.user_id:
        raise NotFoundException("Comment", comment_id)
    return CommentRepository.update(comment, content=_content(data or {}), is_edited=True, edited_at=now_utc())


def delete_comment(principal, comment_id):
    """The author or an admin may delete"""
    comment = CommentRepository.get_by_id(comment_id)
    if comment is None:
        raise NotFoundException("Comment", comment_id)
    if comment.user_id != principal.user_id and principal.role != ROLE_ADMIN:
        raise AuthorizationException("You can only delete your own comments")
    return CommentRepository.delete(comment)


def react_to_comment(user_id, comment_id, data):
    """Like or dislike a comment; repeating the same reaction removes it"""
    reaction_type = (data or {}).get("reactionType")
    if reaction_type not in REACTION_TYPES:
        raise ValidationException(
            "reactionType must be one of: " + ", ".join(REACTION_TYPES), details={"reactionType": reaction_type}
        )
    comment = CommentRepository.get_by_id(comment_id)
    if comment is None:
        raise NotFoundException("Comment", comment_id)
    current = CommentRepository.set_reaction(comment, user_id, reaction_type)
    return {
        "reactionCounts": comment.reaction_counts(),
        "userReactions": {"likes": current == "likes", "dislikes": current == "dislikes"},
    }
