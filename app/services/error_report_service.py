"""
Error report service

Users report a comment (abuse) or a chapter (broken pages); admins move
reports through pending -> reviewed -> resolved/dismissed. The reporter is
notified whenever an admin changes the status.
"""
import logging

from constants import (
    NOTIFICATION_REPORT_UPDATE,
    REPORT_DESCRIPTION_MAX_LENGTH,
    REPORT_REASONS,
    REPORT_STATUSES,
    REPORT_TYPES,
)
from exceptions import ConflictException, NotFoundException, ValidationException
from repositories.comment_repository import CommentRepository
from repositories.error_report_repository import ErrorReportRepository
from repositories.manga_repository import MangaRepository
from services import notification_service
from utils import now_utc

logger = logging.getLogger("main")


def _choice(data, key, choices):
    value = data.get(key)
    if value not in choices:
        raise ValidationException(f"{key} must be one of: " + ", ".join(choices), details={key: value})
    return value


def _int(data, key):
    value = data.get(key)
    if value in (None, ""):
        raise ValidationException(f"{key} is required")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException(f"{key} must be an integer", details={key: value})


def _chapter_number(data):
    value = data.get("chapterNumber")
    if value in (None, ""):
        return None
    return str(value).strip()


def _same_chapter(reported, actual):
    try:
        return float(reported) == float(actual)
    except (TypeError, ValueError):
        return False


def create_report(user_id, data):
    if not isinstance(data, dict):
        raise ValidationException("Request body must be a JSON object")
    report_type = _choice(data, "type", REPORT_TYPES)
    reason = _choice(data, "reason", REPORT_REASONS)
    description = str(data.get("description") or "").strip()
    if len(description) > REPORT_DESCRIPTION_MAX_LENGTH:
        raise ValidationException(f"Description must be at most {REPORT_DESCRIPTION_MAX_LENGTH} characters")

    manga_id = _int(data, "mangaId")
    chapter_number = _chapter_number(data)
    fields = {"manga_id": manga_id, "chapter_number": chapter_number}

    if report_type == "comment":
        comment_id = _int(data, "commentId")
        comment = CommentRepository.get_by_id(comment_id)
        if comment is None:
            raise NotFoundException("Comment", comment_id)
        if comment.manga_id != manga_id:
            raise ValidationException("Comment does not belong to this manga")
        if chapter_number is not None and comment.chapter_id is not None:
            if not _same_chapter(chapter_number, comment.chapter.number):
                raise ValidationException("Comment does not belong to this chapter")
        fields.update(comment_id=comment_id, defaulter_id=comment.user_id)
    else:
        if chapter_number is None:
            raise ValidationException("chapterNumber is required")
        if MangaRepository.get_by_id(manga_id) is None:
            raise NotFoundException("Manga", manga_id)

    if ErrorReportRepository.find_open(
        user_id, report_type, comment_id=fields.get("comment_id"), manga_id=manga_id, chapter_number=chapter_number
    ):
        raise ConflictException("You already have an open report for this item")

    report = ErrorReportRepository.create(
        type=report_type, user_id=user_id, reason=reason, description=description, **fields
    )
    logger.info(f"Error report {report.id} ({report_type}/{reason}) filed by user {user_id}")
    return report


def update_status(admin_id, report_id, data):
    report = ErrorReportRepository.get_by_id(report_id)
    if report is None:
        raise NotFoundException("Error report", report_id)
    data = data if isinstance(data, dict) else {}
    status = _choice(data, "status", REPORT_STATUSES)
    notes = data.get("reviewNotes")
    if notes is not None and not isinstance(notes, str):
        raise ValidationException("reviewNotes must be a string")

    report = ErrorReportRepository.update(
        report, status=status, review_notes=notes, reviewed_by=admin_id, reviewed_at=now_utc()
    )
    logger.info(f"Error report {report.id} set to {status} by admin {admin_id}")
    notification_service.notify(
        report.user_id,
        NOTIFICATION_REPORT_UPDATE,
        "Your report was reviewed",
        f"Your {report.type} report is now {status}",
        {"reportId": report.id, "status": status},
    )
    return report


def delete_report(report_id):
    report = ErrorReportRepository.get_by_id(report_id)
    if report is None:
        raise NotFoundException("Error report", report_id)
    return ErrorReportRepository.delete(report)
