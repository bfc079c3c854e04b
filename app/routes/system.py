"""
System Routes - health check
"""

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import socket
from db import db
from repositories.chapter_repository import ChapterRepository
from repositories.manga_repository import MangaRepository
from api_responses import success_response, handle_api_errors
from constants import BUILD_VERSION
from utils import now_utc
import logging

logger = logging.getLogger("main")

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


@system_bp.route("/health", methods=["GET"])
@handle_api_errors
def health_check_api():
    """Database reachability plus catalog size, 503 when the store is down"""
    overall_status = "healthy"
    checks = {
        "timestamp": now_utc().isoformat(),
        "version": BUILD_VERSION,
        "hostname": socket.gethostname(),
        "database": "unknown",
    }

    # Check Database connection
    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
        checks["catalog"] = {"manga": MangaRepository.count(), "chapters": ChapterRepository.count()}
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {e}")
        checks["database"] = f"error: {str(e)}"
        overall_status = "unhealthy"

    checks["status"] = overall_status
    return success_response(checks, status_code=200 if overall_status == "healthy" else 503)
