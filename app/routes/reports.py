"""
Error Report Routes
"""

from flask import Blueprint, current_app, request
from flask_login import current_user
from api_responses import success_response, paginated_response, handle_api_errors, get_pagination_args
from constants import REPORT_STATUSES, REPORT_TYPES
from middleware.auth import admin_required, login_required_json
from repositories.error_report_repository import ErrorReportRepository
from services import error_report_service

reports_bp = Blueprint("reports", __name__, url_prefix="/api/error-reports")


@reports_bp.route("", methods=["POST"])
@login_required_json
@handle_api_errors
def create_report():
    report = error_report_service.create_report(current_user.id, request.get_json(silent=True))
    return success_response(report.to_dict(), message="Report submitted successfully", status_code=201)


@reports_bp.route("/my-reports")
@login_required_json
@handle_api_errors
def my_reports():
    page, per_page = get_pagination_args(request, current_app.settings)
    pagination = ErrorReportRepository.get_paged_for_user(current_user.id, page, per_page)
    return paginated_response(pagination, lambda r: r.to_dict())


@reports_bp.route("")
@admin_required
@handle_api_errors
def list_reports():
    page, per_page = get_pagination_args(request, current_app.settings)
    # Unknown filter values are ignored rather than rejected
    report_type = request.args.get("type")
    status = request.args.get("status")
    pagination = ErrorReportRepository.get_paged(
        page,
        per_page,
        report_type=report_type if report_type in REPORT_TYPES else None,
        status=status if status in REPORT_STATUSES else None,
    )
    return paginated_response(pagination, lambda r: r.to_dict())


@reports_bp.route("/<int:report_id>/status", methods=["PUT"])
@admin_required
@handle_api_errors
def update_status(report_id):
    report = error_report_service.update_status(current_user.id, report_id, request.get_json(silent=True))
    return success_response(report.to_dict(), message="Report status updated")


@reports_bp.route("/<int:report_id>", methods=["DELETE"])
@admin_required
@handle_api_errors
def delete_report(report_id):
    error_report_service.delete_report(report_id)
    return success_response(message="Report deleted")
