"""
API response helpers - the JSON envelope shared by every blueprint
"""

from flask import jsonify
from functools import wraps

from exceptions import MangaShelfException, ValidationException


def success_response(data=None, message=None, status_code=200):
    """Envelope {code, success, data?, message?}"""
    response = {"code": "SUCCESS", "success": True}

    if data is not None:
        response["data"] = data

    if message:
        response["message"] = message

    return jsonify(response), status_code


def handle_api_errors(f):
    """
    Turn stray ValueError/KeyError from request parsing into validation errors.
    MangaShelf exceptions pass through to the registered error handlers.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except MangaShelfException:
            raise
        except ValueError as e:
            raise ValidationException(str(e)) from e
        except KeyError as e:
            raise ValidationException(f"Missing required parameter: {e.args[0]}") from e

    return wrapper


def pagination_meta(total, page, per_page):
    has_more = page * per_page < total
    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": (total + per_page - 1) // per_page,
        "has_more": has_more,
        "next_page": page + 1 if has_more else None,
        "prev_page": page - 1 if page > 1 else None,
    }


def paginated_response(pagination, serialize):
    """List envelope for a Flask-SQLAlchemy Pagination, serializing each row"""
    return jsonify({
        "code": "SUCCESS",
        "success": True,
        "data": [serialize(item) for item in pagination.items],
        "pagination": pagination_meta(pagination.total, pagination.page, pagination.per_page),
    }), 200


def get_pagination_args(request, settings, default_per_page=None):
    """Read page/limit query args, clamping limit to the configured maximum"""
    page = request.args.get("page", 1, type=int)
    per_page = request.args.get("limit", default_per_page or settings.default_per_page, type=int)
    page = max(1, page)
    per_page = min(max(1, per_page), settings.max_per_page)
    return page, per_page
