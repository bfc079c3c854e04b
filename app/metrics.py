from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
from sqlalchemy.exc import SQLAlchemyError
import logging
import time
from functools import wraps

logger = logging.getLogger("main")

# Database Metrics
db_query_duration_seconds = Histogram(
    "mangashelf_db_query_duration_seconds", "Database query duration", ["operation"]
)

db_query_total = Counter("mangashelf_db_queries_total", "Total database queries", ["operation", "status"])

# Catalog Metrics
catalog_manga_total = Gauge("mangashelf_manga_total", "Total number of manga")
catalog_chapters_total = Gauge("mangashelf_chapters_total", "Total number of chapters")
catalog_users_total = Gauge("mangashelf_users_total", "Total number of registered users")

# Search Metrics
search_duration_seconds = Histogram("mangashelf_search_duration_seconds", "Time spent answering a search request")

search_pool_size = Histogram(
    "mangashelf_search_pool_size",
    "Number of candidates scored per search",
    buckets=(0, 1, 5, 10, 25, 50, 100, 150, 200, 250, 300),
)

search_requests_total = Counter(
    "mangashelf_search_requests_total", "Total search requests", ["fallback", "truncated"]
)

# API Metrics
api_request_duration_seconds = Histogram(
    "mangashelf_api_request_duration_seconds", "API request duration", ["endpoint", "method"]
)

api_requests_total = Counter(
    "mangashelf_api_requests_total", "Total API requests", ["endpoint", "method", "status_code"]
)


def init_metrics(app):
    @app.route("/metrics")
    def metrics():
        update_catalog_metrics()
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)

    @app.before_request
    def before_request():
        request.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - getattr(request, "start_time", time.time())
        api_request_duration_seconds.labels(endpoint=request.endpoint or "unknown", method=request.method).observe(
            duration
        )
        api_requests_total.labels(
            endpoint=request.endpoint or "unknown", method=request.method, status_code=response.status_code
        ).inc()
        return response

    logger.info("Prometheus metrics initialized at /metrics")


def update_catalog_metrics():
    """Refresh catalog gauges from the database."""
    from models import Chapter, Manga, User

    try:
        catalog_manga_total.set(Manga.query.count())
        catalog_chapters_total.set(Chapter.query.count())
        catalog_users_total.set(User.query.count())
    except SQLAlchemyError as e:
        logger.warning(f"Could not refresh catalog metrics: {e}")


def track_db_query(operation):
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
                db_query_total.labels(operation=operation, status="success").inc()
                return result
            except Exception:
                db_query_total.labels(operation=operation, status="error").inc()
                raise
            finally:
                db_query_duration_seconds.labels(operation=operation).observe(time.time() - start_time)

        return wrapper

    return decorator
