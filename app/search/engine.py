"""
Catalog search: candidate pool, scoring and pagination.

The store returns a bounded pool of candidates for the prioritized filter;
the pool is scored in process and sliced into the requested page. The
match total comes from a separate unscored count, so pages past the pool
boundary can be reported by totalPages without being retrievable in ranked
order. Such responses carry truncated=True.
"""
import math
import time
from dataclasses import dataclass, field

import structlog
from sqlalchemy.exc import SQLAlchemyError

from exceptions import InvalidRequest, SearchCancelledException, StoreUnavailableException
from metrics import search_duration_seconds, search_pool_size, search_requests_total
from search.clauses import build_candidate_filter, build_fallback_filter, normalize_whitespace
from search.scorer import score, sort_key
from settings import SearchSettings
from utils import now_utc

logger = structlog.get_logger("search")

TRUNCATED_NOTE = (
    "Only the top {pool} of {total} matches are ranked; pages beyond the ranked pool return no items."
)


@dataclass
class SearchResult:
    query: str
    items: list
    page: int
    limit: int
    total_matches: int
    pool_size: int
    used_fallback: bool = False
    scores: list = field(default_factory=list)

    @property
    def total_pages(self):
        return math.ceil(self.total_matches / self.limit) if self.limit else 0

    @property
    def truncated(self):
        return self.total_matches > self.pool_size

    def to_dict(self, serialize=None):
        serialize = serialize or (lambda record: record.to_summary())
        data = {
            "items": [serialize(record) for record in self.items],
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
            "totalMatches": self.total_matches,
            "truncated": self.truncated,
            "poolSize": self.pool_size,
            "usedFallback": self.used_fallback,
        }
        if self.truncated:
            data["note"] = TRUNCATED_NOTE.format(pool=self.pool_size, total=self.total_matches)
        return data


class SearchEngine:
    """
    Ranks title records from ``store`` for a free-text query.

    ``store`` must provide ``find_candidates(clauses, limit)`` and
    ``count_matching(clauses)``.
    """

    def __init__(self, store, settings=None, clock=now_utc):
        self.store = store
        self.settings = settings or SearchSettings()
        self.clock = clock

    def pool_size(self, limit):
        s = self.settings
        return max(s.pool_min, min(limit * s.pool_factor, s.pool_max))

    def validate(self, query, page, limit):
        if query is None or not str(query).strip():
            raise InvalidRequest("Query parameter 'q' is required")
        query = str(query).strip()

        if page is None:
            page = 1
        try:
            page = int(page)
        except (TypeError, ValueError):
            raise InvalidRequest("Parameter 'page' must be an integer", details={"page": page})
        if page < 1:
            raise InvalidRequest("Parameter 'page' must be a positive integer", details={"page": page})

        try:
            limit = int(limit) if limit is not None else self.settings.default_limit
        except (TypeError, ValueError):
            limit = self.settings.default_limit
        limit = min(max(1, limit), self.settings.max_limit)

        return query, page, limit

    def search(self, query, page=1, limit=None, cancel_event=None):
        query, page, limit = self.validate(query, page, limit)
        pool_limit = self.pool_size(limit)
        start = time.time()

        clauses = build_candidate_filter(query)
        scoring_query = query
        used_fallback = False

        candidates = self._query_store(self.store.find_candidates, clauses, pool_limit, cancel_event=cancel_event)
        if not candidates:
            clauses = build_fallback_filter(query)
            scoring_query = normalize_whitespace(query)
            used_fallback = True
            candidates = self._query_store(self.store.find_candidates, clauses, pool_limit, cancel_event=cancel_event)

        total_matches = 0
        if candidates:
            total_matches = self._query_store(self.store.count_matching, clauses, cancel_event=cancel_event)
            # The count can lag a concurrent insert; never report fewer matches than were pooled
            total_matches = max(total_matches, len(candidates))

        now = self.clock()
        scored = []
        for record in candidates:
            self._check_cancelled(cancel_event)
            scored.append((score(record, scoring_query, now=now, recent_days=self.settings.recent_days), record))
        scored.sort(key=sort_key)

        offset = (page - 1) * limit
        page_slice = scored[offset:offset + limit]

        result = SearchResult(
            query=query,
            items=[record for _, record in page_slice],
            scores=[points for points, _ in page_slice],
            page=page,
            limit=limit,
            total_matches=total_matches,
            pool_size=len(candidates),
            used_fallback=used_fallback,
        )

        duration = time.time() - start
        search_duration_seconds.observe(duration)
        search_pool_size.observe(len(candidates))
        search_requests_total.labels(
            fallback=str(used_fallback).lower(), truncated=str(result.truncated).lower()
        ).inc()
        logger.info(
            f"search q={query!r} page={page} limit={limit} pool={len(candidates)} "
            f"total={total_matches} fallback={used_fallback} duration_ms={duration * 1000.0:.1f}"
        )
        return result

    def _query_store(self, operation, *args, cancel_event=None):
        self._check_cancelled(cancel_event)
        try:
            return operation(*args)
        except SQLAlchemyError as e:
            raise StoreUnavailableException(f"Search query failed: {e.__class__.__name__}") from e

    @staticmethod
    def _check_cancelled(cancel_event):
        if cancel_event is not None and cancel_event.is_set():
            raise SearchCancelledException()
